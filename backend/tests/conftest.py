from pathlib import Path

from dotenv import load_dotenv
import pytest

# Load environment variables for tests before the app reads its settings
load_dotenv(Path(__file__).resolve().parents[1] / '.env.test')

from event_fixtures import make_session_factory, seed_events  # noqa: E402


# Gemini is never reached from tests unless a test installs a fake client
@pytest.fixture(autouse=True)
def disable_genai(monkeypatch):
    monkeypatch.setattr(
        'ticketing.services.intent_resolver.get_genai_client',
        lambda: None,
    )


@pytest.fixture
def db_session():
    Session = make_session_factory()
    db = Session()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def seeded_db(db_session):
    seed_events(db_session)
    return db_session
