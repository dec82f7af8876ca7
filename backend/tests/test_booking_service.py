from datetime import date

from ticketing.crud import crud_event
from ticketing.schemas.chat import (
    ChatReply,
    Intent,
    ProposedBooking,
    Receipt,
    Rejection,
    RejectionReason,
)
from ticketing.services import booking_service


def book(query, tickets=1):
    return Intent(kind="book", event_name_query=query, requested_tickets=tickets)


def test_propose_then_confirm_until_sold_out(seeded_db):
    proposal = booking_service.propose(seeded_db, book("AI Tech Expo", 2))
    assert isinstance(proposal, ProposedBooking)
    assert proposal.event_id == 1001
    assert proposal.available_tickets == 2
    assert proposal.needs_confirmation is True
    assert proposal.event_date == date(2030, 3, 14)
    assert "Please confirm your booking" in proposal.message

    receipt = booking_service.confirm(seeded_db, proposal.event_id, proposal.requested_tickets)
    assert isinstance(receipt, Receipt)
    assert receipt.tickets_purchased == 2
    assert receipt.remaining_tickets == 0
    assert crud_event.get_event(seeded_db, 1001).tickets_sold == 100

    again = booking_service.confirm(seeded_db, 1001, 1)
    assert isinstance(again, Rejection)
    assert again.reason == RejectionReason.INSUFFICIENT_CAPACITY
    assert again.available_tickets == 0
    assert again.message == "Sorry, AI Tech Expo is sold out."


def test_propose_unknown_event_names_the_query(seeded_db):
    outcome = booking_service.propose(seeded_db, book("Nonexistent Gala"))
    assert isinstance(outcome, Rejection)
    assert outcome.reason == RejectionReason.EVENT_NOT_FOUND
    assert outcome.query == "Nonexistent Gala"
    assert '"Nonexistent Gala"' in outcome.message
    assert outcome.suggestion


def test_propose_reports_true_availability(seeded_db):
    outcome = booking_service.propose(seeded_db, book("jazz", 45))
    assert outcome.reason == RejectionReason.INSUFFICIENT_CAPACITY
    assert outcome.available_tickets == 40
    assert "only 40 tickets are available for Jazz Night" in outcome.message


def test_propose_rejects_bad_counts_and_other_intents(seeded_db):
    assert booking_service.propose(seeded_db, book("Jazz Night", 0)).reason == RejectionReason.INVALID_INPUT
    assert booking_service.propose(seeded_db, Intent(kind="view")).reason == RejectionReason.INVALID_INPUT


def test_propose_never_mutates_inventory(seeded_db):
    for _ in range(5):
        booking_service.propose(seeded_db, book("Jazz Night", 2))
    seeded_db.expire_all()
    assert crud_event.get_event(seeded_db, 1002).tickets_sold == 10


def test_confirm_rechecks_capacity(seeded_db):
    proposal = booking_service.propose(seeded_db, book("AI Tech Expo", 2))
    # Someone else buys the last tickets between propose and confirm
    crud_event.reserve_tickets(seeded_db, 1001, 1)
    outcome = booking_service.confirm(seeded_db, proposal.event_id, proposal.requested_tickets)
    assert outcome.reason == RejectionReason.INSUFFICIENT_CAPACITY
    assert outcome.available_tickets == 1
    assert "Would you like to book 1 instead?" in outcome.message


def test_confirm_validates_input(seeded_db):
    assert booking_service.confirm(seeded_db, 0, 1).reason == RejectionReason.INVALID_INPUT
    assert booking_service.confirm(seeded_db, 1002, -2).reason == RejectionReason.INVALID_INPUT
    assert booking_service.confirm(seeded_db, 1002, True).reason == RejectionReason.INVALID_INPUT


def test_confirm_unknown_event(seeded_db):
    outcome = booking_service.confirm(seeded_db, 5555, 1)
    assert outcome.reason == RejectionReason.EVENT_NOT_FOUND
    assert outcome.event_id == 5555


def test_handle_message_greeting_and_help(seeded_db):
    assert booking_service.handle_message(seeded_db, "Hi there").intent == "greeting"
    reply = booking_service.handle_message(seeded_db, "tell me a joke")
    assert reply.intent == "chat"
    assert "ticket booking assistant" in reply.response


def test_handle_message_lists_available_events(seeded_db):
    reply = booking_service.handle_message(seeded_db, "show me available events")
    assert isinstance(reply, ChatReply)
    assert reply.intent == "view"
    assert [e.id for e in reply.events] == [1002, 1001]
    assert "Jazz Night on 2030-01-20 (40 tickets available)" in reply.response
    assert "Sold Out Symphony" not in reply.response


def test_handle_message_with_nothing_available(db_session):
    reply = booking_service.handle_message(db_session, "list events")
    assert reply.events == []
    assert reply.response.startswith("Sorry, there are no events")


def test_handle_message_booking_returns_proposal(seeded_db):
    reply = booking_service.handle_message(seeded_db, "Book 2 tickets for Jazz Night")
    assert reply.intent == "book"
    assert reply.booking.event_id == 1002
    assert reply.booking.requested_tickets == 2
    assert reply.rejection is None
    assert crud_event.get_event(seeded_db, 1002).tickets_sold == 10


def test_handle_message_booking_unknown_event(seeded_db):
    reply = booking_service.handle_message(seeded_db, "book 2 tickets for the Moon Ball")
    assert reply.intent == "book"
    assert reply.booking is None
    assert reply.rejection.reason == RejectionReason.EVENT_NOT_FOUND
    assert reply.rejection.query == "moon ball"


def test_handle_message_strips_markup_and_rejects_empty(seeded_db):
    outcome = booking_service.handle_message(seeded_db, "  <b></b> ")
    assert isinstance(outcome, Rejection)
    assert outcome.message == "Text input required"
    assert isinstance(booking_service.handle_message(seeded_db, None), Rejection)
    assert booking_service.handle_message(seeded_db, "<i>hello</i>").intent == "greeting"


def test_handle_message_provider_error(seeded_db, monkeypatch):
    monkeypatch.setattr(
        booking_service,
        "resolve",
        lambda text: Intent(kind="error", error="I could not understand that.", source="genai"),
    )
    reply = booking_service.handle_message(seeded_db, "zzzz")
    assert reply.intent == "error"
    assert reply.response.startswith("I could not understand that. Try asking to see available events")


def test_confirm_huge_quantity_reports_availability(seeded_db):
    outcome = booking_service.confirm(seeded_db, 1002, 10**20)
    assert outcome.reason == RejectionReason.INSUFFICIENT_CAPACITY
    assert outcome.available_tickets == 40
