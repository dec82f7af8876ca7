import re
from typing import Any

_TAG_RE = re.compile(r"<[^>]*>")


def sanitize_input(text: Any) -> str:
    """Strip markup and surrounding whitespace; non-strings become ``""``."""
    if not isinstance(text, str):
        return ""
    return _TAG_RE.sub("", text).strip()


def is_positive_int(value: Any) -> bool:
    # bool is an int subclass but never a valid count or id
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
