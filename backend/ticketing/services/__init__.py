from .booking_service import confirm, handle_message, propose
from .event_locator import find_event
from .intent_resolver import resolve
