from .event import EventRead
from .chat import (
    ChatReply,
    ChatRequest,
    ConfirmRequest,
    Intent,
    IntentKind,
    ProposedBooking,
    Receipt,
    Rejection,
    RejectionReason,
)
