import logging
from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..schemas.chat import ChatReply, ChatRequest, ConfirmRequest, Receipt, Rejection, RejectionReason
from ..services import booking_service
from ..utils import error_response, internal_error
from .dependencies import get_db

logger = logging.getLogger(__name__)

router = APIRouter()

_REJECTION_STATUS = {
    RejectionReason.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    RejectionReason.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    RejectionReason.INSUFFICIENT_CAPACITY: status.HTTP_409_CONFLICT,
}


def _rejection_field_errors(rejection: Rejection) -> dict:
    errors = {"reason": rejection.reason.value}
    if rejection.available_tickets is not None:
        errors["available_tickets"] = str(rejection.available_tickets)
    if rejection.suggestion:
        errors["suggestion"] = rejection.suggestion
    return errors


@router.post("/chat/parse", response_model=ChatReply)
def parse_chat_message(
    body: ChatRequest,
    db: Session = Depends(get_db),
) -> Any:
    """Classify a chat message and answer it.

    Booking requests come back as a proposal; nothing is sold until the
    client posts the proposal to ``/chat/confirm``.
    """
    try:
        reply = booking_service.handle_message(db, body.text)
    except SQLAlchemyError:
        logger.exception("chat parse failed")
        raise internal_error()

    if isinstance(reply, Rejection):
        raise error_response(
            reply.message,
            {"text": "required"},
            status.HTTP_400_BAD_REQUEST,
        )
    return reply


@router.post("/chat/confirm", response_model=Receipt)
def confirm_booking(
    body: ConfirmRequest,
    db: Session = Depends(get_db),
) -> Any:
    try:
        outcome = booking_service.confirm(db, body.event_id, body.tickets)
    except SQLAlchemyError:
        logger.exception("confirm failed event_id=%s tickets=%s", body.event_id, body.tickets)
        raise internal_error()

    if isinstance(outcome, Rejection):
        raise error_response(
            outcome.message,
            _rejection_field_errors(outcome),
            _REJECTION_STATUS[outcome.reason],
        )
    return outcome
