"""Inquiry store: durable persistence of contact-form submissions."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .models import Inquiry
from .schemas import InquiryCreate

logger = logging.getLogger(__name__)


class InquiryStorageError(Exception):
    """Raised when an inquiry cannot be written to the database."""

    pass


def create_inquiry(db: Session, data: InquiryCreate) -> Inquiry:
    """Persist a validated inquiry and return it with ``id`` and ``created_at`` set.

    Commits before returning, so the record is durable once this call succeeds.
    """
    inquiry = Inquiry(
        name=data.name,
        email=data.email,
        phone=data.phone,
        company=data.company,
        message=data.message,
    )
    try:
        db.add(inquiry)
        db.commit()
        db.refresh(inquiry)
    except SQLAlchemyError as exc:
        db.rollback()
        raise InquiryStorageError("Failed to save inquiry") from exc

    logger.info("Stored inquiry #%s from %s", inquiry.id, inquiry.email)
    return inquiry


def get_inquiry(db: Session, inquiry_id: int) -> Inquiry | None:
    return db.get(Inquiry, inquiry_id)
