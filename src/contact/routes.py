"""Contact-form submission route."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..notifications.service import send_inquiry_notification
from ..rate_limit import limiter
from .schemas import InquiryCreate, InquiryResponse
from .service import InquiryStorageError, create_inquiry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["contact"])


@router.post("/contact", status_code=201)
@limiter.limit(lambda: settings.contact_rate_limit)
def submit_inquiry(
    request: Request,
    body: InquiryCreate,
    db: Session = Depends(get_db),
):
    try:
        inquiry = create_inquiry(db, body)
    except InquiryStorageError as exc:
        logger.exception("Error processing contact form from %s", body.email)
        return JSONResponse({"message": str(exc) or "Internal server error"}, status_code=500)

    # The inquiry is already committed; mail problems must not change the response.
    try:
        send_inquiry_notification(inquiry)
    except Exception as exc:
        logger.error("Failed to send email notification for inquiry #%s: %s", inquiry.id, exc)

    payload = InquiryResponse.model_validate(inquiry).model_dump(mode="json", by_alias=True)
    return JSONResponse(payload, status_code=201)
