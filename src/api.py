"""API router: all JSON endpoints under the /api prefix."""

from fastapi import APIRouter

from .contact.routes import router as contact_router

api_router = APIRouter(prefix="/api", tags=["api"])

api_router.include_router(contact_router)
