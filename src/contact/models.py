"""Contact-form inquiry model."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Integer, Text, func

from ..database import Base


class Inquiry(Base):
    """A single contact-form submission. Rows are insert-only."""

    __tablename__ = "inquiries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    phone = Column(Text, nullable=True)
    company = Column(Text, nullable=True)
    message = Column(Text, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
    )
