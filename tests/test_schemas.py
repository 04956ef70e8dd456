"""Tests for the inquiry input schema."""

import pytest
from pydantic import ValidationError

from src.contact.schemas import InquiryCreate


class TestInquiryCreate:
    def test_accepts_required_fields_only(self):
        data = InquiryCreate(name="Jane", email="jane@acme-consulting.com", message="Please call me back.")
        assert data.phone is None
        assert data.company is None

    def test_rejects_short_message(self):
        with pytest.raises(ValidationError) as exc_info:
            InquiryCreate(name="Jane", email="jane@acme-consulting.com", message="Too short")
        error = exc_info.value.errors()[0]
        assert error["loc"] == ("message",)
        assert error["msg"] == "Message must be at least 10 characters"

    def test_message_of_exactly_ten_characters_is_valid(self):
        data = InquiryCreate(name="Jane", email="jane@acme-consulting.com", message="0123456789")
        assert data.message == "0123456789"

    def test_rejects_invalid_email(self):
        with pytest.raises(ValidationError) as exc_info:
            InquiryCreate(name="Jane", email="not-an-email", message="Please call me back.")
        assert exc_info.value.errors()[0]["loc"] == ("email",)

    def test_rejects_empty_name(self):
        with pytest.raises(ValidationError) as exc_info:
            InquiryCreate(name="", email="jane@acme-consulting.com", message="Please call me back.")
        assert exc_info.value.errors()[0]["loc"] == ("name",)

    def test_ignores_unknown_fields(self):
        data = InquiryCreate(
            name="Jane", email="jane@acme-consulting.com", message="Please call me back.", budget="1M"
        )
        assert not hasattr(data, "budget")

    def test_email_kept_as_submitted(self):
        data = InquiryCreate(name="Jane", email="Jane.Doe@ACME-Consulting.COM", message="Please call me back.")
        assert data.email == "Jane.Doe@ACME-Consulting.COM"

    def test_display_name_form_reduced_to_address(self):
        data = InquiryCreate(name="Jane", email="Jane <jane@acme-consulting.com>", message="Please call me back.")
        assert data.email == "jane@acme-consulting.com"
