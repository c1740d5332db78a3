"""Pydantic models for postcard and Sendblue webhook payloads."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from postcard_service.domain.postcards import PostcardRecord


class SendblueInboundMessage(BaseModel):
    """Inbound message payload posted by Sendblue."""

    model_config = ConfigDict(extra="ignore")

    from_number: str | None = None
    content: str | None = None


class PostcardSubmission(BaseModel):
    """Postcard sent from the mobile client."""

    recipient_name: str = ""
    recipient_phone: str
    message: str
    image_base64: str
    image_content_type: str = "image/jpeg"
    sender_name: str | None = None


class PostcardResponse(BaseModel):
    """Postcard as returned by the API."""

    id: str
    recipient_phone: str
    recipient_name: str
    message: str
    image_reference: str
    sender_name: str | None
    address: str | None
    status: str
    date_created: datetime
    address_requested_at: datetime | None
    address_received_at: datetime | None
    completed_at: datetime | None

    @classmethod
    def from_record(cls, record: PostcardRecord) -> "PostcardResponse":
        """Build a response from a domain record."""
        return cls(
            id=record.id,
            recipient_phone=record.recipient_phone,
            recipient_name=record.recipient_name,
            message=record.message,
            image_reference=record.image_reference,
            sender_name=record.sender_name,
            address=record.address,
            status=str(record.status),
            date_created=record.date_created,
            address_requested_at=record.address_requested_at,
            address_received_at=record.address_received_at,
            completed_at=record.completed_at,
        )
