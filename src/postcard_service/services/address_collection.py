"""Address-collection state machine.

A postcard starts ``pending``. ``request_address`` texts the recipient and
moves it to ``addressRequested`` once the gateway confirms the send. A reply
arriving on the webhook is matched by phone to the newest waiting postcard,
which moves to ``addressReceived``; a successful thank-you then completes it.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum

from postcard_service.adapters.sendblue_client import MessagingGateway
from postcard_service.domain.phone import normalize_phone
from postcard_service.domain.postcards import (
    PostcardRecord,
    PostcardStatus,
    ensure_transition,
)
from postcard_service.errors import GatewayError, StorageError, ValidationError
from postcard_service.services.postcards import PostcardRepository

logger = logging.getLogger(__name__)

ADDRESS_REQUEST_TEMPLATE = (
    "Hi! {sender_name} is trying to send you a postcard 💌 "
    "What address should we send it to?"
)
THANK_YOU_MESSAGE = "Thank you! Your postcard will be on its way soon! 📬"


class InboundReplyResult(StrEnum):
    """Outcome of handling an inbound reply."""

    CAPTURED = "captured"
    ALREADY_CAPTURED = "already_captured"
    NO_MATCH = "no_match"


@dataclass
class AddressCollectionWorkflow:
    """Orchestrates address requests and inbound replies for postcards."""

    repository: PostcardRepository
    gateway: MessagingGateway
    default_sender_name: str = "A friend"

    async def request_address(self, record: PostcardRecord) -> PostcardRecord:
        """Text the recipient asking for an address and mark the request sent.

        On gateway failure the postcard is marked failed and the error is
        re-raised so the submitter learns the send did not happen.
        """
        ensure_transition(record.status, PostcardStatus.ADDRESS_REQUESTED)
        phone = normalize_phone(record.recipient_phone)
        sender_name = record.sender_name or self.default_sender_name
        try:
            await self.gateway.send(
                phone, ADDRESS_REQUEST_TEMPLATE.format(sender_name=sender_name)
            )
        except GatewayError as exc:
            logger.warning(
                "Address request send failed",
                extra={
                    "postcard_id": record.id,
                    "reason": str(exc.reason),
                    "http_status": exc.http_status,
                },
            )
            self._mark_failed(record.id)
            raise

        requested_at = datetime.now(tz=UTC)
        self.repository.update_status(
            record.id,
            PostcardStatus.ADDRESS_REQUESTED,
            {"address_requested_at": requested_at},
        )
        logger.info("Address requested", extra={"postcard_id": record.id})
        return PostcardRecord(
            id=record.id,
            recipient_phone=phone,
            recipient_name=record.recipient_name,
            message=record.message,
            image_reference=record.image_reference,
            status=PostcardStatus.ADDRESS_REQUESTED,
            date_created=record.date_created,
            sender_name=record.sender_name,
            address=record.address,
            address_requested_at=requested_at,
        )

    async def handle_inbound_reply(
        self, from_phone_raw: str | None, content: str | None
    ) -> InboundReplyResult:
        """Record an inbound reply as the address of the matching postcard."""
        if not from_phone_raw or not from_phone_raw.strip():
            raise ValidationError("Missing sender phone number")
        if not content or not content.strip():
            raise ValidationError("Missing message content")

        phone = normalize_phone(from_phone_raw)
        postcard = self.repository.find_active_by_phone(
            phone, PostcardStatus.ADDRESS_REQUESTED
        )
        if postcard is None:
            logger.info("No postcard awaiting an address", extra={"phone": phone})
            return InboundReplyResult.NO_MATCH

        captured = self.repository.transition(
            postcard.id,
            PostcardStatus.ADDRESS_REQUESTED,
            PostcardStatus.ADDRESS_RECEIVED,
            {"address": content, "address_received_at": datetime.now(tz=UTC)},
        )
        if not captured:
            logger.info(
                "Address already captured by another delivery",
                extra={"postcard_id": postcard.id},
            )
            return InboundReplyResult.ALREADY_CAPTURED
        logger.info("Address received", extra={"postcard_id": postcard.id})

        await self._send_thank_you(postcard.id, phone)
        return InboundReplyResult.CAPTURED

    def _mark_failed(self, postcard_id: str) -> None:
        # The gateway error is what the caller needs to see.
        try:
            self.repository.update_status(postcard_id, PostcardStatus.FAILED)
        except StorageError:
            logger.exception(
                "Failed to mark postcard failed", extra={"postcard_id": postcard_id}
            )

    async def _send_thank_you(self, postcard_id: str, phone: str) -> None:
        # The address is already stored; a failed acknowledgment leaves the
        # postcard in addressReceived.
        try:
            await self.gateway.send(phone, THANK_YOU_MESSAGE)
        except Exception:
            logger.exception(
                "Failed to send thank you message", extra={"postcard_id": postcard_id}
            )
            return
        try:
            self.repository.transition(
                postcard_id,
                PostcardStatus.ADDRESS_RECEIVED,
                PostcardStatus.COMPLETED,
                {"completed_at": datetime.now(tz=UTC)},
            )
        except StorageError:
            logger.exception(
                "Failed to mark postcard completed", extra={"postcard_id": postcard_id}
            )
