"""Postcard submission from the mobile client."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from postcard_service.domain.phone import normalize_phone
from postcard_service.domain.postcards import NewPostcard, PostcardDraft, PostcardRecord
from postcard_service.errors import ValidationError
from postcard_service.services.address_collection import AddressCollectionWorkflow
from postcard_service.services.postcards import ImageStore, PostcardRepository

logger = logging.getLogger(__name__)


@dataclass
class PostcardService:
    """Application service for creating and listing postcards."""

    repository: PostcardRepository
    image_store: ImageStore
    workflow: AddressCollectionWorkflow

    async def submit(self, draft: PostcardDraft) -> PostcardRecord:
        """Store the image, create a pending postcard and request the address."""
        if not draft.recipient_phone.strip():
            raise ValidationError("Recipient phone number is required")
        if not draft.message.strip():
            raise ValidationError("Message is required")
        if not draft.image_data:
            raise ValidationError("Image is required")

        image_reference = self.image_store.upload(
            draft.image_data, draft.image_content_type
        )
        record = self.repository.create(
            NewPostcard(
                recipient_phone=normalize_phone(draft.recipient_phone),
                recipient_name=draft.recipient_name,
                message=draft.message,
                image_reference=image_reference,
                sender_name=draft.sender_name,
            )
        )
        logger.info("Postcard created", extra={"postcard_id": record.id})
        return await self.workflow.request_address(record)

    def get(self, postcard_id: str) -> PostcardRecord | None:
        """Return a postcard by id, if present."""
        return self.repository.get(postcard_id)

    def list_sent(self, newest_first: bool = True) -> Iterable[PostcardRecord]:
        """Return every postcard for display."""
        return self.repository.list_all(newest_first=newest_first)
