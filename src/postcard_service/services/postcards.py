"""Persistence interfaces for postcards and their images."""

from collections.abc import Iterable
from typing import Protocol

from postcard_service.domain.postcards import NewPostcard, PostcardRecord, PostcardStatus


class PostcardRepository(Protocol):
    """Persistence interface for postcard records."""

    def create(self, postcard: NewPostcard) -> PostcardRecord:
        """Persist a new pending postcard and return it with its id."""

    def get(self, postcard_id: str) -> PostcardRecord | None:
        """Return a postcard by id, if present."""

    def update_status(
        self,
        postcard_id: str,
        status: PostcardStatus,
        fields: dict[str, object] | None = None,
    ) -> None:
        """Set the status and any extra fields of a postcard."""

    def transition(
        self,
        postcard_id: str,
        from_status: PostcardStatus,
        to_status: PostcardStatus,
        fields: dict[str, object] | None = None,
    ) -> bool:
        """Move a postcard to to_status only if it is still in from_status."""

    def find_active_by_phone(
        self, phone: str, status: PostcardStatus
    ) -> PostcardRecord | None:
        """Return the newest postcard for a phone in the given status."""

    def list_all(self, newest_first: bool = True) -> Iterable[PostcardRecord]:
        """Return a restartable iterable over every postcard."""


class ImageStore(Protocol):
    """Blob storage for postcard images."""

    def upload(self, data: bytes, content_type: str) -> str:
        """Store image bytes and return a retrievable reference."""
