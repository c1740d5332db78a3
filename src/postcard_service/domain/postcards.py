"""Domain models for postcards and their address-collection lifecycle."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from postcard_service.errors import InvalidTransitionError


class PostcardStatus(StrEnum):
    """Workflow status of a postcard."""

    PENDING = "pending"
    ADDRESS_REQUESTED = "addressRequested"
    ADDRESS_RECEIVED = "addressReceived"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Return true when no further transition is allowed."""
        return self in {PostcardStatus.COMPLETED, PostcardStatus.FAILED}


_TRANSITIONS: dict[PostcardStatus, set[PostcardStatus]] = {
    PostcardStatus.PENDING: {PostcardStatus.ADDRESS_REQUESTED, PostcardStatus.FAILED},
    PostcardStatus.ADDRESS_REQUESTED: {
        PostcardStatus.ADDRESS_RECEIVED,
        PostcardStatus.FAILED,
    },
    PostcardStatus.ADDRESS_RECEIVED: {PostcardStatus.COMPLETED, PostcardStatus.FAILED},
    PostcardStatus.COMPLETED: set(),
    PostcardStatus.FAILED: set(),
}


def ensure_transition(current: PostcardStatus, target: PostcardStatus) -> None:
    """Raise when moving from current to target is not a single workflow step."""
    if target not in _TRANSITIONS[current]:
        raise InvalidTransitionError(f"Cannot move postcard from {current} to {target}")


@dataclass(frozen=True)
class NewPostcard:
    """Postcard fields known before persistence."""

    recipient_phone: str
    recipient_name: str
    message: str
    image_reference: str
    sender_name: str | None = None


@dataclass(frozen=True)
class PostcardRecord:
    """Represents a persisted postcard."""

    id: str
    recipient_phone: str
    recipient_name: str
    message: str
    image_reference: str
    status: PostcardStatus
    date_created: datetime
    sender_name: str | None = None
    address: str | None = None
    address_requested_at: datetime | None = None
    address_received_at: datetime | None = None
    completed_at: datetime | None = None


@dataclass(frozen=True)
class PostcardDraft:
    """Postcard submitted by the mobile client, before the image is stored."""

    recipient_phone: str
    recipient_name: str
    message: str
    image_data: bytes
    image_content_type: str = "image/jpeg"
    sender_name: str | None = None
