"""Supabase-backed postcard repository."""

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TypeVar

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from postcard_service.domain.postcards import NewPostcard, PostcardRecord, PostcardStatus
from postcard_service.errors import NotFoundError, StorageError
from postcard_service.services.postcards import PostcardRepository

_COLUMNS = (
    "id, recipient_phone, recipient_name, message, image_url, sender_name, "
    "address, status, date_created, address_requested_at, address_received_at, "
    "completed_at"
)
_FIELD_COLUMNS = {"image_reference": "image_url"}
_PAGE_SIZE = 100

T = TypeVar("T")


@dataclass
class SupabasePostcardRepository(PostcardRepository):
    """Supabase implementation for postcard persistence."""

    client: Client
    table_name: str = "postcards"

    def create(self, postcard: NewPostcard) -> PostcardRecord:
        """Insert a pending postcard row and return it."""
        response = self._execute(
            lambda: self.client.table(self.table_name)
            .insert(
                {
                    "recipient_phone": postcard.recipient_phone,
                    "recipient_name": postcard.recipient_name,
                    "message": postcard.message,
                    "image_url": postcard.image_reference,
                    "sender_name": postcard.sender_name,
                    "status": str(PostcardStatus.PENDING),
                    "date_created": datetime.now(tz=UTC).isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise StorageError("Failed to create postcard")
        return _parse_row(response.data[0])

    def get(self, postcard_id: str) -> PostcardRecord | None:
        """Return a postcard by id, if present."""
        response = self._execute(
            lambda: self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("id", postcard_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def update_status(
        self,
        postcard_id: str,
        status: PostcardStatus,
        fields: dict[str, object] | None = None,
    ) -> None:
        """Update the status and extra fields of a postcard."""
        payload = _update_payload(status, fields)
        response = self._execute(
            lambda: self.client.table(self.table_name)
            .update(payload)
            .eq("id", postcard_id)
            .execute()
        )
        if not response.data:
            raise NotFoundError(f"Postcard {postcard_id} not found")

    def transition(
        self,
        postcard_id: str,
        from_status: PostcardStatus,
        to_status: PostcardStatus,
        fields: dict[str, object] | None = None,
    ) -> bool:
        """Update the status only when the row is still in from_status."""
        payload = _update_payload(to_status, fields)
        response = self._execute(
            lambda: self.client.table(self.table_name)
            .update(payload)
            .eq("id", postcard_id)
            .eq("status", str(from_status))
            .execute()
        )
        return bool(response.data)

    def find_active_by_phone(
        self, phone: str, status: PostcardStatus
    ) -> PostcardRecord | None:
        """Return the most recently created postcard for a phone and status."""
        response = self._execute(
            lambda: self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("recipient_phone", phone)
            .eq("status", str(status))
            .order("date_created", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def list_all(self, newest_first: bool = True) -> "SupabasePostcardListing":
        """Return a lazy listing of every postcard."""
        return SupabasePostcardListing(self, newest_first=newest_first)

    def fetch_page(
        self, offset: int, limit: int, newest_first: bool
    ) -> list[PostcardRecord]:
        """Return one page of postcards ordered by creation date."""
        response = self._execute(
            lambda: self.client.table(self.table_name)
            .select(_COLUMNS)
            .order("date_created", desc=newest_first)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def _execute(self, query: Callable[[], T]) -> T:
        try:
            return query()
        except (APIError, httpx.HTTPError) as exc:
            raise StorageError(f"Supabase request failed: {exc}") from exc


@dataclass
class SupabasePostcardListing:
    """Restartable iterable that pages through the postcards table."""

    repository: SupabasePostcardRepository
    newest_first: bool = True
    page_size: int = _PAGE_SIZE

    def __iter__(self) -> Iterator[PostcardRecord]:
        offset = 0
        while True:
            page = self.repository.fetch_page(
                offset, self.page_size, self.newest_first
            )
            yield from page
            if len(page) < self.page_size:
                return
            offset += self.page_size


def _update_payload(
    status: PostcardStatus, fields: dict[str, object] | None
) -> dict[str, object]:
    payload: dict[str, object] = {"status": str(status)}
    for key, value in (fields or {}).items():
        column = _FIELD_COLUMNS.get(key, key)
        payload[column] = value.isoformat() if isinstance(value, datetime) else value
    return payload


def _parse_timestamp(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None


def _parse_row(row: dict[str, object]) -> PostcardRecord:
    date_created = _parse_timestamp(row.get("date_created")) or datetime.min.replace(
        tzinfo=UTC
    )
    return PostcardRecord(
        id=str(row["id"]),
        recipient_phone=str(row.get("recipient_phone") or ""),
        recipient_name=str(row.get("recipient_name") or ""),
        message=str(row.get("message") or ""),
        image_reference=str(row.get("image_url") or ""),
        status=PostcardStatus(row["status"]),
        date_created=date_created,
        sender_name=row.get("sender_name"),
        address=row.get("address"),
        address_requested_at=_parse_timestamp(row.get("address_requested_at")),
        address_received_at=_parse_timestamp(row.get("address_received_at")),
        completed_at=_parse_timestamp(row.get("completed_at")),
    )
