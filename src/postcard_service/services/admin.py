"""Admin service for reporting."""

from collections import Counter
from dataclasses import dataclass

from postcard_service.domain.postcards import PostcardRecord, PostcardStatus
from postcard_service.services.postcards import PostcardRepository


@dataclass
class AdminService:
    """Service for admin dashboards."""

    repository: PostcardRepository

    def list_postcards(
        self, status: PostcardStatus | None = None, limit: int = 50
    ) -> list[PostcardRecord]:
        """Return recent postcards, optionally filtered by status."""
        records: list[PostcardRecord] = []
        for record in self.repository.list_all(newest_first=True):
            if status is not None and record.status != status:
                continue
            records.append(record)
            if len(records) >= limit:
                break
        return records

    def status_counts(self) -> dict[str, int]:
        """Return the number of postcards in each status."""
        counts = Counter(record.status for record in self.repository.list_all())
        return {str(status): counts.get(status, 0) for status in PostcardStatus}

    def get_postcard(self, postcard_id: str) -> PostcardRecord | None:
        """Return a single postcard, if present."""
        return self.repository.get(postcard_id)
