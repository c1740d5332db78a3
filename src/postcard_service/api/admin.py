"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from postcard_service.api.postcard_models import PostcardResponse
from postcard_service.domain.postcards import PostcardStatus  # noqa: TC001

if TYPE_CHECKING:
    from postcard_service.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/postcards", dependencies=[Depends(require_admin)])
async def list_postcards(
    request: Request,
    status_filter: PostcardStatus | None = Query(default=None, alias="status"),
    limit: int = 50,
) -> dict[str, object]:
    """Return recent postcards and per-status counts."""
    container: AppContainer = request.app.state.container
    records = container.admin_service.list_postcards(status_filter, limit)
    return {
        "postcards": [
            PostcardResponse.from_record(record).model_dump(mode="json")
            for record in records
        ],
        "counts": container.admin_service.status_counts(),
    }


@router.get("/postcards/{postcard_id}", dependencies=[Depends(require_admin)])
async def postcard_detail(postcard_id: str, request: Request) -> dict[str, object]:
    """Return a single postcard."""
    container: AppContainer = request.app.state.container
    record = container.admin_service.get_postcard(postcard_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return PostcardResponse.from_record(record).model_dump(mode="json")
