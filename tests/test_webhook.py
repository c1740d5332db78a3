"""Tests for Sendblue webhook handling."""

from fastapi.testclient import TestClient

from postcard_service.api.app import create_app
from postcard_service.domain.postcards import PostcardStatus
from postcard_service.errors import GatewayError, StorageError
from tests.conftest import (
    FakeMessagingGateway,
    InMemoryPostcardRepository,
    make_new_postcard,
)


def _requested(repository: InMemoryPostcardRepository) -> str:
    record = repository.create(make_new_postcard("+19174779901"))
    repository.update_status(record.id, PostcardStatus.ADDRESS_REQUESTED)
    return record.id


def test_webhook_records_address(
    container,
    repository: InMemoryPostcardRepository,
    gateway: FakeMessagingGateway,
) -> None:
    postcard_id = _requested(repository)
    client = TestClient(create_app(container))

    response = client.post(
        "/sendblue/webhook",
        json={"from_number": "(917) 477-9901", "content": "123 Main St"},
    )

    assert response.status_code == 200
    stored = repository.postcards[postcard_id]
    assert stored.address == "123 Main St"
    assert stored.status == PostcardStatus.COMPLETED
    assert gateway.messages[-1][0] == "+19174779901"


def test_webhook_ignores_extra_payload_fields(
    container, repository: InMemoryPostcardRepository
) -> None:
    postcard_id = _requested(repository)
    client = TestClient(create_app(container))

    response = client.post(
        "/sendblue/webhook",
        json={
            "from_number": "+19174779901",
            "content": "123 Main St",
            "is_outbound": False,
            "media_url": "",
        },
    )

    assert response.status_code == 200
    assert repository.postcards[postcard_id].address == "123 Main St"


def test_webhook_unmatched_sender_returns_404(
    container, repository: InMemoryPostcardRepository
) -> None:
    postcard_id = _requested(repository)
    client = TestClient(create_app(container))

    response = client.post(
        "/sendblue/webhook",
        json={"from_number": "555-000-0000", "content": "hello"},
    )

    assert response.status_code == 404
    stored = repository.postcards[postcard_id]
    assert stored.status == PostcardStatus.ADDRESS_REQUESTED
    assert stored.address is None


def test_webhook_missing_fields_returns_400(container) -> None:
    client = TestClient(create_app(container))

    missing_content = client.post(
        "/sendblue/webhook", json={"from_number": "+19174779901"}
    )
    missing_number = client.post("/sendblue/webhook", json={"content": "hi"})

    assert missing_content.status_code == 400
    assert missing_number.status_code == 400


def test_webhook_invalid_body_returns_400(container) -> None:
    client = TestClient(create_app(container))

    not_json = client.post(
        "/sendblue/webhook",
        content=b"from_number=1",
        headers={"content-type": "application/json"},
    )
    not_object = client.post("/sendblue/webhook", json=["+19174779901", "hi"])

    assert not_json.status_code == 400
    assert not_object.status_code == 400


def test_webhook_rejects_other_methods(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/sendblue/webhook")

    assert response.status_code == 405


def test_webhook_thank_you_failure_still_returns_200(
    container,
    repository: InMemoryPostcardRepository,
    gateway: FakeMessagingGateway,
) -> None:
    postcard_id = _requested(repository)
    gateway.errors.append(GatewayError.from_status(503))
    client = TestClient(create_app(container))

    response = client.post(
        "/sendblue/webhook",
        json={"from_number": "917-477-9901", "content": "123 Main St"},
    )

    assert response.status_code == 200
    stored = repository.postcards[postcard_id]
    assert stored.status == PostcardStatus.ADDRESS_RECEIVED
    assert stored.address == "123 Main St"


def test_webhook_storage_failure_returns_500(
    container, repository: InMemoryPostcardRepository, monkeypatch
) -> None:
    def broken_lookup(phone, status):  # type: ignore[no-untyped-def]
        raise StorageError("database unavailable")

    monkeypatch.setattr(repository, "find_active_by_phone", broken_lookup)
    client = TestClient(create_app(container))

    response = client.post(
        "/sendblue/webhook",
        json={"from_number": "917-477-9901", "content": "123 Main St"},
    )

    assert response.status_code == 500
