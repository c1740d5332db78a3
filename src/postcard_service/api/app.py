"""FastAPI application factory."""

import base64
import binascii
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PayloadValidationError

from postcard_service.api.admin import router as admin_router
from postcard_service.api.postcard_models import (
    PostcardResponse,
    PostcardSubmission,
    SendblueInboundMessage,
)
from postcard_service.app_logging import configure_logging
from postcard_service.containers import AppContainer
from postcard_service.domain.postcards import PostcardDraft
from postcard_service.errors import GatewayError, ValidationError
from postcard_service.services.address_collection import InboundReplyResult


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/sendblue/webhook")
    async def sendblue_webhook(request: Request) -> JSONResponse:
        """Record an inbound Sendblue reply as a postcard address."""
        state_container: AppContainer = request.app.state.container
        try:
            inbound = SendblueInboundMessage.model_validate(await request.json())
        except (ValueError, PayloadValidationError):
            logger.warning("Unreadable Sendblue webhook payload")
            return _status_response(status.HTTP_400_BAD_REQUEST, "invalid payload")

        logger.info(
            "Received inbound message",
            extra={"from_number": inbound.from_number},
        )
        try:
            result = await state_container.workflow.handle_inbound_reply(
                inbound.from_number, inbound.content
            )
        except ValidationError as exc:
            logger.warning("Rejected Sendblue webhook", extra={"detail": str(exc)})
            return _status_response(status.HTTP_400_BAD_REQUEST, str(exc))
        except Exception:
            logger.exception("Error processing Sendblue webhook")
            return _status_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR, "internal server error"
            )

        if result is InboundReplyResult.NO_MATCH:
            return _status_response(
                status.HTTP_404_NOT_FOUND, "no matching postcard found"
            )
        return _status_response(status.HTTP_200_OK, str(result))

    @app.post("/postcards", status_code=status.HTTP_201_CREATED)
    async def submit_postcard(
        submission: PostcardSubmission, request: Request
    ) -> PostcardResponse:
        """Create a postcard and text the recipient for their address."""
        state_container: AppContainer = request.app.state.container
        try:
            image_data = base64.b64decode(submission.image_base64, validate=True)
        except (binascii.Error, ValueError):
            return _status_response(
                status.HTTP_400_BAD_REQUEST, "image_base64 is not valid base64"
            )
        draft = PostcardDraft(
            recipient_phone=submission.recipient_phone,
            recipient_name=submission.recipient_name,
            message=submission.message,
            image_data=image_data,
            image_content_type=submission.image_content_type,
            sender_name=submission.sender_name,
        )
        try:
            record = await state_container.postcard_service.submit(draft)
        except ValidationError as exc:
            return _status_response(status.HTTP_400_BAD_REQUEST, str(exc))
        except GatewayError as exc:
            return JSONResponse(
                status_code=status.HTTP_502_BAD_GATEWAY,
                content={
                    "status": "failed",
                    "reason": str(exc.reason),
                    "retryable": exc.retryable,
                },
            )
        return PostcardResponse.from_record(record)

    @app.get("/postcards")
    async def list_postcards(request: Request) -> dict[str, list[PostcardResponse]]:
        """Return sent postcards, newest first."""
        state_container: AppContainer = request.app.state.container
        return {
            "postcards": [
                PostcardResponse.from_record(record)
                for record in state_container.postcard_service.list_sent()
            ]
        }

    return app


def _status_response(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": detail})
