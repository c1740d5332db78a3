"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from postcard_service.adapters.sendblue_client import (
    HttpxSendblueClient,
    MessagingGateway,
)
from postcard_service.adapters.supabase_image_store import SupabaseImageStore
from postcard_service.adapters.supabase_postcard_repository import (
    SupabasePostcardRepository,
)
from postcard_service.config import Settings, load_settings, validate_messaging_credentials
from postcard_service.services.address_collection import AddressCollectionWorkflow
from postcard_service.services.admin import AdminService
from postcard_service.services.submissions import PostcardService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    messaging_gateway: MessagingGateway
    workflow: AddressCollectionWorkflow
    postcard_service: PostcardService
    admin_service: AdminService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container.

    Raises ConfigurationError when settings or Sendblue credentials are
    missing, before any client is created.
    """
    resolved_settings = settings or load_settings()
    validate_messaging_credentials(resolved_settings)
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    repository = SupabasePostcardRepository(
        supabase_client, table_name=resolved_settings.postcards_table
    )
    image_store = SupabaseImageStore(
        supabase_client, bucket=resolved_settings.postcard_images_bucket
    )
    sendblue_client = HttpxSendblueClient.create(
        api_key=resolved_settings.sendblue_api_key,
        api_secret=resolved_settings.sendblue_api_secret,
        from_number=resolved_settings.sendblue_from_number,
        base_url=resolved_settings.sendblue_base_url,
    )
    workflow = AddressCollectionWorkflow(
        repository=repository,
        gateway=sendblue_client,
        default_sender_name=resolved_settings.default_sender_name,
    )
    postcard_service = PostcardService(
        repository=repository,
        image_store=image_store,
        workflow=workflow,
    )
    admin_service = AdminService(repository)

    async def close_resources() -> None:
        await sendblue_client.close()

    return AppContainer(
        settings=resolved_settings,
        messaging_gateway=sendblue_client,
        workflow=workflow,
        postcard_service=postcard_service,
        admin_service=admin_service,
        close_resources=close_resources,
    )
