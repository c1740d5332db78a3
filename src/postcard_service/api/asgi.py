"""ASGI entrypoint for the postcard service API."""

from postcard_service.api.app import create_app
from postcard_service.containers import build_container

app = create_app(build_container())
