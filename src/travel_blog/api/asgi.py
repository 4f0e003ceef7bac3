"""ASGI entrypoint for the travel blog API."""

from travel_blog.api.app import create_app
from travel_blog.containers import build_container

app = create_app(build_container())
