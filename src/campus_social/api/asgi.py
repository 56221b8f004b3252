"""ASGI entrypoint for the campus social API."""

from campus_social.api.app import create_app
from campus_social.containers import build_container

app = create_app(build_container())
