"""ASGI entrypoint for the history API."""

from member_audit.api.app import create_app
from member_audit.containers import build_container

app = create_app(build_container())
