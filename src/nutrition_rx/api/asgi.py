"""ASGI entrypoint for the prescription API."""

from nutrition_rx.api.app import create_app
from nutrition_rx.containers import build_container

app = create_app(build_container())
