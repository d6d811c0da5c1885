"""ASGI entrypoint for the calorie lens API."""

from calorie_lens.api.app import create_app
from calorie_lens.containers import build_container

app = create_app(build_container())
