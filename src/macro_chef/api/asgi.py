"""ASGI entrypoint for the MacroChef API."""

from macro_chef.api.app import create_app
from macro_chef.containers import build_container

app = create_app(build_container())
