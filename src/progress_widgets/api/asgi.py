"""ASGI entrypoint for the progress widgets API."""

from progress_widgets.api.app import create_app
from progress_widgets.containers import build_container

app = create_app(build_container())
