"""Integration tests for building and mounting the Gradio UI."""

import gradio as gr
from fastapi import FastAPI

from smartlister.api.main import mount_ui
from smartlister.ui.app import create_ui


class TestCreateUI:
    """The Blocks app builds without a running server."""

    def test_returns_blocks(self):
        app = create_ui()
        assert isinstance(app, gr.Blocks)
        assert app.title == "Smart Lister"

    def test_mount_adds_app_route(self):
        target = FastAPI()

        mounted = mount_ui(target)

        paths = [getattr(route, "path", None) for route in mounted.routes]
        assert "/app" in paths
