"""Shared pytest fixtures for Smart Lister tests."""

import io
import json
import shutil
import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import Mock

import pytest
from PIL import Image

from smartlister.core.config import SmartListerConfig
from smartlister.ui.models import ListerState
from smartlister.ui.notifications import ToastStore


class ManualHandle:
    """Timer handle returned by :class:`ManualScheduler`."""

    def __init__(self, delay: float, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler that records timers and fires them on demand."""

    def __init__(self):
        self.handles: list[ManualHandle] = []

    def __call__(self, delay: float, callback) -> ManualHandle:
        handle = ManualHandle(delay, callback)
        self.handles.append(handle)
        return handle

    def fire_all(self) -> None:
        """Run every timer that has not been cancelled."""
        for handle in list(self.handles):
            if not handle.cancelled:
                handle.callback()


class FakeListingModel:
    """Stand-in for GeminiListingModel that returns canned text."""

    def __init__(self):
        self.text = json.dumps(sample_listing_payload())
        self.error: Exception | None = None
        self.calls: list[dict] = []
        self.available = True
        self.closed = False

    async def generate(self, prompt, images, *, system_instruction):
        self.calls.append(
            {"prompt": prompt, "images": images, "system_instruction": system_instruction}
        )
        if self.error is not None:
            raise self.error
        return self.text

    def close(self):
        self.closed = True


def sample_listing_payload() -> dict:
    """A well-formed listing body with 13 tags."""
    return {
        "title": "Handmade Silver Ring | Minimalist Stacking Band - Dainty Gift for Her",
        "tags": [f"tag {i}" for i in range(1, 14)],
        "description": "✨ A minimalist sterling silver ring.\n\nHandmade to order.",
        "snsPost": "Simple, stackable, handmade. #silverring #minimalist",
    }


def make_image_bytes(
    size: tuple[int, int] = (64, 48),
    mode: str = "RGB",
    color=(200, 30, 30),
    fmt: str = "PNG",
) -> bytes:
    """Encode a solid-colour image."""
    buffer = io.BytesIO()
    Image.new(mode, size, color=color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> SmartListerConfig:
    """Create a test configuration with a temporary data directory.

    Args:
        temp_dir: Temporary directory from fixture

    Returns:
        SmartListerConfig instance for testing
    """
    return SmartListerConfig(
        data_dir=temp_dir / "data",
        gemini_api_key="test-key",
        generate_endpoint="http://testserver/api/generate",
        _env_file=None,
    )


@pytest.fixture
def image_factory():
    """Return the solid-colour image encoder."""
    return make_image_bytes


@pytest.fixture
def sample_listing() -> dict:
    return sample_listing_payload()


@pytest.fixture
def manual_scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def toast_store(manual_scheduler: ManualScheduler) -> ToastStore:
    """ToastStore whose timers only fire when the test says so."""
    return ToastStore(scheduler=manual_scheduler)


@pytest.fixture
def ui_state(toast_store: ToastStore) -> ListerState:
    """Initialized UI state with a mock generation client.

    Returns:
        ListerState instance
    """
    return ListerState(toast_store=toast_store, client=Mock())


@pytest.fixture
def fake_listing_model() -> FakeListingModel:
    return FakeListingModel()


@pytest.fixture
def test_client(test_config, fake_listing_model, monkeypatch):
    """FastAPI TestClient with a fake listing model and temporary license database.

    Yields:
        TestClient bound to the application
    """
    from fastapi.testclient import TestClient

    from smartlister.api import main

    monkeypatch.setattr(main, "config", test_config)
    monkeypatch.setattr(main, "GeminiListingModel", lambda cfg: fake_listing_model)

    with TestClient(main.app) as client:
        yield client
