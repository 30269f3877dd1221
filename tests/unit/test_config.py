"""Unit tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from smartlister.core.config import SmartListerConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "GEMINI_API_KEY",
        "GOOGLE_API_KEY",
        "SMARTLISTER_GEMINI_API_KEY",
        "SMARTLISTER_GENERATE_ENDPOINT",
        "SMARTLISTER_SERVER_PORT",
    ):
        monkeypatch.delenv(name, raising=False)


class TestSmartListerConfig:
    """Tests for SmartListerConfig."""

    def test_defaults(self, temp_dir):
        cfg = SmartListerConfig(data_dir=temp_dir, _env_file=None)

        assert cfg.gemini_api_key == ""
        assert cfg.max_images == 10
        assert cfg.max_image_dimension == 1024
        assert cfg.max_image_bytes == 524288
        assert cfg.toast_duration_ms == 2000
        assert cfg.request_timeout is None
        assert cfg.session_cookie_name == "session_token"

    def test_creates_data_dir(self, temp_dir):
        data_dir = temp_dir / "fresh"
        cfg = SmartListerConfig(data_dir=data_dir, _env_file=None)

        assert data_dir.is_dir()
        assert cfg.license_db_path == data_dir / "licenses.db"

    def test_session_max_age_seconds(self, temp_dir):
        cfg = SmartListerConfig(data_dir=temp_dir, _env_file=None)
        assert cfg.session_max_age_seconds == 7 * 24 * 60 * 60

    def test_prefixed_environment(self, temp_dir, monkeypatch):
        monkeypatch.setenv("SMARTLISTER_MAX_IMAGES", "5")
        monkeypatch.setenv("SMARTLISTER_GEMINI_MODEL", "gemini-test")

        cfg = SmartListerConfig(data_dir=temp_dir, _env_file=None)

        assert cfg.max_images == 5
        assert cfg.gemini_model == "gemini-test"

    @pytest.mark.parametrize("variable", ["GEMINI_API_KEY", "GOOGLE_API_KEY"])
    def test_conventional_api_key_variables(self, temp_dir, monkeypatch, variable):
        monkeypatch.setenv(variable, "from-env")

        cfg = SmartListerConfig(data_dir=temp_dir, _env_file=None)

        assert cfg.gemini_api_key == "from-env"

    def test_endpoint_defaults_to_local_server(self, temp_dir):
        cfg = SmartListerConfig(data_dir=temp_dir, _env_file=None)
        assert cfg.generate_endpoint == "http://127.0.0.1:7860/api/generate"

    def test_endpoint_follows_server_port(self, temp_dir, monkeypatch):
        monkeypatch.setenv("SMARTLISTER_SERVER_PORT", "9100")

        cfg = SmartListerConfig(data_dir=temp_dir, _env_file=None)

        assert cfg.generate_endpoint == "http://127.0.0.1:9100/api/generate"

    def test_explicit_endpoint_kept(self, temp_dir):
        cfg = SmartListerConfig(
            data_dir=temp_dir,
            server_port=9100,
            generate_endpoint="http://lister.internal/api/generate",
            _env_file=None,
        )
        assert cfg.generate_endpoint == "http://lister.internal/api/generate"

    def test_invalid_port_rejected(self, temp_dir):
        with pytest.raises(ValidationError):
            SmartListerConfig(data_dir=temp_dir, server_port=80, _env_file=None)

    def test_templates_dir_has_login_page(self, temp_dir):
        cfg = SmartListerConfig(data_dir=temp_dir, _env_file=None)
        assert Path(cfg.templates_dir, "login.html").is_file()
