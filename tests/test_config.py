"""Test configuration and optional dependency probing in TableEngine/utils"""

import sys
from pathlib import Path

import pytest

# Add project root directory to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from TableEngine.errors import MissingOptionalDependency
from TableEngine.utils import config, dependency_check


class TestSettings:
    """Test the pydantic-settings configuration"""

    def test_defaults(self, monkeypatch):
        for name in ("IMAGE_ZOOM", "IMAGE_EXPAND", "SCREENSHOT_BACKEND", "HTML_BACKGROUND"):
            monkeypatch.delenv(f"TABLE_ENGINE_{name}", raising=False)
        settings = config.Settings(_env_file=None)
        assert settings.IMAGE_ZOOM == 2
        assert settings.IMAGE_EXPAND == 5
        assert settings.SCREENSHOT_BACKEND == "playwright"
        assert settings.HTML_BACKGROUND == "white"
        assert settings.ATOMIC_WRITES is True

    def test_environment_prefix(self, monkeypatch):
        monkeypatch.setenv("TABLE_ENGINE_IMAGE_ZOOM", "3.5")
        monkeypatch.setenv("TABLE_ENGINE_ATOMIC_WRITES", "false")
        settings = config.Settings(_env_file=None)
        assert settings.IMAGE_ZOOM == 3.5
        assert settings.ATOMIC_WRITES is False

    def test_reload_settings_replaces_module_instance(self, monkeypatch):
        original = config.settings
        monkeypatch.setenv("TABLE_ENGINE_HTML_BACKGROUND", "black")
        try:
            reloaded = config.reload_settings()
            assert config.settings is reloaded
            assert reloaded.HTML_BACKGROUND == "black"
        finally:
            config.settings = original


class TestDependencyCheck:
    """Test call-time probing of optional backends"""

    def test_missing_package(self):
        assert dependency_check.is_package_installed("table_engine_no_such_package") is False
        with pytest.raises(MissingOptionalDependency) as excinfo:
            dependency_check.require_package("table_engine_no_such_package", "testing", "no-such-dist")
        assert "pip install no-such-dist" in str(excinfo.value)

    def test_present_package_is_returned(self):
        module = dependency_check.require_package("json", "testing")
        assert module.dumps({}) == "{}"

    def test_playwright_message_names_install_steps(self, monkeypatch):
        monkeypatch.setattr(dependency_check, "is_package_installed", lambda name: False)
        available, message = dependency_check.check_playwright_available()
        assert available is False
        assert "playwright install chromium" in message

    def test_log_dependency_status(self, monkeypatch):
        monkeypatch.setattr(dependency_check, "is_package_installed", lambda name: False)
        assert dependency_check.log_dependency_status() == {"playwright": False, "weasyprint": False}
