"""Unit tests for capture configuration."""

import pytest
import yaml

from pagesnap.capture.config import (
    CONFIG_PATH_VAR,
    ENV_VAR,
    BrowserEngineType,
    CaptureConfigManager,
    CaptureSettings,
    build_settings,
)


class TestCaptureSettings:
    """Tests for CaptureSettings defaults and validation."""

    def test_defaults(self):
        settings = CaptureSettings()

        assert settings.environment == "production"
        assert settings.engine == BrowserEngineType.CHROMIUM
        assert settings.headless is True
        assert (settings.desktop_width, settings.desktop_height, settings.desktop_scale) == (1920, 1080, 3)
        assert (settings.mobile_width, settings.mobile_height, settings.mobile_scale) == (430, 932, 3)
        assert (settings.brand_width, settings.brand_height, settings.brand_scale) == (1440, 900, 2)
        assert settings.navigation_timeout_ms == 15000
        assert settings.settle_delay_ms == 600
        assert settings.blocked_resource_types == ["font", "media"]
        assert "doubleclick.net" in settings.tracking_patterns
        assert settings.max_concurrent_sessions is None

    def test_launch_options(self):
        options = CaptureSettings(headless=False).to_launch_options()

        assert options == {
            'headless': False,
            'args': ["--no-sandbox", "--disable-setuid-sandbox"],
        }

    def test_invalid_environment(self):
        with pytest.raises(ValueError, match="Environment must be one of"):
            CaptureSettings(environment="qa")

    def test_invalid_engine(self):
        with pytest.raises(ValueError, match="Engine must be one of"):
            CaptureSettings(engine="netscape")

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValueError):
            CaptureSettings(navigation_timeout_ms=0)

    def test_zero_settle_delay_allowed(self):
        assert CaptureSettings(settle_delay_ms=0).settle_delay_ms == 0


class TestBuildSettings:
    """Tests for build_settings environment overrides."""

    def test_empty_data(self):
        assert build_settings(None) == CaptureSettings()

    def test_environment_override_applied(self):
        data = {
            'settle_delay_ms': 800,
            'environments': {
                'test': {'settle_delay_ms': 0},
                'staging': {'desktop_width': 1440},
            },
        }

        settings = build_settings(data, 'test')

        assert settings.environment == 'test'
        assert settings.settle_delay_ms == 0
        assert settings.desktop_width == 1920

    def test_environment_from_file(self):
        data = {
            'environment': 'staging',
            'environments': {'staging': {'desktop_width': 1440}},
        }

        assert build_settings(data).desktop_width == 1440

    def test_does_not_mutate_input(self):
        data = {'environments': {'test': {'settle_delay_ms': 0}}}

        build_settings(data, 'test')

        assert 'environments' in data


class TestCaptureConfigManager:
    """Tests for CaptureConfigManager."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        monkeypatch.delenv(ENV_VAR, raising=False)
        monkeypatch.delenv(CONFIG_PATH_VAR, raising=False)

    @pytest.fixture
    def config_file(self, tmp_path):
        path = tmp_path / "capture.yaml"
        path.write_text(yaml.safe_dump({
            'navigation_timeout_ms': 20000,
            'environments': {
                'development': {'navigation_timeout_ms': 30000},
            },
        }))
        return path

    def test_loads_yaml(self, config_file):
        manager = CaptureConfigManager(config_file)

        assert manager.config.navigation_timeout_ms == 20000
        assert manager.environment == "production"

    def test_env_var_selects_overrides(self, config_file, monkeypatch):
        monkeypatch.setenv(ENV_VAR, "development")
        manager = CaptureConfigManager(config_file)

        settings = manager.load_config()

        assert settings.environment == "development"
        assert settings.navigation_timeout_ms == 30000

    def test_reloads_when_environment_changes(self, config_file, monkeypatch):
        manager = CaptureConfigManager(config_file)
        assert manager.load_config().navigation_timeout_ms == 20000

        monkeypatch.setenv(ENV_VAR, "development")

        assert manager.load_config().navigation_timeout_ms == 30000

    def test_caches_config(self, config_file):
        manager = CaptureConfigManager(config_file)

        assert manager.load_config() is manager.load_config()

    def test_path_from_env_var(self, config_file, monkeypatch):
        monkeypatch.setenv(CONFIG_PATH_VAR, str(config_file))

        manager = CaptureConfigManager()

        assert manager.config_path == config_file
        assert manager.config.navigation_timeout_ms == 20000

    def test_missing_explicit_file(self, tmp_path):
        manager = CaptureConfigManager(tmp_path / "missing.yaml")

        with pytest.raises(FileNotFoundError):
            manager.load_config()

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "capture.yaml"
        path.write_text("engine: netscape\n")

        with pytest.raises(ValueError, match="Configuration validation failed"):
            CaptureConfigManager(path).load_config()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "capture.yaml"
        path.write_text("navigation_timeout_ms: [unclosed\n")

        with pytest.raises(yaml.YAMLError):
            CaptureConfigManager(path).load_config()

    def test_bundled_config(self):
        settings = CaptureConfigManager().load_config()

        assert settings.desktop_width == 1920
        assert settings.brand_scale == 2
