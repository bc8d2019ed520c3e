"""Tests for configuration management."""

from pathlib import Path

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    get_artboard_size,
    get_environment,
    get_environment_info,
    get_output_dir,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("MCP_PORT", raising=False)
        assert get_environment(EnvVar.MCP_PORT) == 18080

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("MCP_PORT", "9999")
        assert get_environment(EnvVar.MCP_PORT, override=5000) == 5000

    @pytest.mark.unit
    def test_int_type_conversion(self, monkeypatch):
        """Integer type conversion from string."""
        monkeypatch.setenv("SKETCH_ARTBOARD_WIDTH", "1440")
        result = get_environment(EnvVar.SKETCH_ARTBOARD_WIDTH)
        assert result == 1440
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_bool_type_conversion_true(self, monkeypatch):
        """Boolean type conversion for true values."""
        for value in ("true", "1", "yes", "TRUE", "Yes"):
            monkeypatch.setenv("SKETCH_VALIDATE", value)
            assert get_environment(EnvVar.SKETCH_VALIDATE) is True

    @pytest.mark.unit
    def test_bool_type_conversion_false(self, monkeypatch):
        """Boolean type conversion for false values."""
        for value in ("false", "0", "no", "FALSE", "No"):
            monkeypatch.setenv("SKETCH_VALIDATE", value)
            assert get_environment(EnvVar.SKETCH_VALIDATE) is False

    @pytest.mark.unit
    def test_unrecognized_bool_returns_default(self, monkeypatch):
        """Unparseable boolean falls back to the default."""
        monkeypatch.setenv("SKETCH_VALIDATE", "maybe")
        assert get_environment(EnvVar.SKETCH_VALIDATE) is True

    @pytest.mark.unit
    def test_path_type_conversion(self, monkeypatch, tmp_path):
        """Path variables are converted to Path objects."""
        monkeypatch.setenv("SKETCH_OUTPUT_DIR", str(tmp_path))
        assert get_environment(EnvVar.SKETCH_OUTPUT_DIR) == tmp_path

    @pytest.mark.unit
    def test_invalid_int_returns_default(self, monkeypatch):
        """Invalid integer value returns default."""
        monkeypatch.setenv("MCP_PORT", "not-a-number")
        assert get_environment(EnvVar.MCP_PORT) == 18080


class TestGetEnvironmentInfo:
    """Tests for environment variable metadata."""

    @pytest.mark.unit
    def test_returns_env_config(self):
        """Returns EnvConfig dataclass."""
        info = get_environment_info(EnvVar.SKETCH_FILENAME)
        assert isinstance(info, EnvConfig)
        assert info.name == "SKETCH_FILENAME"
        assert info.default == "ai-design"
        assert info.var_type is str
        assert info.category == "export"

    @pytest.mark.unit
    def test_every_variable_has_description(self):
        """All variables document themselves."""
        for var in EnvVar:
            assert get_environment_info(var).description


class TestListEnvironmentVariables:
    """Tests for listing environment variables."""

    @pytest.mark.unit
    def test_lists_all_without_category(self):
        """No category returns every variable."""
        assert list_environment_variables() == list(EnvVar)

    @pytest.mark.unit
    def test_filters_by_category(self):
        """Category filter keeps only matching variables."""
        service = list_environment_variables("service")
        assert set(service) == {EnvVar.MCP_HOST, EnvVar.MCP_PORT}


class TestConvenienceFunctions:
    """Tests for derived configuration helpers."""

    @pytest.mark.unit
    def test_output_dir_override(self, tmp_path):
        """Explicit override wins."""
        assert get_output_dir(tmp_path) == tmp_path
        assert get_output_dir(str(tmp_path)) == tmp_path

    @pytest.mark.unit
    def test_output_dir_from_env(self, monkeypatch, tmp_path):
        """SKETCH_OUTPUT_DIR is honored."""
        monkeypatch.setenv("SKETCH_OUTPUT_DIR", str(tmp_path / "exports"))
        assert get_output_dir() == tmp_path / "exports"

    @pytest.mark.unit
    def test_output_dir_default_under_home(self, monkeypatch):
        """Falls back to a directory under the user's home."""
        monkeypatch.delenv("SKETCH_OUTPUT_DIR", raising=False)
        assert get_output_dir() == Path.home() / ".sketch-mcp" / "output"

    @pytest.mark.unit
    def test_artboard_size(self, monkeypatch):
        """Artboard size combines both dimension variables."""
        monkeypatch.delenv("SKETCH_ARTBOARD_WIDTH", raising=False)
        monkeypatch.setenv("SKETCH_ARTBOARD_HEIGHT", "900")
        assert get_artboard_size() == {"width": 393, "height": 900}
