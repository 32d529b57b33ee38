"""Tests for configuration management."""

import pytest

from .lib import (
    DEFAULT_KROKI_ENDPOINT,
    EnvConfig,
    EnvVar,
    _convert_value,
    get_environment,
    get_environment_info,
    get_kroki_endpoint,
    get_timeout,
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
        monkeypatch.delenv("KROKI_ENDPOINT", raising=False)
        assert get_environment(EnvVar.KROKI_ENDPOINT) == "https://kroki.io"

    @pytest.mark.unit
    def test_empty_value_uses_default(self, monkeypatch):
        """An empty variable counts as unset."""
        monkeypatch.setenv("KROKI_ENDPOINT", "")
        assert get_environment(EnvVar.KROKI_ENDPOINT) == DEFAULT_KROKI_ENDPOINT

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("KROKI_TIMEOUT", "99")
        assert get_environment(EnvVar.KROKI_TIMEOUT, override=5.0) == 5.0

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("KROKI_ENDPOINT", "http://localhost:8000")
        assert get_environment(EnvVar.KROKI_ENDPOINT) == "http://localhost:8000"

    @pytest.mark.unit
    def test_float_type_conversion(self, monkeypatch):
        """Float type conversion from string."""
        monkeypatch.setenv("KROKI_TIMEOUT", "2.5")
        result = get_environment(EnvVar.KROKI_TIMEOUT)
        assert result == 2.5
        assert isinstance(result, float)

    @pytest.mark.unit
    def test_invalid_float_returns_default(self, monkeypatch):
        """Invalid numeric value returns default."""
        monkeypatch.setenv("KROKI_TIMEOUT", "soon")
        assert get_environment(EnvVar.KROKI_TIMEOUT) == 30.0

    @pytest.mark.unit
    def test_whitespace_value_uses_default(self, monkeypatch):
        """A blank variable counts as unset."""
        monkeypatch.setenv("KROKI_TIMEOUT", "   ")
        assert get_environment(EnvVar.KROKI_TIMEOUT) == 30.0

    @pytest.mark.unit
    def test_registered_types_are_converted(self):
        """Every variable uses a type that _convert_value handles."""
        for var in EnvVar:
            assert var.value.var_type in (str, float)
            assert isinstance(var.value.default, var.value.var_type)

    @pytest.mark.unit
    def test_convert_value(self):
        """Strings pass through, floats are parsed."""
        assert _convert_value("http://k", str, "d") == "http://k"
        assert _convert_value("2.5", float, 1.0) == 2.5
        assert _convert_value("abc", float, 1.0) == 1.0
        assert _convert_value(None, str, "d") == "d"


class TestGetEnvironmentInfo:
    """Tests for environment variable metadata."""

    @pytest.mark.unit
    def test_returns_env_config(self):
        """Returns EnvConfig dataclass."""
        info = get_environment_info(EnvVar.KROKI_ENDPOINT)
        assert isinstance(info, EnvConfig)
        assert info.name == "KROKI_ENDPOINT"
        assert info.default == "https://kroki.io"
        assert info.var_type is str
        assert info.category == "service"

    @pytest.mark.unit
    def test_description_present(self):
        """Description field is populated."""
        info = get_environment_info(EnvVar.KROKI_TIMEOUT)
        assert "timeout" in info.description.lower()


class TestListEnvironmentVariables:
    """Tests for listing environment variables."""

    @pytest.mark.unit
    def test_returns_all_variables(self):
        """Returns all EnvVar members when no category."""
        result = list_environment_variables()
        assert len(result) == len(EnvVar)

    @pytest.mark.unit
    def test_filter_by_category(self):
        """Filters by category correctly."""
        service_vars = list_environment_variables("service")
        assert EnvVar.KROKI_ENDPOINT in service_vars
        assert EnvVar.KROKI_TIMEOUT in service_vars
        assert EnvVar.KROKI_LOG_LEVEL not in service_vars


# =============================================================================
# Tests for convenience functions
# =============================================================================


class TestGetKrokiEndpoint:
    """Tests for endpoint resolution."""

    @pytest.mark.unit
    def test_default_endpoint(self, monkeypatch):
        """Falls back to the public service."""
        monkeypatch.delenv("KROKI_ENDPOINT", raising=False)
        assert get_kroki_endpoint() == "https://kroki.io"

    @pytest.mark.unit
    def test_env_endpoint_used_verbatim(self, monkeypatch):
        """The environment value is used exactly."""
        monkeypatch.setenv("KROKI_ENDPOINT", "http://localhost:8000")
        assert get_kroki_endpoint() == "http://localhost:8000"

    @pytest.mark.unit
    def test_trailing_slash_removed(self, monkeypatch):
        """Trailing slashes are stripped."""
        monkeypatch.setenv("KROKI_ENDPOINT", "http://localhost:8000/")
        assert get_kroki_endpoint() == "http://localhost:8000"

    @pytest.mark.unit
    def test_override_beats_environment(self, monkeypatch):
        """Explicit override wins over the environment."""
        monkeypatch.setenv("KROKI_ENDPOINT", "http://localhost:8000")
        assert get_kroki_endpoint("http://example.test") == "http://example.test"

    @pytest.mark.unit
    def test_empty_override_ignored(self, monkeypatch):
        """An empty override falls through to the environment."""
        monkeypatch.setenv("KROKI_ENDPOINT", "http://localhost:8000")
        assert get_kroki_endpoint("") == "http://localhost:8000"


class TestGetTimeout:
    """Tests for timeout resolution."""

    @pytest.mark.unit
    def test_default_timeout(self, monkeypatch):
        """Default timeout is 30 seconds."""
        monkeypatch.delenv("KROKI_TIMEOUT", raising=False)
        assert get_timeout() == 30.0

    @pytest.mark.unit
    def test_override(self):
        """Override wins."""
        assert get_timeout(1.5) == 1.5
