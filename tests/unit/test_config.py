"""
Unit tests for ServerConfig and ClientConfig.
"""

import pytest

from tinyhttp.config import ClientConfig, ServerConfig


class TestServerConfig:
    """Tests for ServerConfig."""

    def test_defaults(self):
        config = ServerConfig()

        assert config.host == "127.0.0.1"
        assert config.port == 8080
        assert config.backlog == 128
        assert config.timeout is None
        assert config.max_body_size == 10 * 1024 * 1024
        assert config.log_level == "INFO"
        config.validate()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("TINYHTTP_HOST", "0.0.0.0")
        monkeypatch.setenv("TINYHTTP_PORT", "3000")
        monkeypatch.setenv("TINYHTTP_TIMEOUT", "2.5")
        monkeypatch.setenv("TINYHTTP_MAX_BODY_SIZE", "1024")
        monkeypatch.setenv("TINYHTTP_LOG_LEVEL", "DEBUG")

        config = ServerConfig.from_env()

        assert config.host == "0.0.0.0"
        assert config.port == 3000
        assert config.timeout == 2.5
        assert config.max_body_size == 1024
        assert config.log_level == "DEBUG"

    def test_from_env_defaults(self, monkeypatch):
        for name in ("HOST", "PORT", "TIMEOUT", "MAX_BODY_SIZE", "LOG_LEVEL"):
            monkeypatch.delenv(f"TINYHTTP_{name}", raising=False)

        assert ServerConfig.from_env() == ServerConfig()

    @pytest.mark.parametrize("kwargs", [
        {"port": -1},
        {"port": 70000},
        {"backlog": 0},
        {"timeout": 0},
        {"max_line_size": 10},
        {"max_headers": 0},
        {"max_body_size": -1},
        {"log_level": "LOUD"},
    ])
    def test_validate_rejects(self, kwargs):
        with pytest.raises(ValueError):
            ServerConfig(**kwargs).validate()

    def test_port_zero_allowed(self):
        """Port 0 asks the OS for a free port."""
        ServerConfig(port=0).validate()


class TestClientConfig:
    """Tests for ClientConfig."""

    def test_defaults(self):
        config = ClientConfig()

        assert config.timeout is None
        assert config.default_port == 80
        assert config.user_agent is None
        config.validate()

    @pytest.mark.parametrize("kwargs", [
        {"timeout": -1},
        {"default_port": 0},
        {"max_headers": 0},
    ])
    def test_validate_rejects(self, kwargs):
        with pytest.raises(ValueError):
            ClientConfig(**kwargs).validate()
