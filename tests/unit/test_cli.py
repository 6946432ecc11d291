"""
Unit tests for the command-line entry point.
"""

import pytest

from minihttp.__main__ import config_from_args, main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("HTTP_HOST", "HTTP_PORT", "HTTP_DIRECTORY",
                 "HTTP_LOG_LEVEL", "HTTP_LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)


class TestConfigFromArgs:
    """Tests for CLI argument handling."""

    def test_defaults(self):
        config = config_from_args([])

        assert config.host == "127.0.0.1"
        assert config.port == 4221
        assert config.directory == "."
        assert config.log_level == "INFO"

    def test_directory(self, tmp_path):
        config = config_from_args(["--directory", str(tmp_path)])

        assert config.directory == str(tmp_path)

    def test_invalid_directory_falls_back(self, capsys):
        """Test that a missing directory is reported and replaced by '.'."""
        config = config_from_args(["--directory", "/definitely/not/here"])

        assert config.directory == "."
        assert "/definitely/not/here" in capsys.readouterr().err

    def test_flags(self, tmp_path):
        config = config_from_args([
            "-d", str(tmp_path),
            "-H", "0.0.0.0",
            "-p", "8080",
            "-l", "debug",
            "--log-format", "json",
        ])

        assert config.host == "0.0.0.0"
        assert config.port == 8080
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"

    def test_env_defaults_overridden(self, monkeypatch):
        monkeypatch.setenv("HTTP_PORT", "9000")

        assert config_from_args([]).port == 9000
        assert config_from_args(["--port", "9001"]).port == 9001

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            config_from_args(["--version"])

        assert exc_info.value.code == 0
        assert "minihttp" in capsys.readouterr().out


class TestMain:
    """Tests for main()."""

    def test_invalid_port_exits(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--port", "70000"])

        assert exc_info.value.code == 1
        assert "Invalid port" in capsys.readouterr().err

    def test_invalid_env_exits(self, monkeypatch, capsys):
        monkeypatch.setenv("HTTP_PORT", "not-a-number")

        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1
