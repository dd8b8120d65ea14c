"""Tests for the process entry point."""

import pytest
from unittest.mock import patch

from burnread.server import LOG_FORMAT, configure_logging, main


class TestConfigureLogging:
    """Test logging setup."""

    def test_basic_config(self):
        with patch("burnread.server.logging.basicConfig") as mock_config:
            configure_logging("debug")
        mock_config.assert_called_once_with(level="DEBUG", format=LOG_FORMAT)


class TestMain:
    """Test server startup."""

    def test_runs_uvicorn(self, monkeypatch):
        monkeypatch.setenv("BURNREAD_PORT", "9100")
        with patch("burnread.server.uvicorn.run") as mock_run, patch(
            "burnread.server.create_app"
        ) as mock_create_app, patch("burnread.server.configure_logging"):
            main()

        settings = mock_create_app.call_args.args[0]
        assert settings.port == 9100
        mock_run.assert_called_once_with(
            mock_create_app.return_value,
            host="0.0.0.0",
            port=9100,
            log_config=None,
        )
