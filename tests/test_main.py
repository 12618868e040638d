"""Tests for the main CLI entry point."""

import tempfile
import unittest
from argparse import Namespace
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from chapterrelay.__main__ import _load_config, _parse_args, main
from chapterrelay.config import RelayConfig
from chapterrelay.errors import SourceFetchError


class TestParseArgs(unittest.TestCase):
    """Test suite for CLI argument parsing."""

    @patch.dict("os.environ", {}, clear=True)
    def test_parse_args_defaults(self) -> None:
        """1. Default Args: No source, default output directory, all flags off."""
        args = _parse_args([])
        assert isinstance(args, Namespace)
        assert args.source is None
        assert args.output_dir == "result"
        assert args.sequential is False
        assert args.debug is False
        assert args.concurrency is None

    @patch.dict("os.environ", {"JSON_URL": "https://example.com/7.json"})
    def test_source_from_environment(self) -> None:
        """2. Environment: JSON_URL provides the default source."""
        assert _parse_args([]).source == "https://example.com/7.json"

    def test_parse_args_all_options(self) -> None:
        """3. Options: Every option is parsed."""
        args = _parse_args(["data.json", "-o", "out", "-c", "relay.yaml", "--sequential", "--concurrency", "5", "--debug"])
        assert args.source == "data.json"
        assert args.output_dir == "out"
        assert args.config == "relay.yaml"
        assert args.sequential is True
        assert args.concurrency == 5
        assert args.debug is True


class TestLoadConfig(unittest.TestCase):
    """Test suite for _load_config."""

    def test_defaults_without_file(self) -> None:
        """1. Defaults: No config file means the default configuration."""
        args = _parse_args(["data.json"])
        assert _load_config(args) == RelayConfig()

    def test_overrides_are_applied(self) -> None:
        """2. Overrides: Command-line flags replace file values."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "relay.yaml"
            path.write_text("concurrency_limit: 4\ntarget_lang: ja\n", encoding="utf-8")
            args = _parse_args(["data.json", "-c", str(path), "--sequential", "--concurrency", "1"])

            config = _load_config(args)

        assert config.concurrent is False
        assert config.concurrency_limit == 1
        assert config.target_lang == "ja"

    def test_invalid_override_raises(self) -> None:
        """3. Validation: An invalid override raises ValueError."""
        with pytest.raises(ValueError, match="Invalid or missing configuration"):
            _load_config(_parse_args(["data.json", "--concurrency", "0"]))


@patch("chapterrelay.__main__.setup_logging")
class TestMain(unittest.TestCase):
    """Test suite for the main function."""

    @patch("chapterrelay.__main__.run_job", new_callable=AsyncMock)
    def test_main_success(self, mock_run_job: AsyncMock, mock_setup_logging: MagicMock) -> None:
        """1. Success: The job runs with the parsed source and output directory."""
        mock_run_job.return_value = Path("out/1.json")

        with self.assertLogs("chapterrelay.__main__", level="INFO") as cm:
            main(["https://example.com/1.json", "-o", "out"])

        mock_setup_logging.assert_called_once()
        assert mock_setup_logging.call_args.kwargs["log_dir"] == Path("out") / "logs"
        source, output_dir, config = mock_run_job.await_args.args
        assert source == "https://example.com/1.json"
        assert output_dir == "out"
        assert isinstance(config, RelayConfig)
        assert any("File saved to" in line for line in cm.output)

    @patch.dict("os.environ", {}, clear=True)
    def test_main_without_source_exits(self, _mock_setup_logging: MagicMock) -> None:
        """2. No Source: Exits with status 1 when neither argument nor JSON_URL is given."""
        with self.assertLogs("chapterrelay.__main__", level="CRITICAL"), pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1

    def test_main_missing_config_exits(self, _mock_setup_logging: MagicMock) -> None:
        """3. Bad Config: A missing config file is reported and exits with status 1."""
        with self.assertLogs("chapterrelay.__main__", level="CRITICAL") as cm, pytest.raises(SystemExit) as exc_info:
            main(["data.json", "-c", "/nonexistent/relay.yaml"])
        assert exc_info.value.code == 1
        assert "Invalid configuration" in cm.output[0]

    @patch("chapterrelay.__main__.run_job", new_callable=AsyncMock, side_effect=SourceFetchError("404"))
    def test_main_fetch_failure_exits(self, _mock_run_job: AsyncMock, _mock_setup_logging: MagicMock) -> None:
        """4. Fetch Failure: A source that cannot be fetched exits with status 1."""
        with self.assertLogs("chapterrelay.__main__", level="CRITICAL") as cm, pytest.raises(SystemExit) as exc_info:
            main(["https://example.com/1.json"])
        assert exc_info.value.code == 1
        assert "404" in cm.output[0]

    @patch("chapterrelay.__main__.run_job", new_callable=AsyncMock, side_effect=RuntimeError("boom"))
    def test_main_unexpected_error_exits(self, _mock_run_job: AsyncMock, _mock_setup_logging: MagicMock) -> None:
        """5. Unexpected: Any other error is logged with its traceback and exits with status 1."""
        with self.assertLogs("chapterrelay.__main__", level="ERROR") as cm, pytest.raises(SystemExit) as exc_info:
            main(["data.json"])
        assert exc_info.value.code == 1
        assert "An unexpected error occurred" in cm.output[0]
