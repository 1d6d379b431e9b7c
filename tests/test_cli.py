"""
tests/test_cli.py
==================
Command-Line Interface Tests

Tests verify:
    1. Argument errors exit with status 2 before any work happens
    2. Fatal run errors (output path is a file, missing input) return 1
    3. A normal run returns 0 and prints the summary line
    4. Environment defaults (VAD_ADDR_API, VAD_MODEL, VAD_REQUEST_TIMEOUT)
    5. Per-file report lines stay visible at --log-level ERROR

All tests are OFFLINE: requests.Session is mocked.
"""

import contextlib
import io
import logging
import os
import sys
import tempfile
import unittest
import wave
from pathlib import Path
from unittest.mock import MagicMock, patch

# Ensure project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from wavvad import cli
from wavvad.config import ENV_ADDR_API, ENV_MODEL, ENV_REQUEST_TIMEOUT

ENDPOINT = "http://vad-1:8080/vad"

_CLEAN_ENV = {ENV_ADDR_API: "", ENV_MODEL: "", ENV_REQUEST_TIMEOUT: ""}


def _write_wav(path, channels=1):
    with wave.open(str(path), "wb") as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(2)
        wf.setframerate(16000)
        wf.writeframes(b"\x00" * 320 * channels)


def _ok_response():
    resp = MagicMock()
    resp.status_code = 200
    return resp


class _CliCase(unittest.TestCase):

    def setUp(self):
        env = patch.dict(os.environ, _CLEAN_ENV)
        env.start()
        self.addCleanup(env.stop)
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.input_dir = self.root / "in"
        self.output_dir = self.root / "out"
        self.input_dir.mkdir()

    def tearDown(self):
        self._tmp.cleanup()

    def _main(self, *argv):
        stdout = io.StringIO()
        stderr = io.StringIO()
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            code = cli.main(list(argv))
        return code, stdout.getvalue()

    def _exit_code(self, *argv):
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(list(argv))
        return ctx.exception.code


# ===================================================================
# 1. Argument errors
# ===================================================================


class TestArgumentErrors(_CliCase):

    def test_missing_addr_api(self):
        self.assertEqual(self._exit_code(str(self.input_dir), str(self.output_dir)), 2)

    def test_empty_endpoint_list(self):
        code = self._exit_code(str(self.input_dir), str(self.output_dir), "--addr-api", ",")
        self.assertEqual(code, 2)

    def test_not_a_url(self):
        code = self._exit_code(str(self.input_dir), str(self.output_dir), "--addr-api", "localhost")
        self.assertEqual(code, 2)

    def test_non_positive_timeout(self):
        code = self._exit_code(
            str(self.input_dir), str(self.output_dir),
            "--addr-api", ENDPOINT, "--timeout", "0",
        )
        self.assertEqual(code, 2)

    def test_non_finite_timeout(self):
        for value in ("nan", "inf"):
            code = self._exit_code(
                str(self.input_dir), str(self.output_dir),
                "--addr-api", ENDPOINT, "--timeout", value,
            )
            self.assertEqual(code, 2)
        self.assertFalse(self.output_dir.exists())

    def test_missing_positional(self):
        self.assertEqual(self._exit_code(str(self.input_dir), "--addr-api", ENDPOINT), 2)

    def test_argument_error_creates_nothing(self):
        self._exit_code(str(self.input_dir), str(self.output_dir), "--addr-api", "")
        self.assertFalse(self.output_dir.exists())


# ===================================================================
# 2. Fatal run errors
# ===================================================================


class TestFatalErrors(_CliCase):

    @patch("wavvad.api.client.requests.Session")
    def test_output_dir_is_regular_file(self, session_cls):
        _write_wav(self.input_dir / "a.wav")
        self.output_dir.write_text("not a directory")

        with self.assertLogs("wavvad.cli", level="ERROR"):
            code, stdout = self._main(str(self.input_dir), str(self.output_dir), "--addr-api", ENDPOINT)

        self.assertEqual(code, 1)
        self.assertEqual(stdout, "")
        session_cls.assert_not_called()

    @patch("wavvad.api.client.requests.Session")
    def test_missing_input_dir(self, session_cls):
        with self.assertLogs("wavvad.cli", level="ERROR"):
            code, _ = self._main(str(self.root / "nope"), str(self.output_dir), "--addr-api", ENDPOINT)

        self.assertEqual(code, 1)
        session_cls.assert_not_called()


# ===================================================================
# 3. Normal runs
# ===================================================================


class TestRun(_CliCase):

    @patch("wavvad.api.client.requests.Session")
    def test_summary_and_exit_zero(self, session_cls):
        _write_wav(self.input_dir / "a.wav")
        _write_wav(self.input_dir / "b.wav", channels=2)
        (self.input_dir / "c.txt").write_text("ignored")
        session_cls.return_value.post.return_value = _ok_response()

        code, stdout = self._main(
            str(self.input_dir), str(self.output_dir), "--addr-api", ENDPOINT, "--model", "silero",
        )

        self.assertEqual(code, 0)
        self.assertEqual(stdout, "VAD complete: 1 files processed, 1 skipped.\n")
        _, kwargs = session_cls.return_value.post.call_args
        self.assertEqual(kwargs["json"]["model"], "silero")
        self.assertEqual(kwargs["timeout"], 120.0)
        self.assertTrue(self.output_dir.is_dir())

    @patch("wavvad.api.client.requests.Session")
    def test_failures_still_exit_zero(self, session_cls):
        _write_wav(self.input_dir / "a.wav")
        resp = MagicMock()
        resp.status_code = 500
        session_cls.return_value.post.return_value = resp

        code, stdout = self._main(str(self.input_dir), str(self.output_dir), "--addr-api", ENDPOINT)

        self.assertEqual(code, 0)
        self.assertEqual(stdout, "VAD complete: 0 files processed, 1 skipped.\n")

    @patch("wavvad.api.client.requests.Session")
    def test_timeout_flag(self, session_cls):
        _write_wav(self.input_dir / "a.wav")
        session_cls.return_value.post.return_value = _ok_response()

        self._main(
            str(self.input_dir), str(self.output_dir),
            "--addr-api", ENDPOINT, "--timeout", "7.5",
        )

        _, kwargs = session_cls.return_value.post.call_args
        self.assertEqual(kwargs["timeout"], 7.5)


# ===================================================================
# 4. Environment defaults
# ===================================================================


class TestEnvironmentDefaults(_CliCase):

    @patch("wavvad.api.client.requests.Session")
    def test_endpoints_model_and_timeout_from_env(self, session_cls):
        _write_wav(self.input_dir / "a.wav")
        session_cls.return_value.post.return_value = _ok_response()
        env = {ENV_ADDR_API: ENDPOINT, ENV_MODEL: "env-model", ENV_REQUEST_TIMEOUT: "30"}

        with patch.dict(os.environ, env):
            code, stdout = self._main(str(self.input_dir), str(self.output_dir))

        self.assertEqual(code, 0)
        self.assertEqual(stdout, "VAD complete: 1 files processed, 0 skipped.\n")
        args, kwargs = session_cls.return_value.post.call_args
        self.assertEqual(args[0], ENDPOINT)
        self.assertEqual(kwargs["json"]["model"], "env-model")
        self.assertEqual(kwargs["timeout"], 30.0)

    @patch("wavvad.api.client.requests.Session")
    def test_flag_overrides_env(self, session_cls):
        _write_wav(self.input_dir / "a.wav")
        session_cls.return_value.post.return_value = _ok_response()
        other = "http://vad-2:8080/vad"

        with patch.dict(os.environ, {ENV_ADDR_API: ENDPOINT}):
            self._main(str(self.input_dir), str(self.output_dir), "--addr-api", other)

        args, _ = session_cls.return_value.post.call_args
        self.assertEqual(args[0], other)

    def test_bad_env_timeout_is_argument_error(self):
        with patch.dict(os.environ, {ENV_REQUEST_TIMEOUT: "soon"}):
            code = self._exit_code(str(self.input_dir), str(self.output_dir), "--addr-api", ENDPOINT)
        self.assertEqual(code, 2)


# ===================================================================
# 5. Logging setup
# ===================================================================


class TestConfigureLogging(unittest.TestCase):

    def setUp(self):
        reporter = logging.getLogger(cli.REPORTER_LOGGER)
        self.addCleanup(reporter.setLevel, reporter.level)

    def test_per_file_lines_survive_error_level(self):
        cli.configure_logging("ERROR")
        reporter = logging.getLogger(cli.REPORTER_LOGGER)
        self.assertTrue(reporter.isEnabledFor(logging.WARNING))
        self.assertTrue(reporter.isEnabledFor(logging.INFO))
        self.assertFalse(reporter.isEnabledFor(logging.DEBUG))

    def test_debug_level_kept(self):
        cli.configure_logging("DEBUG")
        reporter = logging.getLogger(cli.REPORTER_LOGGER)
        self.assertTrue(reporter.isEnabledFor(logging.DEBUG))


if __name__ == "__main__":
    unittest.main()
