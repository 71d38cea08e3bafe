import sys
from unittest import mock

import pytest

from digcore.cmdx import (
    MAX_STDERR_BYTES,
    CommandTimeoutError,
    command_run,
    remove_windows_carriage_returns,
    run_timeout,
    truncate_stderr,
)

PY = f'"{sys.executable}"'


def test_command_run_captures_stdout():
    result = command_run(f'{PY} -c "print(42)"', 30)
    assert result.stdout.strip() == b"42"
    assert result.returncode == 0


def test_command_run_captures_stderr_and_exit_code():
    result = command_run(f'{PY} -c "import sys; sys.stderr.write(\'oops\'); sys.exit(3)"', 30)
    assert result.stderr == b"oops"
    assert result.returncode == 3


def test_command_run_timeout():
    with pytest.raises(CommandTimeoutError) as info:
        command_run(f'{PY} -c "import time; time.sleep(30)"', 0.5)
    assert "timeout" in str(info.value)


def test_command_run_empty_command():
    with pytest.raises(ValueError, match="unable to parse command"):
        command_run("   ", 5)


def test_command_run_unterminated_quote():
    with pytest.raises(ValueError, match="unable to parse command"):
        command_run('echo "hello', 5)


def test_run_timeout_with_argument_list():
    result = run_timeout([sys.executable, "-c", "print('hi')"], 30)
    assert result.stdout.strip() == b"hi"
    assert result.returncode == 0


def test_run_timeout_missing_program():
    with pytest.raises(FileNotFoundError):
        run_timeout(["definitely-not-a-real-program-xyz"], 5)


def test_truncate_stderr_keeps_first_line():
    assert truncate_stderr(b"line1\nline2") == b"line1..."


def test_truncate_stderr_trailing_newline_only():
    assert truncate_stderr(b"short\n") == b"short"


def test_truncate_stderr_long_single_line():
    out = truncate_stderr(b"x" * 600)
    assert len(out) == MAX_STDERR_BYTES + 3
    assert out.endswith(b"...")


def test_truncate_stderr_leading_newline_untouched():
    data = b"\nabc"
    assert truncate_stderr(data) == data


def test_remove_carriage_returns_on_windows():
    with mock.patch("sys.platform", "win32"):
        assert remove_windows_carriage_returns(b"a\r\nb\r\n") == b"a\nb\n"


def test_remove_carriage_returns_elsewhere():
    data = b"a\r\nb\r\n"
    with mock.patch("sys.platform", "linux"):
        assert remove_windows_carriage_returns(data) == data