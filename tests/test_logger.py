"""Test the logging system."""
from logging import Logger, getLogger as stdlib_getlogger
import sys

import pytest

from q3bsp.logger import LogMessage


def function(logger: Logger) -> None:
    """Test detecting different methods."""
    logger.info('Starting other function')
    logger.warning('Used wrong logic')
    logger.info('Finishing.')


@pytest.fixture
def clean_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """init_logging() modifies global state, so ensure we undo that."""
    monkeypatch.setattr(sys, 'excepthook', sys.excepthook)
    monkeypatch.setattr(stdlib_getlogger(), 'handlers', [])
    monkeypatch.setattr(stdlib_getlogger(), 'level', stdlib_getlogger().level)
    monkeypatch.delenv('Q3BSP_DEBUG', raising=False)


def test_logging_output(capsys: pytest.CaptureFixture[str], clean_logging: None) -> None:
    """Test the output of logging to the console."""
    from q3bsp.logger import context, get_logger, init_logging

    root = init_logging()
    root.info('hello there')
    root.error('Root error!:\n- Something failed.')
    get_logger('another').warning('A problem: {}', 45)
    get_logger('another').debug('Hidden: {}', 12)
    function(root)
    with context('First'):
        root.info('Message')
        with context('Second'):
            root.info('More messages')
        root.warning('A warning.')

    out, err = capsys.readouterr()
    out_lines = out.splitlines()
    err_lines = err.splitlines()

    assert any(line.startswith('[I] ') and line.endswith(': hello there') for line in out_lines)
    assert any(line.endswith(': Starting other function') for line in out_lines)
    assert any(line.endswith(': Finishing.') for line in out_lines)
    assert any(line.startswith('[I] (First) ') and line.endswith(': Message') for line in out_lines)
    assert any(line.startswith('[I] (First, Second) ') for line in out_lines)
    assert 'Hidden' not in out + err

    # Warnings and errors only go to stderr.
    assert 'Used wrong logic' not in out
    assert 'A warning.' not in out
    assert any(line.startswith('[E] ') and line.endswith(': Root error!:') for line in err_lines)
    assert ' | - Something failed.' in err_lines
    assert any(line.startswith('[W] ') and line.endswith(': A problem: 45') for line in err_lines)
    assert any(line.startswith('[W] (First) ') and line.endswith(': A warning.') for line in err_lines)


def test_debug_env(
    capsys: pytest.CaptureFixture[str],
    clean_logging: None,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """The environment variable enables debug messages."""
    from q3bsp.logger import get_logger, init_logging
    monkeypatch.setenv('Q3BSP_DEBUG', '1')
    init_logging()
    get_logger('another').debug('Shown: {}', 12)
    out, err = capsys.readouterr()
    assert any(line.startswith('[D] ') and line.endswith(': Shown: 12') for line in out.splitlines())


def test_log_file(tmp_path, clean_logging: None) -> None:
    """Logs can also be written to a file."""
    from q3bsp.logger import get_logger, init_logging
    filename = tmp_path / 'logs' / 'dump.log'
    init_logging(filename)
    get_logger('another').debug('Written to {}', 'file')
    for handler in stdlib_getlogger().handlers:
        handler.flush()
    assert '[DEBUG] ' in filename.read_text('utf8')
    assert 'Written to file' in filename.read_text('utf8')
    for handler in stdlib_getlogger().handlers:
        handler.close()


def test_uncaught_exceptions(
    capsys: pytest.CaptureFixture[str],
    clean_logging: None,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Uncaught exceptions are logged, then passed to the previous hook."""
    from q3bsp.logger import init_logging
    previous = []
    monkeypatch.setattr(sys, 'excepthook', lambda *args: previous.append(args))
    init_logging()

    try:
        raise ValueError('Bad lump')
    except ValueError as exc:
        error = exc
    sys.excepthook(ValueError, error, error.__traceback__)
    out, err = capsys.readouterr()
    assert out == ''
    err_lines = err.splitlines()
    assert any(line.startswith('[E] ') and line.endswith(': Uncaught Exception:') for line in err_lines)
    assert 'ValueError: Bad lump' in err_lines
    assert previous == [(ValueError, error, error.__traceback__)]

    # Exiting is not an error.
    sys.excepthook(SystemExit, SystemExit(0), None)
    out, err = capsys.readouterr()
    assert out == err == ''
    assert len(previous) == 1


def test_message_formatting() -> None:
    """Braces are only formatted if arguments are passed."""
    assert str(LogMessage('{not} formatted', (), {})) == '{not} formatted'
    assert str(LogMessage('{} and {key}', (1, ), {'key': 'value'})) == '1 and value'
    assert str(LogMessage('A\nB', (), {})) == 'A\n | B\n |___\n'
