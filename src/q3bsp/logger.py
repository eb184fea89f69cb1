"""Logging helpers for q3bsp.

Messages are written with :external:py:meth:`str.format()` placeholders, and are only
formatted if a handler actually outputs them::

    LOGGER = get_logger(__name__)
    LOGGER.debug('Load lump {} ({} bytes)', lump.name, length)

Scripts call :py:func:`init_logging` once, to send messages to the console and optionally a file.
"""
from typing import (
    TYPE_CHECKING, Any, Generator, List, Mapping, Optional, Tuple, Type, Union, cast,
)
from types import TracebackType
import contextlib
import contextvars
import logging
import os
import sys

from q3bsp import StringPath


__all__ = ['LogMessage', 'LoggerAdapter', 'get_logger', 'init_logging', 'context', 'DEBUG_ENV']

# The names passed to context(), innermost last.
CTX_STACK: 'contextvars.ContextVar[List[str]]' = contextvars.ContextVar('q3bsp_logger')
#: Set this environment variable to ``1`` to show debug messages on the console.
DEBUG_ENV = 'Q3BSP_DEBUG'
# The record attribute holding the context.
CTX_ATTR = 'q3bsp_context'
# The console only shows the first letter of the level name.
FILE_FORMAT = '[{levelname}]{q3bsp_context} {module}.{funcName}(): {message}'
CONSOLE_FORMAT = '[{levelname[0]}]{q3bsp_context} {module}.{funcName}(): {message}'


class LogMessage:
    """A message and its arguments, formatted when converted to a string.

    Messages without arguments are left alone, so braces can still be logged.
    Multi-line messages are indented, so they stand out from the next record.
    """
    def __init__(self, fmt: str, args: Tuple[object, ...], kwargs: Mapping[str, object]) -> None:
        self.fmt = fmt
        self.args = args
        self.kwargs = kwargs

    def format_msg(self) -> str:
        """Apply the arguments. The result replaces the format string."""
        if self.args or self.kwargs:
            self.fmt = self.fmt.format(*self.args, **self.kwargs)
            self.args = ()
            self.kwargs = {}
        return self.fmt

    def __str__(self) -> str:
        msg = self.format_msg()
        if '\n' not in msg:
            return msg
        lines = msg.split('\n')
        if lines[-1].isspace():
            del lines[-1]
        return '\n | '.join(lines) + '\n |___\n'


_ExcInfo = Union[
    None, bool, BaseException,
    Tuple[Type[BaseException], BaseException, Optional[TracebackType]],
    Tuple[None, None, None],
]
if TYPE_CHECKING:  # Only generic in stubs.
    _AdapterBase = logging.LoggerAdapter[logging.Logger]
else:
    _AdapterBase = logging.LoggerAdapter


class LoggerAdapter(_AdapterBase):
    """Wraps a logger, so messages use str.format() and include the current context."""
    logger: logging.Logger

    def __init__(self, logger: logging.Logger) -> None:
        super().__init__(logger, {})

    def log(
        self,
        level: int,
        msg: Any,
        *args: Any,
        exc_info: _ExcInfo = None,
        stack_info: bool = False,
        extra: Optional[Mapping[str, object]] = None,
        stacklevel: int = 0,
        **kwargs: Any,
    ) -> None:
        """Log a message, with ``args`` and ``kwargs`` passed to :external:py:meth:`str.format()`."""
        if not self.isEnabledFor(level):
            return
        record_extra = dict(extra or {})
        record_extra[CTX_ATTR] = _context_text()
        # Skip over debug() etc and this method, so funcName is the caller.
        if sys.version_info >= (3, 10):
            stacklevel += 2
        # noinspection PyProtectedMember
        self.logger._log(
            level,
            LogMessage(str(msg), args, kwargs),
            (),
            extra=record_extra,
            exc_info=exc_info,
            stack_info=stack_info,
            stacklevel=stacklevel,
        )

    def __getattr__(self, attr: str) -> Any:
        """Delegate unknown methods to the logger."""
        return getattr(self.logger, attr)


class Formatter(logging.Formatter):
    """Records from plain loggers have no context, so default it to blank."""
    def format(self, record: logging.LogRecord) -> str:
        record.__dict__.setdefault(CTX_ATTR, '')
        return super().format(record)


def _context_text() -> str:
    """Produce the context part of a message, like `` (q3dm1.bsp, FACES)``."""
    stack = CTX_STACK.get([])
    return f' ({", ".join(stack)})' if stack else ''


def _below_warning(record: logging.LogRecord) -> bool:
    """Warnings and errors only go to stderr."""
    return record.levelno < logging.WARNING


def init_logging(filename: Optional[StringPath] = None) -> logging.Logger:
    """Send log messages to the console, and optionally a file.

    Info messages go to stdout, debug ones only if :py:data:`DEBUG_ENV` is set to ``1``.
    Warnings and errors go to stderr. If a filename is passed, everything is written
    there as well. Uncaught exceptions are logged through :py:func:`sys.excepthook`.

    :returns: An adapter for the root logger.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    console_fmt = Formatter(CONSOLE_FORMAT, style='{')

    if filename is not None:
        folder = os.path.dirname(filename)
        if folder:
            os.makedirs(folder, exist_ok=True)
        file_handler = logging.FileHandler(filename, mode='w', encoding='utf8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(Formatter(FILE_FORMAT, style='{'))
        root.addHandler(file_handler)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.DEBUG if os.environ.get(DEBUG_ENV) == '1' else logging.INFO)
    stdout_handler.addFilter(_below_warning)
    stdout_handler.setFormatter(console_fmt)
    root.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(console_fmt)
    root.addHandler(stderr_handler)

    prev_hook = sys.excepthook

    def log_uncaught(
        exc_type: Type[BaseException],
        exc_value: BaseException,
        exc_tb: Optional[TracebackType],
    ) -> None:
        """Log exceptions which reach the top level, then pass them on."""
        if isinstance(exc_value, SystemExit):
            return
        root.error('Uncaught Exception:', exc_info=(exc_type, exc_value, exc_tb))
        # The default hook would only print the traceback a second time.
        if prev_hook is not sys.__excepthook__:
            prev_hook(exc_type, exc_value, exc_tb)

    sys.excepthook = log_uncaught
    return cast(logging.Logger, LoggerAdapter(root))


def get_logger(name: str = '') -> logging.Logger:
    """Get a logger in the ``q3bsp`` namespace, which uses str.format() for messages."""
    log = logging.getLogger(f'q3bsp.{name}' if name else 'q3bsp')
    return cast(logging.Logger, LoggerAdapter(log))


@contextlib.contextmanager
def context(name: str) -> Generator[str, None, None]:
    """Tag all messages logged inside this block with the name, usually a filename or lump."""
    stack = CTX_STACK.get(None)
    if stack is None:
        stack = []
        CTX_STACK.set(stack)
    stack.append(name)
    try:
        yield name
    finally:
        popped = stack.pop()
        assert popped is name, f'Popped incorrect value: pop({popped!r}) != ctx({name!r})!'
