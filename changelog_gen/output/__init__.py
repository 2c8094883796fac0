"""Terminal Output Formatting Package"""

import re
import sys
import os
import threading


class Colors:
    """ANSI escape codes for terminal colors."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    CYAN = '\033[36m'


# Cursor control
CLEAR_LINE = '\r\033[K'
CLEAR_DOWN = '\033[J'
SAVE_CURSOR = '\0337'
RESTORE_CURSOR = '\0338'

ANSI_RE = re.compile(r'\033(?:\[[0-9;?]*[A-Za-z]|[78])')


def cursor_up(lines: int) -> str:
    """Move the cursor up; empty for 0 since CSI 0 A still moves one row."""
    if lines <= 0:
        return ''
    return f'\033[{lines}A'


def strip_ansi(text: str) -> str:
    return ANSI_RE.sub('', text)


def _supports_color() -> bool:
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    if not hasattr(sys.stdout, 'isatty') or not sys.stdout.isatty():
        return False
    if sys.platform == 'win32':
        try:
            import ctypes
            kernel32 = ctypes.windll.kernel32
            kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7)
            return True
        except Exception:
            return False
    return True


def _supports_unicode() -> bool:
    if sys.platform == 'win32':
        try:
            '─⠋'.encode(sys.stdout.encoding or 'utf-8')
            return True
        except (UnicodeEncodeError, LookupError):
            return False
    return True


COLORS_ENABLED = _supports_color()
UNICODE_ENABLED = _supports_unicode()

CROSS = '✗' if UNICODE_ENABLED else '[X]'
RULE = '─' if UNICODE_ENABLED else '-'


def _colorize(text: str, *codes: str) -> str:
    if not COLORS_ENABLED:
        return text
    return f"{''.join(codes)}{text}{Colors.RESET}"


def success(text: str) -> str:
    return _colorize(text, Colors.GREEN)


def error(text: str) -> str:
    return _colorize(text, Colors.RED)


def warning(text: str) -> str:
    return _colorize(text, Colors.YELLOW)


def info(text: str) -> str:
    return _colorize(text, Colors.CYAN)


def dim(text: str) -> str:
    return _colorize(text, Colors.DIM)


def bold(text: str) -> str:
    return _colorize(text, Colors.BOLD)


def print_error(message: str) -> None:
    print(f"{error(CROSS)} {error(message)}", file=sys.stderr)


class Spinner:
    """Animated status line shown until the first response chunk.

    States go idle -> active -> stopped. stop() joins the thread, so once it
    returns no frame write is in flight and the caller owns the cursor.
    Use start()/stop() or as a context manager.
    """
    FRAMES_UNICODE = ['⠋', '⠙', '⠹', '⠸', '⠼', '⠴', '⠦', '⠧', '⠇', '⠏']
    FRAMES_ASCII = ['-', '\\', '|', '/']
    INTERVAL = 0.15

    def __init__(self, message: str = '', interval: float = INTERVAL, stream=None):
        self.message = message
        self.interval = interval
        self.stream = stream if stream is not None else sys.stdout
        self.state = 'idle'
        self._thread = None
        self._stop_event = threading.Event()
        self._frames = self.FRAMES_UNICODE if UNICODE_ENABLED else self.FRAMES_ASCII

    @property
    def active(self) -> bool:
        return self.state == 'active'

    def _write(self, text: str) -> bool:
        try:
            self.stream.write(text)
            self.stream.flush()
            return True
        except (OSError, ValueError):
            return False

    def _spin(self):
        idx = 0
        while not self._stop_event.is_set():
            frame = self._frames[idx % len(self._frames)]
            if not self._write(f'{CLEAR_LINE}{info(frame)} {self.message}'):
                break  # terminal went away
            idx += 1
            self._stop_event.wait(self.interval)

    def start(self) -> 'Spinner':
        if self.state != 'idle':
            return self
        self.state = 'active'
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._spin, daemon=True)
        self._thread.start()
        return self

    def stop(self) -> None:
        """Stop animating, wait for the last frame, and clear the line."""
        if self.state != 'active':
            self.state = 'stopped'
            return
        self._stop_event.set()
        if self._thread:
            self._thread.join()
            self._thread = None
        self._write(CLEAR_LINE)
        self.state = 'stopped'

    def __enter__(self):
        return self.start()

    def __exit__(self, *args):
        self.stop()


__all__ = [
    "Colors", "COLORS_ENABLED", "UNICODE_ENABLED",
    "CROSS", "RULE",
    "CLEAR_LINE", "CLEAR_DOWN", "SAVE_CURSOR", "RESTORE_CURSOR", "ANSI_RE",
    "cursor_up", "strip_ansi",
    "success", "error", "warning", "info", "dim", "bold",
    "print_error",
    "Spinner",
]
