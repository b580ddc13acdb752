"""
Minimal logging context for subgrab.
Single place to control all output: screen + file, with flush.
"""
import os
import re
from pathlib import Path
from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.text import Text

_PREFIX_STYLES = (
    (re.compile(r"^\[WARNING\]"), "yellow"),
    (re.compile(r"^\[ERROR\]"), "red"),
    (re.compile(r"^\[INFO\]"), "cyan"),
    (re.compile(r"^\[[0-9:.]+\] \[DEBUG\]"), "grey50"),
)
_URL_PATTERN = re.compile(r"https?://\S+")


class SubgrabLogger:
    """Minimal logger: print to screen + file, always flush"""

    def __init__(self, log_file: Optional[Path] = None, debug: bool = False):
        self.log_file = log_file
        self._file_handle = None
        self._start_time = datetime.now()
        self.debug_mode = debug
        self._console = Console(highlight=False)

        if log_file:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            self._file_handle = open(log_file, 'w', buffering=1, encoding='utf-8')  # Line buffered, UTF-8

        from subgrab.__version__ import __version__
        self.debug(f"({self._start_time.strftime('%H:%M:%S')}  Started subgrab {__version__})")

    def _screen_text(self, output: str) -> Text:
        """Style known prefixes and URLs without interpreting rich markup."""
        text = Text(output)
        for pattern, style in _PREFIX_STYLES:
            match = pattern.match(output)
            if match:
                text.stylize(style, 0, match.end())
                break
        for match in _URL_PATTERN.finditer(output):
            text.stylize("underline", match.start(), match.end())
        return text

    def log(self, msg: str, prefix: str = ""):
        """Log to screen and file"""
        output = f"{prefix}{msg}" if prefix else msg

        self._console.print(self._screen_text(output))

        if self._file_handle:
            self._file_handle.write(output + "\n")
            self._file_handle.flush()
            os.fsync(self._file_handle.fileno())

    def info(self, msg: str):
        """Info message"""
        self.log(msg)

    def warning(self, msg: str):
        """Warning message"""
        self.log(msg, "[WARNING] ")

    def error(self, msg: str):
        """Error message"""
        self.log(msg, "[ERROR] ")

    def debug(self, msg: str):
        """Debug message (only shown in debug mode)"""
        if self.debug_mode:
            timestamp = datetime.now().strftime('%H:%M:%S.%f')[:-3]
            self.log(msg, f"[{timestamp}] [DEBUG] ")

    def http_request(self, method: str, url: str):
        """Log HTTP request (debug mode only)"""
        self.debug(f"HTTP Request: {method} {url}")

    def http_response(self, status: int, size: int, elapsed_ms: float):
        """Log HTTP response (debug mode only)"""
        self.debug(f"HTTP Response ({elapsed_ms:.0f}ms): Status {status}, {size} bytes")

    def step(self, state: str, description: str):
        """Log a pipeline state transition (debug mode only)"""
        self.debug(f"[{state}] {description}")

    def close(self):
        """Close file handle with goodbye message"""
        if self._file_handle:
            end_time = datetime.now()
            elapsed = end_time - self._start_time
            goodbye = f"({end_time.strftime('%H:%M:%S')}  Ended session, elapsed {elapsed.total_seconds():.1f}s)"
            self._file_handle.write(goodbye + "\n")
            self._file_handle.close()
            self._file_handle = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


# Global instance (set by the CLI)
_logger: Optional[SubgrabLogger] = None

def set_logger(logger: SubgrabLogger):
    """Set global logger instance"""
    global _logger
    _logger = logger

def get_logger() -> SubgrabLogger:
    """Get global logger instance"""
    global _logger
    if _logger is None:
        # Fallback: create stdout-only logger
        _logger = SubgrabLogger()
    return _logger

# Convenience functions
def log(msg: str):
    get_logger().log(msg)

def info(msg: str):
    get_logger().info(msg)

def warning(msg: str):
    get_logger().warning(msg)

def error(msg: str):
    get_logger().error(msg)

def debug(msg: str):
    get_logger().debug(msg)
