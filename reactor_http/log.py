"""Leveled logger that writes to the screen or to dated log files."""

from __future__ import annotations

import enum
import os
import sys
import threading
import time
from pathlib import Path


class PrintMethod(enum.Enum):
    """Where log lines go."""

    SCREEN = "screen"
    ONEFILE = "onefile"
    CLASSFILE = "classfile"


_LEVELS = {"debug": 0, "info": 1, "warning": 2, "error": 3, "fatal": 4}
_MAX_PART = 1023


class Logger:
    """Thread-safe logger with five levels, from debug (0) to fatal (4)."""

    def __init__(self):
        self.print_method = PrintMethod.SCREEN
        self.log_file = "log.txt"
        self.level = 0
        home = os.environ.get("HOME")
        self.directory = Path(home) / "log" if home else Path("log")
        self._lock = threading.Lock()

    def set_print_method(self, method):
        self.print_method = PrintMethod(method)

    def set_log_file(self, name):
        self.log_file = name

    def set_log_level(self, level):
        """Set the threshold by name; an unknown name means debug."""
        self.level = _LEVELS.get(level, 0)

    def debug(self, fmt, *args):
        self._emit("Debug", 0, fmt, args)

    def info(self, fmt, *args):
        self._emit("Info", 1, fmt, args)

    def warning(self, fmt, *args):
        self._emit("Warning", 2, fmt, args)

    def error(self, fmt, *args):
        self._emit("Error", 3, fmt, args)

    def fatal(self, fmt, *args):
        self._emit("Fatal", 4, fmt, args)

    def _emit(self, level_name, level_value, fmt, args):
        if self.level > level_value:
            return
        message = fmt % args if args else fmt
        now = time.localtime()
        prefix = (
            f"[{level_name}][thread: {threading.get_ident():#x}]"
            f"[{now.tm_hour:02d}:{now.tm_min:02d}:{now.tm_sec:02d}]"
        )
        text = f"{prefix[:_MAX_PART]} {message[:_MAX_PART]}\n"
        with self._lock:
            self._output(level_name, text)

    def _output(self, level_name, text):
        if self.print_method is PrintMethod.SCREEN:
            sys.stdout.write(text)
            sys.stdout.flush()
        elif self.print_method is PrintMethod.ONEFILE:
            self._append(self.log_file, text)
        else:
            self._append(f"{self.log_file}.{level_name}", text)

    def _append(self, name, text):
        stamp = time.strftime("%Y-%m-%d")
        target = self.directory / f"{stamp}_{name}"
        try:
            with open(target, "a", encoding="utf-8") as handle:
                handle.write(text)
        except OSError:
            return


logger = Logger()