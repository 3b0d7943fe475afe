from __future__ import annotations

import logging
import os
import sys
from abc import ABC, abstractmethod
from contextlib import contextmanager
from enum import Enum
from typing import Dict, Iterator, Optional, TextIO

from rich.console import Console
from rich.control import Control, ControlType
from rich.text import Text

from .config import DEFAULT_WIDTH

if os.name == "nt":
    import msvcrt
else:
    import termios
    import tty

logger = logging.getLogger(__name__)

CANCEL_KEY = "\x1b"
BACKSPACE_KEYS = ("\x7f", "\b")
INTERRUPT_KEY = "\x03"


class Color(Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    INFO = "info"
    WARNING = "warning"
    DEFAULT = "default"


def is_printable(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


class Terminal(ABC):
    """
    What the typing engine needs from the terminal.

    Subclasses supply key reading and raw-mode switching for their platform.
    Colour and cursor output go through the rich console, which picks the
    right escape codes (or console API calls) for wherever it is running.
    """

    def __init__(self, console: Console, palette: Dict[str, str]) -> None:
        self.console = console
        self.palette = palette
        self.color = Color.DEFAULT
        self.raw = False

    # colour state

    def style(self, color: Color) -> str:
        return self.palette.get(color.value, "")

    def set_color(self, color: Color) -> None:
        self.color = color

    # output

    def write(self, chunk: str) -> None:
        self.console.print(Text(chunk, style=self.style(self.color)), end="", soft_wrap=True)

    def say(self, message: str = "", color: Color = Color.DEFAULT) -> None:
        previous = self.color
        self.set_color(color)
        self.write(message + "\n")
        self.set_color(previous)

    def draw(self, text: Text) -> None:
        self.console.print(text, end="", soft_wrap=True)

    def newline(self) -> None:
        self.console.line()

    def carriage_return(self) -> None:
        self.console.control(Control(ControlType.CARRIAGE_RETURN))

    def cursor_up(self, lines: int = 1) -> None:
        self.console.control(Control.move(0, -lines))

    def clear_screen(self) -> None:
        self.console.clear()

    @contextmanager
    def frame(self) -> Iterator[None]:
        # hold everything written inside until the frame is complete
        with self.console:
            yield

    def get_width(self) -> int:
        width = self.console.width
        return width if width and width > 0 else DEFAULT_WIDTH

    # input

    @abstractmethod
    def read_key(self) -> str:
        """Block for one key and return it, or "" for keys with no character."""

    def enter_raw_mode(self) -> None:
        self.raw = True

    def restore_mode(self) -> None:
        self.raw = False

    @contextmanager
    def raw_mode(self) -> Iterator["Terminal"]:
        if self.raw:
            yield self
            return
        self.enter_raw_mode()
        try:
            yield self
        finally:
            self.restore_mode()

    def wait_for_key(self, message: str) -> str:
        self.write(message)
        with self.raw_mode():
            return self.read_key()


class PosixTerminal(Terminal):
    """cbreak mode through termios: no echo, no line buffering, Ctrl+C still works."""

    def __init__(self, console: Console, palette: Dict[str, str], stream: Optional[TextIO] = None) -> None:
        super().__init__(console, palette)
        self.stream = stream or sys.stdin
        self._saved = None

    def enter_raw_mode(self) -> None:
        fd = self.stream.fileno()
        self._saved = termios.tcgetattr(fd)
        tty.setcbreak(fd)
        self.raw = True

    def restore_mode(self) -> None:
        if self._saved is not None:
            termios.tcsetattr(self.stream.fileno(), termios.TCSADRAIN, self._saved)
            self._saved = None
        self.raw = False

    def read_key(self) -> str:
        with self.raw_mode():
            ch = self.stream.read(1)
        if ch == "":
            raise EOFError("standard input closed")
        return ch


class WindowsTerminal(Terminal):
    """msvcrt already reads unbuffered without echo, so raw mode is bookkeeping only."""

    def read_key(self) -> str:
        ch = msvcrt.getwch()
        if ch in ("\x00", "\xe0"):
            # arrow and function keys arrive as a prefix plus a scan code
            msvcrt.getwch()
            return ""
        if ch == INTERRUPT_KEY:
            raise KeyboardInterrupt
        return ch


def create_terminal(console: Console, palette: Dict[str, str]) -> Terminal:
    if os.name == "nt":
        terminal: Terminal = WindowsTerminal(console, palette)
    else:
        terminal = PosixTerminal(console, palette)
    logger.debug("using %s", type(terminal).__name__)
    return terminal
