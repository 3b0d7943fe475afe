from __future__ import annotations

from typing import Sequence

from rich.text import Text

from .terminal import Color, Terminal


def lines_to_clear(drawn: int, width: int) -> int:
    """
    Number of screen lines the previous draw of `drawn` characters covers.

    Lines are broken before the character that would start column `width`,
    so a full line leaves the cursor on it rather than on the next one.
    """
    width = max(1, width)
    return (max(0, drawn - 1) // width) + 1


def build_prefix(typed: Sequence[str], marks: Sequence[bool], width: int, terminal: Terminal) -> Text:
    width = max(1, width)
    correct = terminal.style(Color.CORRECT)
    incorrect = terminal.style(Color.INCORRECT)

    text = Text()
    current_line_length = 0
    for ch, ok in zip(typed, marks):
        if current_line_length >= width:
            text.append("\n")
            current_line_length = 0
        text.append(ch, style=correct if ok else incorrect)
        current_line_length += 1
    return text


class PrefixRenderer:
    """Redraws the typed-so-far prefix in place after every keystroke."""

    def __init__(self, terminal: Terminal) -> None:
        self.terminal = terminal
        self.drawn = 0

    def erase(self, width: int) -> None:
        terminal = self.terminal
        count = lines_to_clear(self.drawn, width)
        terminal.set_color(Color.DEFAULT)
        for i in range(count):
            terminal.carriage_return()
            terminal.write(" " * width)
            terminal.carriage_return()
            if i < count - 1:
                terminal.cursor_up()

    def redraw(self, typed: Sequence[str], marks: Sequence[bool]) -> None:
        width = self.terminal.get_width()
        with self.terminal.frame():
            self.erase(width)
            self.terminal.draw(build_prefix(typed, marks, width, self.terminal))
        self.drawn = len(typed)
