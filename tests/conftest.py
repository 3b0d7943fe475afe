from __future__ import annotations

import io
import random
import re
from typing import Callable, Iterable, List

import pytest
from rich.console import Console

from lowkeytype.config import THEMES, Settings
from lowkeytype.context import AppContext
from lowkeytype.profiles import ProfileStore
from lowkeytype.scoring import score
from lowkeytype.session import SessionOutcome, TypingResult
from lowkeytype.terminal import Terminal


class FakeTerminal(Terminal):
    """Plays back scripted keys and captures everything written."""

    def __init__(self, keys: Iterable[str] = (), width: int = 20) -> None:
        console = Console(
            file=io.StringIO(),
            force_terminal=True,
            color_system="standard",
            width=width,
            legacy_windows=False,
        )
        super().__init__(console, dict(THEMES["classic"]))
        self.keys: List[str] = list(keys)
        self.raw_entries = 0
        self.restores = 0

    def feed(self, *keys: str) -> None:
        self.keys.extend(keys)

    def read_key(self) -> str:
        if not self.keys:
            raise EOFError("scripted keys exhausted")
        return self.keys.pop(0)

    def enter_raw_mode(self) -> None:
        self.raw_entries += 1
        self.raw = True

    def restore_mode(self) -> None:
        self.restores += 1
        self.raw = False

    @property
    def output(self) -> str:
        return self.console.file.getvalue()


_TOKEN = re.compile(r"\x1b\[([\d;]*)([A-Za-z])|(\r)|(\n)|(.)", re.S)


def render_screen(output: str, width: int) -> List[str]:
    """
    Replay terminal output onto a virtual screen and return its rows.

    Understands SGR (ignored), cursor up, carriage return, newline and the
    clear/home pair, with the usual deferred wrap at the right margin.
    """
    rows: List[List[str]] = [[" "] * width]
    row = col = 0
    pending = False
    for match in _TOKEN.finditer(output):
        params, command, cr, nl, ch = match.groups()
        if command:
            if command == "A":
                row = max(0, row - int(params or 1))
                pending = False
            elif command == "J":
                rows = [[" "] * width]
            elif command == "H":
                row = col = 0
                pending = False
            continue
        if cr:
            col = 0
            pending = False
            continue
        if nl:
            row += 1
            col = 0
            pending = False
        else:
            if pending:
                row += 1
                col = 0
                pending = False
            while len(rows) <= row:
                rows.append([" "] * width)
            rows[row][col] = ch
            if col == width - 1:
                pending = True
            else:
                col += 1
        while len(rows) <= row:
            rows.append([" "] * width)
    return ["".join(r).rstrip() for r in rows]


@pytest.fixture(autouse=True)
def _plain_term(monkeypatch):
    # rich drops cursor controls on dumb terminals
    monkeypatch.setenv("TERM", "xterm-256color")
    monkeypatch.delenv("NO_COLOR", raising=False)


@pytest.fixture
def terminal() -> FakeTerminal:
    return FakeTerminal()


@pytest.fixture
def words_dir(tmp_path):
    path = tmp_path / "words"
    path.mkdir()
    (path / "wordbaseL.txt").write_text("cat dog sun hat pen cup map jar box fig\nowl bee\n", encoding="utf-8")
    (path / "wordbaseM.txt").write_text("garden window silver planet\n", encoding="utf-8")
    (path / "wordbaseH.txt").write_text("labyrinthine ephemeral\n", encoding="utf-8")
    return path


@pytest.fixture
def ctx(tmp_path, words_dir, terminal) -> AppContext:
    settings = Settings(
        data_dir=tmp_path,
        users_file=tmp_path / "users.txt",
        words_dir=words_dir,
        title_file=tmp_path / "title.txt",
        log_file=tmp_path / "lowkeytype.log",
    )
    store = ProfileStore(settings.users_file)
    store.load()
    profile, _ = store.get_or_create("ada")
    return AppContext(
        settings=settings,
        console=terminal.console,
        terminal=terminal,
        store=store,
        profile=profile,
        rng=random.Random(7),
    )


def make_result(accuracy: float = 100.0, wpm: float = 60.0, total: int = 20, incorrect: int = 0) -> TypingResult:
    return TypingResult(
        text="cat dog",
        typed="cat dog",
        total_keystrokes=total,
        incorrect_keystrokes=incorrect,
        accuracy=accuracy,
        wpm=wpm,
        elapsed_seconds=4.0,
        report=score("cat dog", "cat dog"),
    )


class ScriptedRunner:
    """Stands in for run_session, replaying outcomes and keeping the targets it saw."""

    def __init__(self, outcomes: Iterable[SessionOutcome]) -> None:
        self.outcomes = list(outcomes)
        self.targets: List[str] = []

    def __call__(self, text: str, terminal: Terminal) -> SessionOutcome:
        self.targets.append(text)
        return self.outcomes.pop(0)


def completed(accuracy: float = 100.0, wpm: float = 60.0) -> SessionOutcome:
    return SessionOutcome.completed_with(make_result(accuracy=accuracy, wpm=wpm))


def cancelled() -> SessionOutcome:
    return SessionOutcome.cancelled_outcome()


def ticking_clock(*values: float) -> Callable[[], float]:
    it = iter(values)
    return lambda: next(it)
