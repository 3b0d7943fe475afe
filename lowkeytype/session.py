from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from .classify import MistakeLedger, classify
from .config import BUFFER_CAPACITY
from .errors import SessionError
from .render import PrefixRenderer
from .scoring import ScoreReport, compute_wpm, keystroke_accuracy, score
from .terminal import BACKSPACE_KEYS, CANCEL_KEY, Color, Terminal, is_printable

logger = logging.getLogger(__name__)


class SessionState(Enum):
    AWAITING_START = "awaiting start"
    TYPING = "typing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class TypingResult:
    text: str
    typed: str
    total_keystrokes: int
    incorrect_keystrokes: int
    accuracy: float
    wpm: float
    elapsed_seconds: float
    report: ScoreReport

    @property
    def correct_chars(self) -> int:
        return self.total_keystrokes - self.incorrect_keystrokes


@dataclass(frozen=True)
class SessionOutcome:
    state: SessionState
    result: Optional[TypingResult] = None

    @classmethod
    def completed_with(cls, result: TypingResult) -> "SessionOutcome":
        return cls(SessionState.COMPLETED, result)

    @classmethod
    def cancelled_outcome(cls) -> "SessionOutcome":
        return cls(SessionState.CANCELLED)

    @property
    def completed(self) -> bool:
        return self.state is SessionState.COMPLETED

    @property
    def cancelled(self) -> bool:
        return self.state is SessionState.CANCELLED


class TypingSession:
    """
    One pass over a target text.

    AWAITING_START -> TYPING -> COMPLETED | CANCELLED. The clock is read when
    typing starts and when the last character lands, nowhere else.
    """

    def __init__(
        self,
        target: str,
        capacity: int = BUFFER_CAPACITY,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        if not target:
            raise ValueError("target text is empty")
        if len(target) > capacity - 1:
            raise ValueError(f"target text is longer than {capacity - 1} characters")
        self.target = target
        self.capacity = capacity
        self.clock = clock
        self.state = SessionState.AWAITING_START
        self.typed: List[str] = []
        self.marks: List[bool] = []
        self.ledger = MistakeLedger()
        self.total_keystrokes = 0
        self.started_at: Optional[float] = None
        self._result: Optional[TypingResult] = None

    @property
    def pos(self) -> int:
        return len(self.typed)

    @property
    def incorrect_keystrokes(self) -> int:
        return self.ledger.charged

    @property
    def finished(self) -> bool:
        return self.state in (SessionState.COMPLETED, SessionState.CANCELLED)

    def start(self) -> None:
        if self.state is not SessionState.AWAITING_START:
            raise SessionError(f"cannot start a session that is {self.state.value}")
        self.state = SessionState.TYPING
        self.started_at = self.clock()

    def feed(self, key: str) -> bool:
        """Apply one keystroke. Returns True when the buffer changed."""
        if self.state is not SessionState.TYPING:
            raise SessionError(f"cannot type into a session that is {self.state.value}")

        if key == CANCEL_KEY:
            self.state = SessionState.CANCELLED
            return False

        if key in BACKSPACE_KEYS:
            if not self.typed:
                return False
            self.typed.pop()
            self.marks = classify(self.typed, self.target, self.ledger, removed=self.pos)
            return True

        if not is_printable(key) or self.pos >= self.capacity - 1:
            return False

        self.typed.append(key)
        self.total_keystrokes += 1
        self.marks = classify(self.typed, self.target, self.ledger)
        if self.pos == len(self.target):
            self._complete(self.clock())
        return True

    def _complete(self, ended_at: float) -> None:
        start = ended_at if self.started_at is None else self.started_at
        elapsed = max(0.0, ended_at - start)
        typed = "".join(self.typed)
        correct = self.total_keystrokes - self.incorrect_keystrokes
        self._result = TypingResult(
            text=self.target,
            typed=typed,
            total_keystrokes=self.total_keystrokes,
            incorrect_keystrokes=self.incorrect_keystrokes,
            accuracy=keystroke_accuracy(correct, self.total_keystrokes),
            wpm=compute_wpm(self.pos, elapsed),
            elapsed_seconds=elapsed,
            report=score(self.target, typed),
        )
        self.state = SessionState.COMPLETED

    def result(self) -> TypingResult:
        if self._result is None:
            raise SessionError(f"no result for a session that is {self.state.value}")
        return self._result


def show_target(terminal: Terminal, target: str) -> None:
    terminal.say(target + "\n", Color.INFO)


def run_session(
    target: str,
    terminal: Terminal,
    capacity: int = BUFFER_CAPACITY,
    clock: Callable[[], float] = time.perf_counter,
) -> SessionOutcome:
    session = TypingSession(target, capacity=capacity, clock=clock)
    renderer = PrefixRenderer(terminal)

    with terminal.raw_mode():
        show_target(terminal, target)
        terminal.write("Press any key to start typing...")
        terminal.read_key()
        terminal.clear_screen()
        show_target(terminal, target)
        terminal.say("Begin typing:    Press ESC at anytime to Cancel")

        session.start()
        logger.info("session started: %d characters", len(target))
        while not session.finished:
            if session.feed(terminal.read_key()):
                renderer.redraw(session.typed, session.marks)

    if session.state is SessionState.CANCELLED:
        logger.info("session cancelled at %d/%d characters", session.pos, len(target))
        terminal.say("\n\nTest cancelled. Returning to menu...", Color.WARNING)
        return SessionOutcome.cancelled_outcome()

    result = session.result()
    logger.info(
        "session completed: %.2f wpm, %.2f%% accuracy, %.2fs",
        result.wpm,
        result.accuracy,
        result.elapsed_seconds,
    )
    terminal.say("\n\nText completed!", Color.CORRECT)
    return SessionOutcome.completed_with(result)
