from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .config import (
    DYNAMIC_COMPLEXITY_THRESHOLD,
    ENDURANCE_ACCURACY_THRESHOLD,
    ENDURANCE_WPM_THRESHOLD,
    ROUND_WORDS,
)
from .context import AppContext
from .errors import LoadError
from .profiles import UserProfile
from .session import SessionOutcome, TypingResult, run_session
from .terminal import Color, Terminal
from .words import build_target, sample_words
from . import ui

logger = logging.getLogger(__name__)

SessionRunner = Callable[[str, Terminal], SessionOutcome]


@dataclass
class RoundState:
    difficulty: str = "light"
    words_completed: int = 0
    rounds_completed: int = 0
    running_accuracy: float = 100.0
    running_wpm: float = 100.0
    cancelled: bool = False

    @property
    def accuracy_ok(self) -> bool:
        return self.running_accuracy >= ENDURANCE_ACCURACY_THRESHOLD

    @property
    def wpm_ok(self) -> bool:
        return self.running_wpm >= ENDURANCE_WPM_THRESHOLD

    def should_continue(self) -> bool:
        return not self.cancelled and self.accuracy_ok and self.wpm_ok

    def apply(self, result: TypingResult, words: int = ROUND_WORDS) -> None:
        self.running_accuracy = result.accuracy
        self.running_wpm = result.wpm
        self.words_completed += words
        self.rounds_completed += 1


def difficulty_for(profile: UserProfile) -> str:
    accuracy = profile.historical_accuracy()
    if accuracy >= DYNAMIC_COMPLEXITY_THRESHOLD:
        return "hard"
    if accuracy >= DYNAMIC_COMPLEXITY_THRESHOLD - 10:
        return "medium"
    return "light"


def load_pool(ctx: AppContext, difficulty: str) -> Optional[List[str]]:
    try:
        return ctx.load_words(difficulty)
    except LoadError as exc:
        logger.warning("word list unavailable: %s", exc)
        ctx.terminal.say(f"Error: {exc}", Color.INCORRECT)
        ctx.terminal.say("Failed to load word list. Returning to main menu.")
        ui.pause(ctx.terminal, "Press any key to continue...")
        return None


# ---------------------------
# Raw speed
# ---------------------------

def run_raw_speed(
    ctx: AppContext,
    pool: Sequence[str],
    count: int,
    runner: SessionRunner = run_session,
) -> SessionOutcome:
    terminal = ctx.terminal
    if count > len(pool):
        terminal.say(f"Not enough words in file. Using all {len(pool)} available words.", Color.WARNING)
        count = len(pool)
    text = build_target(sample_words(pool, count, ctx.rng))

    terminal.say("\n===== Raw Speed Test =====", Color.INFO)
    terminal.say("Type as fast and accurately as you can!")
    terminal.say("Press ESC at any time to end the test.\n")
    outcome = runner(text, terminal)

    if outcome.completed and outcome.result is not None:
        update = ctx.store.record_results(ctx.user, [outcome.result])
        ui.show_test_results(terminal, [outcome.result], update)
        ctx.persist()
    else:
        logger.info("raw speed test cancelled, stats left untouched")
    ui.pause(terminal)
    return outcome


# ---------------------------
# Endurance
# ---------------------------

def run_endurance_rounds(
    ctx: AppContext,
    pool: Sequence[str],
    difficulty: str = "light",
    runner: SessionRunner = run_session,
) -> RoundState:
    """
    Play 10-word rounds until a threshold is missed or the player cancels.

    The running figures are those of the last completed round. A cancelled
    round ends the loop without touching them.
    """
    terminal = ctx.terminal
    state = RoundState(difficulty=difficulty)

    while state.should_continue():
        text = build_target(sample_words(pool, ROUND_WORDS, ctx.rng, allow_reuse=True))
        ui.show_round_header(
            terminal,
            state.rounds_completed + 1,
            state.words_completed,
            state.running_accuracy,
            state.running_wpm,
        )
        outcome = runner(text, terminal)
        if not outcome.completed or outcome.result is None:
            state.cancelled = True
            terminal.say("\nTest canceled. Returning to main menu...", Color.WARNING)
            break

        state.apply(outcome.result)
        logger.info(
            "round %d done: %.2f%% accuracy, %.2f wpm",
            state.rounds_completed,
            state.running_accuracy,
            state.running_wpm,
        )
        ui.show_round_results(terminal, state.rounds_completed, outcome.result)

        if not state.accuracy_ok:
            terminal.say(
                f"\nAccuracy dropped below {ENDURANCE_ACCURACY_THRESHOLD:.1f}%. Endurance mode ended.",
                Color.WARNING,
            )
        elif not state.wpm_ok:
            terminal.say(
                f"\nWPM dropped below {ENDURANCE_WPM_THRESHOLD:.1f}. Endurance mode ended.",
                Color.WARNING,
            )
        else:
            terminal.say("\nBoth accuracy and WPM are above thresholds. Continue to next round.", Color.CORRECT)
            terminal.wait_for_key("Press any key to start next round...")
            terminal.newline()
    return state


def run_endurance(ctx: AppContext, runner: SessionRunner = run_session) -> Optional[RoundState]:
    terminal = ctx.terminal
    profile = ctx.user
    terminal.say("\n===== Endurance Mode =====", Color.INFO)
    terminal.say(
        f"Keep typing until your accuracy falls below {ENDURANCE_ACCURACY_THRESHOLD:.1f}% "
        f"or WPM falls below {ENDURANCE_WPM_THRESHOLD:.1f}"
    )
    terminal.say("Press ESC at any time to end the test.\n")

    difficulty = difficulty_for(profile)
    terminal.say(f"Starting with {difficulty.upper()} difficulty based on your profile.")
    pool = load_pool(ctx, difficulty)
    if pool is None:
        return None

    state = run_endurance_rounds(ctx, pool, difficulty, runner)

    previous_high = profile.endurance_high_score
    new_high = ctx.store.record_endurance(profile, state.words_completed, state.rounds_completed)
    logger.info(
        "endurance finished: %d words over %d rounds%s",
        state.words_completed,
        state.rounds_completed,
        " (new high score)" if new_high else "",
    )
    ui.show_endurance_summary(
        terminal,
        state.words_completed,
        state.rounds_completed,
        state.running_accuracy,
        state.running_wpm,
        previous_high if new_high else None,
    )
    ctx.persist()
    ui.pause(terminal)
    return state
