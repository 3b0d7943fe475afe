from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from rich.console import Console
from rich.prompt import IntPrompt, Prompt
from rich.table import Table
from rich.text import Text

from .profiles import StatsUpdate, UserProfile
from .session import TypingResult
from .terminal import Color, Terminal

logger = logging.getLogger(__name__)

BANNER_COLORS = [Color.CORRECT, Color.INFO, Color.WARNING]

SKILL_COLORS = {
    "Expert": Color.CORRECT,
    "Advanced": Color.INFO,
    "Intermediate": Color.WARNING,
    "Beginner": Color.DEFAULT,
}


# ---------------------------
# Input
# ---------------------------

def ask_int(console: Console, prompt: str, low: int, high: int) -> int:
    while True:
        value = IntPrompt.ask(f"{prompt} ({low}-{high})", console=console)
        if low <= value <= high:
            return value
        console.print(f"[prompt.invalid]Number must be between {low} and {high}. Please try again")


def ask_username(console: Console) -> str:
    return Prompt.ask("Enter your username (no spaces)", console=console)


def pause(terminal: Terminal, message: str = "Press any key to return to menu...") -> None:
    terminal.newline()
    terminal.wait_for_key(message)
    terminal.newline()


# ---------------------------
# Screens
# ---------------------------

def show_banner(terminal: Terminal, path: Path) -> None:
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("could not open title art %s: %s", path, exc)
        terminal.say("LowkeyType", Color.INFO)
        return
    for number, line in enumerate(lines):
        terminal.say(line, BANNER_COLORS[number % len(BANNER_COLORS)])


def show_menu(terminal: Terminal, labels: Sequence[str]) -> None:
    terminal.say("\n===== Main Menu =====", Color.INFO)
    for number, label in enumerate(labels, start=1):
        terminal.say(f"{number}. {label}")


def show_welcome(terminal: Terminal, profile: UserProfile) -> None:
    terminal.say(f"Welcome back, {profile.name}!", Color.CORRECT)
    terminal.say(
        f"Best WPM: {profile.best_wpm:.2f} | Best Accuracy: {profile.best_accuracy:.2f}% "
        f"| Tests completed: {profile.tests_completed}"
    )
    if profile.endurance_high_score > 0:
        terminal.say(f"Endurance Mode High Score: {profile.endurance_high_score} words")


def show_round_header(terminal: Terminal, round_number: int, words: int, accuracy: float, wpm: float) -> None:
    terminal.say(f"\n===== Round {round_number} =====", Color.INFO)
    terminal.say(f"Words completed so far: {words}")
    terminal.say(f"Current accuracy: {accuracy:.2f}%")
    terminal.say(f"Current WPM: {wpm:.2f}")
    terminal.say("Press ESC at any time to end the test.\n")


def show_round_results(terminal: Terminal, round_number: int, result: TypingResult) -> None:
    report = result.report
    terminal.say(f"\n===== Round {round_number} Results =====", Color.INFO)
    terminal.say(f"Time taken: {result.elapsed_seconds:.2f} seconds")
    terminal.say(f"Accuracy: {result.accuracy:.2f}%")
    terminal.say(f"WPM: {result.wpm:.2f}")
    terminal.say(f"Mistyped chars: {report.mistyped}")
    terminal.say(f"Missed chars: {report.missed}")
    terminal.say(f"Extra chars: {report.extra}")


def show_endurance_summary(
    terminal: Terminal,
    words: int,
    rounds: int,
    accuracy: float,
    wpm: float,
    previous_high: Optional[int],
) -> None:
    terminal.say("\n===== Endurance Mode Complete =====", Color.INFO)
    terminal.say(f"Total words completed: {words}")
    terminal.say(f"Rounds completed: {rounds}")
    terminal.say(f"Final accuracy: {accuracy:.2f}%")
    terminal.say(f"Final WPM: {wpm:.2f}")
    if previous_high is not None:
        terminal.say(f"New endurance high score! Previous: {previous_high} words", Color.CORRECT)


def show_test_results(terminal: Terminal, results: Sequence[TypingResult], update: StatsUpdate) -> None:
    for number, result in enumerate(results, start=1):
        terminal.say(f"\n===== Test {number} Results =====", Color.INFO)
        terminal.say(f"Time taken: {result.elapsed_seconds:.2f} seconds")
        terminal.say(f"Words per minute: {result.wpm:.2f}")
        terminal.say(f"Accuracy: {result.accuracy:.2f}%")
        terminal.say(
            f"Character check: {result.report.accuracy:.2f}% "
            f"({result.report.mistyped} mistyped, {result.report.missed} missed, {result.report.extra} extra)"
        )
    if update.new_best_wpm:
        terminal.say(
            f"\nNew personal best WPM: {update.average_wpm:.2f} (previous: {update.previous_best_wpm:.2f})",
            Color.CORRECT,
        )
    if update.new_best_accuracy:
        terminal.say(
            f"\nNew personal best accuracy: {update.average_accuracy:.2f}% "
            f"(previous: {update.previous_best_accuracy:.2f}%)",
            Color.CORRECT,
        )


def leaderboard_table(top: List[UserProfile], current: UserProfile, rank: int, size: int) -> Table:
    table = Table(title="Leaderboard", title_justify="left")
    table.add_column("Rank", justify="right")
    table.add_column("Username")
    table.add_column("WPM", justify="right")
    table.add_column("Accuracy", justify="right")
    table.add_column("Tests", justify="right")
    table.add_column("Endurance", justify="right")

    def row(position: int, user: UserProfile, suffix: str = "") -> None:
        style = "bold" if user.name == current.name else None
        table.add_row(
            str(position),
            Text(user.name + suffix),
            f"{user.best_wpm:.2f}",
            f"{user.best_accuracy:.2f}",
            str(user.tests_completed),
            str(user.endurance_high_score),
            style=style,
        )

    for position, user in enumerate(top, start=1):
        row(position, user)
    if rank > size:
        table.add_row("...", "", "", "", "", "")
        row(rank, current, " (You)")
    return table


def show_leaderboard(terminal: Terminal, top: List[UserProfile], current: UserProfile, rank: int, size: int) -> None:
    if not top:
        terminal.say("No users found.", Color.WARNING)
        return
    terminal.newline()
    terminal.console.print(leaderboard_table(top, current, rank, size))


def show_profile(terminal: Terminal, profile: UserProfile) -> None:
    terminal.say(f"\n===== Profile: {profile.name} =====", Color.INFO)
    terminal.say(f"Tests completed: {profile.tests_completed}")
    terminal.say(f"Best WPM: {profile.best_wpm:.2f}")
    terminal.say(f"Best accuracy: {profile.best_accuracy:.2f}%")
    terminal.say(f"Average accuracy: {profile.average_accuracy:.2f}%")
    terminal.say(f"Endurance high score: {profile.endurance_high_score} words")
    level = profile.skill_level()
    terminal.write("\nSkill assessment: ")
    terminal.say(level, SKILL_COLORS[level])
