"""Tests for lowkeytype.ui: screens that show user-supplied names."""

import pytest

from conftest import FakeTerminal
from lowkeytype import ui
from lowkeytype.profiles import UserProfile


@pytest.mark.parametrize("name", ["[/oops]", "[bold]ada", "[red]x[/red]"])
def test_leaderboard_prints_names_literally(name):
    terminal = FakeTerminal(width=100)
    user = UserProfile(name, best_wpm=42.0)
    ui.show_leaderboard(terminal, [user], user, 1, 5)
    assert name in terminal.output


def test_leaderboard_marks_user_outside_top(tmp_path):
    terminal = FakeTerminal(width=100)
    top = [UserProfile(f"u{i}", best_wpm=float(100 - i)) for i in range(5)]
    me = UserProfile("[/me]", best_wpm=1.0)
    ui.show_leaderboard(terminal, top, me, 9, 5)
    assert "[/me] (You)" in terminal.output
    assert "..." in terminal.output


def test_empty_leaderboard():
    terminal = FakeTerminal()
    ui.show_leaderboard(terminal, [], UserProfile("ada"), 0, 5)
    assert "No users found." in terminal.output


def test_profile_shows_name_literally():
    terminal = FakeTerminal(width=100)
    ui.show_profile(terminal, UserProfile("[/oops]"))
    assert "===== Profile: [/oops] =====" in terminal.output
    assert "Beginner" in terminal.output
