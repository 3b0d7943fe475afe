from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Sequence, Tuple

from .config import LEADERBOARD_SIZE, MAX_NAME_LEN
from .errors import ProfileError

if TYPE_CHECKING:
    from .session import TypingResult

logger = logging.getLogger(__name__)


@dataclass
class UserProfile:
    name: str
    best_wpm: float = 0.0
    best_accuracy: float = 0.0
    tests_completed: int = 0
    endurance_high_score: int = 0
    average_accuracy: float = 0.0
    total_chars_typed: int = 0
    total_correct_chars: int = 0

    def historical_accuracy(self) -> float:
        if self.total_chars_typed > 0:
            return self.total_correct_chars / self.total_chars_typed * 100.0
        return self.best_accuracy

    def skill_rating(self) -> float:
        normalized_wpm = self.best_wpm / 200.0 * 100.0
        rating = normalized_wpm * 0.5 + self.best_accuracy * 0.3 + self.average_accuracy * 0.2
        return min(100.0, rating)

    def skill_level(self) -> str:
        rating = self.skill_rating()
        if rating >= 100.0:
            return "Expert"
        if rating > 80.0:
            return "Advanced"
        if rating > 60.0:
            return "Intermediate"
        return "Beginner"

    def to_line(self) -> str:
        return (
            f"{self.name} {self.best_wpm:.2f} {self.best_accuracy:.2f} "
            f"{self.tests_completed} {self.endurance_high_score} "
            f"{self.average_accuracy:.2f} {self.total_chars_typed} {self.total_correct_chars}"
        )


# field order on disk
PROFILE_FIELDS: List[Tuple[str, Callable[[str], object]]] = [
    ("name", str),
    ("best_wpm", float),
    ("best_accuracy", float),
    ("tests_completed", int),
    ("endurance_high_score", int),
    ("average_accuracy", float),
    ("total_chars_typed", int),
    ("total_correct_chars", int),
]
MIN_PROFILE_FIELDS = 4


def parse_profile(line: str) -> Optional[UserProfile]:
    """
    Read one users-file line, stopping at the first field that doesn't parse.

    The line counts if name, best WPM, best accuracy and tests completed
    made it; later fields keep their defaults. Lines written before the
    running totals existed get totals estimated from the best accuracy.
    """
    values: Dict[str, object] = {}
    for (name, kind), token in zip(PROFILE_FIELDS, line.split()):
        try:
            values[name] = kind(token)
        except ValueError:
            break
    if len(values) < MIN_PROFILE_FIELDS:
        return None

    profile = UserProfile(**values)
    has_totals = "total_chars_typed" in values
    if not has_totals and profile.tests_completed > 0:
        profile.total_chars_typed = 200 * profile.tests_completed
        profile.total_correct_chars = int(profile.total_chars_typed * (profile.best_accuracy / 100.0))
        profile.average_accuracy = profile.best_accuracy * 0.9
    return profile


def validate_name(raw: str) -> str:
    name = raw.strip()
    if not name or any(ch.isspace() for ch in name):
        raise ValueError("username must be a single word with no spaces")
    return name[:MAX_NAME_LEN]


@dataclass
class StatsUpdate:
    average_wpm: float
    average_accuracy: float
    previous_best_wpm: float
    previous_best_accuracy: float

    @property
    def new_best_wpm(self) -> bool:
        return self.average_wpm > self.previous_best_wpm

    @property
    def new_best_accuracy(self) -> bool:
        return self.average_accuracy > self.previous_best_accuracy


class ProfileStore:
    def __init__(self, path: Path) -> None:
        self.path = path
        self.users: List[UserProfile] = []
        self.loaded = False

    def load(self) -> int:
        try:
            lines = self.path.read_text(encoding="utf-8").splitlines()
        except FileNotFoundError:
            logger.info("users file %s not found, creating it", self.path)
            self.users = []
            self.loaded = True
            self.save()
            return 0
        except (OSError, UnicodeDecodeError) as exc:
            raise ProfileError(f"Could not read {self.path}: {exc}") from exc

        users: List[UserProfile] = []
        for number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            profile = parse_profile(line)
            if profile is None:
                logger.debug("skipping malformed line %d of %s", number, self.path)
                continue
            users.append(profile)
        self.users = users
        self.loaded = True
        logger.info("loaded %d user profiles from %s", len(users), self.path)
        return len(users)

    def save(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("".join(u.to_line() + "\n" for u in self.users), encoding="utf-8")
        except OSError as exc:
            raise ProfileError(f"Could not write {self.path}: {exc}") from exc
        logger.info("saved %d user profiles to %s", len(self.users), self.path)

    def find(self, name: str) -> Optional[UserProfile]:
        for user in self.users:
            if user.name == name:
                return user
        return None

    def get_or_create(self, raw_name: str) -> Tuple[UserProfile, bool]:
        name = validate_name(raw_name)
        existing = self.find(name)
        if existing is not None:
            return existing, False
        profile = UserProfile(name=name)
        self.users.append(profile)
        logger.info("created profile for %s", name)
        return profile, True

    def record_results(self, profile: UserProfile, results: Sequence["TypingResult"]) -> StatsUpdate:
        if not results:
            raise ValueError("no results to record")
        update = StatsUpdate(
            average_wpm=sum(r.wpm for r in results) / len(results),
            average_accuracy=sum(r.accuracy for r in results) / len(results),
            previous_best_wpm=profile.best_wpm,
            previous_best_accuracy=profile.best_accuracy,
        )
        if update.new_best_wpm:
            profile.best_wpm = update.average_wpm
        if update.new_best_accuracy:
            profile.best_accuracy = update.average_accuracy

        profile.total_chars_typed += sum(r.total_keystrokes for r in results)
        profile.total_correct_chars += sum(r.correct_chars for r in results)
        if profile.total_chars_typed > 0:
            profile.average_accuracy = profile.total_correct_chars / profile.total_chars_typed * 100.0
        profile.tests_completed += len(results)
        return update

    def record_endurance(self, profile: UserProfile, words_completed: int, rounds_completed: int) -> bool:
        new_high = words_completed > profile.endurance_high_score
        if new_high:
            profile.endurance_high_score = words_completed
        profile.tests_completed += rounds_completed
        return new_high

    def ranked(self) -> List[UserProfile]:
        # sorted() is stable, so ties keep file order
        return sorted(self.users, key=lambda u: u.best_wpm, reverse=True)

    def leaderboard(self, current: UserProfile, size: int = LEADERBOARD_SIZE) -> Tuple[List[UserProfile], int]:
        ranked = self.ranked()
        rank = 0
        for i, user in enumerate(ranked, start=1):
            if user.name == current.name:
                rank = i
                break
        return ranked[:size], rank
