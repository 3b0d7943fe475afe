from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional

from rich.console import Console

from .config import Settings
from .errors import LowkeyTypeError, ProfileError
from .profiles import ProfileStore, UserProfile
from .terminal import Color, Terminal
from .words import load_words

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """State shared by the menu, the modes and the session engine."""

    settings: Settings
    console: Console
    terminal: Terminal
    store: ProfileStore
    profile: Optional[UserProfile] = None
    word_pool: List[str] = field(default_factory=list)
    rng: random.Random = field(default_factory=random.Random)

    @property
    def user(self) -> UserProfile:
        if self.profile is None:
            raise LowkeyTypeError("no user is logged in")
        return self.profile

    def load_words(self, difficulty: str) -> List[str]:
        self.word_pool = load_words(difficulty, self.settings.words_dir)
        return self.word_pool

    def persist(self) -> bool:
        if not self.store.loaded:
            # never overwrite a users file we haven't read
            return False
        try:
            self.store.save()
        except ProfileError as exc:
            logger.warning("%s", exc)
            self.terminal.say(f"Error: {exc}", Color.INCORRECT)
            return False
        self.terminal.say("User data saved successfully.")
        return True
