from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Dict, List, Sequence

from .config import MAX_WORD_LEN
from .errors import LoadError

logger = logging.getLogger(__name__)

DIFFICULTIES = ["light", "medium", "hard"]

WORD_FILES: Dict[str, str] = {
    "light": "wordbaseL.txt",
    "medium": "wordbaseM.txt",
    "hard": "wordbaseH.txt",
}


def word_file(difficulty: str, words_dir: Path) -> Path:
    try:
        return words_dir / WORD_FILES[difficulty]
    except KeyError:
        raise LoadError(f"unknown difficulty {difficulty!r}") from None


def split_long(token: str) -> List[str]:
    return [token[i:i + MAX_WORD_LEN] for i in range(0, len(token), MAX_WORD_LEN)]


def load_words(difficulty: str, words_dir: Path) -> List[str]:
    path = word_file(difficulty, words_dir)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadError(f"Could not open {path}: {exc}") from exc

    words: List[str] = []
    for token in content.split():
        words.extend(split_long(token))
    if not words:
        raise LoadError(f"{path} contains no words")
    logger.info("loaded %d words from %s", len(words), path)
    return words


def sample_words(pool: Sequence[str], count: int, rng: random.Random, allow_reuse: bool = False) -> List[str]:
    """
    Draw `count` words without replacement.

    A pool smaller than `count` is used up entirely; with `allow_reuse`
    the shortfall is then filled by drawing with replacement, so the
    result always has `count` words.
    """
    if count <= 0 or not pool:
        return []
    if count <= len(pool):
        return rng.sample(list(pool), count)
    words = rng.sample(list(pool), len(pool))
    if allow_reuse:
        words.extend(rng.choices(list(pool), k=count - len(pool)))
    return words


def build_target(words: Sequence[str]) -> str:
    return " ".join(words)
