from __future__ import annotations

from dataclasses import dataclass


# ---------------------------
# Typing math
# ---------------------------

@dataclass(frozen=True)
class ScoreReport:
    accuracy: float
    mistyped: int
    missed: int
    extra: int

    @property
    def total_errors(self) -> int:
        return self.mistyped + self.missed + self.extra


def score(target: str, typed: str) -> ScoreReport:
    """
    Positional accuracy of `typed` against `target`.

    Mismatches inside the common length count as mistyped, a short
    attempt is charged the missing tail and a long one the surplus.
    Errors are measured against the target length and the result is
    clamped to [0, 100]; an empty target scores 0.
    """
    n = min(len(target), len(typed))
    mistyped = 0
    for i in range(n):
        if typed[i] != target[i]:
            mistyped += 1
    missed = max(0, len(target) - len(typed))
    extra = max(0, len(typed) - len(target))

    if not target:
        accuracy = 0.0
    else:
        accuracy = 100.0 * (1.0 - (mistyped + missed + extra) / len(target))
        accuracy = min(100.0, max(0.0, accuracy))
    return ScoreReport(accuracy=accuracy, mistyped=mistyped, missed=missed, extra=extra)


def compute_wpm(chars: int, elapsed_sec: float) -> float:
    if elapsed_sec <= 0:
        return 0.0
    minutes = elapsed_sec / 60.0
    return (chars / 5.0) / minutes


def keystroke_accuracy(correct: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return 100.0 * correct / total
