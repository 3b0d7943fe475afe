"""LowkeyType: a terminal typing test with endurance and raw speed modes."""

try:
    import rich  # noqa: F401
except ModuleNotFoundError as exc:
    missing = getattr(exc, "name", "")
    hint = "python3 -m pip install -U rich"
    print(f"Missing dependency '{missing}'. Install with: {hint}")
    raise SystemExit(1) from exc

from .scoring import ScoreReport, compute_wpm, score
from .session import SessionOutcome, SessionState, TypingResult, TypingSession, run_session

__version__ = "1.0.0"

__all__ = [
    "ScoreReport",
    "SessionOutcome",
    "SessionState",
    "TypingResult",
    "TypingSession",
    "compute_wpm",
    "run_session",
    "score",
    "__version__",
]
