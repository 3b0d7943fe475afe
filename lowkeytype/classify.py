from __future__ import annotations

from typing import List, Optional, Sequence, Set


class MistakeLedger:
    """
    Positions already charged as errors during one session.

    A position is charged at most once, whatever happens to it afterwards:
    backspace never clears a flag, so retyping the same slot wrongly again
    costs nothing extra. Positions past the end of the target share the
    same flag set.
    """

    def __init__(self) -> None:
        self.flags: Set[int] = set()
        self.charged = 0

    def __contains__(self, index: int) -> bool:
        return index in self.flags

    def charge(self, index: int) -> bool:
        if index in self.flags:
            return False
        self.flags.add(index)
        self.charged += 1
        return True


def is_correct(typed: Sequence[str], target: str, index: int) -> bool:
    return index < len(target) and typed[index] == target[index]


def classify(
    typed: Sequence[str],
    target: str,
    ledger: MistakeLedger,
    removed: Optional[int] = None,
) -> List[bool]:
    """
    Rescan the whole typed prefix, charging newly wrong positions.

    `removed` is the slot a backspace just emptied. It holds nothing, so it
    never matches the target and is charged like any other wrong position.
    """
    marks: List[bool] = []
    for i in range(len(typed)):
        ok = is_correct(typed, target, i)
        if not ok:
            ledger.charge(i)
        marks.append(ok)
    if removed is not None:
        ledger.charge(removed)
    return marks
