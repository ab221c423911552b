"""
Visual-blocks challenge checking.

A learner's flow is correct when it compiles to the same sketch as the
solution flow (ignoring leading/trailing whitespace).  Both sides go through
the normal permissive pipeline, so a half-built diagram is simply
"incorrect", never an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .deserialiser import normalize
from .diff import DiffOp, diff_lines
from .emitter import emit
from .ir import FlowState
from .scheduler import Scheduler

logger = logging.getLogger(__name__)


class ChallengeStatus(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    UNAVAILABLE = "unavailable"   # no usable solution to compare against


@dataclass
class ChallengeResult:
    status: ChallengeStatus
    expected: Optional[str] = None
    actual: Optional[str] = None
    diff: List[DiffOp] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.status is ChallengeStatus.CORRECT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "expected": self.expected,
            "actual": self.actual,
            "diff": [op.to_dict() for op in self.diff],
        }


def _compile(state: FlowState) -> str:
    return emit(Scheduler(state).build()).strip()


def check_answer(flow: Any, solution: Any) -> ChallengeResult:
    solution_state = normalize(solution)
    if solution_state.is_empty():
        logger.debug("solution flow is empty; nothing to check against")
        return ChallengeResult(status=ChallengeStatus.UNAVAILABLE)

    expected = _compile(solution_state)
    actual = _compile(normalize(flow))
    status = ChallengeStatus.CORRECT if actual == expected else ChallengeStatus.INCORRECT
    return ChallengeResult(
        status=status,
        expected=expected,
        actual=actual,
        diff=diff_lines(actual, expected),
    )


__all__ = ["ChallengeResult", "ChallengeStatus", "check_answer"]
