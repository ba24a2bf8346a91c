"""Status flags and result objects returned by the processor."""

from dataclasses import dataclass, field
from enum import IntFlag
from typing import Dict, List, Tuple


class Status(IntFlag):
    """
    Outcome of a backend call.

    Flags combine, so an evaluation can be both `NOT_ENOUGH_DATA`
    (results varied too much) and `LOW_SCORE` at the same time.
    `OK` is the empty set of flags.
    """

    OK = 0
    NO_DATASET = 1
    LOW_SCORE = 4
    NOT_ENOUGH_DATA = 8


@dataclass
class TrainingResult:
    status: Status = Status.OK
    info: List[str] = field(default_factory=list)
    total_samples: int = 0
    used_samples: int = 0


@dataclass
class EstimateResult:
    status: Status = Status.OK
    info: List[str] = field(default_factory=list)
    # Input row index -> (sample id, predicted value)
    predictions: Dict[int, Tuple[str, float]] = field(default_factory=dict)


@dataclass
class EvaluationResult:
    """
    Aggregate of an evaluation run.

    Attributes:
        status: Combined status flags.
        info: Human readable notices.
        score: Mean R² across iterations.
        scores: R² of each completed iteration.
        deviation: Population standard deviation of `scores`.
    """

    status: Status = Status.OK
    info: List[str] = field(default_factory=list)
    score: float = 0.0
    scores: List[float] = field(default_factory=list)
    deviation: float = 0.0
