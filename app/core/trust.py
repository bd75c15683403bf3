import math
from typing import Iterable

BASE_TRUST_SCORE = 100
MAX_TRUST_SCORE = 100
DEFAULT_MISSED_EVENT_PENALTY = 20

# (minimum score, label), highest first
TRUST_LEVELS = [
    (90, "Elite"),
    (70, "Trusted"),
    (40, "Fair"),
]


def calculate_trust_score(
    ratings: Iterable[int],
    missed_events_count: int,
    penalty: int = DEFAULT_MISSED_EVENT_PENALTY,
) -> int:
    """
    Combine peer ratings and missed events into a score in [0, 100].

    Without reviews the base is 100; otherwise the average 1-5 rating is
    scaled by 20. Each missed event then costs ``penalty`` points.
    """
    ratings = list(ratings)
    if ratings:
        # Half points round up
        base = math.floor(sum(ratings) / len(ratings) * 20 + 0.5)
    else:
        base = BASE_TRUST_SCORE
    score = base - penalty * max(missed_events_count, 0)
    return max(0, min(MAX_TRUST_SCORE, score))


def trust_label(score: int) -> str:
    for minimum, label in TRUST_LEVELS:
        if score >= minimum:
            return label
    return "Caution"
