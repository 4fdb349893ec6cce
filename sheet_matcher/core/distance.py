"""Edit distance between canonical keys."""

from functools import lru_cache
import Levenshtein


@lru_cache(maxsize=10000)
def edit_distance(source: str, target: str) -> int:
    """
    Levenshtein distance with unit cost for insertion, deletion and
    substitution.
    """
    return Levenshtein.distance(source, target)


def within_tolerance(source: str, target: str, tolerance: int) -> bool:
    """Whether two keys are at most ``tolerance`` edits apart."""
    if abs(len(source) - len(target)) > tolerance:
        return False
    return Levenshtein.distance(source, target, score_cutoff=tolerance) <= tolerance
