"""
Ranking

Orders scored candidates into a deterministic total order:

1. overall score (post-bonus), descending
2. reputation score, descending
3. experience score (flight companion) / service area score (pickup), descending
4. offer id, ascending, so equal scores never depend on input order

Candidates whose pre-bonus score is not positive are dropped first.
"""

from typing import Iterable, List

from app.services.matching.snapshots import MatchResult, ServiceType


def _secondary_tiebreak(result: MatchResult) -> float:
    if result.service_type == ServiceType.PICKUP:
        return result.score.service_area_score
    return result.score.experience_score


def _sort_key(result: MatchResult):
    return (
        -result.score.overall_score,
        -result.score.reputation_score,
        -_secondary_tiebreak(result),
        result.offer.id,
    )


def rank_match_results(results: Iterable[MatchResult], max_results: int) -> List[MatchResult]:
    """
    Rank and truncate match results.

    Args:
        results: Scored candidates (any order)
        max_results: Maximum to return; zero or negative returns an empty list

    Returns:
        Best-first list of at most max_results entries
    """
    if max_results <= 0:
        return []

    viable = [result for result in results if result.score.weighted_score > 0]
    return sorted(viable, key=_sort_key)[:max_results]
