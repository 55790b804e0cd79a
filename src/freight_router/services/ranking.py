from __future__ import annotations

from freight_router.services.scoring import DEFAULT_SCORING, ScoringConfig, score_route
from freight_router.services.types import RouteCandidate


def rank_candidates(
    candidates: list[RouteCandidate],
    config: ScoringConfig = DEFAULT_SCORING,
) -> list[RouteCandidate]:
    """Score candidates, sort by descending score and assign ranks 1..N.

    Python's sort is stable, so candidates with equal scores keep their input order.
    """
    for candidate in candidates:
        candidate.score = score_route(
            duration_hours=candidate.duration_hours,
            miles=candidate.miles,
            condition_count=len(candidate.adverse_conditions),
            config=config,
        )

    ranked = sorted(candidates, key=lambda candidate: candidate.score, reverse=True)
    for position, candidate in enumerate(ranked, start=1):
        candidate.rank = position
    return ranked
