from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings


@dataclass(slots=True, frozen=True)
class ScoringConfig:
    duration_cap_hours: float = 12.0
    distance_cap_miles: float = 800.0
    condition_penalty: float = 0.2
    duration_weight: float = 0.4
    distance_weight: float = 0.3
    condition_weight: float = 0.3

    @classmethod
    def from_settings(cls) -> ScoringConfig:
        return cls(
            duration_cap_hours=float(settings.ROUTE_SCORE_DURATION_CAP_HOURS),
            distance_cap_miles=float(settings.ROUTE_SCORE_DISTANCE_CAP_MILES),
            condition_penalty=float(settings.ROUTE_SCORE_CONDITION_PENALTY),
            duration_weight=float(settings.ROUTE_SCORE_DURATION_WEIGHT),
            distance_weight=float(settings.ROUTE_SCORE_DISTANCE_WEIGHT),
            condition_weight=float(settings.ROUTE_SCORE_CONDITION_WEIGHT),
        )


DEFAULT_SCORING = ScoringConfig()


def score_route(
    duration_hours: float,
    miles: float,
    condition_count: int,
    config: ScoringConfig = DEFAULT_SCORING,
) -> float:
    duration_term = max(0.0, 1.0 - duration_hours / config.duration_cap_hours)
    distance_term = max(0.0, 1.0 - miles / config.distance_cap_miles)
    condition_term = max(0.0, 1.0 - config.condition_penalty * condition_count)
    return (
        config.duration_weight * duration_term
        + config.distance_weight * distance_term
        + config.condition_weight * condition_term
    )
