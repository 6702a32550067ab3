"""
Tunable RMR parameters.

All constants the engine uses live in one frozen RatingParams object that is
passed into RatingEngine. Defaults come from rally.rating.constants; a
handful can be overridden from the environment via RatingParams.from_settings().
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from rally.rating.constants import (
    DEVIATION_DEFAULTS,
    FLOW_DEFAULTS,
    FLOW_WEIGHTS,
    LOGISTIC_SCALE,
    MULTIPLIER_DEFAULTS,
    VOLATILITY_DEFAULTS,
)

if TYPE_CHECKING:
    from rally.config import Settings

TIE_POLICIES = ("no_change", "side_b")
SHRINK_MODES = ("flat", "opponent_weighted")


@dataclass(frozen=True)
class RatingParams:
    """
    Every RMR constant in one immutable object.

    Swap individual values with dataclasses.replace() to test how sensitive
    ratings are to a parameter.
    """
    # Expected score
    logistic_scale: float = LOGISTIC_SCALE

    # Volatility
    volatility_base: float = VOLATILITY_DEFAULTS["volatility_base"]
    volatility_multiplier: float = VOLATILITY_DEFAULTS["volatility_multiplier"]

    # Flow weights (max_run is intentionally absent: it is not applied)
    weight_clutch: float = FLOW_WEIGHTS["clutch"]
    weight_comeback: float = FLOW_WEIGHTS["comeback"]
    weight_consistency: float = FLOW_WEIGHTS["consistency"]
    weight_endurance: float = FLOW_WEIGHTS["endurance"]
    weight_focus: float = FLOW_WEIGHTS["focus"]
    weight_tempo: float = FLOW_WEIGHTS["tempo"]

    # Flow filters
    long_rally_seconds: float = FLOW_DEFAULTS["long_rally_seconds"]
    clutch_score: int = FLOW_DEFAULTS["clutch_score"]

    # Set / point-differential multipliers
    sweep_sets: int = MULTIPLIER_DEFAULTS["sweep_sets"]
    sweep_multiplier: float = MULTIPLIER_DEFAULTS["sweep_multiplier"]
    point_diff_amplitude: float = MULTIPLIER_DEFAULTS["point_diff_amplitude"]
    point_diff_pivot: float = MULTIPLIER_DEFAULTS["point_diff_pivot"]
    point_diff_spread: float = MULTIPLIER_DEFAULTS["point_diff_spread"]

    # M_total blend and integrity penalty
    blend_set: float = MULTIPLIER_DEFAULTS["blend_set"]
    blend_point_diff: float = MULTIPLIER_DEFAULTS["blend_point_diff"]
    blend_flow: float = MULTIPLIER_DEFAULTS["blend_flow"]
    forced_termination_integrity: float = MULTIPLIER_DEFAULTS["forced_termination_integrity"]

    # Deviation
    min_deviation: float = DEVIATION_DEFAULTS["min_deviation"]
    max_deviation: float = DEVIATION_DEFAULTS["max_deviation"]
    shrink_rate: float = DEVIATION_DEFAULTS["shrink_rate"]
    deviation_shrink_mode: str = "flat"
    weighted_shrink_max_rate: float = DEVIATION_DEFAULTS["weighted_shrink_max_rate"]
    weighted_shrink_span: float = DEVIATION_DEFAULTS["weighted_shrink_span"]
    idle_decay_constant: float = DEVIATION_DEFAULTS["idle_decay_constant"]
    idle_decay_period_days: float = DEVIATION_DEFAULTS["idle_decay_period_days"]

    # Tied set wins: 'no_change' leaves ratings alone, 'side_b' rates B as winner
    tie_policy: str = "no_change"

    def __post_init__(self):
        if self.tie_policy not in TIE_POLICIES:
            raise ValueError(f"tie_policy must be one of {TIE_POLICIES}, got '{self.tie_policy}'")
        if self.deviation_shrink_mode not in SHRINK_MODES:
            raise ValueError(
                f"deviation_shrink_mode must be one of {SHRINK_MODES}, "
                f"got '{self.deviation_shrink_mode}'"
            )
        if self.min_deviation > self.max_deviation:
            raise ValueError("min_deviation must not exceed max_deviation")
        if self.point_diff_spread <= 0:
            raise ValueError("point_diff_spread must be positive")
        if self.idle_decay_period_days <= 0:
            raise ValueError("idle_decay_period_days must be positive")

    @property
    def flow_weights(self) -> dict[str, float]:
        """Applied weight per FlowProfile field."""
        return {
            "clutch": self.weight_clutch,
            "comeback": self.weight_comeback,
            "consistency": self.weight_consistency,
            "endurance": self.weight_endurance,
            "focus": self.weight_focus,
            "tempo": self.weight_tempo,
        }

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> RatingParams:
        """Build params from the defaults plus any environment overrides."""
        if settings is None:
            from rally.config import get_settings

            settings = get_settings()

        params = cls(
            tie_policy=settings.rating_tie_policy,
            deviation_shrink_mode=settings.rating_deviation_shrink_mode,
        )
        if settings.rating_idle_decay_constant is not None:
            params = replace(params, idle_decay_constant=settings.rating_idle_decay_constant)
        if settings.rating_idle_decay_period_days is not None:
            params = replace(params, idle_decay_period_days=settings.rating_idle_decay_period_days)
        return params


DEFAULT_PARAMS = RatingParams()
