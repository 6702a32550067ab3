"""
RMR (Rally Match Rating) constants.

Volatility: how far a single match can move a rating
  volatility = VOLATILITY_MULTIPLIER * RD + VOLATILITY_BASE
  - RD 30 (settled player)  -> 14.4
  - RD 350 (brand new)      -> 40.0

Flow weights: how much each play-style dimension contributes to M_flow.
The applied weights sum to 0.95. MAX_RUN is defined but is not part of
the flow profile, so it never enters the weighted sum.

Multipliers: how set outcome, point differential and flow blend into the
single performance multiplier applied to the winner.
"""

# Starting rating for every new player
DEFAULT_RATING = 1000

# Volatility (rating change scale) from deviation
VOLATILITY_DEFAULTS = {
    "volatility_base": 12.0,
    "volatility_multiplier": 0.08,
}

# Logistic spread of the expected-score curve
LOGISTIC_SCALE = 400.0

FLOW_WEIGHTS = {
    "clutch": 0.25,
    "comeback": 0.20,
    "consistency": 0.20,
    "endurance": 0.15,
    "focus": 0.10,
    "tempo": 0.05,
    "max_run": 0.05,
}

# Neutral value for a flow dimension with no signal
NEUTRAL_FLOW = 0.5

# No detector exists yet for these two dimensions; they stay neutral
COMEBACK_PLACEHOLDER = NEUTRAL_FLOW
CONSISTENCY_PLACEHOLDER = NEUTRAL_FLOW

# Point-log filters used by the flow analysis
FLOW_DEFAULTS = {
    "long_rally_seconds": 30.0,  # rallies at or above this are "long"
    "clutch_score": 20,          # both sides at or above this = deuce territory
}

MULTIPLIER_DEFAULTS = {
    # Clean sweep (2-0 either way)
    "sweep_sets": 2,
    "sweep_multiplier": 1.25,
    # 1 + amplitude * tanh((|diff| - pivot) / spread)
    "point_diff_amplitude": 0.5,
    "point_diff_pivot": 5.0,
    "point_diff_spread": 10.0,
    # M_total blend
    "blend_set": 0.3,
    "blend_point_diff": 0.2,
    "blend_flow": 0.5,
    # Integrity penalty for matches that were ended early
    "forced_termination_integrity": 0.7,
}

DEVIATION_DEFAULTS = {
    "min_deviation": 30.0,
    "max_deviation": 350.0,
    # Flat shrink applied after every scored match
    "shrink_rate": 0.05,
    # Opponent-weighted shrink: rate = max_rate - span * (opponent_RD / max_RD)
    "weighted_shrink_max_rate": 0.10,
    "weighted_shrink_span": 0.08,
    # Idle decay: RD' = sqrt(RD^2 + c^2 * periods)
    "idle_decay_constant": 30.0,
    "idle_decay_period_days": 30.44,
}

MS_PER_DAY = 1000 * 60 * 60 * 24

# Upper bounds (exclusive) of each tier, lowest first.
# Ratings at or above the last bound are TOP_TIER.
TIER_THRESHOLDS = (
    (800, "Bronze 3"),
    (900, "Bronze 2"),
    (1000, "Bronze 1"),
    (1100, "Silver 3"),
    (1200, "Silver 2"),
    (1300, "Silver 1"),
    (1400, "Gold 3"),
    (1500, "Gold 2"),
)
TOP_TIER = "Gold 1"

# Starting deviation by number of correct answers on the rules quiz.
# Anything not listed starts at maximum uncertainty.
PLACEMENT_DEVIATIONS = {
    3: 200.0,
    2: 250.0,
    1: 300.0,
}
