"""
Rally v4.0 - Rally Match Rating (RMR) engine

Turns the point-by-point record of a finished match into updated skill
ratings and a per-match play-style profile.

Main components:
- rating: RMR calculation (expected score, volatility, flow analysis,
  performance multipliers, deviation shrink/decay, tiers)
- db: Rating state persistence (SQLAlchemy models and sessions)
- config: Settings loaded from the environment
"""

__version__ = "4.0.0"
