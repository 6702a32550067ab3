"""Session-start decay and post-match settlement against stored rating state."""

from __future__ import annotations

import logging
from dataclasses import replace

from sqlalchemy.orm import Session

from rally.db.models import PlayerRatingState, RatingHistory
from rally.rating.engine import RatingEngine
from rally.rating.models import SIDE_A, SIDE_B, MatchEvaluation, MatchRecord
from rally.rating.params import RatingParams
from rally.rating.placement import initial_rating_state

logger = logging.getLogger(__name__)


class LiveRatingUpdater:
    """
    Reads and writes PlayerRatingState rows around the pure engine.

    Both operations lock the rows they touch (SELECT ... FOR UPDATE) so two
    devices reporting for the same player are serialized by the database.
    Commit/rollback is left to the caller's session scope.
    """

    def __init__(self, params: RatingParams | None = None):
        self.engine = RatingEngine(params)

    @classmethod
    def from_settings(cls) -> "LiveRatingUpdater":
        return cls(RatingParams.from_settings())

    def start_session(self, session: Session, player_key: str, now_ms: int) -> bool:
        """
        Apply idle-time deviation growth when a player starts a session.

        Returns True if a new deviation was written. Nothing is written
        unless the decayed value is strictly greater than the stored one.
        """
        state = (
            session.query(PlayerRatingState)
            .filter(PlayerRatingState.player_key == player_key)
            .with_for_update()
            .one_or_none()
        )
        if state is None:
            return False

        decayed = self.engine.decay_deviation(state.deviation, state.last_match_at_ms, now_ms)
        if decayed <= state.deviation:
            logger.debug("No idle decay for %s (RD %.1f)", player_key, state.deviation)
            return False

        logger.info("Idle decay for %s: RD %.1f -> %.1f", player_key, state.deviation, decayed)
        state.deviation = decayed
        return True

    def settle_match(
        self,
        session: Session,
        player_a_key: str,
        player_b_key: str,
        record: MatchRecord,
        played_at_ms: int,
    ) -> MatchEvaluation:
        """
        Rate a match against the stored state and persist the result.

        The stored ratings are authoritative: the record's snapshots are
        replaced with the locked rows' values before rating, so a stale
        client snapshot cannot overwrite a concurrent update.

        Raises:
            ValueError: If both keys are the same player, or the point log is empty
        """
        if player_a_key == player_b_key:
            raise ValueError(f"A player cannot play themselves: '{player_a_key}'")

        states = self._lock_states(session, [player_a_key, player_b_key])
        state_a = states.get(player_a_key) or self._create_state(
            session, player_a_key, record.side_a.display_name
        )
        state_b = states.get(player_b_key) or self._create_state(
            session, player_b_key, record.side_b.display_name
        )

        record = replace(
            record,
            side_a=replace(record.side_a, rating=state_a.rating, deviation=state_a.deviation),
            side_b=replace(record.side_b, rating=state_b.rating, deviation=state_b.deviation),
        )
        evaluation = self.engine.evaluate(record)

        if not evaluation.was_rated:
            return evaluation

        self._write(session, state_a, player_b_key, evaluation, record, played_at_ms, side=SIDE_A)
        self._write(session, state_b, player_a_key, evaluation, record, played_at_ms, side=SIDE_B)

        logger.info(
            "Settled %s vs %s: %s %.0f -> %.0f, %s %.0f -> %.0f",
            player_a_key,
            player_b_key,
            player_a_key,
            evaluation.rating_a_before,
            evaluation.new_rating_a,
            player_b_key,
            evaluation.rating_b_before,
            evaluation.new_rating_b,
        )
        return evaluation

    def _lock_states(self, session: Session, player_keys: list[str]) -> dict[str, PlayerRatingState]:
        # Sorted so concurrent settlements lock rows in the same order
        rows = (
            session.query(PlayerRatingState)
            .filter(PlayerRatingState.player_key.in_(sorted(player_keys)))
            .order_by(PlayerRatingState.player_key)
            .with_for_update()
            .all()
        )
        return {row.player_key: row for row in rows}

    def _create_state(self, session: Session, player_key: str, display_name: str) -> PlayerRatingState:
        placement = initial_rating_state()
        state = PlayerRatingState(
            player_key=player_key,
            display_name=display_name,
            rating=placement.rating,
            deviation=placement.deviation,
            match_count=0,
            last_match_at_ms=placement.last_match_timestamp,
        )
        session.add(state)
        session.flush()
        return state

    def _write(
        self,
        session: Session,
        state: PlayerRatingState,
        opponent_key: str,
        evaluation: MatchEvaluation,
        record: MatchRecord,
        played_at_ms: int,
        side: str,
    ) -> None:
        if side == SIDE_A:
            rating_after, deviation_after = evaluation.new_rating_a, evaluation.new_deviation_a
        else:
            rating_after, deviation_after = evaluation.new_rating_b, evaluation.new_deviation_b

        session.add(
            RatingHistory(
                player_key=state.player_key,
                opponent_key=opponent_key,
                won=evaluation.winner == side,
                rating_before=state.rating,
                rating_after=rating_after,
                deviation_before=state.deviation,
                deviation_after=deviation_after,
                m_total=evaluation.multipliers.m_total,
                was_forcibly_terminated=record.was_forcibly_terminated,
                played_at_ms=played_at_ms,
            )
        )

        state.rating = rating_after
        state.deviation = deviation_after
        state.match_count += 1
        state.last_match_at_ms = max(state.last_match_at_ms, played_at_ms)
