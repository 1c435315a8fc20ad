"""
Jediný vstup výsledků od spolupracovníků (bodovací panely, importy, ruční zápis).

Spolupracovník dodá trojici (zápas, vítěz, skóre) a engine podle typu fáze
rozhodne, co s ní: eliminace postoupí, skupina přepočítá tabulku, série
započítá výhru.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Protocol

from competitions.exceptions import Conflict, NotFound
from competitions.models import Corner, Match, MatchGame, PhaseType
from competitions.services.advancement import _get_locked_match, advance_winner, finish_match
from competitions.services.series import record_series_result
from competitions.services.standings import recompute_standings
from competitions.services.tx import atomic

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchOutcome:
    match_id: int
    winner_registration_ref: int
    score1: Optional[Decimal] = None
    score2: Optional[Decimal] = None
    walkover_reason: Optional[str] = None


class OutcomeSource(Protocol):
    def outcome(self) -> MatchOutcome: ...


def _load(match_id: int) -> Match:
    m = Match.objects.alive().filter(pk=match_id).prefetch_related("participations").first()
    if m is None:
        raise NotFound(f"Match {match_id} not found.")
    return m


def _sides(m: Match) -> tuple[Optional[int], Optional[int]]:
    """(participant1, participant2) podle rohu: BLUE/A první, WHITE/B druhý."""
    refs = {p.corner: p.registration_ref for p in m.participations.all()}
    return refs.get(Corner.BLUE) or refs.get(Corner.A), refs.get(Corner.WHITE) or refs.get(Corner.B)


def outcome_from_scores(match_id: int, score1, score2) -> MatchOutcome:
    """Strict winner from the two scores; a tie cannot be decided here."""
    m = _load(match_id)
    first, second = _sides(m)
    s1, s2 = Decimal(str(score1)), Decimal(str(score2))
    if s1 == s2:
        raise Conflict(f"Match {m.match_number}: tied score {s1}:{s2} has no winner.")
    winner = first if s1 > s2 else second
    if winner is None:
        raise Conflict(f"Match {m.match_number} has no participant on the winning side.")
    return MatchOutcome(match_id=m.pk, winner_registration_ref=winner, score1=s1, score2=s2)


def outcome_from_games(match_id: int) -> MatchOutcome:
    """Winner by sub-games won (``MatchGame``); scores are the games-won counts."""
    m = _load(match_id)
    first, second = _sides(m)
    won = Counter(
        MatchGame.objects.filter(match=m, winner_registration_ref__isnull=False).values_list(
            "winner_registration_ref", flat=True
        )
    )
    if not won:
        raise Conflict(f"Match {m.match_number} has no decided games.")
    g1, g2 = won[first], won[second]
    if g1 == g2:
        raise Conflict(f"Match {m.match_number}: games tied {g1}:{g2}.")
    winner = first if g1 > g2 else second
    return MatchOutcome(
        match_id=m.pk, winner_registration_ref=winner, score1=Decimal(g1), score2=Decimal(g2)
    )


@atomic()
def submit_outcome(outcome: MatchOutcome):
    """Route one outcome by the phase type of its match; returns that operation's result."""
    if not isinstance(outcome, MatchOutcome):
        outcome = outcome.outcome()

    m = _get_locked_match(outcome.match_id)
    phase_type = m.phase.type
    if phase_type == PhaseType.ELIMINATION:
        result = advance_winner(
            m.pk, outcome.winner_registration_ref, outcome.score1, outcome.score2
        )
    elif phase_type == PhaseType.GROUP:
        finish_match(m.pk, outcome.winner_registration_ref, outcome.score1, outcome.score2)
        result = recompute_standings(m.phase_id)
    else:
        result = record_series_result(
            m.pk, outcome.winner_registration_ref, outcome.score1, outcome.score2
        )

    logger.info(
        "outcomes.submit match=%s phase_type=%s winner=%s walkover=%s",
        m.pk,
        phase_type,
        outcome.winner_registration_ref,
        bool(outcome.walkover_reason),
    )
    return result


@atomic()
def set_walkover(match_id: int, winner_registration_ref: int, reason: str):
    """Kontumace: zápas se neodehrál, vítěz postupuje bez skóre."""
    m = _get_locked_match(match_id)
    m.is_walkover = True
    m.walkover_reason = reason
    m.save(update_fields=["is_walkover", "walkover_reason", "updated_at"])
    return submit_outcome(
        MatchOutcome(
            match_id=m.pk, winner_registration_ref=winner_registration_ref, walkover_reason=reason
        )
    )
