from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Optional

from django.utils import timezone

from competitions import conf
from competitions.exceptions import Conflict, InvalidInput, NotFound
from competitions.models import Corner, Match, MatchStatus, Participation, Phase, PhaseType
from competitions.services._concurrency import atomic_phase
from competitions.services.advancement import _get_locked_match, finish_match
from competitions.services.seeding import resolve_registration_refs
from competitions.services.tx import atomic

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeriesResult:
    series_complete: bool
    winner: Optional[int]


@dataclass(frozen=True)
class SeriesStatus:
    wins: dict[int, int]
    played: int
    series_complete: bool
    winner: Optional[int]


def series_round_name(number: int) -> str:
    return f"Partido {number} de {conf.SERIES_LENGTH}"


def _tally(phase_id: int) -> Counter:
    rows = (
        Match.objects.alive()
        .filter(phase_id=phase_id, status=MatchStatus.FINISHED, winner_registration_ref__isnull=False)
        .values_list("winner_registration_ref", flat=True)
    )
    return Counter(rows)


def _series_winner(wins: Counter) -> Optional[int]:
    for ref, count in wins.items():
        if count >= conf.SERIES_WINS_NEEDED:
            return ref
    return None


@atomic_phase
def init_best_of_3(phase, registration_refs=None) -> list[Match]:
    """Založí sérii: zápasy 1..3 ("Partido i de 3"), strany A/B pevně po celou sérii."""
    if phase.type != PhaseType.BEST_OF_3:
        raise InvalidInput("Best-of-3 series can only be initialised for best-of-3 phases.")
    refs = resolve_registration_refs(phase, registration_refs)
    if len(refs) != 2:
        raise InvalidInput("A best-of-3 series needs exactly 2 distinct participants.")
    if Match.objects.alive().filter(phase=phase).exists():
        raise Conflict(f"Phase {phase.pk} already has matches.")

    a, b = refs
    matches = []
    participations = []
    for number in range(1, conf.SERIES_LENGTH + 1):
        m = Match.objects.create(
            phase=phase,
            match_number=number,
            round=series_round_name(number),
            status=MatchStatus.SCHEDULED,
        )
        matches.append(m)
        participations.append(Participation(match=m, registration_ref=a, corner=Corner.A))
        participations.append(Participation(match=m, registration_ref=b, corner=Corner.B))
    Participation.objects.bulk_create(participations)

    logger.info("series.init phase=%s a=%s b=%s matches=%s", phase.pk, a, b, len(matches))
    return matches


@atomic()
def record_series_result(match_id: int, winner_registration_ref: int, score1=None, score2=None) -> SeriesResult:
    """
    Zapíše výsledek jednoho zápasu série.

    Jakmile má někdo SERIES_WINS_NEEDED výher, zbylé neodehrané zápasy
    (SCHEDULED i IN_PROGRESS) se zruší (CANCELLED).
    """
    m = _get_locked_match(match_id)
    if m.phase.type != PhaseType.BEST_OF_3:
        raise InvalidInput("Match does not belong to a best-of-3 phase.")
    finish_match(m.pk, winner_registration_ref, score1, score2)

    wins = _tally(m.phase_id)
    winner = _series_winner(wins)
    if winner is None:
        # změna vítěze mohla sérii znovu otevřít
        restore_cancelled_series_matches(m.phase_id)
        logger.info("series.result match=%s winner=%s tally=%s", m.pk, winner_registration_ref, dict(wins))
        return SeriesResult(series_complete=False, winner=None)

    cancelled = (
        Match.objects.alive()
        .filter(phase_id=m.phase_id, status__in=[MatchStatus.SCHEDULED, MatchStatus.IN_PROGRESS])
        .update(status=MatchStatus.CANCELLED, updated_at=timezone.now())
    )
    logger.info(
        "series.complete phase=%s winner=%s tally=%s cancelled=%s",
        m.phase_id,
        winner,
        dict(wins),
        cancelled,
    )
    return SeriesResult(series_complete=True, winner=winner)


def get_series_status(phase_id: int) -> SeriesStatus:
    if not Phase.objects.filter(pk=phase_id).exists():
        raise NotFound(f"Phase {phase_id} not found.")
    wins = _tally(phase_id)
    winner = _series_winner(wins)
    return SeriesStatus(
        wins=dict(wins),
        played=sum(wins.values()),
        series_complete=winner is not None,
        winner=winner,
    )


def restore_cancelled_series_matches(phase_id: int) -> int:
    """After a reopen: if nobody holds the winning tally any more, CANCELLED -> SCHEDULED."""
    if _series_winner(_tally(phase_id)) is not None:
        return 0
    restored = (
        Match.objects.alive()
        .filter(phase_id=phase_id, status=MatchStatus.CANCELLED)
        .update(status=MatchStatus.SCHEDULED, updated_at=timezone.now())
    )
    if restored:
        logger.info("series.restore phase=%s restored=%s", phase_id, restored)
    return restored
