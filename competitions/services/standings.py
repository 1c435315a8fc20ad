# competitions/services/standings.py
from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from typing import Optional

from django.utils import timezone

from competitions import conf
from competitions.exceptions import InvalidInput, NotFound
from competitions.models import Match, MatchGame, MatchStatus, Phase, PhaseManualRank, Standing
from competitions.services._concurrency import atomic_phase

logger = logging.getLogger(__name__)

_COUNTERS = (
    "matches_played",
    "wins",
    "draws",
    "losses",
    "points",
    "score_for",
    "score_against",
    "score_diff",
)


# ---------- pomocné ----------


def _games_won(match_ids: list[int]) -> dict[int, Counter]:
    """{match_id: Counter(registration_ref -> vyhrané hry)} z dílčích záznamů."""
    out: dict[int, Counter] = {}
    rows = MatchGame.objects.filter(
        match_id__in=match_ids, winner_registration_ref__isnull=False
    ).values_list("match_id", "winner_registration_ref")
    for match_id, winner in rows:
        out.setdefault(match_id, Counter())[winner] += 1
    return out


def standings_sort_key(s: Standing) -> tuple[int, int, int]:
    return (-s.points, -s.score_diff, -s.score_for)


def rank_standings(standings: Iterable[Standing]) -> list[Standing]:
    """Stable sort by points, score diff, score for (all descending); sets ``rank_position``."""
    ordered = sorted(standings, key=standings_sort_key)
    for idx, s in enumerate(ordered, start=1):
        s.rank_position = idx
    return ordered


# ---------- přepočet ----------


@atomic_phase
def recompute_standings(phase) -> list[Standing]:
    """
    Přepočítá tabulku skupiny od nuly ze všech DOHRANÝCH zápasů fáze.

    - výhra = WIN_POINTS bodů, prohra 0; remízy tento formát nezná,
    - score_for/score_against = vyhrané dílčí hry (sety) obou stran,
    - pořadí: body, rozdíl skóre, skóre pro (vše sestupně), stabilně,
    - manual_rank_position se nikdy nepočítá ani nemaže.
    """
    standings = list(Standing.objects.filter(phase=phase).order_by("registration_ref", "id"))
    by_ref = {s.registration_ref: s for s in standings}
    for s in standings:
        for field in _COUNTERS:
            setattr(s, field, 0)

    matches = list(
        Match.objects.alive()
        .filter(phase=phase, status=MatchStatus.FINISHED)
        .prefetch_related("participations")
        .order_by("match_number")
    )
    games = _games_won([m.pk for m in matches])

    for m in matches:
        parts = list(m.participations.all())
        if len(parts) != 2:
            continue
        s1, s2 = by_ref.get(parts[0].registration_ref), by_ref.get(parts[1].registration_ref)
        if s1 is None or s2 is None:
            continue

        s1.matches_played += 1
        s2.matches_played += 1

        winner = m.winner_registration_ref
        if winner == s1.registration_ref:
            s1.wins += 1
            s1.points += conf.WIN_POINTS
            s2.losses += 1
        elif winner == s2.registration_ref:
            s2.wins += 1
            s2.points += conf.WIN_POINTS
            s1.losses += 1

        won = games.get(m.pk)
        if won:
            g1, g2 = won[s1.registration_ref], won[s2.registration_ref]
            s1.score_for += g1
            s1.score_against += g2
            s2.score_for += g2
            s2.score_against += g1

    for s in standings:
        s.score_diff = s.score_for - s.score_against

    ordered = rank_standings(standings)
    Standing.objects.bulk_update(ordered, [*_COUNTERS, "rank_position"])

    logger.info("standings.recompute phase=%s rows=%s matches=%s", phase.pk, len(ordered), len(matches))
    return ordered


def get_standings(phase_id: int) -> list[Standing]:
    if not Phase.objects.filter(pk=phase_id).exists():
        raise NotFound(f"Phase {phase_id} not found.")
    return list(
        Standing.objects.filter(phase_id=phase_id).order_by(
            "rank_position", "registration_ref"
        )
    )


# ---------- ruční pořadí ----------


def _validate_position(position: Optional[int]) -> Optional[int]:
    if position is None:
        return None
    try:
        value = int(position)
    except (TypeError, ValueError):
        raise InvalidInput(f"Invalid manual rank position: {position!r}")
    if value < 1:
        raise InvalidInput("Manual rank position must be >= 1.")
    return value


def _store_manual_rank(phase: Phase, registration_ref: int, position: Optional[int]) -> None:
    PhaseManualRank.objects.update_or_create(
        phase=phase,
        registration_ref=registration_ref,
        defaults={"manual_rank_position": position},
    )
    Standing.objects.filter(phase=phase, registration_ref=registration_ref).update(
        manual_rank_position=position, manual_rank_updated_at=timezone.now()
    )


@atomic_phase
def set_manual_rank(phase, registration_ref: int, position: Optional[int]) -> None:
    """Set (or with ``None`` unset) the advisory manual rank of one registration."""
    _store_manual_rank(phase, int(registration_ref), _validate_position(position))
    logger.info(
        "standings.manual_rank phase=%s registration=%s position=%s",
        phase.pk,
        registration_ref,
        position,
    )


@atomic_phase
def set_manual_ranks(phase, ranks: Iterable[tuple[int, Optional[int]]]) -> int:
    """Bulk variant of :func:`set_manual_rank`; validates everything before writing."""
    items = [(int(ref), _validate_position(pos)) for ref, pos in ranks]
    for ref, pos in items:
        _store_manual_rank(phase, ref, pos)
    logger.info("standings.manual_ranks phase=%s count=%s", phase.pk, len(items))
    return len(items)


@atomic_phase
def clear_manual_ranks(phase) -> int:
    cleared, _ = PhaseManualRank.objects.filter(phase=phase).delete()
    Standing.objects.filter(phase=phase).update(
        manual_rank_position=None, manual_rank_updated_at=timezone.now()
    )
    logger.info("standings.clear_manual_ranks phase=%s cleared=%s", phase.pk, cleared)
    return cleared


def get_manual_ranks(phase_id: int) -> dict[int, Optional[int]]:
    rows = PhaseManualRank.objects.filter(phase_id=phase_id).values_list(
        "registration_ref", "manual_rank_position"
    )
    return dict(rows)
