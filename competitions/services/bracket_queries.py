from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from competitions.exceptions import NotFound
from competitions.models import Match, MatchStatus, Phase
from competitions.services.advancement import load_rounds, third_place_match_for
from competitions.services.bracket import BracketInfo
from competitions.services.rounds import FINAL, THIRD_PLACE, match_count_for


@dataclass(frozen=True)
class Placement:
    registration_ref: int
    match_id: int
    finalized_at: datetime


def _ensure_phase(phase_id: int) -> None:
    if not Phase.objects.filter(pk=phase_id).exists():
        raise NotFound(f"Phase {phase_id} not found.")


def bracket_stats(matches: list[Match]) -> dict:
    total = len(matches)
    by_status = {s: 0 for s in MatchStatus.values}
    for m in matches:
        by_status[m.status] = by_status.get(m.status, 0) + 1
    completed = by_status[MatchStatus.FINISHED]
    return {
        "total": total,
        "completed": completed,
        "in_progress": by_status[MatchStatus.IN_PROGRESS],
        "pending": by_status[MatchStatus.SCHEDULED],
        "cancelled": by_status[MatchStatus.CANCELLED],
        "completion_percentage": round(completed * 100 / total) if total else 0,
    }


def get_bracket_structure(phase_id: int) -> dict:
    """Matches grouped by round (bracket order), the third-place match and completion stats."""
    _ensure_phase(phase_id)
    by_round = load_rounds(phase_id)
    matches = [m for items in by_round.values() for m in items]
    return {
        "by_round": {name: items for name, items in by_round.items() if name != THIRD_PLACE},
        "third_place_match": third_place_match_for(by_round),
        "total_matches": len(matches),
        "stats": bracket_stats(matches),
    }


def _final(phase_id: int) -> Optional[Match]:
    return Match.objects.alive().filter(phase_id=phase_id, round=FINAL).first()


def is_bracket_complete(phase_id: int) -> bool:
    _ensure_phase(phase_id)
    final = _final(phase_id)
    return bool(
        final and final.status == MatchStatus.FINISHED and final.winner_registration_ref
    )


def _placement(m: Optional[Match]) -> Optional[Placement]:
    if m is None or m.status != MatchStatus.FINISHED or not m.winner_registration_ref:
        return None
    return Placement(
        registration_ref=m.winner_registration_ref, match_id=m.pk, finalized_at=m.updated_at
    )


def get_champion(phase_id: int) -> Optional[Placement]:
    _ensure_phase(phase_id)
    return _placement(_final(phase_id))


def get_third_place(phase_id: int) -> Optional[Placement]:
    _ensure_phase(phase_id)
    return _placement(Match.objects.alive().filter(phase_id=phase_id, round=THIRD_PLACE).first())


def get_bracket_info(phase_id: int) -> Optional[BracketInfo]:
    """Odvodí BracketInfo z uložených zápasů (nic se neukládá). None pokud fáze nemá pavouka."""
    _ensure_phase(phase_id)
    by_round = load_rounds(phase_id)
    sized = [(match_count_for(name), items) for name, items in by_round.items()]
    sized = [(size, items) for size, items in sized if size]
    if not sized:
        return None
    first_size, first_round = max(sized, key=lambda pair: pair[0])
    slots = first_size * 2
    participants = len({p.registration_ref for m in first_round for p in m.participations.all()})
    return BracketInfo(
        total_participants=participants,
        total_slots=slots,
        total_rounds=slots.bit_length() - 1,
        bye_count=slots - participants,
        has_third_place=THIRD_PLACE in by_round,
    )
