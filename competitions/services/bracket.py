from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from competitions import conf
from competitions.exceptions import Conflict, InvalidInput
from competitions.models import Corner, Match, MatchStatus, Participation, PhaseType
from competitions.services._concurrency import atomic_phase
from competitions.services.advancement import resolve_forced_byes
from competitions.services.rounds import THIRD_PLACE, next_power_of_two, round_name_for
from competitions.services.seeding import resolve_registration_refs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BracketInfo:
    total_participants: int
    total_slots: int
    total_rounds: int
    bye_count: int
    has_third_place: bool


@dataclass(frozen=True)
class BracketResult:
    matches: list[Match]
    third_place_match: Optional[Match]
    bracket_info: BracketInfo


def bracket_shape(participants: int) -> tuple[int, int]:
    """Return ``(slots, rounds)`` for a single elimination bracket."""
    slots = next_power_of_two(participants)
    return slots, slots.bit_length() - 1


def first_round_pairs(refs: list[int], slots: int) -> list[tuple[Optional[int], Optional[int]]]:
    """Pair refs ``2k``/``2k+1`` into first-round match ``k``; missing slots are None (byes)."""
    padded: list[Optional[int]] = list(refs) + [None] * (slots - len(refs))
    return [(padded[i], padded[i + 1]) for i in range(0, slots, 2)]


@atomic_phase
def build_bracket(phase, registration_refs=None, include_third_place: bool = False) -> BracketResult:
    """
    Vygeneruje kompletní pavouka pro eliminační fázi.

    - všechna kola najednou, match_number hustě po kolech (1..slots-1),
    - v 1. kole dvojice (2k, 2k+1) jako BLUE/WHITE,
    - volné losy (bye) se vyřeší hned a vítěz postoupí, kaskádově dál,
    - zápas o 3. místo (9999, tercer_lugar) je prázdný až do semifinále.
    Vše v jedné transakci; při chybě se nic neuloží.
    """
    if phase.type != PhaseType.ELIMINATION:
        raise InvalidInput("Brackets can only be built for elimination phases.")
    refs = resolve_registration_refs(phase, registration_refs)
    if len(refs) < 2:
        raise InvalidInput("At least 2 participants are required.")
    if Match.objects.alive().filter(phase=phase).exists():
        raise Conflict(f"Phase {phase.pk} already has matches.")

    slots, total_rounds = bracket_shape(len(refs))

    created: list[Match] = []
    number = 1
    for round_idx in range(total_rounds):
        in_round = slots >> (round_idx + 1)
        name = round_name_for(in_round)
        for _ in range(in_round):
            created.append(
                Match(phase=phase, match_number=number, round=name, status=MatchStatus.SCHEDULED)
            )
            number += 1
    for m in created:
        m.save()

    participations = []
    for m, (blue, white) in zip(created, first_round_pairs(refs, slots)):
        if blue is not None:
            participations.append(Participation(match=m, registration_ref=blue, corner=Corner.BLUE))
        if white is not None:
            participations.append(
                Participation(match=m, registration_ref=white, corner=Corner.WHITE)
            )
    Participation.objects.bulk_create(participations)

    third_place = None
    if include_third_place:
        third_place = Match.objects.create(
            phase=phase,
            match_number=conf.THIRD_PLACE_MATCH_NUMBER,
            round=THIRD_PLACE,
            status=MatchStatus.SCHEDULED,
        )

    byes = resolve_forced_byes(phase.pk)

    info = BracketInfo(
        total_participants=len(refs),
        total_slots=slots,
        total_rounds=total_rounds,
        bye_count=slots - len(refs),
        has_third_place=include_third_place,
    )
    matches = list(
        Match.objects.filter(pk__in=[m.pk for m in created])
        .prefetch_related("participations")
        .order_by("match_number")
    )
    logger.info(
        "bracket.build phase=%s participants=%s slots=%s rounds=%s byes_resolved=%s third_place=%s",
        phase.pk,
        len(refs),
        slots,
        total_rounds,
        byes,
        include_third_place,
    )
    return BracketResult(matches=matches, third_place_match=third_place, bracket_info=info)
