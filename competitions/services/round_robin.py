from __future__ import annotations

import logging
from typing import Optional

from competitions.exceptions import Conflict, InvalidInput
from competitions.models import Corner, Match, MatchStatus, Participation, PhaseType, Standing
from competitions.services._concurrency import atomic_phase
from competitions.services.seeding import resolve_registration_refs

logger = logging.getLogger(__name__)

BYE = None


def circle_pairings(refs: list[int]) -> list[list[tuple[int, int]]]:
    """
    Kruhová metoda (circle method) pro každý s každým.

    Pozice 0 je pevná, ostatní se po každém kole posunou o jedno místo po směru.
    V kole se páruje pozice ``i`` s ``n-1-i``. Lichý počet dostane fiktivní BYE,
    dvojice s BYE se vynechají. Vrací seznam kol, každé jako seznam dvojic (A, B).
    """
    slots: list[Optional[int]] = list(refs)
    if len(slots) % 2:
        slots.append(BYE)
    n = len(slots)
    rounds: list[list[tuple[int, int]]] = []
    for _ in range(n - 1):
        pairs = []
        for i in range(n // 2):
            a, b = slots[i], slots[n - 1 - i]
            if a is BYE or b is BYE:
                continue
            pairs.append((a, b))
        rounds.append(pairs)
        # rotace: poslední na pozici 1, zbytek o jedno dál
        slots = [slots[0], slots[-1], *slots[1:-1]]
    return rounds


@atomic_phase
def init_round_robin(phase, registration_refs=None) -> list[Standing]:
    """Create zeroed standings, then every pairing of the group as SCHEDULED matches."""
    if phase.type != PhaseType.GROUP:
        raise InvalidInput("Round robin can only be initialised for group phases.")
    refs = resolve_registration_refs(phase, registration_refs)
    if len(refs) < 2:
        raise InvalidInput("At least 2 participants are required.")
    if Match.objects.alive().filter(phase=phase).exists():
        raise Conflict(f"Phase {phase.pk} already has matches.")

    standings = [Standing(phase=phase, registration_ref=ref) for ref in refs]
    for s in standings:
        s.save()

    number = 1
    participations = []
    for round_no, pairs in enumerate(circle_pairings(refs), start=1):
        for a, b in pairs:
            m = Match.objects.create(
                phase=phase, match_number=number, round=str(round_no), status=MatchStatus.SCHEDULED
            )
            participations.append(Participation(match=m, registration_ref=a, corner=Corner.A))
            participations.append(Participation(match=m, registration_ref=b, corner=Corner.B))
            number += 1
    Participation.objects.bulk_create(participations)

    logger.info(
        "round_robin.init phase=%s participants=%s matches=%s", phase.pk, len(refs), number - 1
    )
    return standings
