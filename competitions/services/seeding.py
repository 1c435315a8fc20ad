from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from django.db.models import F

from competitions.exceptions import InvalidInput
from competitions.models import Phase, PhaseRegistration


def seeded_registration_refs(phase: Phase) -> list[int]:
    """Registrace fáze v pořadí nasazení; nenasazení na konci v pořadí zápisu."""
    qs = PhaseRegistration.objects.filter(phase=phase).order_by(
        F("seed_number").asc(nulls_last=True), "id"
    )
    return list(qs.values_list("registration_ref", flat=True))


def resolve_registration_refs(phase: Phase, refs: Optional[Iterable[int]]) -> list[int]:
    """Explicit order from the caller wins; otherwise the phase's seeding order."""
    if refs is None:
        return seeded_registration_refs(phase)
    out: list[int] = []
    for raw in refs:
        try:
            ref = int(raw)
        except (TypeError, ValueError):
            raise InvalidInput(f"Invalid registration ref: {raw!r}")
        if ref < 1:
            raise InvalidInput(f"Invalid registration ref: {raw!r}")
        out.append(ref)
    if len(set(out)) != len(out):
        raise InvalidInput("Registration refs must be unique.")
    return out
