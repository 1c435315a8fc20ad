from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

FINAL = "final"
SEMIFINAL = "semifinal"
THIRD_PLACE = "tercer_lugar"
SYNTHETIC_PREFIX = "ronda_"

ROUND_NAMES = {
    1: FINAL,
    2: SEMIFINAL,
    4: "cuartos",
    8: "octavos",
    16: "dieciseisavos",
    32: "treintaidosavos",
}

# striktní pořadí eliminačních kol; tercer_lugar stojí paralelně k finále
ROUND_ORDER = ["treintaidosavos", "dieciseisavos", "octavos", "cuartos", SEMIFINAL, FINAL]

_SIZE_BY_NAME = {name: size for size, name in ROUND_NAMES.items()}


def next_power_of_two(n: int) -> int:
    """Return the next power of two greater than or equal to n."""
    if n < 1:
        return 1
    return 1 << (n - 1).bit_length()


def round_name_for(match_count: int) -> str:
    """Return the round name for a round holding ``match_count`` matches."""
    return ROUND_NAMES.get(match_count, f"{SYNTHETIC_PREFIX}{match_count}")


def match_count_for(round_name: Optional[str]) -> int:
    """Inverse of :func:`round_name_for`; 0 for anything that is not an elimination round."""
    if not round_name:
        return 0
    if round_name in _SIZE_BY_NAME:
        return _SIZE_BY_NAME[round_name]
    if round_name.startswith(SYNTHETIC_PREFIX):
        tail = round_name[len(SYNTHETIC_PREFIX) :]
        if tail.isdigit():
            return int(tail)
    return 0


def next_round_name(round_name: Optional[str]) -> Optional[str]:
    """Successor of ``round_name`` in elimination order, or None for final / unknown rounds."""
    if round_name in ROUND_ORDER:
        idx = ROUND_ORDER.index(round_name)
        if idx + 1 >= len(ROUND_ORDER):
            return None
        return ROUND_ORDER[idx + 1]
    size = match_count_for(round_name)
    if size > 1 and round_name.startswith(SYNTHETIC_PREFIX):
        return round_name_for(size // 2)
    return None


def previous_round_name(round_name: Optional[str]) -> Optional[str]:
    """Feeder round of ``round_name`` (the round with twice as many matches)."""
    size = match_count_for(round_name)
    if not size:
        return None
    return round_name_for(size * 2)


def round_sort_key(round_name: Optional[str]) -> tuple:
    # eliminace: od největšího kola k finále, 3. místo za finále; skupiny číselně
    size = match_count_for(round_name)
    if size:
        return (0, -size, 0)
    if round_name == THIRD_PLACE:
        return (0, 0, 1)
    if round_name and round_name.isdigit():
        return (1, int(round_name), 0)
    return (2, 0, 0)


def group_by_round(matches: Iterable) -> dict[str, list]:
    """Group matches by ``round`` with every group sorted by ``match_number``.

    Groups are returned in bracket order (see :func:`round_sort_key`).
    """
    grouped: dict[str, list] = {}
    for m in matches:
        grouped.setdefault(m.round, []).append(m)
    for items in grouped.values():
        items.sort(key=lambda m: m.match_number)
    return {name: grouped[name] for name in sorted(grouped, key=round_sort_key)}
