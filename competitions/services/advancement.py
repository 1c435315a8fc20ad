from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from django.db import IntegrityError, transaction
from django.utils import timezone

from competitions.exceptions import Conflict, InvalidInput, NotFound
from competitions.models import Corner, Match, MatchStatus, Participation, PhaseType
from competitions.services._concurrency import atomic_phase
from competitions.services.rounds import (
    FINAL,
    SEMIFINAL,
    THIRD_PLACE,
    group_by_round,
    next_round_name,
    previous_round_name,
)
from competitions.services.tx import atomic, locked

logger = logging.getLogger(__name__)

_SLOT_CORNERS = (Corner.BLUE, Corner.WHITE)


@dataclass(frozen=True)
class AdvanceResult:
    match: Match
    next_match: Optional[Match]
    third_place_match: Optional[Match]
    message: str


# ---------- načtení struktury ----------


def load_rounds(phase_id: int) -> dict[str, list[Match]]:
    """Alive matches of a phase grouped by round, participations prefetched."""
    qs = (
        Match.objects.alive()
        .filter(phase_id=phase_id)
        .prefetch_related("participations")
        .order_by("match_number")
    )
    return group_by_round(qs)


def _position_in_round(m: Match, by_round: dict[str, list[Match]]) -> int:
    for idx, x in enumerate(by_round.get(m.round) or []):
        if x.pk == m.pk:
            return idx
    return -1


def next_match_for(m: Match, by_round: dict[str, list[Match]]) -> Optional[Match]:
    """Match the winner of ``m`` moves to: next round, index ``floor(p/2)``."""
    if m.round in (FINAL, THIRD_PLACE):
        return None
    pos = _position_in_round(m, by_round)
    if pos < 0:
        return None
    successors = by_round.get(next_round_name(m.round)) or []
    idx = pos // 2
    return successors[idx] if idx < len(successors) else None


def third_place_match_for(by_round: dict[str, list[Match]]) -> Optional[Match]:
    matches = by_round.get(THIRD_PLACE) or []
    return matches[0] if matches else None


def _feeders_of(m: Match, by_round: dict[str, list[Match]]) -> list[Match]:
    prev = previous_round_name(m.round)
    if not prev:
        return []
    pos = _position_in_round(m, by_round)
    if pos < 0:
        return []
    return (by_round.get(prev) or [])[2 * pos : 2 * pos + 2]


def _is_dead(m: Match, by_round: dict[str, list[Match]]) -> bool:
    """True when ``m`` can never produce a participant (empty subtree)."""
    if m.winner_registration_ref is not None or m.registration_refs():
        return False
    return all(_is_dead(f, by_round) for f in _feeders_of(m, by_round))


def _slot_still_open(m: Match, by_round: dict[str, list[Match]]) -> bool:
    """Může ještě do prázdného slotu někdo přijít?"""
    if m.round == THIRD_PLACE:
        return any(s.status != MatchStatus.FINISHED for s in by_round.get(SEMIFINAL) or [])
    present = set(m.registration_refs())
    for f in _feeders_of(m, by_round):
        if _is_dead(f, by_round):
            continue
        if f.winner_registration_ref is None or f.winner_registration_ref not in present:
            return True
    return False


def _is_pending_bye(m: Match, by_round: dict[str, list[Match]]) -> bool:
    return (
        m.winner_registration_ref is None
        and m.status not in (MatchStatus.FINISHED, MatchStatus.CANCELLED)
        and len(m.registration_refs()) == 1
        and not _slot_still_open(m, by_round)
    )


# ---------- sloty ----------


def place_in_match(target_id: int, registration_ref: int) -> Match:
    """Idempotently seat ``registration_ref`` in match ``target_id``.

    The target row is locked and participations are re-read under the lock;
    the insert itself relies on the (match, registration_ref) unique constraint.
    """
    target = locked(Match.objects.filter(pk=target_id)).get()
    existing = list(Participation.objects.filter(match=target))
    if any(p.registration_ref == registration_ref for p in existing):
        return target
    if len(existing) >= 2:
        raise Conflict(f"Match {target.match_number} already has two participants.")
    taken = {p.corner for p in existing}
    corner = next(c for c in _SLOT_CORNERS if c not in taken)
    try:
        with transaction.atomic():
            Participation.objects.get_or_create(
                match=target, registration_ref=registration_ref, defaults={"corner": corner}
            )
    except IntegrityError:
        # souběžný zápis do stejného slotu: vyhrál ten druhý, ověř stav
        if not Participation.objects.filter(match=target, registration_ref=registration_ref).exists():
            raise Conflict(f"Slot in match {target.match_number} was taken concurrently.")
    return target


def _retract(target: Match, registration_ref: int) -> None:
    target = locked(Match.objects.filter(pk=target.pk)).get()
    qs = Participation.objects.filter(match=target, registration_ref=registration_ref)
    if not qs.exists():
        return
    if target.status == MatchStatus.FINISHED:
        raise Conflict(
            f"Match {target.match_number} ({target.round}) is already finished; reopen it first."
        )
    qs.delete()


def _loser_of(m: Match, winner_ref: Optional[int]) -> Optional[int]:
    for ref in m.registration_refs():
        if ref != winner_ref:
            return ref
    return None


def _propagate(
    m: Match, winner_ref: int, by_round: dict[str, list[Match]]
) -> tuple[Optional[Match], Optional[Match]]:
    next_match = next_match_for(m, by_round)
    if next_match is not None:
        next_match = place_in_match(next_match.pk, winner_ref)

    third_place = None
    if m.round == SEMIFINAL:
        tp = third_place_match_for(by_round)
        loser = _loser_of(m, winner_ref)
        if tp is not None and loser is not None:
            third_place = place_in_match(tp.pk, loser)
    return next_match, third_place


def _retract_progression(m: Match, old_winner: int, by_round: dict[str, list[Match]]) -> None:
    next_match = next_match_for(m, by_round)
    if next_match is not None:
        _retract(next_match, old_winner)
    if m.round == SEMIFINAL:
        tp = third_place_match_for(by_round)
        old_loser = _loser_of(m, old_winner)
        if tp is not None and old_loser is not None:
            _retract(tp, old_loser)


def _get_locked_match(match_id: int) -> Match:
    m = locked(Match.objects.alive().filter(pk=match_id)).select_related("phase").first()
    if m is None:
        raise NotFound(f"Match {match_id} not found.")
    return m


# ---------- byes ----------


def _resolve_bye(m: Match, by_round: dict[str, list[Match]]) -> None:
    sole = m.registration_refs()[0]
    Match.objects.filter(pk=m.pk).update(
        winner_registration_ref=sole, status=MatchStatus.FINISHED, updated_at=timezone.now()
    )
    m.winner_registration_ref = sole
    m.status = MatchStatus.FINISHED
    _propagate(m, sole, by_round)
    logger.info("advancement.bye phase=%s match=%s winner=%s", m.phase_id, m.match_number, sole)


def resolve_forced_byes(phase_id: int) -> int:
    """Resolve every single-participant match whose empty slot can no longer fill.

    Runs to a fixpoint so byes cascade through later rounds. Caller owns the transaction.
    """
    processed = 0
    while True:
        by_round = load_rounds(phase_id)
        ordered = sorted(
            (m for matches in by_round.values() for m in matches), key=lambda m: m.match_number
        )
        pending = next((m for m in ordered if _is_pending_bye(m, by_round)), None)
        if pending is None:
            return processed
        _resolve_bye(pending, by_round)
        processed += 1


@atomic_phase
def process_phase_byes(phase) -> int:
    processed = resolve_forced_byes(phase.pk)
    logger.info("advancement.process_byes phase=%s processed=%s", phase.pk, processed)
    return processed


# ---------- výsledky ----------


def _apply_scores(m: Match, score1, score2, fields: list[str]) -> None:
    if score1 is not None:
        m.participant1_score = score1
        fields.append("participant1_score")
    if score2 is not None:
        m.participant2_score = score2
        fields.append("participant2_score")


def _validate_winner(m: Match, winner_ref: int) -> None:
    if m.status == MatchStatus.CANCELLED:
        raise InvalidInput(f"Match {m.match_number} is cancelled.")
    if winner_ref not in m.registration_refs():
        raise InvalidInput("The given winner does not participate in this match.")


@atomic()
def advance_winner(
    match_id: int, winner_registration_ref: int, score1=None, score2=None
) -> AdvanceResult:
    """Finish a match and move its winner (and a semifinal loser) forward.

    Re-running with the same arguments changes nothing. A different winner on an
    already finished match first pulls the previous winner back out of the next
    match and the previous loser out of the third-place match.
    """
    m = _get_locked_match(match_id)
    _validate_winner(m, winner_registration_ref)

    by_round = load_rounds(m.phase_id)
    previous = m.winner_registration_ref
    if previous is not None and previous != winner_registration_ref:
        _retract_progression(m, previous, by_round)

    fields = ["winner_registration_ref", "status"]
    m.winner_registration_ref = winner_registration_ref
    m.status = MatchStatus.FINISHED
    _apply_scores(m, score1, score2, fields)
    m.save(update_fields=fields + ["updated_at"])

    next_match, third_place = _propagate(m, winner_registration_ref, by_round)
    # dořeší byes, které tímto výsledkem vznikly (prázdná protější větev)
    byes = resolve_forced_byes(m.phase_id) if m.phase.type == PhaseType.ELIMINATION else 0

    if next_match is not None:
        message = f"winner advanced to {next_match.round}"
    elif m.round == FINAL:
        message = "champion determined"
    elif m.round == THIRD_PLACE:
        message = "third place determined"
    else:
        message = "match finished"

    logger.info(
        "advancement.advance match=%s phase=%s winner=%s next=%s third_place=%s byes_resolved=%s",
        m.pk,
        m.phase_id,
        winner_registration_ref,
        getattr(next_match, "pk", None),
        getattr(third_place, "pk", None),
        byes,
    )
    return AdvanceResult(
        match=m, next_match=next_match, third_place_match=third_place, message=message
    )


@atomic()
def finish_match(match_id: int, winner_registration_ref: int, score1=None, score2=None) -> Match:
    """Finish a match without moving anybody (group and series matches)."""
    m = _get_locked_match(match_id)
    _validate_winner(m, winner_registration_ref)
    fields = ["winner_registration_ref", "status"]
    m.winner_registration_ref = winner_registration_ref
    m.status = MatchStatus.FINISHED
    _apply_scores(m, score1, score2, fields)
    m.save(update_fields=fields + ["updated_at"])
    logger.info("advancement.finish match=%s winner=%s", m.pk, winner_registration_ref)
    return m


@atomic()
def reopen_match(match_id: int) -> Match:
    """Revert a finished match to IN_PROGRESS and undo what its result moved forward."""
    from competitions.services.series import restore_cancelled_series_matches
    from competitions.services.standings import recompute_standings

    m = _get_locked_match(match_id)
    if m.status != MatchStatus.FINISHED:
        raise InvalidInput(f"Only finished matches can be reopened (match is {m.status}).")

    if m.winner_registration_ref is not None:
        _retract_progression(m, m.winner_registration_ref, load_rounds(m.phase_id))

    m.winner_registration_ref = None
    m.status = MatchStatus.IN_PROGRESS
    m.save(update_fields=["winner_registration_ref", "status", "updated_at"])

    if m.phase.type == PhaseType.GROUP:
        recompute_standings(m.phase_id)
    elif m.phase.type == PhaseType.BEST_OF_3:
        restore_cancelled_series_matches(m.phase_id)
    elif resolve_forced_byes(m.phase_id):
        # osamělý účastník bez možného soupeře: zápas se hned znovu vyřeší jako bye
        m.refresh_from_db()

    logger.info("advancement.reopen match=%s phase=%s", m.pk, m.phase_id)
    return m
