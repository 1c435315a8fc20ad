import threading

import pytest
from django.db import IntegrityError, OperationalError, close_old_connections
from django.test import TransactionTestCase

from competitions.exceptions import Conflict
from competitions.models import Corner, MatchStatus, Participation
from competitions.services.advancement import advance_winner
from competitions.services.bracket import build_bracket
from tests.factories import make_phase, match_no


class AdvanceConcurrencyTests(TransactionTestCase):
    reset_sequences = True

    def _run_parallel(self, *calls):
        """Spustí volání souběžně; vrátí [(call, None | výjimka)] v pořadí volání."""
        outcomes = [None] * len(calls)
        guard = threading.Lock()

        def run(idx, match_id, winner):
            close_old_connections()
            try:
                advance_winner(match_id, winner)
                error = None
            except Exception as exc:
                error = exc
            finally:
                close_old_connections()
            with guard:
                outcomes[idx] = (calls[idx], error)

        threads = [threading.Thread(target=run, args=(i, *call)) for i, call in enumerate(calls)]
        for th in threads:
            th.start()
        for th in threads:
            th.join()
        return outcomes

    def _assert_only(self, outcomes, allowed):
        for _, error in outcomes:
            if error is not None:
                self.assertIsInstance(error, allowed)

    def test_same_winner_twice_is_placed_once(self):
        phase = make_phase(refs=[1, 2, 3, 4])
        build_bracket(phase.pk, include_third_place=True)
        sf1 = match_no(phase, 1)

        outcomes = self._run_parallel((sf1.pk, 1), (sf1.pk, 1))
        self._assert_only(outcomes, OperationalError)
        succeeded = sum(1 for _, error in outcomes if error is None)

        final, tp = match_no(phase, 3), match_no(phase, 9999)
        self.assertEqual(Participation.objects.filter(match=final).count(), min(1, succeeded))
        self.assertEqual(Participation.objects.filter(match=tp).count(), min(1, succeeded))

        for (match_id, winner), error in outcomes:
            if error is not None:
                advance_winner(match_id, winner)
        self.assertEqual(Participation.objects.filter(match=final).count(), 1)
        self.assertEqual(Participation.objects.filter(match=tp).count(), 1)

    def test_both_semifinals_fill_distinct_corners(self):
        phase = make_phase(refs=[1, 2, 3, 4])
        build_bracket(phase.pk)
        sf1, sf2 = match_no(phase, 1), match_no(phase, 2)

        outcomes = self._run_parallel((sf1.pk, 2), (sf2.pk, 3))
        self._assert_only(outcomes, (OperationalError, Conflict))
        succeeded = sum(1 for _, error in outcomes if error is None)

        final = match_no(phase, 3)
        rows = dict(Participation.objects.filter(match=final).values_list("registration_ref", "corner"))
        self.assertEqual(len(rows), succeeded)
        self.assertEqual(len(set(rows.values())), len(rows))

        for (match_id, winner), error in outcomes:
            if error is not None:
                advance_winner(match_id, winner)
        rows = dict(Participation.objects.filter(match=final).values_list("registration_ref", "corner"))
        self.assertEqual(set(rows), {2, 3})
        self.assertEqual(set(rows.values()), {Corner.BLUE, Corner.WHITE})


@pytest.mark.django_db
def test_lost_slot_race_raises_conflict_and_rolls_back(monkeypatch):
    phase = make_phase(refs=[1, 2, 3, 4])
    build_bracket(phase.pk)
    sf1 = match_no(phase, 1)

    def taken(*args, **kwargs):
        raise IntegrityError("UNIQUE constraint failed: competitions_participation.corner")

    monkeypatch.setattr(Participation.objects, "get_or_create", taken)
    with pytest.raises(Conflict):
        advance_winner(sf1.pk, 1)

    monkeypatch.undo()
    sf1.refresh_from_db()
    assert sf1.status == MatchStatus.SCHEDULED
    assert sf1.winner_registration_ref is None
    assert not Participation.objects.filter(match=match_no(phase, 3)).exists()

