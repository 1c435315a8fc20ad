from dataclasses import dataclass

import pytest

from competitions.exceptions import Conflict, InvalidInput
from competitions.models import GameStatus, MatchGame, MatchStatus, PhaseType, Standing
from competitions.services.advancement import AdvanceResult
from competitions.services.bracket import build_bracket
from competitions.services.outcomes import (
    MatchOutcome,
    outcome_from_games,
    outcome_from_scores,
    set_walkover,
    submit_outcome,
)
from competitions.services.round_robin import init_round_robin
from competitions.services.series import SeriesResult, init_best_of_3
from tests.factories import make_phase, match_no, refs_in


@pytest.mark.django_db
def test_elimination_outcome_advances():
    phase = make_phase(refs=[1, 2, 3, 4])
    build_bracket(phase.pk)
    res = submit_outcome(MatchOutcome(match_id=match_no(phase, 1).pk, winner_registration_ref=2))
    assert isinstance(res, AdvanceResult)
    assert refs_in(match_no(phase, 3)) == {2}


@pytest.mark.django_db
def test_group_outcome_recomputes_standings():
    phase = make_phase(type=PhaseType.GROUP, refs=[1, 2, 3])
    init_round_robin(phase.pk)
    submit_outcome(MatchOutcome(match_id=match_no(phase, 1).pk, winner_registration_ref=3))
    row = Standing.objects.get(phase=phase, registration_ref=3)
    assert (row.points, row.rank_position) == (3, 1)


@pytest.mark.django_db
def test_series_outcome_records_result():
    phase = make_phase(type=PhaseType.BEST_OF_3)
    init_best_of_3(phase.pk, [7, 8])
    res = submit_outcome(MatchOutcome(match_id=match_no(phase, 1).pk, winner_registration_ref=8))
    assert res == SeriesResult(series_complete=False, winner=None)


@pytest.mark.django_db
def test_outcome_source_protocol():
    phase = make_phase(refs=[1, 2])
    build_bracket(phase.pk)

    @dataclass
    class Panel:
        match_id: int

        def outcome(self):
            return outcome_from_scores(self.match_id, 2, 5)

    res = submit_outcome(Panel(match_no(phase, 1).pk))
    assert res.message == "champion determined"
    final = match_no(phase, 1)
    assert final.winner_registration_ref == 2
    assert (final.participant1_score, final.participant2_score) == (2, 5)


@pytest.mark.django_db
def test_outcome_from_scores_tie():
    phase = make_phase(refs=[1, 2])
    build_bracket(phase.pk)
    with pytest.raises(Conflict):
        outcome_from_scores(match_no(phase, 1).pk, 3, 3)


@pytest.mark.django_db
def test_outcome_from_games():
    phase = make_phase(refs=[1, 2])
    build_bracket(phase.pk)
    m = match_no(phase, 1)
    with pytest.raises(Conflict):
        outcome_from_games(m.pk)

    for number, winner in enumerate([2, 1, 2], start=1):
        MatchGame.objects.create(
            match=m, game_number=number, winner_registration_ref=winner, status=GameStatus.COMPLETED
        )
    outcome = outcome_from_games(m.pk)
    assert outcome.winner_registration_ref == 2
    assert (outcome.score1, outcome.score2) == (1, 2)


@pytest.mark.django_db
def test_outcome_from_games_tie():
    phase = make_phase(refs=[1, 2])
    build_bracket(phase.pk)
    m = match_no(phase, 1)
    MatchGame.objects.create(match=m, game_number=1, winner_registration_ref=1)
    MatchGame.objects.create(match=m, game_number=2, winner_registration_ref=2)
    with pytest.raises(Conflict):
        outcome_from_games(m.pk)


@pytest.mark.django_db
def test_walkover():
    phase = make_phase(refs=[1, 2, 3, 4])
    build_bracket(phase.pk)
    sf1 = match_no(phase, 1)

    set_walkover(sf1.pk, 2, "no_show")

    sf1.refresh_from_db()
    assert sf1.is_walkover is True
    assert sf1.walkover_reason == "no_show"
    assert sf1.status == MatchStatus.FINISHED
    assert refs_in(match_no(phase, 3)) == {2}


@pytest.mark.django_db
def test_walkover_for_outsider_rolls_back():
    phase = make_phase(refs=[1, 2, 3, 4])
    build_bracket(phase.pk)
    sf1 = match_no(phase, 1)
    with pytest.raises(InvalidInput):
        set_walkover(sf1.pk, 4, "retired")
    sf1.refresh_from_db()
    assert sf1.is_walkover is False
