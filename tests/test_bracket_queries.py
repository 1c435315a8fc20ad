import pytest

from competitions.exceptions import NotFound
from competitions.services.advancement import advance_winner
from competitions.services.bracket import build_bracket
from competitions.services.bracket_queries import (
    get_bracket_info,
    get_bracket_structure,
    get_champion,
    get_third_place,
    is_bracket_complete,
)
from tests.factories import make_phase, match_no


@pytest.mark.django_db
def test_structure_and_stats():
    phase = make_phase(refs=[1, 2, 3, 4])
    build_bracket(phase.pk, include_third_place=True)

    s = get_bracket_structure(phase.pk)
    assert list(s["by_round"]) == ["semifinal", "final"]
    assert [m.match_number for m in s["by_round"]["semifinal"]] == [1, 2]
    assert s["third_place_match"].match_number == 9999
    assert s["total_matches"] == 4
    assert s["stats"] == {
        "total": 4,
        "completed": 0,
        "in_progress": 0,
        "pending": 4,
        "cancelled": 0,
        "completion_percentage": 0,
    }

    advance_winner(match_no(phase, 1).pk, 1)
    stats = get_bracket_structure(phase.pk)["stats"]
    assert stats["completed"] == 1
    assert stats["completion_percentage"] == 25


@pytest.mark.django_db
def test_champion_and_third_place():
    phase = make_phase(refs=[1, 2, 3, 4])
    build_bracket(phase.pk, include_third_place=True)
    assert is_bracket_complete(phase.pk) is False
    assert get_champion(phase.pk) is None
    assert get_third_place(phase.pk) is None

    advance_winner(match_no(phase, 1).pk, 1)
    advance_winner(match_no(phase, 2).pk, 4)
    final = match_no(phase, 3)
    advance_winner(final.pk, 4)
    advance_winner(match_no(phase, 9999).pk, 2)

    assert is_bracket_complete(phase.pk) is True
    champion = get_champion(phase.pk)
    assert champion.registration_ref == 4
    assert champion.match_id == final.pk
    assert champion.finalized_at is not None
    assert get_third_place(phase.pk).registration_ref == 2


@pytest.mark.django_db
def test_bracket_info_is_derived_from_matches():
    phase = make_phase(refs=[1, 2, 3, 4, 5])
    build_bracket(phase.pk)
    info = get_bracket_info(phase.pk)
    assert info.total_participants == 5
    assert info.total_slots == 8
    assert info.total_rounds == 3
    assert info.bye_count == 3
    assert info.has_third_place is False


@pytest.mark.django_db
def test_queries_without_bracket():
    phase = make_phase()
    assert get_bracket_info(phase.pk) is None
    assert get_bracket_structure(phase.pk)["total_matches"] == 0
    assert is_bracket_complete(phase.pk) is False


@pytest.mark.django_db
def test_queries_unknown_phase():
    for fn in (get_bracket_structure, is_bracket_complete, get_champion, get_third_place):
        with pytest.raises(NotFound):
            fn(424242)
