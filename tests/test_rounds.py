from competitions.services.rounds import (
    group_by_round,
    match_count_for,
    next_power_of_two,
    next_round_name,
    previous_round_name,
    round_name_for,
)


class _M:
    def __init__(self, number, round):
        self.match_number = number
        self.round = round


def test_next_power_of_two():
    assert [next_power_of_two(n) for n in (1, 2, 3, 5, 8, 9, 33)] == [1, 2, 4, 8, 8, 16, 64]


def test_round_names_by_match_count():
    assert round_name_for(1) == "final"
    assert round_name_for(2) == "semifinal"
    assert round_name_for(4) == "cuartos"
    assert round_name_for(8) == "octavos"
    assert round_name_for(16) == "dieciseisavos"
    assert round_name_for(32) == "treintaidosavos"
    assert round_name_for(64) == "ronda_64"
    assert match_count_for("ronda_64") == 64
    assert match_count_for("tercer_lugar") == 0
    assert match_count_for("3") == 0


def test_round_order_chain():
    assert next_round_name("cuartos") == "semifinal"
    assert next_round_name("semifinal") == "final"
    assert next_round_name("final") is None
    assert next_round_name("tercer_lugar") is None
    assert next_round_name("ronda_128") == "ronda_64"
    assert next_round_name("ronda_64") == "treintaidosavos"
    assert previous_round_name("final") == "semifinal"
    assert previous_round_name("treintaidosavos") == "ronda_64"


def test_group_by_round_orders_rounds_and_matches():
    matches = [
        _M(9999, "tercer_lugar"),
        _M(7, "final"),
        _M(6, "semifinal"),
        _M(2, "cuartos"),
        _M(5, "semifinal"),
        _M(1, "cuartos"),
    ]
    grouped = group_by_round(matches)
    assert list(grouped) == ["cuartos", "semifinal", "final", "tercer_lugar"]
    assert [m.match_number for m in grouped["semifinal"]] == [5, 6]
    assert [m.match_number for m in grouped["cuartos"]] == [1, 2]


def test_group_by_round_numeric_rounds():
    grouped = group_by_round([_M(3, "2"), _M(1, "1"), _M(5, "10"), _M(2, "1")])
    assert list(grouped) == ["1", "2", "10"]
