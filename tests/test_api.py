import pytest

from competitions.models import Phase, PhaseRegistration, PhaseType
from tests.factories import make_phase, match_no

BASE = "/api/competitions"


def post(client, url, data=None):
    return client.post(url, data or {}, content_type="application/json")


@pytest.mark.django_db
def test_build_and_read_bracket(client):
    phase = make_phase(refs=[1, 2, 3, 4])

    resp = post(client, f"{BASE}/phases/{phase.pk}/bracket/", {"include_third_place": True})
    assert resp.status_code == 201
    data = resp.json()
    assert len(data["matches"]) == 3
    assert data["third_place_match"]["match_number"] == 9999
    assert data["bracket_info"]["total_slots"] == 4

    resp = client.get(f"{BASE}/phases/{phase.pk}/bracket/")
    data = resp.json()
    assert list(data["by_round"]) == ["semifinal", "final"]
    assert data["stats"]["pending"] == 4
    assert data["bracket_info"]["has_third_place"] is True
    first = data["by_round"]["semifinal"][0]
    assert {p["registration_ref"] for p in first["participations"]} == {1, 2}


@pytest.mark.django_db
def test_second_build_is_conflict(client):
    phase = make_phase(refs=[1, 2])
    post(client, f"{BASE}/phases/{phase.pk}/bracket/")
    resp = post(client, f"{BASE}/phases/{phase.pk}/bracket/", {"registration_refs": [1, 2]})
    assert resp.status_code == 409
    assert resp.json()["code"] == "conflict"


@pytest.mark.django_db
def test_errors_are_mapped(client):
    resp = client.get(f"{BASE}/phases/999999/bracket/")
    assert resp.status_code == 404
    assert resp.json()["code"] == "not_found"

    phase = make_phase(refs=[1])
    resp = post(client, f"{BASE}/phases/{phase.pk}/bracket/")
    assert resp.status_code == 400
    assert resp.json() == {"detail": "At least 2 participants are required.", "code": "invalid_input"}

    resp = post(client, f"{BASE}/phases/{phase.pk}/bracket/", {"registration_refs": ["x"]})
    assert resp.status_code == 400
    assert resp.json()["code"] == "invalid_input"


@pytest.mark.django_db
def test_advance_flow_and_champion(client):
    phase = make_phase(refs=[1, 2, 3, 4])
    post(client, f"{BASE}/phases/{phase.pk}/bracket/")

    resp = post(
        client,
        f"{BASE}/matches/{match_no(phase, 1).pk}/advance/",
        {"winner_registration_ref": 9},
    )
    assert resp.status_code == 400

    resp = post(
        client,
        f"{BASE}/matches/{match_no(phase, 1).pk}/advance/",
        {"winner_registration_ref": 1, "score1": "3", "score2": "0"},
    )
    assert resp.status_code == 200
    assert resp.json()["message"] == "winner advanced to final"
    assert resp.json()["next_match"]["match_number"] == 3

    post(client, f"{BASE}/matches/{match_no(phase, 2).pk}/walkover/", {"winner_registration_ref": 4, "reason": "no_show"})
    resp = post(client, f"{BASE}/matches/{match_no(phase, 3).pk}/advance/", {"winner_registration_ref": 4})
    assert resp.json()["message"] == "champion determined"

    assert client.get(f"{BASE}/phases/{phase.pk}/bracket/complete/").json() == {"complete": True}
    champion = client.get(f"{BASE}/phases/{phase.pk}/bracket/champion/").json()["champion"]
    assert champion["registration_ref"] == 4
    assert client.get(f"{BASE}/phases/{phase.pk}/bracket/third-place/").json() == {"third_place": None}


@pytest.mark.django_db
def test_reopen_and_byes(client):
    phase = make_phase(refs=[1, 2, 3])
    post(client, f"{BASE}/phases/{phase.pk}/bracket/")
    assert post(client, f"{BASE}/phases/{phase.pk}/byes/").json() == {"processed": 0}

    sf1 = match_no(phase, 1)
    post(client, f"{BASE}/matches/{sf1.pk}/advance/", {"winner_registration_ref": 2})
    resp = post(client, f"{BASE}/matches/{sf1.pk}/reopen/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "IN_PROGRESS"

    resp = post(client, f"{BASE}/matches/{sf1.pk}/reopen/")
    assert resp.status_code == 400


@pytest.mark.django_db
def test_round_robin_and_standings(client):
    phase = make_phase(type=PhaseType.GROUP, refs=[1, 2, 3])
    resp = post(client, f"{BASE}/phases/{phase.pk}/round-robin/")
    assert resp.status_code == 201
    assert len(resp.json()["matches"]) == 3
    assert len(resp.json()["standings"]) == 3

    resp = post(client, f"{BASE}/phases/{phase.pk}/standings/recompute/")
    assert [row["rank_position"] for row in resp.json()] == [1, 2, 3]

    resp = client.put(
        f"{BASE}/phases/{phase.pk}/manual-ranks/",
        {"ranks": [{"registration_ref": 3, "manual_rank_position": 1}]},
        content_type="application/json",
    )
    assert resp.json() == {"updated": 1}
    rows = client.get(f"{BASE}/phases/{phase.pk}/standings/").json()
    assert {r["registration_ref"]: r["manual_rank_position"] for r in rows}[3] == 1

    resp = client.put(
        f"{BASE}/phases/{phase.pk}/manual-ranks/",
        {"ranks": [{"registration_ref": 3, "manual_rank_position": 0}]},
        content_type="application/json",
    )
    assert resp.status_code == 400

    assert client.delete(f"{BASE}/phases/{phase.pk}/manual-ranks/").json() == {"cleared": 1}


@pytest.mark.django_db
def test_best_of_3_endpoints(client):
    phase = Phase.objects.create(name="Final series", type=PhaseType.BEST_OF_3)
    resp = post(client, f"{BASE}/phases/{phase.pk}/best-of-3/", {"registration_refs": [5, 6]})
    assert resp.status_code == 201
    assert [m["round"] for m in resp.json()] == ["Partido 1 de 3", "Partido 2 de 3", "Partido 3 de 3"]

    for number in (1, 2):
        resp = post(
            client,
            f"{BASE}/matches/{match_no(phase, number).pk}/series-result/",
            {"winner_registration_ref": 6},
        )
    assert resp.json() == {"series_complete": True, "winner": 6}

    resp = post(
        client,
        f"{BASE}/matches/{match_no(phase, 3).pk}/series-result/",
        {"winner_registration_ref": 5},
    )
    assert resp.status_code == 400


@pytest.mark.django_db
def test_seeded_order_is_used_without_explicit_refs(client):
    phase = Phase.objects.create(name="Seeds", type=PhaseType.ELIMINATION)
    PhaseRegistration.objects.create(phase=phase, registration_ref=30, seed_number=None)
    PhaseRegistration.objects.create(phase=phase, registration_ref=10, seed_number=2)
    PhaseRegistration.objects.create(phase=phase, registration_ref=20, seed_number=1)
    PhaseRegistration.objects.create(phase=phase, registration_ref=40, seed_number=None)

    data = post(client, f"{BASE}/phases/{phase.pk}/bracket/").json()
    first = data["matches"][0]["participations"]
    assert [p["registration_ref"] for p in first] == [20, 10]
