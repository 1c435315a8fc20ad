from io import StringIO

import pytest
from django.core.management import CommandError, call_command

from competitions.models import MatchStatus, Participation
from competitions.services.bracket import build_bracket
from tests.factories import make_phase, match_no


@pytest.mark.django_db
def test_process_byes_command():
    phase = make_phase(refs=[1, 2, 3, 4])
    build_bracket(phase.pk)
    Participation.objects.filter(match=match_no(phase, 1), registration_ref=2).delete()

    out = StringIO()
    call_command("competitions_process_byes", str(phase.pk), stdout=out)
    assert "1 byes processed" in out.getvalue()
    assert match_no(phase, 1).status == MatchStatus.FINISHED

    out = StringIO()
    call_command("competitions_process_byes", str(phase.pk), stdout=out)
    assert "0 byes processed" in out.getvalue()


@pytest.mark.django_db
def test_process_byes_command_unknown_phase():
    with pytest.raises(CommandError):
        call_command("competitions_process_byes", "31337", stdout=StringIO())
