from functools import wraps

from django.db import transaction

from competitions.exceptions import NotFound
from competitions.models import Phase
from competitions.services.tx import locked


def lock_phase(phase_id: int) -> Phase:
    """Zamkne řádek fáze; všechny fázové operace se tak serializují."""
    phase = locked(Phase.objects.filter(pk=phase_id)).first()
    if phase is None:
        raise NotFound(f"Phase {phase_id} not found.")
    return phase


def atomic_phase(fn):
    """Wrap ``fn(phase_id, ...)`` in a transaction holding the phase row lock.

    The locked Phase instance is passed in place of the id.
    """

    @wraps(fn)
    def wrapper(phase_id, *args, **kwargs):
        with transaction.atomic():
            phase = lock_phase(getattr(phase_id, "pk", phase_id))
            return fn(phase, *args, **kwargs)

    return wrapper
