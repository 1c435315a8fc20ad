from django.core.exceptions import ObjectDoesNotExist, ValidationError


class InvalidInput(ValidationError):
    """Bad shape or precondition: participant counts, phase type, foreign winner."""


class Conflict(ValidationError):
    """Operation clashes with stored state (occupied slot, ambiguous winner, finished downstream)."""


class NotFound(ObjectDoesNotExist):
    pass
