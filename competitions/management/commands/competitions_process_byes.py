from django.core.management.base import BaseCommand, CommandError

from ...exceptions import NotFound
from ...services.advancement import process_phase_byes


class Command(BaseCommand):
    help = "Resolve every pending bye of a phase and propagate the winners"

    def add_arguments(self, parser):
        parser.add_argument("phase_id", type=int)

    def handle(self, *args, **options):
        phase_id = options["phase_id"]
        try:
            processed = process_phase_byes(phase_id)
        except NotFound as e:
            raise CommandError(str(e))
        self.stdout.write(f"{processed} byes processed")
