"""
Engine-owned rows: Match / Participation / Standing (+ MatchGame, manual ranks).
Phase a PhaseRegistration patří externím spolupracovníkům, engine je jen čte.
Registrace jsou neprůhledná čísla (registration_ref), nikdy je nedereferencujeme.
"""

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from competitions.exceptions import InvalidInput


class PhaseType(models.TextChoices):
    ELIMINATION = "ELIMINATION", "Elimination"
    GROUP = "GROUP", "Group (round robin)"
    BEST_OF_3 = "BEST_OF_3", "Best of 3"


class MatchStatus(models.TextChoices):
    SCHEDULED = "SCHEDULED", "Scheduled"
    IN_PROGRESS = "IN_PROGRESS", "In progress"
    FINISHED = "FINISHED", "Finished"
    CANCELLED = "CANCELLED", "Cancelled"


class Corner(models.TextChoices):
    BLUE = "BLUE", "Blue"
    WHITE = "WHITE", "White"
    A = "A", "A"
    B = "B", "B"


class GameStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    IN_PROGRESS = "IN_PROGRESS", "In progress"
    COMPLETED = "COMPLETED", "Completed"


class Phase(models.Model):
    name = models.CharField(max_length=100, null=True, blank=True)  # "Pool A", "Cuartos"
    type = models.CharField(max_length=16, choices=PhaseType.choices)
    display_order = models.PositiveIntegerField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["display_order", "id"]

    def __str__(self):
        return self.name or f"<Phase {self.pk}>"

    def save(self, *args, **kwargs):
        if self.pk is not None:
            stored = Phase.objects.filter(pk=self.pk).values_list("type", flat=True).first()
            if stored is not None and stored != self.type and self.matches.exists():
                raise InvalidInput("Phase type cannot change once matches exist.")
        super().save(*args, **kwargs)


class PhaseRegistration(models.Model):
    phase = models.ForeignKey(Phase, on_delete=models.CASCADE, related_name="registrations")
    registration_ref = models.PositiveBigIntegerField()
    seed_number = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["phase", "registration_ref"], name="uniq_phase_registration"
            )
        ]

    def __str__(self):
        return f"{self.phase_id}:{self.registration_ref} (seed {self.seed_number or '-'})"


class MatchQuerySet(models.QuerySet):
    def alive(self):
        return self.filter(deleted_at__isnull=True)


class Match(models.Model):
    phase = models.ForeignKey(Phase, on_delete=models.CASCADE, related_name="matches")
    match_number = models.PositiveIntegerField()
    # eliminace: "final", "semifinal", "cuartos", ..., "tercer_lugar"; skupiny: "1", "2", ...
    round = models.CharField(max_length=50, null=True, blank=True)
    status = models.CharField(
        max_length=12, choices=MatchStatus.choices, default=MatchStatus.SCHEDULED
    )
    winner_registration_ref = models.PositiveBigIntegerField(null=True, blank=True)

    participant1_score = models.DecimalField(
        max_digits=5, decimal_places=2, null=True, blank=True
    )
    participant2_score = models.DecimalField(
        max_digits=5, decimal_places=2, null=True, blank=True
    )

    is_walkover = models.BooleanField(default=False)
    walkover_reason = models.CharField(max_length=255, null=True, blank=True)  # no_show, retired, ...

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    objects = MatchQuerySet.as_manager()

    class Meta:
        ordering = ["phase", "match_number"]
        indexes = [
            models.Index(fields=["phase", "status"], name="match_phase_status_idx"),
            models.Index(fields=["phase", "round"], name="match_phase_round_idx"),
            models.Index(fields=["winner_registration_ref"], name="match_winner_ref_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["phase", "match_number"],
                condition=models.Q(deleted_at__isnull=True),
                name="uniq_alive_match_number_per_phase",
            )
        ]

    def __str__(self):
        return f"{self.phase_id}:#{self.match_number}:{self.round or '?'}"

    def registration_refs(self) -> list[int]:
        return [p.registration_ref for p in self.participations.all()]


class Participation(models.Model):
    match = models.ForeignKey(Match, on_delete=models.CASCADE, related_name="participations")
    registration_ref = models.PositiveBigIntegerField()
    corner = models.CharField(max_length=8, choices=Corner.choices)

    class Meta:
        ordering = ["match", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["match", "registration_ref"], name="uniq_match_registration"
            ),
            models.UniqueConstraint(fields=["match", "corner"], name="uniq_match_corner"),
        ]

    def __str__(self):
        return f"{self.match_id}:{self.registration_ref}[{self.corner}]"


class MatchGame(models.Model):
    """Dílčí hra (např. set ve stolním tenise); ukládá ji spolupracovník, engine jen čte."""

    match = models.ForeignKey(Match, on_delete=models.CASCADE, related_name="games")
    game_number = models.PositiveSmallIntegerField(validators=[MinValueValidator(1)])
    score1 = models.PositiveSmallIntegerField(null=True, blank=True)
    score2 = models.PositiveSmallIntegerField(null=True, blank=True)
    winner_registration_ref = models.PositiveBigIntegerField(null=True, blank=True)
    status = models.CharField(
        max_length=12, choices=GameStatus.choices, default=GameStatus.PENDING
    )

    class Meta:
        ordering = ["match", "game_number"]
        constraints = [
            models.UniqueConstraint(fields=["match", "game_number"], name="uniq_match_game_number")
        ]

    def __str__(self):
        return f"{self.match_id}:G{self.game_number}"


class Standing(models.Model):
    phase = models.ForeignKey(Phase, on_delete=models.CASCADE, related_name="standings")
    registration_ref = models.PositiveBigIntegerField()

    matches_played = models.PositiveIntegerField(default=0)
    wins = models.PositiveIntegerField(default=0)
    draws = models.PositiveIntegerField(default=0)
    losses = models.PositiveIntegerField(default=0)
    points = models.IntegerField(default=0)
    score_for = models.IntegerField(default=0)
    score_against = models.IntegerField(default=0)
    score_diff = models.IntegerField(default=0)

    rank_position = models.PositiveIntegerField(null=True, blank=True)
    # ruční pořadí od admina; přepočet ho nikdy nepočítá ani nemaže
    manual_rank_position = models.PositiveIntegerField(null=True, blank=True)
    manual_rank_updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["phase", "rank_position", "registration_ref"]
        indexes = [models.Index(fields=["phase", "points", "score_diff"], name="standing_phase_points_idx")]
        constraints = [
            models.UniqueConstraint(
                fields=["phase", "registration_ref"], name="uniq_phase_standing"
            )
        ]

    def __str__(self):
        return f"{self.phase_id}:{self.registration_ref} #{self.rank_position or '-'}"


class PhaseManualRank(models.Model):
    phase = models.ForeignKey(Phase, on_delete=models.CASCADE, related_name="manual_ranks")
    registration_ref = models.PositiveBigIntegerField()
    manual_rank_position = models.PositiveIntegerField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["phase", "manual_rank_position", "registration_ref"]
        constraints = [
            models.UniqueConstraint(
                fields=["phase", "registration_ref"], name="uniq_phase_manual_rank"
            )
        ]

    def __str__(self):
        return f"{self.phase_id}:{self.registration_ref} -> {self.manual_rank_position}"
