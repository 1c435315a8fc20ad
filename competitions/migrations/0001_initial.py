import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Phase",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(blank=True, max_length=100, null=True)),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("ELIMINATION", "Elimination"),
                            ("GROUP", "Group (round robin)"),
                            ("BEST_OF_3", "Best of 3"),
                        ],
                        max_length=16,
                    ),
                ),
                ("display_order", models.PositiveIntegerField(blank=True, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["display_order", "id"]},
        ),
        migrations.CreateModel(
            name="Match",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("match_number", models.PositiveIntegerField()),
                ("round", models.CharField(blank=True, max_length=50, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("SCHEDULED", "Scheduled"),
                            ("IN_PROGRESS", "In progress"),
                            ("FINISHED", "Finished"),
                            ("CANCELLED", "Cancelled"),
                        ],
                        default="SCHEDULED",
                        max_length=12,
                    ),
                ),
                ("winner_registration_ref", models.PositiveBigIntegerField(blank=True, null=True)),
                ("participant1_score", models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ("participant2_score", models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ("is_walkover", models.BooleanField(default=False)),
                ("walkover_reason", models.CharField(blank=True, max_length=255, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                (
                    "phase",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="matches",
                        to="competitions.phase",
                    ),
                ),
            ],
            options={"ordering": ["phase", "match_number"]},
        ),
        migrations.CreateModel(
            name="Participation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("registration_ref", models.PositiveBigIntegerField()),
                (
                    "corner",
                    models.CharField(
                        choices=[("BLUE", "Blue"), ("WHITE", "White"), ("A", "A"), ("B", "B")],
                        max_length=8,
                    ),
                ),
                (
                    "match",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="participations",
                        to="competitions.match",
                    ),
                ),
            ],
            options={"ordering": ["match", "id"]},
        ),
        migrations.CreateModel(
            name="MatchGame",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "game_number",
                    models.PositiveSmallIntegerField(
                        validators=[django.core.validators.MinValueValidator(1)]
                    ),
                ),
                ("score1", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("score2", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("winner_registration_ref", models.PositiveBigIntegerField(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("IN_PROGRESS", "In progress"),
                            ("COMPLETED", "Completed"),
                        ],
                        default="PENDING",
                        max_length=12,
                    ),
                ),
                (
                    "match",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="games",
                        to="competitions.match",
                    ),
                ),
            ],
            options={"ordering": ["match", "game_number"]},
        ),
        migrations.CreateModel(
            name="PhaseRegistration",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("registration_ref", models.PositiveBigIntegerField()),
                ("seed_number", models.PositiveIntegerField(blank=True, null=True)),
                (
                    "phase",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="registrations",
                        to="competitions.phase",
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="Standing",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("registration_ref", models.PositiveBigIntegerField()),
                ("matches_played", models.PositiveIntegerField(default=0)),
                ("wins", models.PositiveIntegerField(default=0)),
                ("draws", models.PositiveIntegerField(default=0)),
                ("losses", models.PositiveIntegerField(default=0)),
                ("points", models.IntegerField(default=0)),
                ("score_for", models.IntegerField(default=0)),
                ("score_against", models.IntegerField(default=0)),
                ("score_diff", models.IntegerField(default=0)),
                ("rank_position", models.PositiveIntegerField(blank=True, null=True)),
                ("manual_rank_position", models.PositiveIntegerField(blank=True, null=True)),
                ("manual_rank_updated_at", models.DateTimeField(blank=True, null=True)),
                (
                    "phase",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="standings",
                        to="competitions.phase",
                    ),
                ),
            ],
            options={"ordering": ["phase", "rank_position", "registration_ref"]},
        ),
        migrations.CreateModel(
            name="PhaseManualRank",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("registration_ref", models.PositiveBigIntegerField()),
                ("manual_rank_position", models.PositiveIntegerField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "phase",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="manual_ranks",
                        to="competitions.phase",
                    ),
                ),
            ],
            options={"ordering": ["phase", "manual_rank_position", "registration_ref"]},
        ),
        migrations.AddIndex(
            model_name="match",
            index=models.Index(fields=["phase", "status"], name="match_phase_status_idx"),
        ),
        migrations.AddIndex(
            model_name="match",
            index=models.Index(fields=["phase", "round"], name="match_phase_round_idx"),
        ),
        migrations.AddIndex(
            model_name="match",
            index=models.Index(fields=["winner_registration_ref"], name="match_winner_ref_idx"),
        ),
        migrations.AddConstraint(
            model_name="match",
            constraint=models.UniqueConstraint(
                condition=models.Q(("deleted_at__isnull", True)),
                fields=("phase", "match_number"),
                name="uniq_alive_match_number_per_phase",
            ),
        ),
        migrations.AddConstraint(
            model_name="participation",
            constraint=models.UniqueConstraint(
                fields=("match", "registration_ref"), name="uniq_match_registration"
            ),
        ),
        migrations.AddConstraint(
            model_name="participation",
            constraint=models.UniqueConstraint(fields=("match", "corner"), name="uniq_match_corner"),
        ),
        migrations.AddConstraint(
            model_name="matchgame",
            constraint=models.UniqueConstraint(
                fields=("match", "game_number"), name="uniq_match_game_number"
            ),
        ),
        migrations.AddConstraint(
            model_name="phaseregistration",
            constraint=models.UniqueConstraint(
                fields=("phase", "registration_ref"), name="uniq_phase_registration"
            ),
        ),
        migrations.AddIndex(
            model_name="standing",
            index=models.Index(fields=["phase", "points", "score_diff"], name="standing_phase_points_idx"),
        ),
        migrations.AddConstraint(
            model_name="standing",
            constraint=models.UniqueConstraint(
                fields=("phase", "registration_ref"), name="uniq_phase_standing"
            ),
        ),
        migrations.AddConstraint(
            model_name="phasemanualrank",
            constraint=models.UniqueConstraint(
                fields=("phase", "registration_ref"), name="uniq_phase_manual_rank"
            ),
        ),
    ]
