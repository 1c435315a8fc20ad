from django.contrib import admin, messages

from .models import (
    Match,
    MatchGame,
    Participation,
    Phase,
    PhaseManualRank,
    PhaseRegistration,
    PhaseType,
    Standing,
)
from .services.advancement import process_phase_byes
from .services.standings import recompute_standings


class PhaseRegistrationInline(admin.TabularInline):
    model = PhaseRegistration
    extra = 0


@admin.register(Phase)
class PhaseAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "display_order", "created_at")
    list_filter = ("type",)
    inlines = [PhaseRegistrationInline]

    @admin.action(description="Resolve pending byes")
    def resolve_byes(self, request, queryset):
        for phase in queryset:
            processed = process_phase_byes(phase.pk)
            messages.info(request, f"{phase}: {processed} byes resolved.")

    @admin.action(description="Recompute standings")
    def recompute(self, request, queryset):
        for phase in queryset:
            if phase.type != PhaseType.GROUP:
                messages.warning(request, f"{phase}: not a group phase, skipped.")
                continue
            rows = recompute_standings(phase.pk)
            messages.success(request, f"{phase}: {len(rows)} standings recomputed.")

    actions = ["resolve_byes", "recompute"]


class ParticipationInline(admin.TabularInline):
    model = Participation
    extra = 0


class MatchGameInline(admin.TabularInline):
    model = MatchGame
    extra = 0


@admin.register(Match)
class MatchAdmin(admin.ModelAdmin):
    list_display = ("phase", "match_number", "round", "status", "winner_registration_ref", "is_walkover")
    list_filter = ("status", "phase__type")
    search_fields = ("round",)
    inlines = [ParticipationInline, MatchGameInline]


@admin.register(Standing)
class StandingAdmin(admin.ModelAdmin):
    list_display = (
        "phase",
        "rank_position",
        "registration_ref",
        "points",
        "wins",
        "losses",
        "score_diff",
        "manual_rank_position",
    )
    list_filter = ("phase",)


@admin.register(PhaseManualRank)
class PhaseManualRankAdmin(admin.ModelAdmin):
    list_display = ("phase", "registration_ref", "manual_rank_position", "updated_at")
    list_filter = ("phase",)
