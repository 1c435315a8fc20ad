from __future__ import annotations

from rest_framework import serializers

from competitions.models import Match, Participation, Standing


class ParticipationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Participation
        fields = ["registration_ref", "corner"]


class MatchSerializer(serializers.ModelSerializer):
    participations = ParticipationSerializer(many=True, read_only=True)

    class Meta:
        model = Match
        fields = [
            "id",
            "phase",
            "match_number",
            "round",
            "status",
            "winner_registration_ref",
            "participant1_score",
            "participant2_score",
            "is_walkover",
            "walkover_reason",
            "participations",
        ]


class StandingSerializer(serializers.ModelSerializer):
    class Meta:
        model = Standing
        fields = [
            "registration_ref",
            "matches_played",
            "wins",
            "draws",
            "losses",
            "points",
            "score_for",
            "score_against",
            "score_diff",
            "rank_position",
            "manual_rank_position",
        ]


class BracketInfoSerializer(serializers.Serializer):
    total_participants = serializers.IntegerField()
    total_slots = serializers.IntegerField()
    total_rounds = serializers.IntegerField()
    bye_count = serializers.IntegerField()
    has_third_place = serializers.BooleanField()


class PlacementSerializer(serializers.Serializer):
    registration_ref = serializers.IntegerField()
    match_id = serializers.IntegerField()
    finalized_at = serializers.DateTimeField()


# ---------- vstupy ----------


class RegistrationRefsInput(serializers.Serializer):
    registration_refs = serializers.ListField(
        child=serializers.IntegerField(min_value=1), required=False, allow_null=True
    )


class BuildBracketInput(RegistrationRefsInput):
    include_third_place = serializers.BooleanField(required=False, default=False)


class BestOf3Input(serializers.Serializer):
    registration_refs = serializers.ListField(child=serializers.IntegerField(min_value=1))


class WinnerInput(serializers.Serializer):
    winner_registration_ref = serializers.IntegerField(min_value=1)
    score1 = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, allow_null=True)
    score2 = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, allow_null=True)


class WalkoverInput(serializers.Serializer):
    winner_registration_ref = serializers.IntegerField(min_value=1)
    reason = serializers.CharField(max_length=255)


class ManualRankItem(serializers.Serializer):
    registration_ref = serializers.IntegerField(min_value=1)
    manual_rank_position = serializers.IntegerField(min_value=1, allow_null=True)


class ManualRanksInput(serializers.Serializer):
    ranks = ManualRankItem(many=True)
