from __future__ import annotations

from dataclasses import asdict

from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from competitions.models import Match
from competitions.services import (
    advance_winner,
    build_bracket,
    clear_manual_ranks,
    get_bracket_info,
    get_bracket_structure,
    get_champion,
    get_standings,
    get_third_place,
    init_best_of_3,
    init_round_robin,
    is_bracket_complete,
    process_phase_byes,
    recompute_standings,
    record_series_result,
    reopen_match,
    set_manual_ranks,
    set_walkover,
)

from .serializers import (
    BestOf3Input,
    BracketInfoSerializer,
    BuildBracketInput,
    ManualRanksInput,
    MatchSerializer,
    PlacementSerializer,
    RegistrationRefsInput,
    StandingSerializer,
    WalkoverInput,
    WinnerInput,
)


def _validated(serializer_class, request) -> dict:
    serializer = serializer_class(data=request.data)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


def _match_data(match_id: int) -> dict:
    m = Match.objects.prefetch_related("participations").get(pk=match_id)
    return MatchSerializer(m).data


class BracketView(APIView):
    def get(self, request, phase_id: int):
        structure = get_bracket_structure(phase_id)
        info = get_bracket_info(phase_id)
        third = structure["third_place_match"]
        return Response(
            {
                "by_round": {
                    name: MatchSerializer(items, many=True).data
                    for name, items in structure["by_round"].items()
                },
                "third_place_match": MatchSerializer(third).data if third else None,
                "total_matches": structure["total_matches"],
                "stats": structure["stats"],
                "bracket_info": BracketInfoSerializer(info).data if info else None,
            }
        )

    def post(self, request, phase_id: int):
        data = _validated(BuildBracketInput, request)
        result = build_bracket(
            phase_id,
            registration_refs=data.get("registration_refs"),
            include_third_place=data["include_third_place"],
        )
        third = result.third_place_match
        return Response(
            {
                "matches": MatchSerializer(result.matches, many=True).data,
                "third_place_match": _match_data(third.pk) if third else None,
                "bracket_info": asdict(result.bracket_info),
            },
            status=status.HTTP_201_CREATED,
        )


class BracketCompleteView(APIView):
    def get(self, request, phase_id: int):
        return Response({"complete": is_bracket_complete(phase_id)})


class ChampionView(APIView):
    def get(self, request, phase_id: int):
        placement = get_champion(phase_id)
        return Response({"champion": PlacementSerializer(placement).data if placement else None})


class ThirdPlaceView(APIView):
    def get(self, request, phase_id: int):
        placement = get_third_place(phase_id)
        return Response(
            {"third_place": PlacementSerializer(placement).data if placement else None}
        )


class ProcessByesView(APIView):
    def post(self, request, phase_id: int):
        return Response({"processed": process_phase_byes(phase_id)})


class AdvanceView(APIView):
    def post(self, request, match_id: int):
        data = _validated(WinnerInput, request)
        result = advance_winner(
            match_id, data["winner_registration_ref"], data.get("score1"), data.get("score2")
        )
        return Response(
            {
                "message": result.message,
                "match": _match_data(result.match.pk),
                "next_match": _match_data(result.next_match.pk) if result.next_match else None,
                "third_place_match": (
                    _match_data(result.third_place_match.pk) if result.third_place_match else None
                ),
            }
        )


class ReopenView(APIView):
    def post(self, request, match_id: int):
        m = reopen_match(match_id)
        return Response(_match_data(m.pk))


class WalkoverView(APIView):
    def post(self, request, match_id: int):
        data = _validated(WalkoverInput, request)
        set_walkover(match_id, data["winner_registration_ref"], data["reason"])
        return Response(_match_data(match_id))


class RoundRobinView(APIView):
    def post(self, request, phase_id: int):
        data = _validated(RegistrationRefsInput, request)
        standings = init_round_robin(phase_id, registration_refs=data.get("registration_refs"))
        matches = Match.objects.alive().filter(phase_id=phase_id).prefetch_related("participations")
        return Response(
            {
                "standings": StandingSerializer(standings, many=True).data,
                "matches": MatchSerializer(matches, many=True).data,
            },
            status=status.HTTP_201_CREATED,
        )


class StandingsList(generics.ListAPIView):
    serializer_class = StandingSerializer
    pagination_class = None

    def get_queryset(self):
        return get_standings(self.kwargs["phase_id"])


class RecomputeStandingsView(APIView):
    def post(self, request, phase_id: int):
        return Response(StandingSerializer(recompute_standings(phase_id), many=True).data)


class ManualRanksView(APIView):
    def put(self, request, phase_id: int):
        data = _validated(ManualRanksInput, request)
        updated = set_manual_ranks(
            phase_id,
            [(item["registration_ref"], item["manual_rank_position"]) for item in data["ranks"]],
        )
        return Response({"updated": updated})

    def delete(self, request, phase_id: int):
        return Response({"cleared": clear_manual_ranks(phase_id)})


class BestOf3View(APIView):
    def post(self, request, phase_id: int):
        data = _validated(BestOf3Input, request)
        matches = init_best_of_3(phase_id, data["registration_refs"])
        qs = Match.objects.filter(pk__in=[m.pk for m in matches]).prefetch_related("participations")
        return Response(MatchSerializer(qs, many=True).data, status=status.HTTP_201_CREATED)


class SeriesResultView(APIView):
    def post(self, request, match_id: int):
        data = _validated(WinnerInput, request)
        result = record_series_result(
            match_id, data["winner_registration_ref"], data.get("score1"), data.get("score2")
        )
        return Response(asdict(result))
