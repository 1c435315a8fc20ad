from django.urls import path

from . import views

urlpatterns = [
    path("phases/<int:phase_id>/bracket/", views.BracketView.as_view(), name="bracket"),
    path(
        "phases/<int:phase_id>/bracket/complete/",
        views.BracketCompleteView.as_view(),
        name="bracket-complete",
    ),
    path(
        "phases/<int:phase_id>/bracket/champion/",
        views.ChampionView.as_view(),
        name="bracket-champion",
    ),
    path(
        "phases/<int:phase_id>/bracket/third-place/",
        views.ThirdPlaceView.as_view(),
        name="bracket-third-place",
    ),
    path("phases/<int:phase_id>/byes/", views.ProcessByesView.as_view(), name="phase-byes"),
    path(
        "phases/<int:phase_id>/round-robin/",
        views.RoundRobinView.as_view(),
        name="round-robin",
    ),
    path("phases/<int:phase_id>/standings/", views.StandingsList.as_view(), name="standings"),
    path(
        "phases/<int:phase_id>/standings/recompute/",
        views.RecomputeStandingsView.as_view(),
        name="standings-recompute",
    ),
    path(
        "phases/<int:phase_id>/manual-ranks/",
        views.ManualRanksView.as_view(),
        name="manual-ranks",
    ),
    path("phases/<int:phase_id>/best-of-3/", views.BestOf3View.as_view(), name="best-of-3"),
    path("matches/<int:match_id>/advance/", views.AdvanceView.as_view(), name="match-advance"),
    path("matches/<int:match_id>/reopen/", views.ReopenView.as_view(), name="match-reopen"),
    path("matches/<int:match_id>/walkover/", views.WalkoverView.as_view(), name="match-walkover"),
    path(
        "matches/<int:match_id>/series-result/",
        views.SeriesResultView.as_view(),
        name="match-series-result",
    ),
]
