from competitions.services.advancement import (
    AdvanceResult,
    advance_winner,
    finish_match,
    process_phase_byes,
    reopen_match,
)
from competitions.services.bracket import BracketInfo, BracketResult, build_bracket
from competitions.services.bracket_queries import (
    Placement,
    get_bracket_info,
    get_bracket_structure,
    get_champion,
    get_third_place,
    is_bracket_complete,
)
from competitions.services.outcomes import (
    MatchOutcome,
    OutcomeSource,
    outcome_from_games,
    outcome_from_scores,
    set_walkover,
    submit_outcome,
)
from competitions.services.round_robin import circle_pairings, init_round_robin
from competitions.services.series import (
    SeriesResult,
    SeriesStatus,
    get_series_status,
    init_best_of_3,
    record_series_result,
)
from competitions.services.standings import (
    clear_manual_ranks,
    get_manual_ranks,
    get_standings,
    recompute_standings,
    set_manual_rank,
    set_manual_ranks,
)

__all__ = [
    "AdvanceResult",
    "BracketInfo",
    "BracketResult",
    "MatchOutcome",
    "OutcomeSource",
    "Placement",
    "SeriesResult",
    "SeriesStatus",
    "advance_winner",
    "build_bracket",
    "circle_pairings",
    "clear_manual_ranks",
    "finish_match",
    "get_bracket_info",
    "get_bracket_structure",
    "get_champion",
    "get_manual_ranks",
    "get_series_status",
    "get_standings",
    "get_third_place",
    "init_best_of_3",
    "init_round_robin",
    "is_bracket_complete",
    "outcome_from_games",
    "outcome_from_scores",
    "process_phase_byes",
    "recompute_standings",
    "record_series_result",
    "reopen_match",
    "set_manual_rank",
    "set_manual_ranks",
    "set_walkover",
    "submit_outcome",
]
