"""
Utilities package for the ScoreSnap scorebook.

This package contains utility functions and constants used throughout the application.
"""
from .time_utils import fmt_medium_date, now, parse_date, parse_time, parse_datetime
from .ordering import move_offsets, renumber
from .constants import (
    APP_TITLE, DEFAULT_SPORT, MIN_SCORE, MAX_REASONABLE_SCORE, MAX_NAME_LENGTH,
    RECENT_GAMES_LIMIT, DEFAULT_PLAYER_COLOR, DEFAULT_TEAM_COLOR, TeamColor
)

__all__ = [
    "fmt_medium_date", "now", "parse_date", "parse_time", "parse_datetime",
    "move_offsets", "renumber", "APP_TITLE", "DEFAULT_SPORT", "MIN_SCORE",
    "MAX_REASONABLE_SCORE", "MAX_NAME_LENGTH", "RECENT_GAMES_LIMIT",
    "DEFAULT_PLAYER_COLOR", "DEFAULT_TEAM_COLOR", "TeamColor"
]
