"""
Constants for the ScoreSnap scorebook application.

This module contains configuration constants used throughout the application.
"""
from enum import Enum

# Application metadata
APP_TITLE = "ScoreSnap"

# Sport defaults
DEFAULT_SPORT = "Basketball"
MIN_SCORE = 0
MAX_REASONABLE_SCORE = 200

# Name limits shared by players, teams and opponents
MAX_NAME_LENGTH = 50

# Number of games shown in a team's recent form
RECENT_GAMES_LIMIT = 5

# Labels for derived game results
RESULT_WIN = "Win"
RESULT_LOSS = "Loss"
RESULT_TIE = "Tie"
NO_DATE_TEXT = "No date"


class TeamColor(Enum):
    """Color tags a player or team can be labelled with."""
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    ORANGE = "orange"
    PURPLE = "purple"
    PINK = "pink"
    TEAL = "teal"
    INDIGO = "indigo"
    YELLOW = "yellow"
    GRAY = "gray"
    BROWN = "brown"
    BLACK = "black"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def is_valid(cls, value: str) -> bool:
        return value in {c.value for c in cls}


DEFAULT_PLAYER_COLOR = TeamColor.BLUE.value
DEFAULT_TEAM_COLOR = TeamColor.BLUE.value

# Durable storage
STORE_VERSION = 1
DEFAULT_DATA_FILE = "scoresnap_data.json"
DEFAULT_PREFERENCES_FILE = "scoresnap_preferences.json"
DATA_PATH_ENV = "SCORESNAP_DATA"

# Preference keys
LAST_VIEWED_PLAYER_KEY = "last_viewed_player_id"
LAST_VIEWED_TEAM_KEY = "last_viewed_team_id"
HAS_COMPLETED_SETUP_KEY = "has_completed_setup"
