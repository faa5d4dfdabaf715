"""
Models package for the ScoreSnap scorebook.

This package contains the Player, Team and Game models and their relationship helpers.
"""
from .game import Game
from .team import Team
from .player import Player

__all__ = ["Player", "Team", "Game"]
