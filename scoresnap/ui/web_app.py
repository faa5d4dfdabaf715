"""
Flask web API for the ScoreSnap scorebook application.

This module exposes the roster, game and selection operations as JSON
endpoints for a presentation layer. Every response carries a ``success`` flag.
"""
import base64
import binascii
import logging
import os
import tempfile
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from ..models import Player, Team
from ..services import (
    CommitError, DuplicateNameError, RecordNotFoundError, ServiceFactory,
    StoreLoadError, ValidationError, ObjectStore, all_passed, game_view,
    run_integration_checks,
)
from ..utils import APP_TITLE, TeamColor, parse_date, parse_time
from ..utils.constants import DATA_PATH_ENV, DEFAULT_DATA_FILE, DEFAULT_PREFERENCES_FILE

logger = logging.getLogger(__name__)


class WebAppState:
    """
    State holder for the web application.

    Owns one service factory, so every endpoint works against the same store.
    """

    def __init__(self, factory: Optional[ServiceFactory] = None):
        self.service_factory = factory or ServiceFactory()
        services = self.service_factory.create_complete_service_suite()
        self.store = services['store']
        self.roster_service = services['roster']
        self.game_service = services['games']
        self.app_context = services['context']


# ==================== JSON views ==================== #

def team_view(team: Team, include_games: bool = False) -> Dict[str, Any]:
    data = team.to_dict(include_games=False)
    data.update({
        "wins": team.wins,
        "losses": team.losses,
        "ties": team.ties,
        "record": team.record_display,
        "average_score": round(team.average_score, 1),
        "point_differential": team.point_differential,
        "game_count": len(team.games),
    })
    if include_games:
        data["games"] = [game_view(g) for g in team.games_array]
    return data


def player_view(player: Player) -> Dict[str, Any]:
    data = player.to_dict(include_teams=False)
    data["teams"] = [team_view(t) for t in player.teams_array]
    return data


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError(["Request body must be a JSON object"])
    return data


def _game_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """Pick the game fields out of a request body, parsing dates and times."""
    fields = {}
    for name in ("opponent_name", "team_score", "opponent_score", "location", "notes"):
        if name in data:
            fields[name] = data[name]
    try:
        if "game_date" in data:
            fields["game_date"] = parse_date(data["game_date"])
        if "game_time" in data:
            fields["game_time"] = parse_time(data["game_time"])
    except (TypeError, ValueError):
        raise ValidationError(["Invalid date or time format"])
    return fields


def _is_offset(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _move_args(data: Dict[str, Any]):
    source = data.get("from")
    destination = data.get("to")
    if (
        not isinstance(source, list)
        or not all(_is_offset(offset) for offset in source)
        or not _is_offset(destination)
    ):
        raise ValidationError(["Expected 'from' as a list of offsets and 'to' as an offset"])
    return source, destination


def create_app(state: Optional[WebAppState] = None, data_path: Optional[str] = None) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        state: Prepared application state (tests pass one backed by memory)
        data_path: JSON data file used when no state is given

    Returns:
        Configured Flask application instance
    """
    if state is None:
        preferences_path = None
        if data_path:
            preferences_path = os.path.join(os.path.dirname(os.path.abspath(data_path)), DEFAULT_PREFERENCES_FILE)
        state = WebAppState(ServiceFactory(data_path, preferences_path))

    app = Flask(__name__)
    app.config["APP_STATE"] = state

    roster = state.roster_service
    games = state.game_service
    context = state.app_context

    # ==================== Error handling ==================== #

    @app.errorhandler(RecordNotFoundError)
    def handle_not_found(e):
        return jsonify({"success": False, "error": str(e)}), 404

    @app.errorhandler(DuplicateNameError)
    def handle_duplicate(e):
        return jsonify({"success": False, "error": str(e), "errors": e.errors}), 409

    @app.errorhandler(ValidationError)
    def handle_validation(e):
        return jsonify({"success": False, "error": str(e), "errors": e.errors}), 400

    @app.errorhandler(IndexError)
    def handle_bad_offset(e):
        return jsonify({"success": False, "error": str(e)}), 400

    @app.errorhandler(CommitError)
    def handle_commit(e):
        logger.error("Request failed to commit: %s", e)
        return jsonify({"success": False, "error": str(e)}), 500

    @app.errorhandler(StoreLoadError)
    def handle_store_load(e):
        logger.error("Store could not be reloaded: %s", e)
        return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({"success": True, "app": APP_TITLE})

    @app.route("/api/colors", methods=["GET"])
    def get_colors():
        """List the color tags players and teams can use."""
        return jsonify({
            "success": True,
            "colors": [{"value": c.value, "display_name": c.display_name} for c in TeamColor],
        })

    # ==================== Players ==================== #

    @app.route("/api/players", methods=["GET"])
    def get_players():
        """Get all players in display order."""
        players = roster.players_array()
        return jsonify({
            "success": True,
            "players": [player_view(p) for p in players],
            "count": len(players),
        })

    @app.route("/api/players", methods=["POST"])
    def create_player():
        """Create a new player."""
        data = _json_body()
        player = roster.create_player(
            name=data.get("name"),
            player_color=data.get("player_color"),
            sport=data.get("sport"),
        )
        return jsonify({
            "success": True,
            "message": f"Player '{player.name}' created successfully",
            "player": player_view(player),
        }), 201

    @app.route("/api/players/order", methods=["POST"])
    def reorder_players():
        source, destination = _move_args(_json_body())
        players = roster.move_players(source, destination)
        return jsonify({"success": True, "players": [p.to_dict(include_teams=False) for p in players]})

    @app.route("/api/players/<player_id>", methods=["GET"])
    def get_player(player_id: str):
        """Get detailed information for a specific player."""
        return jsonify({"success": True, "player": player_view(roster.get_player(player_id))})

    @app.route("/api/players/<player_id>", methods=["PUT"])
    def update_player(player_id: str):
        """Update an existing player."""
        data = _json_body()
        player = roster.update_player(
            player_id,
            name=data.get("name"),
            player_color=data.get("player_color"),
            sport=data.get("sport"),
        )
        return jsonify({
            "success": True,
            "message": "Player updated successfully",
            "player": player_view(player),
        })

    @app.route("/api/players/<player_id>", methods=["DELETE"])
    def delete_player(player_id: str):
        """Delete a player with all of its teams and games."""
        player = roster.delete_player(player_id)
        context.handle_player_deletion(player)
        return jsonify({
            "success": True,
            "message": f"Player '{player.name}' deleted successfully",
        })

    # ==================== Teams ==================== #

    @app.route("/api/players/<player_id>/teams", methods=["POST"])
    def create_team(player_id: str):
        data = _json_body()
        team = roster.create_team(
            player_id,
            name=data.get("name"),
            team_color=data.get("team_color"),
            sport=data.get("sport"),
        )
        return jsonify({
            "success": True,
            "message": f"Team '{team.name}' created successfully",
            "team": team_view(team),
        }), 201

    @app.route("/api/players/<player_id>/teams/order", methods=["POST"])
    def reorder_teams(player_id: str):
        source, destination = _move_args(_json_body())
        teams = roster.move_teams(player_id, source, destination)
        return jsonify({"success": True, "teams": [team_view(t) for t in teams]})

    @app.route("/api/teams/<team_id>", methods=["GET"])
    def get_team(team_id: str):
        team = roster.get_team(team_id)
        return jsonify({
            "success": True,
            "team": team_view(team, include_games=True),
            "summary": games.team_summary(team_id),
        })

    @app.route("/api/teams/<team_id>", methods=["PUT"])
    def update_team(team_id: str):
        data = _json_body()
        team = roster.update_team(
            team_id,
            name=data.get("name"),
            team_color=data.get("team_color"),
            sport=data.get("sport"),
        )
        return jsonify({"success": True, "message": "Team updated successfully", "team": team_view(team)})

    @app.route("/api/teams/<team_id>", methods=["DELETE"])
    def delete_team(team_id: str):
        team = roster.delete_team(team_id)
        context.handle_team_deletion(team)
        return jsonify({"success": True, "message": f"Team '{team.name}' deleted successfully"})

    # ==================== Games ==================== #

    @app.route("/api/teams/<team_id>/games", methods=["POST"])
    def record_game(team_id: str):
        """Record a new game for a team."""
        fields = _game_fields(_json_body())
        game = games.record_game(
            team_id,
            opponent_name=fields.get("opponent_name"),
            team_score=fields.get("team_score"),
            opponent_score=fields.get("opponent_score"),
            game_date=fields.get("game_date"),
            game_time=fields.get("game_time"),
            location=fields.get("location"),
            notes=fields.get("notes"),
        )
        return jsonify({
            "success": True,
            "message": f"Game saved: {game.summary}",
            "game": game_view(game),
        }), 201

    @app.route("/api/games/<game_id>", methods=["GET"])
    def get_game(game_id: str):
        return jsonify({"success": True, "game": game_view(games.get_game(game_id))})

    @app.route("/api/games/<game_id>", methods=["PUT"])
    def update_game(game_id: str):
        game = games.update_game(game_id, **_game_fields(_json_body()))
        return jsonify({"success": True, "message": "Game updated successfully", "game": game_view(game)})

    @app.route("/api/games/<game_id>", methods=["DELETE"])
    def delete_game(game_id: str):
        game = games.delete_game(game_id)
        return jsonify({"success": True, "message": f"Game vs {game.opponent_name} deleted successfully"})

    @app.route("/api/games/<game_id>/team", methods=["POST"])
    def move_game(game_id: str):
        """Move a game to another team."""
        data = _json_body()
        if not data.get("team_id"):
            raise ValidationError(["team_id is required"])
        game = games.move_game(game_id, data["team_id"])
        return jsonify({"success": True, "game": game_view(game)})

    @app.route("/api/games/<game_id>/scoreboard", methods=["PUT"])
    def upload_scoreboard(game_id: str):
        """Store a scoreboard image, sent raw or as base64 in JSON."""
        if request.is_json:
            encoded = _json_body().get("image_base64")
            if not isinstance(encoded, str):
                raise ValidationError(["image_base64 must be a base64 string"])
            try:
                image_data = base64.b64decode(encoded, validate=True)
            except (binascii.Error, ValueError):
                raise ValidationError(["image_base64 is not valid base64"])
        else:
            image_data = request.get_data()
        game = games.attach_scoreboard(game_id, image_data)
        return jsonify({"success": True, "game": game_view(game)})

    @app.route("/api/games/<game_id>/scoreboard", methods=["DELETE"])
    def clear_scoreboard(game_id: str):
        game = games.clear_scoreboard(game_id)
        return jsonify({"success": True, "game": game_view(game)})

    # ==================== Selection ==================== #

    def _context_data() -> Dict[str, Any]:
        player = context.current_player
        team = context.current_team
        return {
            "success": True,
            "needs_setup": context.needs_setup,
            "setup_completed": context.setup_completed,
            "current_player": player.to_dict(include_teams=False) if player else None,
            "current_team": team_view(team) if team else None,
        }

    @app.route("/api/context", methods=["GET"])
    def get_context():
        return jsonify(_context_data())

    @app.route("/api/context/player", methods=["POST"])
    def switch_player():
        data = _json_body()
        context.switch_to_player(roster.get_player(data.get("player_id")))
        return jsonify(_context_data())

    @app.route("/api/context/team", methods=["POST"])
    def switch_team():
        data = _json_body()
        team = roster.get_team(data.get("team_id"))
        if not context.switch_to_team(team):
            return jsonify({"success": False, "error": "Team does not belong to the current player"}), 409
        return jsonify(_context_data())

    @app.route("/api/context/selection", methods=["POST"])
    def switch_player_and_team():
        """Select a player and one of its teams together."""
        data = _json_body()
        player = roster.get_player(data.get("player_id"))
        team = roster.get_team(data.get("team_id"))
        context.switch_to_player_and_team(player, team)
        return jsonify(_context_data())

    @app.route("/api/setup", methods=["POST"])
    def run_setup():
        """Create the first player and team and select them."""
        data = _json_body()
        player, team = roster.create_player_and_team(
            player_name=data.get("player_name"),
            team_name=data.get("team_name"),
            team_color=data.get("team_color"),
            sport=data.get("sport"),
        )
        context.complete_setup(player, team)
        return jsonify(_context_data()), 201

    # ==================== Diagnostics ==================== #

    @app.route("/api/diagnostics", methods=["POST"])
    def run_diagnostics():
        """Run the store integration checks against a scratch store."""
        with tempfile.TemporaryDirectory() as scratch_dir:
            scratch = ObjectStore(os.path.join(scratch_dir, "diagnostics.json"))
            results = run_integration_checks(scratch)
        return jsonify({"success": all_passed(results), "results": results})

    return app


def run_web_app(host: str = "127.0.0.1", port: int = 7122, data_path: Optional[str] = None) -> None:
    """
    Run the web application.

    Args:
        host: Host address to bind to (default: localhost only)
        port: Port number to listen on
        data_path: JSON data file; defaults to $SCORESNAP_DATA or scoresnap_data.json
    """
    data_path = data_path or os.environ.get(DATA_PATH_ENV) or DEFAULT_DATA_FILE
    logger.info("Serving %s API on %s:%d with data file %s", APP_TITLE, host, port, data_path)
    app = create_app(data_path=data_path)
    app.run(host=host, port=port, debug=False)
