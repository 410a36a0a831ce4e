from flask import Blueprint, jsonify, request
from flask_login import login_required
from motm.services.voting import (
    create_game as svc_create_game,
    get_game as svc_get_game,
    get_results as svc_get_results,
    set_status as svc_set_status,
    submit_vote as svc_submit_vote,
)


games = Blueprint('games', __name__)


@games.route('', methods=['POST'])
@login_required
def create_game():
    data = request.get_json(silent=True) or {}
    game = svc_create_game(
        date=data.get('date'),
        opponents=data.get('opponents'),
        team_sheet=data.get('team_sheet') or [],
        team_name=data.get('team_name'),
        club_name=data.get('club_name'),
        moments=data.get('moments') or [],
    )
    return jsonify(game.to_dict()), 201


@games.route('/<int:game_id>', methods=['GET'])
def get_game(game_id):
    return jsonify(svc_get_game(game_id).to_dict())


@games.route('/<int:game_id>/status', methods=['POST'])
@login_required
def set_game_status(game_id):
    data = request.get_json(silent=True) or {}
    game = svc_set_status(game_id, data.get('status'))
    return jsonify(game.to_dict())


@games.route('/<int:game_id>/votes', methods=['POST'])
def submit_vote(game_id):
    data = request.get_json(silent=True) or {}
    voter = data.get('voter') if isinstance(data.get('voter'), dict) else {}
    vote = svc_submit_vote(
        game_id,
        voter_name=voter.get('name'),
        voter_token=voter.get('token'),
        mom=data.get('mom'),
        dod=data.get('dod'),
        moment=data.get('moment'),
    )
    return jsonify(vote.to_dict())


@games.route('/<int:game_id>/results', methods=['GET'])
def get_results(game_id):
    return jsonify(svc_get_results(game_id, request.args.get('token')))
