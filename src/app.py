"""
Flask web application for bracket generation.
"""
import os
import logging
from flask import Flask, request, jsonify, abort
from brackets.errors import InvalidInput, BrokenBracket
from brackets.models import Region
from brackets.seeding import seeds_for_first_round_slot, shuffle_participants
from brackets.fixed import generate_fixed_bracket, build_fixed_links
from brackets.generate import generate_arbitrary_bracket
from brackets.results import record_result, match_status
from brackets.storage import save_bracket, load_bracket, update_bracket, list_brackets, bracket_to_dict

app = Flask(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('BRACKET_DATA_DIR', os.path.join(BASE_DIR, 'data'))
LOG_LEVEL = os.environ.get('BRACKET_LOG_LEVEL', 'INFO').upper()

app.config['DATA_DIR'] = DATA_DIR
app.json.sort_keys = False
app.logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

MAX_PARTICIPANTS = 256


def _data_dir() -> str:
    return app.config['DATA_DIR']


def _bracket_response(bracket: dict) -> dict:
    """Serialize a bracket with each match's current status."""
    data = bracket_to_dict(bracket)
    for match_data, match in zip(data['matches'], bracket['matches']):
        match_data['status'] = match_status(match)
    return data


@app.errorhandler(InvalidInput)
def handle_invalid_input(e):
    app.logger.warning(f'Rejected request to {request.path}: {e}')
    return jsonify({'error': str(e)}), 400


@app.errorhandler(BrokenBracket)
def handle_broken_bracket(e):
    app.logger.error(f'Bracket generation failed for {request.path}: {e}')
    return jsonify({'error': 'Could not create bracket'}), 500


@app.route('/api/seeds/<int:slot>', methods=['GET'])
def api_seeds(slot):
    """Seeds playing in first-round game ``slot`` of a 16-seed region."""
    high_seed, low_seed = seeds_for_first_round_slot(slot)
    return jsonify({'slot': slot, 'seeds': [high_seed, low_seed]})


@app.route('/api/tournaments/<tournament_id>/games', methods=['POST'])
def api_generate_tournament_games(tournament_id):
    """Generate the 63 games and their links for a four-region tournament."""
    data = request.get_json(silent=True) or {}
    region_data = data.get('regions')
    if not isinstance(region_data, list):
        raise InvalidInput('Missing regions')

    try:
        regions = [Region(r['id'], int(r['position']), name=r.get('name')) for r in region_data]
    except (KeyError, TypeError, ValueError):
        raise InvalidInput('Each region needs an id and a numeric position')

    games = generate_fixed_bracket(tournament_id, regions)
    links = build_fixed_links(games, regions)

    app.logger.info(f'Generated {len(games)} games for tournament {tournament_id}')
    return jsonify({
        'games': [game.to_dict() for game in games],
        'links': links,
    })


@app.route('/api/brackets', methods=['GET'])
def api_list_brackets():
    return jsonify({'brackets': list_brackets(_data_dir())})


@app.route('/api/brackets', methods=['POST'])
def api_create_bracket():
    """Create a single or double elimination bracket."""
    data = request.get_json(silent=True) or {}
    name = (data.get('name') or '').strip()
    bracket_type = data.get('bracket_type')
    participants = data.get('participants')

    if not name or not bracket_type or participants is None:
        raise InvalidInput('Missing required fields')
    if not isinstance(participants, list):
        raise InvalidInput('Participants must be a list')
    if len(participants) > MAX_PARTICIPANTS:
        raise InvalidInput(f'At most {MAX_PARTICIPANTS} participants allowed')

    if data.get('randomize'):
        participants = shuffle_participants(participants)

    bracket = generate_arbitrary_bracket(participants, bracket_type)
    bracket['name'] = name
    bracket_id = save_bracket(_data_dir(), bracket)

    app.logger.info(f'Created {bracket_type} bracket {bracket_id} "{name}" with {len(participants)} participants')
    return jsonify({'id': bracket_id, 'bracket': _bracket_response(bracket)}), 201


@app.route('/api/brackets/<bracket_id>', methods=['GET'])
def api_get_bracket(bracket_id):
    bracket = load_bracket(_data_dir(), bracket_id)
    if bracket is None:
        abort(404)
    return jsonify(_bracket_response(bracket))


@app.route('/api/brackets/<bracket_id>/advance', methods=['POST'])
def api_advance(bracket_id):
    """Record a match winner and advance participants."""
    data = request.get_json(silent=True) or {}
    match_id = data.get('match_id')
    winner_id = data.get('winner_id')
    if match_id is None or not winner_id:
        raise InvalidInput('Missing match_id or winner_id')

    updated = update_bracket(_data_dir(), bracket_id,
                             lambda bracket: record_result(bracket, match_id, winner_id))
    if updated is None:
        abort(404)
    bracket, result = updated

    return jsonify({'success': True, **result, 'status': bracket['status']})


@app.errorhandler(404)
def handle_not_found(e):
    return jsonify({'error': 'Not found'}), 404


if __name__ == '__main__':
    app.run(debug=os.environ.get('FLASK_DEBUG') == '1')
