"""
Flask JSON API for the draw core.

Every endpoint is stateless: inputs arrive in the request body and the
computed structure is returned. Brackets are sent back and forth whole, so
persistence stays with the caller.
"""
from flask import Flask, jsonify, request

from draw.advancement import record_result
from draw.elimination import build_bracket
from draw.errors import DrawError, InvalidInput
from draw.formats import default_round_formats
from draw.groups import build_team_units, distribute_groups
from draw.models import Bracket, Entrant, SeededEntrant, Standing
from draw.round_robin import round_robin_byes, schedule_round_robin
from draw.seeding import seed_from_standings

app = Flask(__name__)


@app.errorhandler(DrawError)
def handle_draw_error(error):
    app.logger.warning(f'{type(error).__name__}: {error}')
    return jsonify({'error': type(error).__name__, 'message': str(error)}), 400


def _payload():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidInput('Request body must be a JSON object')
    return data


def _require(data, key):
    if key not in data:
        raise InvalidInput(f'Missing field: {key}')
    return data[key]


def _entrant_from_json(item):
    if isinstance(item, dict):
        entrant_id = str(_require(item, 'id'))
        return Entrant(entrant_id, item.get('name', entrant_id), item.get('team'))
    return Entrant(str(item))


@app.route('/api/health', methods=['GET'])
def api_health():
    return jsonify({'status': 'ok'})


@app.route('/api/groups', methods=['POST'])
def api_groups():
    """Distribute entrants into groups. Team partners stay together."""
    data = _payload()
    entrants = [_entrant_from_json(item) for item in _require(data, 'entrants')]
    groups = distribute_groups(
        build_team_units(entrants),
        _require(data, 'group_count'),
        shuffle=bool(data.get('shuffle', False)),
        rng=data.get('seed'),
    )
    return jsonify({'groups': [{'id': g.id, 'entrants': g.entrant_ids} for g in groups]})


@app.route('/api/schedule', methods=['POST'])
def api_schedule():
    """Round-robin fixtures for one group."""
    data = _payload()
    entrant_ids = [str(e) for e in _require(data, 'entrants')]
    fixtures = schedule_round_robin(entrant_ids, data.get('boards') or [1], data.get('group'))
    byes = round_robin_byes(entrant_ids)
    return jsonify({
        'fixtures': [f.as_dict() for f in fixtures],
        'byes': [{'entrant': entrant, 'round': round_number} for entrant, round_number in byes.items()],
    })


def _standings_from_json(raw):
    if not isinstance(raw, dict):
        raise InvalidInput('standings must map group ids to ranked entrants')
    standings = {}
    for group_id, rows in raw.items():
        if not isinstance(rows, list):
            raise InvalidInput(f'standings for group {group_id} must be a list')
        group_standings = []
        for position, row in enumerate(rows, start=1):
            if isinstance(row, dict):
                group_standings.append(Standing(str(_require(row, 'entrant')), group_id, row.get('rank', position),
                                                row.get('wins', 0), row.get('losses', 0), row.get('leg_diff', 0)))
            else:
                group_standings.append(Standing(str(row), group_id, position))
        standings[str(group_id)] = group_standings
    return standings


@app.route('/api/seed', methods=['POST'])
def api_seed():
    """Seed advancing entrants from final group standings."""
    data = _payload()
    seeded = seed_from_standings(_standings_from_json(_require(data, 'standings')), _require(data, 'advance'))
    return jsonify({'seeded': [
        {'entrant': s.entrant_id, 'group': s.group_id, 'rank': s.rank, 'seed': s.seed} for s in seeded
    ]})


@app.route('/api/bracket', methods=['POST'])
def api_bracket():
    """Build a bracket from a seed-ordered list of entrants."""
    data = _payload()
    seeded = []
    for index, item in enumerate(_require(data, 'seeded'), start=1):
        if isinstance(item, dict):
            seeded.append(SeededEntrant(str(_require(item, 'entrant')), item.get('group'),
                                        item.get('rank'), index, name=item.get('name')))
        else:
            seeded.append(SeededEntrant(str(item), None, None, index))
    bracket = build_bracket(seeded)
    formats = default_round_formats(bracket)
    return jsonify({
        'bracket': bracket.as_dict(),
        'formats': [f.as_dict() for f in formats.values()],
    })


@app.route('/api/result', methods=['POST'])
def api_result():
    """Record a knockout result on the posted bracket and return it."""
    data = _payload()
    try:
        bracket = Bracket.from_dict(_require(data, 'bracket'))
    except (KeyError, TypeError) as e:
        raise InvalidInput(f'Malformed bracket: {e}')
    record_result(bracket, _require(data, 'round'), _require(data, 'match'),
                  _require(data, 'score1'), _require(data, 'score2'))
    app.logger.info(f"Recorded round {data['round']} match {data['match']}: {data['score1']}-{data['score2']}")
    return jsonify({'bracket': bracket.as_dict(), 'champion': bracket.champion})


if __name__ == '__main__':
    app.run(debug=True)
