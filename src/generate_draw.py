#!/usr/bin/env python3
"""
Command line host for the draw core.

Usage:
    python src/generate_draw.py groups data/entrants.yaml --boards data/boards.csv
    python src/generate_draw.py bracket data/standings.yaml --advance 2 --output data/bracket.yaml
    python src/generate_draw.py result data/bracket.yaml 1 2 3 1

Exit codes:
    0: Success
    1: The draw rejected the input
"""
import argparse
import logging
import os
import sys

import yaml
from filelock import FileLock

from draw.advancement import record_result
from draw.errors import DrawError, InvalidInput
from draw.formats import default_round_formats, update_round_format
from draw.groups import build_team_units, distribute_groups
from draw.models import Bracket
from draw.round_robin import allocate_boards, generate_group_stage, round_robin_byes
from draw.seeding import seed_from_standings, seed_label
from draw.elimination import build_bracket
from settings import DATA_DIR, load_boards, load_entrants, load_settings, load_standings


def save_bracket(bracket, path):
    with open(path, 'w', encoding='utf-8') as f:
        yaml.dump(bracket.as_dict(), f, default_flow_style=False, sort_keys=False)


def load_bracket(path):
    with open(path, 'r', encoding='utf-8') as f:
        return Bracket.from_dict(yaml.safe_load(f))


def _slot_text(slot, group_count):
    if slot.is_bye:
        return 'BYE'
    if slot.entrant_id is None:
        return 'TBD'
    if slot.rank is not None:
        return f"{slot.entrant_id} ({slot.group_id}{slot.rank})" if group_count > 1 else f"{slot.entrant_id} (#{slot.rank})"
    return slot.entrant_id


def parse_legs(value):
    """Parse a ``ROUND=LEGS`` override."""
    round_text, _, legs_text = value.partition('=')
    try:
        return int(round_text), int(legs_text)
    except ValueError:
        raise InvalidInput(f"Expected ROUND=LEGS, got {value!r}")


def round_formats(bracket, settings, legs_overrides=None):
    formats = default_round_formats(bracket, settings['round_formats'])
    for override in legs_overrides or []:
        round_number, legs = parse_legs(override)
        formats = update_round_format(formats, round_number, legs)
    return formats


def cmd_groups(args, settings):
    entrants = load_entrants(args.entrants)
    names = {entrant.id: entrant.name for entrant in entrants}
    group_count = args.groups or settings['group_count']
    shuffle = args.shuffle or settings['shuffle_groups']
    groups = distribute_groups(build_team_units(entrants), group_count,
                               shuffle=shuffle, rng=settings['shuffle_seed'])

    boards = load_boards(args.boards) if args.boards else list(range(1, len(groups) + 1))
    schedule = generate_group_stage(groups, allocate_boards(boards, len(groups)))

    first_group = True
    for group in groups:
        if not first_group:
            print()
        print(f"# Group {group.id}")
        byes = {round_number: entrant for entrant, round_number in round_robin_byes(group.entrant_ids).items()}
        current_round = None
        for fixture in schedule[group.id]:
            if fixture.round != current_round:
                current_round = fixture.round
                if current_round in byes:
                    print(f"Round {current_round}, BYE: {names.get(byes[current_round], byes[current_round])}")
            print(f"Round {fixture.round}, Board {fixture.board}: "
                  f"{names.get(fixture.entrant_a, fixture.entrant_a)} vs {names.get(fixture.entrant_b, fixture.entrant_b)}")
        first_group = False
    return 0


def cmd_bracket(args, settings):
    standings = load_standings(args.standings)
    advance = args.advance or settings['advance_per_group']
    seeded = seed_from_standings(standings, advance)
    bracket = build_bracket(seeded)

    print(f"# Seeds ({len(seeded)} entrants, bracket of {bracket.bracket_size}, {bracket.byes} byes)")
    for entry in seeded:
        print(f"{entry.seed}. {entry.entrant_id} ({seed_label(entry, len(standings))})")
    print()
    formats = round_formats(bracket, settings, args.legs)
    for round_number, matches in bracket.rounds().items():
        print(f"# {matches[0].label} ({formats[round_number].description})")
        for match in matches:
            line = (f"M{match.match_number}: {_slot_text(match.upper, len(standings))} vs "
                    f"{_slot_text(match.lower, len(standings))}")
            if match.is_bye:
                line += f" -> {match.winner} advances"
            print(line)

    if args.output:
        save_bracket(bracket, args.output)
        print(f"\nBracket written to {args.output}")
    return 0


def cmd_result(args, settings):
    lock = FileLock(args.bracket + '.lock', timeout=10)
    with lock:
        bracket = load_bracket(args.bracket)
        formats = round_formats(bracket, settings, args.legs) if args.strict or args.legs else None
        record_result(bracket, args.round, args.match, args.score1, args.score2, formats=formats)
        save_bracket(bracket, args.bracket)

    match = bracket.get(args.round, args.match)
    print(f"{match.label} M{match.match_number}: {match.winner} wins {max(match.scores)}-{min(match.scores)}")
    if bracket.champion is not None:
        print(f"Champion: {bracket.champion}")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(description="Group stage and knockout draw generator")
    parser.add_argument('--settings', default=os.path.join(DATA_DIR, 'settings.yaml'),
                        help='Settings YAML file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log every fixture and bye')
    subparsers = parser.add_subparsers(dest='command', required=True)

    groups = subparsers.add_parser('groups', help='Distribute entrants and schedule group play')
    groups.add_argument('entrants', help='Entrants YAML file in seed order')
    groups.add_argument('--boards', help='Boards CSV file with a board_number column')
    groups.add_argument('--groups', type=int, help='Number of groups (overrides settings)')
    groups.add_argument('--shuffle', action='store_true', help='Shuffle entrants before splitting')
    groups.set_defaults(func=cmd_groups)

    bracket = subparsers.add_parser('bracket', help='Seed and build the knockout bracket')
    bracket.add_argument('standings', help='Final group standings YAML file')
    bracket.add_argument('--advance', type=int, help='Entrants advancing per group (overrides settings)')
    bracket.add_argument('--output', help='Write the bracket to this YAML file')
    bracket.add_argument('--legs', action='append', metavar='ROUND=LEGS',
                         help='Legs to win in a round, e.g. 2=4 (repeatable)')
    bracket.set_defaults(func=cmd_bracket)

    result = subparsers.add_parser('result', help='Record a knockout result in a bracket file')
    result.add_argument('bracket', help='Bracket YAML file written by the bracket command')
    result.add_argument('round', type=int)
    result.add_argument('match', type=int)
    result.add_argument('score1', type=int)
    result.add_argument('score2', type=int)
    result.add_argument('--strict', action='store_true', help='Require scores to match the round format')
    result.add_argument('--legs', action='append', metavar='ROUND=LEGS',
                        help='Legs to win in a round; implies --strict')
    result.set_defaults(func=cmd_result)
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')
    settings = load_settings(args.settings)
    try:
        return args.func(args, settings)
    except DrawError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
