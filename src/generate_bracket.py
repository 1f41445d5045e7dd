"""
Print a bracket generated from a YAML list of participants.

    python src/generate_bracket.py data/participants.yaml --type double
    python src/generate_bracket.py --regions data/regions.yaml
"""
import argparse
import logging
import os
import sys
import yaml
from brackets.errors import BracketError
from brackets.models import Region
from brackets.seeding import shuffle_participants
from brackets.fixed import generate_fixed_bracket, build_fixed_links, apply_links, get_fixed_bracket_display
from brackets.generate import generate_arbitrary_bracket, get_bracket_display, BRACKET_TYPES
from brackets.storage import bracket_to_dict


def load_participants(file_path):
    """Load participants from a YAML list (or a mapping with a 'participants' list)."""
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file)
    if isinstance(data, dict):
        data = data.get('participants')
    if not isinstance(data, list):
        raise ValueError(f"{file_path} must contain a list of participants")
    return [str(name) for name in data]


def load_regions(file_path):
    """Load regions from a YAML list of {id, position, name} entries."""
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file) or []
    return [Region(r['id'], int(r['position']), name=r.get('name')) for r in data]


def _describe_slot(value, names):
    return names.get(value, value) if value is not None else 'TBD'


def print_bracket(bracket):
    display = get_bracket_display(bracket)
    names = {pid: p.ref for pid, p in display['participants_by_id'].items()}

    first = True
    for side in ('winners_bracket', 'losers_bracket', 'finals'):
        for round_name, matches in display[side].items():
            if not first:
                print()
            print(f"# {round_name}")
            for match in matches:
                line = f"{match.code}: {_describe_slot(match.slot_a, names)} vs {_describe_slot(match.slot_b, names)}"
                if match.is_reset:
                    line += " (only if needed)"
                print(line)
            first = False

    if display['bye_seeds']:
        by_seed = {p.seed: p.ref for p in bracket['participants']}
        print()
        print("# Byes")
        for seed in display['bye_seeds']:
            print(f"({seed}) {by_seed[seed]}")


def print_fixed_bracket(games, regions):
    display = get_fixed_bracket_display(games, regions)
    region_names = {region.id: region.name for region in display['regions']}

    first = True
    for round_name, round_games in display['rounds'].items():
        if not first:
            print()
        print(f"# {round_name}")
        for game in round_games:
            where = region_names.get(game.region_id, 'National')
            print(f"{game.code} ({where}) -> {'championship winner' if game.winner_to is None else f'game {game.winner_to}'}")
        first = False


def main(argv=None):
    parser = argparse.ArgumentParser(description='Generate a tournament bracket.')
    parser.add_argument('participants', nargs='?', help='YAML file with the participant list (seed order)')
    parser.add_argument('--type', dest='bracket_type', choices=BRACKET_TYPES, default='single')
    parser.add_argument('--shuffle', action='store_true', help='Randomize seeds before generating')
    parser.add_argument('--output', help='Write the generated bracket to this YAML file')
    parser.add_argument('--regions', help='YAML file with four regions; prints the 63-game tournament instead')
    parser.add_argument('--tournament-id', default='tournament')
    parser.add_argument('--verbose', action='store_true')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    try:
        if args.regions:
            regions = load_regions(args.regions)
            games = generate_fixed_bracket(args.tournament_id, regions)
            apply_links(games, build_fixed_links(games, regions))
            print_fixed_bracket(games, regions)
            return 0

        if not args.participants:
            parser.error('a participants file is required unless --regions is given')

        participants = load_participants(args.participants)
        if args.shuffle:
            participants = shuffle_participants(participants)

        bracket = generate_arbitrary_bracket(participants, args.bracket_type,
                                             bracket_id=os.path.splitext(os.path.basename(args.participants))[0])
    except (BracketError, ValueError, KeyError) as e:
        print(f"Could not create bracket: {e}", file=sys.stderr)
        return 1

    print_bracket(bracket)

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            yaml.safe_dump(bracket_to_dict(bracket), f, default_flow_style=False, sort_keys=False)

    return 0


if __name__ == '__main__':
    sys.exit(main())
