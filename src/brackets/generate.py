"""
Entry point for user-created brackets of any size.
"""
import logging
from typing import List, Dict, Optional

from .errors import InvalidInput
from .models import WINNERS, LOSERS, FINALS
from .seeding import assign_seeds, calculate_bracket_size
from .elimination import (
    generate_single_elimination_bracket,
    get_bye_seeds,
    get_round_name,
    total_winners_rounds,
)
from .double_elimination import (
    generate_double_elimination_bracket,
    get_losers_round_name,
    get_winners_round_name,
)

logger = logging.getLogger(__name__)

SINGLE = 'single'
DOUBLE = 'double'
BRACKET_TYPES = (SINGLE, DOUBLE)


def generate_arbitrary_bracket(participant_refs: List, bracket_type: str, bracket_id=None) -> Dict:
    """
    Generate participants and a fully linked match graph.

    Seeds follow the order of ``participant_refs``; shuffle beforehand for a
    random draw. Returns a dict with:
    - 'bracket_id', 'bracket_type', 'status' ('active'), 'champion' (None)
    - 'participants': list of Participant
    - 'matches': list of Match, ``id`` == list position
    - 'bracket_size', 'byes', 'bye_seeds'
    - 'total_winners_rounds', 'total_losers_rounds'
    """
    if bracket_type not in BRACKET_TYPES:
        raise InvalidInput(f"Invalid bracket type: {bracket_type!r} (expected one of {', '.join(BRACKET_TYPES)})")

    participants = assign_seeds(participant_refs)

    if bracket_type == SINGLE:
        matches = generate_single_elimination_bracket(participants, bracket_id)
    else:
        matches = generate_double_elimination_bracket(participants, bracket_id)

    bye_seeds = get_bye_seeds(participants, matches)
    losers_rounds = {m.round for m in matches if m.side == LOSERS}

    logger.info("Generated %s elimination bracket %s: %d participants, %d matches, %d byes",
                bracket_type, bracket_id, len(participants), len(matches), len(bye_seeds))

    return {
        'bracket_id': bracket_id,
        'bracket_type': bracket_type,
        'status': 'active',
        'champion': None,
        'participants': participants,
        'matches': matches,
        'bracket_size': calculate_bracket_size(len(participants)),
        'byes': len(bye_seeds),
        'bye_seeds': bye_seeds,
        'total_winners_rounds': total_winners_rounds(len(participants)),
        'total_losers_rounds': len(losers_rounds),
    }


def get_match_round_name(bracket: Dict, match) -> str:
    """Display name for the round ``match`` belongs to."""
    if match.side == FINALS:
        return "Bracket Reset" if match.is_reset else "Grand Final"
    if match.side == LOSERS:
        return get_losers_round_name(match.round, bracket['total_losers_rounds'])
    participants_in_round = bracket['bracket_size'] // (2 ** (match.round - 1))
    if bracket['bracket_type'] == DOUBLE:
        return get_winners_round_name(participants_in_round)
    return get_round_name(participants_in_round)


def get_bracket_display(bracket: Dict) -> Dict:
    """
    Get bracket data grouped for display.

    Returns dict of side -> {round name -> [matches]} plus participant lookups.
    """
    sides = {WINNERS: {}, LOSERS: {}, FINALS: {}}
    for match in bracket['matches']:
        sides[match.side].setdefault(get_match_round_name(bracket, match), []).append(match)

    return {
        'winners_bracket': sides[WINNERS],
        'losers_bracket': sides[LOSERS],
        'finals': sides[FINALS],
        'participants_by_id': {p.id: p for p in bracket['participants']},
        'total_matches': len(bracket['matches']),
        'byes': bracket['byes'],
        'bye_seeds': bracket['bye_seeds'],
    }


def find_match(bracket: Dict, match_id) -> Optional[object]:
    for match in bracket['matches']:
        if match.id == match_id:
            return match
    return None
