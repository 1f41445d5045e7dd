"""
Recording match results and moving participants along the links a generator laid down.
"""
import logging
from typing import List, Dict

from .errors import InvalidInput, BrokenBracket
from .models import Match, FINALS

logger = logging.getLogger(__name__)

PENDING = 'pending'
READY = 'ready'
RESOLVED = 'resolved'
SKIPPED = 'skipped'


def match_status(match: Match) -> str:
    """pending (a slot still empty) -> ready (both slots filled) -> resolved (winner set)."""
    if match.skipped:
        return SKIPPED
    if match.winner is not None:
        return RESOLVED
    if match.slot_a is not None and match.slot_b is not None:
        return READY
    return PENDING


def _index(matches: List[Match]) -> Dict:
    return {match.id: match for match in matches}


def _check_ready(match: Match, winner):
    status = match_status(match)
    if status != READY:
        raise InvalidInput(f"Match {match.code} is {status}, not ready for a result")
    if winner not in match.slots:
        raise InvalidInput(f"Winner must be a participant in match {match.code}")


def _open_slot(by_id: Dict, target_id, is_slot_a: bool, source: Match) -> Match:
    """The match ``target_id`` if its slot is still empty; BrokenBracket otherwise."""
    target = by_id.get(target_id)
    if target is None:
        raise BrokenBracket(f"Match {source.code} points at missing match {target_id}")
    current = target.slot_a if is_slot_a else target.slot_b
    if current is not None:
        raise BrokenBracket(f"Slot {'A' if is_slot_a else 'B'} of {target.code} is already filled")
    return target


def advance_winner(matches: List[Match], match_id, winner) -> Match:
    """
    Set the winner of a ready match and copy it into the downstream slot.

    Works for any linked graph, including fixed-bracket games after
    ``apply_links``. Returns the downstream match, or None for the terminal match.
    """
    by_id = _index(matches)
    match = by_id.get(match_id)
    if match is None:
        raise InvalidInput(f"Match not found: {match_id}")
    _check_ready(match, winner)

    target = None
    if match.winner_to is not None:
        target = _open_slot(by_id, match.winner_to, match.winner_is_slot_a, match)

    match.winner = winner
    if target is not None:
        target.set_slot(match.winner_is_slot_a, winner)
    return target


def _complete(bracket: Dict, participant_id):
    bracket['status'] = 'completed'
    bracket['champion'] = participant_id


def _eliminate(bracket: Dict, participant_id):
    for participant in bracket['participants']:
        if participant.id == participant_id:
            participant.eliminated = True
            return


def record_result(bracket: Dict, match_id, winner_id) -> Dict:
    """
    Record ``winner_id`` as the winner of ``match_id`` in a generated bracket.

    Winners go to their ``winner_to`` slot; in double elimination losers go
    to their ``loser_to`` slot and are eliminated only when they have none.
    For the Grand Final, a win by the winners bracket champion (slot A) ends
    the bracket and skips the reset; a win by the losers bracket champion
    sends both finalists to the reset.

    Returns dict with 'winner', 'loser', 'eliminated' and 'champion'.
    """
    matches = bracket['matches']
    by_id = _index(matches)
    match = by_id.get(match_id)
    if match is None:
        raise InvalidInput(f"Match not found: {match_id}")
    if bracket.get('status') == 'completed':
        raise InvalidInput("Bracket is already completed")
    _check_ready(match, winner_id)

    loser_id = match.slot_b if winner_id == match.slot_a else match.slot_a
    eliminated = None
    finished = match.winner_to is None
    grand_final_won = match.side == FINALS and not match.is_reset and winner_id == match.slot_a

    # All target slots are checked before anything is written
    moves = []
    if not grand_final_won:
        if match.winner_to is not None:
            target = _open_slot(by_id, match.winner_to, match.winner_is_slot_a, match)
            moves.append((target, match.winner_is_slot_a, winner_id))
        if match.loser_to is not None:
            target = _open_slot(by_id, match.loser_to, match.loser_is_slot_a, match)
            moves.append((target, match.loser_is_slot_a, loser_id))
        else:
            eliminated = loser_id

    match.winner = winner_id
    for target, is_slot_a, participant_id in moves:
        target.set_slot(is_slot_a, participant_id)

    if grand_final_won:
        # Winners bracket champion takes the Grand Final: no reset
        reset = by_id.get(match.winner_to)
        if reset is not None:
            reset.skipped = True
        eliminated = loser_id
        finished = True

    if eliminated is not None:
        _eliminate(bracket, eliminated)
    if finished:
        _complete(bracket, winner_id)

    logger.info("Match %s won by %s%s", match.code, winner_id,
                f", {eliminated} eliminated" if eliminated else "")
    return {
        'winner': winner_id,
        'loser': loser_id,
        'eliminated': eliminated,
        'champion': bracket.get('champion'),
    }


def get_playable_matches(bracket: Dict) -> List[Match]:
    """Matches waiting on a result, in generation order."""
    return [match for match in bracket['matches'] if match_status(match) == READY]
