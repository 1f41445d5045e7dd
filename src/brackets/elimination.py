"""
Single elimination bracket generation for any participant count.

A bracket is built in two steps. First it is planned as a full power-of-two
tree of conceptual matches, each fed by two inputs:

- ('seed', s): the participant seeded s, absent when s > participant count
- ('winner', k): the winner of planned match k
- ('loser', k): the loser of planned match k

Then the plan is materialized. A planned match with two live inputs becomes a
real Match and its upstream matches get linked to it. A planned match with
fewer than two live inputs is dropped and its one live input (if any) is
handed to whoever consumes that match. That is how a bye puts its seed
straight into a round-2 slot, and how the losers bracket shrinks when early
winners-bracket matches never happen.
"""
import logging
import math
from typing import List, Dict, Tuple

from .errors import BrokenBracket
from .models import Match, Participant, WINNERS
from .seeding import calculate_bracket_size, generate_bracket_order

logger = logging.getLogger(__name__)


def get_round_name(participants_in_round: int) -> str:
    """Get the name of a round based on number of participants."""
    if participants_in_round == 2:
        return "Final"
    elif participants_in_round == 4:
        return "Semifinal"
    elif participants_in_round == 8:
        return "Quarterfinal"
    else:
        return f"Round of {participants_in_round}"


def plan_match(plan: List[Dict], side: str, round_num: int, feed_a, feed_b, is_reset: bool = False) -> int:
    """Append a planned match and return its index in ``plan``."""
    plan.append({
        'side': side,
        'round': round_num,
        'feeds': (feed_a, feed_b),
        'is_reset': is_reset,
    })
    return len(plan) - 1


def plan_winners_bracket(bracket_size: int) -> Tuple[List[Dict], List[List[int]]]:
    """
    Plan the winners bracket for a power-of-two ``bracket_size``.

    Returns (plan, rounds) where rounds[r] lists the plan indices of winners
    round r + 1 in bracket order. Round 1 uses the standard seeding order;
    every later match takes the winners of two consecutive matches, the
    first into slot A.
    """
    plan = []
    bracket_order = generate_bracket_order(bracket_size)

    first_round = []
    for i in range(0, len(bracket_order), 2):
        first_round.append(plan_match(plan, WINNERS, 1, ('seed', bracket_order[i]), ('seed', bracket_order[i + 1])))
    rounds = [first_round]

    round_num = 1
    while len(rounds[-1]) > 1:
        round_num += 1
        previous = rounds[-1]
        rounds.append([
            plan_match(plan, WINNERS, round_num, ('winner', previous[i]), ('winner', previous[i + 1]))
            for i in range(0, len(previous), 2)
        ])

    return plan, rounds


def _resolve_feed(feed, outcomes: List, participant_by_seed: Dict[int, Participant]):
    """Turn a planned input into a live input, or None when nobody will arrive."""
    if feed is None:
        return None
    kind, ref = feed
    if kind == 'seed':
        participant = participant_by_seed.get(ref)
        return ('participant', participant) if participant else None

    state, value = outcomes[ref]
    if state == 'match':
        return (kind, value)
    # Dropped matches pass their single input along as their winner and have no loser
    return value if kind == 'winner' else None


def materialize(plan: List[Dict], participants: List[Participant], bracket_id=None) -> List[Match]:
    """
    Build linked Match objects from a plan.

    Matches come back in plan order with ``id`` equal to their list position,
    rounds renumbered so each side starts at 1 with no gaps, and match
    numbers running 1..n within each (side, round).
    """
    participant_by_seed = {p.seed: p for p in participants}
    matches = []
    outcomes = []

    for node in plan:
        feeds = [_resolve_feed(feed, outcomes, participant_by_seed) for feed in node['feeds']]
        live = [feed for feed in feeds if feed is not None]
        if len(live) < 2:
            outcomes.append(('forward', live[0] if live else None))
            continue

        match = Match(len(matches), node['round'], 0, side=node['side'], bracket_id=bracket_id)
        match.is_reset = node['is_reset']
        for is_slot_a, (kind, value) in zip((True, False), feeds):
            if kind == 'participant':
                match.set_slot(is_slot_a, value.id)
            elif kind == 'winner':
                if value.winner_to is not None:
                    raise BrokenBracket(f"Winner of {value.code} already advances to match {value.winner_to}")
                value.winner_to = match.id
                value.winner_is_slot_a = is_slot_a
            elif kind == 'loser':
                if value.loser_to is not None:
                    raise BrokenBracket(f"Loser of {value.code} already drops to match {value.loser_to}")
                value.loser_to = match.id
                value.loser_is_slot_a = is_slot_a
        matches.append(match)
        outcomes.append(('match', match))

    _renumber(matches)
    return matches


def _renumber(matches: List[Match]):
    rounds_by_side = {}
    for match in matches:
        rounds_by_side.setdefault(match.side, set()).add(match.round)
    compact = {
        side: {round_num: index for index, round_num in enumerate(sorted(rounds), start=1)}
        for side, rounds in rounds_by_side.items()
    }

    counters = {}
    for match in matches:
        match.round = compact[match.side][match.round]
        key = (match.side, match.round)
        counters[key] = counters.get(key, 0) + 1
        match.match_number = counters[key]


def generate_single_elimination_bracket(participants: List[Participant], bracket_id=None) -> List[Match]:
    """
    Generate a fully linked single elimination bracket.

    Byes go to the top seeds and are not materialized: a bye recipient is
    placed directly into its round-2 slot, so N participants always give
    N - 1 matches.
    """
    bracket_size = calculate_bracket_size(len(participants))
    plan, _ = plan_winners_bracket(bracket_size)
    matches = materialize(plan, participants, bracket_id)
    logger.debug("Single elimination: %d participants, %d matches", len(participants), len(matches))
    return matches


def get_bye_seeds(participants: List[Participant], matches: List[Match]) -> List[int]:
    """Seeds whose first match is in winners round 2 or later."""
    first_round = set()
    for match in matches:
        if match.side == WINNERS and match.round == 1:
            first_round.update(match.slots)
    return sorted(p.seed for p in participants if p.id not in first_round)


def get_terminal_match(matches: List[Match]) -> Match:
    """The one match whose winner goes nowhere: the final, or the bracket reset."""
    terminal = [match for match in matches if match.winner_to is None]
    if len(terminal) != 1:
        raise BrokenBracket(f"Expected exactly one terminal match, found {len(terminal)}")
    return terminal[0]


def total_winners_rounds(num_participants: int) -> int:
    return int(math.log2(calculate_bracket_size(num_participants))) if num_participants >= 2 else 0
