"""
Double elimination bracket generation.

In double elimination:
- Participants must lose twice to be eliminated
- Winners Bracket: participants that haven't lost yet
- Losers Bracket: participants that have lost once
- Grand Final: Winners bracket champion (slot A) vs Losers bracket champion (slot B)
- Bracket Reset: if the losers bracket champion wins the Grand Final, a second
  final decides the champion. It is always generated and the result recorder
  skips it when it is not needed.
"""
import logging
import math
from typing import List, Dict, Tuple

from .models import Match, Participant, LOSERS, FINALS
from .elimination import plan_match, plan_winners_bracket, materialize
from .seeding import calculate_bracket_size

logger = logging.getLogger(__name__)


def get_losers_round_name(round_num: int, total_losers_rounds: int) -> str:
    """Get the name for a losers bracket round (1-indexed)."""
    rounds_from_end = total_losers_rounds - round_num
    if rounds_from_end == 0:
        return "Losers Final"
    elif rounds_from_end == 1:
        return "Losers Semifinal"
    else:
        return f"Losers Round {round_num}"


def get_winners_round_name(participants_in_round: int) -> str:
    """Get the name for a winners bracket round."""
    if participants_in_round == 2:
        return "Winners Final"
    elif participants_in_round == 4:
        return "Winners Semifinal"
    elif participants_in_round == 8:
        return "Winners Quarterfinal"
    else:
        return f"Winners Round of {participants_in_round}"


def calculate_losers_bracket_rounds(bracket_size: int) -> int:
    """
    Calculate number of planned rounds in losers bracket.
    For N participants in winners bracket (power of 2):
    - Winners bracket has log2(N) rounds
    - Losers bracket has 2 * (log2(N) - 1) rounds

    Byes can remove the first of these rounds entirely.
    """
    if bracket_size < 2:
        return 0
    winners_rounds = int(math.log2(bracket_size))
    return 2 * (winners_rounds - 1)


def plan_losers_bracket(plan: List[Dict], winners_rounds: List[List[int]]) -> Tuple[List[List[int]], tuple]:
    """
    Plan the losers bracket fed by ``winners_rounds``.

    Returns (losers_rounds, champion_feed). The pattern is:

    - L1: winners round 1 losers play each other in pairs
    - then for each later winners round W(r):
        - drop-in round: each W(r) loser (slot A) meets a losers bracket
          survivor (slot B). Drops are taken in reverse order instead of
          pairing the i-th drop with the i-th survivor, so a loser does not
          immediately meet someone from their own half
        - consolidation round: drop-in winners pair off, while more than one
          survivor remains

    For an 8-participant bracket:
    - L1: 4 W1 losers pair off -> 2 matches
    - L2: 2 W2 losers vs 2 L1 winners -> 2 matches
    - L3: 2 L2 winners pair off -> 1 match
    - L4: W3 (winners final) loser vs L3 winner -> 1 match, losers champion

    With only one winners round there is no losers bracket: the loser of the
    single winners match is the losers champion.
    """
    first_round = winners_rounds[0]
    if len(winners_rounds) == 1:
        return [], ('loser', first_round[0])

    round_num = 1
    survivors = [
        plan_match(plan, LOSERS, round_num, ('loser', first_round[i]), ('loser', first_round[i + 1]))
        for i in range(0, len(first_round), 2)
    ]
    losers_rounds = [survivors]

    for winners_round in winners_rounds[1:]:
        round_num += 1
        drops = list(reversed(winners_round))
        drop_in = [
            plan_match(plan, LOSERS, round_num, ('loser', drop), ('winner', survivor))
            for drop, survivor in zip(drops, survivors)
        ]
        losers_rounds.append(drop_in)
        survivors = drop_in

        if len(drop_in) > 1:
            round_num += 1
            survivors = [
                plan_match(plan, LOSERS, round_num, ('winner', drop_in[i]), ('winner', drop_in[i + 1]))
                for i in range(0, len(drop_in), 2)
            ]
            losers_rounds.append(survivors)

    return losers_rounds, ('winner', survivors[0])


def generate_double_elimination_bracket(participants: List[Participant], bracket_id=None) -> List[Match]:
    """
    Generate a fully linked double elimination bracket.

    Returns winners bracket matches, then losers bracket matches, then the
    Grand Final and the Bracket Reset. N participants give N - 1 winners
    matches, N - 2 losers matches and 2 finals.
    """
    bracket_size = calculate_bracket_size(len(participants))
    plan, winners_rounds = plan_winners_bracket(bracket_size)
    _, losers_champion = plan_losers_bracket(plan, winners_rounds)

    grand_final = plan_match(plan, FINALS, 1, ('winner', winners_rounds[-1][0]), losers_champion)
    plan_match(plan, FINALS, 2, ('winner', grand_final), ('loser', grand_final), is_reset=True)

    matches = materialize(plan, participants, bracket_id)
    logger.debug("Double elimination: %d participants, %d matches", len(participants), len(matches))
    return matches
