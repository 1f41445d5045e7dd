"""
Seed pairing table and seeding helpers shared by every bracket generator.
"""
import math
import random
import uuid
from typing import List, Tuple, Optional

from .errors import InvalidInput
from .models import Participant


# First-round pairings for a 16-seed region, in bracket order (game 1..8).
FIRST_ROUND_PAIRINGS = (
    (1, 16),
    (8, 9),
    (5, 12),
    (4, 13),
    (6, 11),
    (3, 14),
    (7, 10),
    (2, 15),
)


def seeds_for_first_round_slot(slot_index: int) -> Tuple[int, int]:
    """Return (high_seed, low_seed) for first-round game ``slot_index`` (1-8)."""
    if not isinstance(slot_index, int) or not 1 <= slot_index <= len(FIRST_ROUND_PAIRINGS):
        raise InvalidInput(f"First round slot must be between 1 and {len(FIRST_ROUND_PAIRINGS)}, got {slot_index!r}")
    return FIRST_ROUND_PAIRINGS[slot_index - 1]


def calculate_bracket_size(num_participants: int) -> int:
    """Calculate the bracket size (next power of 2)."""
    if num_participants <= 0:
        return 0
    return 2 ** math.ceil(math.log2(num_participants))


def calculate_byes(num_participants: int) -> int:
    """Calculate number of byes needed."""
    return calculate_bracket_size(num_participants) - num_participants


def generate_bracket_order(bracket_size: int) -> List[int]:
    """
    Generate the standard tournament bracket order.
    This ensures that if all higher seeds win, they meet in the proper rounds.

    For 8 participants: [1, 8, 4, 5, 2, 7, 3, 6]
    This gives matchups: 1v8, 4v5, 2v7, 3v6
    Winners: 1v4 side, 2v3 side
    Final: 1v2 (if chalk)
    """
    if bracket_size < 2 or bracket_size & (bracket_size - 1):
        raise InvalidInput(f"Bracket size must be a power of 2 of at least 2, got {bracket_size}")
    if bracket_size == 2:
        return [1, 2]

    upper_half = generate_bracket_order(bracket_size // 2)

    # Pair each upper seed with its complement
    result = []
    for seed in upper_half:
        result.extend([seed, bracket_size + 1 - seed])

    return result


def assign_seeds(participant_refs: List) -> List[Participant]:
    """
    Create participants seeded in input order (first ref is seed 1).

    Raises InvalidInput for fewer than 2 refs or duplicate refs.
    """
    refs = list(participant_refs or [])
    if len(refs) < 2:
        raise InvalidInput(f"At least 2 participants required, got {len(refs)}")
    # refs are opaque and may be unhashable (dicts or lists from JSON)
    if any(ref in refs[:i] for i, ref in enumerate(refs)):
        raise InvalidInput("Participants must be unique")

    return [Participant(uuid.uuid4().hex, ref, seed) for seed, ref in enumerate(refs, start=1)]


def shuffle_participants(participant_refs: List, rng: Optional[random.Random] = None) -> List:
    """Return a shuffled copy of ``participant_refs`` for random seeding."""
    shuffled = list(participant_refs)
    (rng or random).shuffle(shuffled)
    return shuffled
