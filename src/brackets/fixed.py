"""
Fixed 64-team bracket: four regions of 16 seeds, six rounds, 63 games.

Games are generated unlinked, then ``build_fixed_links`` computes where each
winner goes. Callers that persist games and get new ids back can re-run the
linker over the stored games as long as round, region and game number are kept.
"""
import logging
from typing import List, Dict, Optional

from .errors import InvalidInput, BrokenBracket
from .models import Match, Region
from .seeding import FIRST_ROUND_PAIRINGS, seeds_for_first_round_slot

logger = logging.getLogger(__name__)

REGION_COUNT = 4
TEAMS_PER_REGION = 16

# (round, games per region) for the rounds played inside a region
REGIONAL_ROUNDS = ((1, 8), (2, 4), (3, 2), (4, 1))
FINAL_FOUR_ROUND = 5
CHAMPIONSHIP_ROUND = 6

ROUND_NAMES = {
    1: "Round of 64",
    2: "Round of 32",
    3: "Sweet 16",
    4: "Elite 8",
    5: "Final Four",
    6: "Championship",
}


def get_fixed_round_name(round_num: int) -> str:
    return ROUND_NAMES.get(round_num, f"Round {round_num}")


def sort_regions(regions: List[Region]) -> List[Region]:
    """Validate the region list and return it sorted by position."""
    regions = list(regions or [])
    if len(regions) != REGION_COUNT:
        raise InvalidInput(f"Exactly {REGION_COUNT} regions required, got {len(regions)}")

    positions = sorted(region.position for region in regions)
    if positions != list(range(1, REGION_COUNT + 1)):
        raise InvalidInput(f"Region positions must be 1-{REGION_COUNT} with no repeats, got {positions}")

    if len({region.id for region in regions}) != REGION_COUNT:
        raise InvalidInput("Region ids must be unique")

    return sorted(regions, key=lambda region: region.position)


def generate_fixed_bracket(tournament_id, regions: List[Region]) -> List[Match]:
    """
    Generate all 63 games for a four-region tournament.

    Games come back ordered by (round, region position, game number) and
    carry their list position as ``id``. No links are set.
    """
    sorted_regions = sort_regions(regions)
    games = []

    def add_game(round_num, game_number, region=None):
        game = Match(len(games), round_num, game_number,
                     region_id=region.id if region else None, tournament_id=tournament_id)
        if region:
            game.region_position = region.position
        games.append(game)

    for round_num, games_per_region in REGIONAL_ROUNDS:
        for region in sorted_regions:
            for game_number in range(1, games_per_region + 1):
                add_game(round_num, game_number, region)

    # Final Four: regions 1/2 meet in game 1, regions 3/4 in game 2
    add_game(FINAL_FOUR_ROUND, 1)
    add_game(FINAL_FOUR_ROUND, 2)

    add_game(CHAMPIONSHIP_ROUND, 1)

    logger.debug("Generated %d games for tournament %s", len(games), tournament_id)
    return games


def build_fixed_links(games: List[Match], regions: List[Region]) -> List[Dict]:
    """
    Compute where every game's winner goes.

    Returns one ``{'match_id', 'next_match_id', 'is_slot_a'}`` dict per game
    except the championship. Raises BrokenBracket if an expected game is
    missing; nothing is returned in that case.
    """
    sorted_regions = sort_regions(regions)
    by_key = {(game.round, game.region_id, game.match_number): game for game in games}

    def find_game(round_num, region_id, game_number):
        game = by_key.get((round_num, region_id, game_number))
        if game is None:
            raise BrokenBracket(f"Missing game: round {round_num}, region {region_id}, game {game_number}")
        return game

    links = []

    def link(game, next_game, is_slot_a):
        links.append({'match_id': game.id, 'next_match_id': next_game.id, 'is_slot_a': is_slot_a})

    # Inside each region, games 1,2 -> next round game 1; games 3,4 -> game 2; etc.
    for round_num, games_per_region in REGIONAL_ROUNDS[:-1]:
        for region in sorted_regions:
            for game_number in range(1, games_per_region + 1):
                next_game = find_game(round_num + 1, region.id, (game_number + 1) // 2)
                link(find_game(round_num, region.id, game_number), next_game, game_number % 2 == 1)

    # Elite 8 -> Final Four game ceil(position / 2); odd positions take slot A
    for region in sorted_regions:
        semifinal = find_game(FINAL_FOUR_ROUND, None, (region.position + 1) // 2)
        link(find_game(REGIONAL_ROUNDS[-1][0], region.id, 1), semifinal, region.position % 2 == 1)

    championship = find_game(CHAMPIONSHIP_ROUND, None, 1)
    link(find_game(FINAL_FOUR_ROUND, None, 1), championship, True)
    link(find_game(FINAL_FOUR_ROUND, None, 2), championship, False)

    return links


def apply_links(games: List[Match], links: List[Dict]) -> List[Match]:
    """Write ``links`` onto the matching games in place."""
    by_id = {game.id: game for game in games}
    for entry in links:
        game = by_id.get(entry['match_id'])
        if game is None or entry['next_match_id'] not in by_id:
            raise BrokenBracket(f"Link references an unknown game: {entry}")
        if game.winner_to is not None:
            raise BrokenBracket(f"Game {game.code} is already linked")
        game.winner_to = entry['next_match_id']
        game.winner_is_slot_a = entry['is_slot_a']
    return games


def populate_first_round(games: List[Match], regions: List[Region],
                         teams_by_region: Dict[object, Dict[int, object]]) -> List[Match]:
    """
    Place each region's seeded teams into its round-1 games.

    ``teams_by_region`` maps region id -> {seed: team}. Regions that are
    missing, or seeds without a team, leave the slot empty.
    """
    sorted_regions = sort_regions(regions)
    first_round = {(game.region_id, game.match_number): game for game in games if game.round == 1}

    for region in sorted_regions:
        teams = teams_by_region.get(region.id) or {}
        for seed in teams:
            if not 1 <= seed <= TEAMS_PER_REGION:
                raise InvalidInput(f"Seed {seed} in region {region.name} is outside 1-{TEAMS_PER_REGION}")

        for game_number in range(1, len(FIRST_ROUND_PAIRINGS) + 1):
            game = first_round.get((region.id, game_number))
            if game is None:
                raise BrokenBracket(f"Missing game: round 1, region {region.id}, game {game_number}")
            high_seed, low_seed = seeds_for_first_round_slot(game_number)
            game.slot_a = teams.get(high_seed)
            game.slot_b = teams.get(low_seed)

    return games


def get_fixed_bracket_display(games: List[Match], regions: Optional[List[Region]] = None) -> Dict:
    """Group games by round name for display."""
    rounds = {}
    for game in sorted(games, key=lambda g: (g.round, g.region_position or 0, g.match_number)):
        rounds.setdefault(get_fixed_round_name(game.round), []).append(game)
    return {
        'rounds': rounds,
        'total_games': len(games),
        'regions': sort_regions(regions) if regions is not None else None,
    }
