"""
Tests for generate_arbitrary_bracket and bracket display helpers.
"""
import pytest

from brackets.errors import InvalidInput
from brackets.models import LOSERS
from brackets.generate import (
    generate_arbitrary_bracket,
    get_bracket_display,
    get_match_round_name,
    find_match,
)
from conftest import topology


class TestGenerateArbitraryBracket:
    """Tests for generate_arbitrary_bracket."""

    def test_single_result(self, names):
        bracket = generate_arbitrary_bracket(names(6), 'single', bracket_id='b1')
        assert bracket['bracket_id'] == 'b1'
        assert bracket['bracket_type'] == 'single'
        assert bracket['status'] == 'active'
        assert bracket['champion'] is None
        assert len(bracket['participants']) == 6
        assert len(bracket['matches']) == 5
        assert bracket['bracket_size'] == 8
        assert bracket['byes'] == 2
        assert bracket['bye_seeds'] == [1, 2]
        assert bracket['total_winners_rounds'] == 3
        assert bracket['total_losers_rounds'] == 0

    def test_double_result(self, names):
        bracket = generate_arbitrary_bracket(names(8), 'double')
        assert len(bracket['matches']) == 15
        assert bracket['byes'] == 0
        assert bracket['total_winners_rounds'] == 3
        assert bracket['total_losers_rounds'] == 4

    def test_byes_can_remove_a_losers_round(self, names):
        bracket = generate_arbitrary_bracket(names(5), 'double')
        assert bracket['total_losers_rounds'] == 3
        assert max(m.round for m in bracket['matches'] if m.side == LOSERS) == 3

    def test_participants_seeded_in_order(self, names):
        bracket = generate_arbitrary_bracket(['Zed', 'Amy', 'Kim'], 'single')
        assert [(p.ref, p.seed) for p in bracket['participants']] == [('Zed', 1), ('Amy', 2), ('Kim', 3)]

    def test_bracket_id_on_every_match(self, names):
        bracket = generate_arbitrary_bracket(names(7), 'double', bracket_id='abc')
        assert all(m.bracket_id == 'abc' for m in bracket['matches'])

    @pytest.mark.parametrize("bracket_type", ['triple', '', None, 'Single'])
    def test_invalid_type(self, names, bracket_type):
        with pytest.raises(InvalidInput, match="Invalid bracket type"):
            generate_arbitrary_bracket(names(4), bracket_type)

    @pytest.mark.parametrize("refs", [[], ['Only']])
    def test_too_few_participants(self, refs):
        with pytest.raises(InvalidInput):
            generate_arbitrary_bracket(refs, 'double')

    @pytest.mark.parametrize("bracket_type", ['single', 'double'])
    @pytest.mark.parametrize("count", [2, 3, 7, 12, 17])
    def test_same_input_same_topology(self, names, bracket_type, count):
        first = generate_arbitrary_bracket(names(count), bracket_type)
        second = generate_arbitrary_bracket(names(count), bracket_type)
        assert topology(first) == topology(second)


class TestBracketDisplay:
    """Tests for get_bracket_display and round naming."""

    def test_single_round_names(self, names):
        display = get_bracket_display(generate_arbitrary_bracket(names(8), 'single'))
        assert list(display['winners_bracket']) == ["Quarterfinal", "Semifinal", "Final"]
        assert display['losers_bracket'] == {}
        assert display['finals'] == {}
        assert display['total_matches'] == 7

    def test_large_single_round_names(self, names):
        display = get_bracket_display(generate_arbitrary_bracket(names(16), 'single'))
        assert list(display['winners_bracket'])[0] == "Round of 16"

    def test_double_round_names(self, names):
        display = get_bracket_display(generate_arbitrary_bracket(names(8), 'double'))
        assert list(display['winners_bracket']) == [
            "Winners Quarterfinal", "Winners Semifinal", "Winners Final",
        ]
        assert list(display['losers_bracket']) == [
            "Losers Round 1", "Losers Round 2", "Losers Semifinal", "Losers Final",
        ]
        assert list(display['finals']) == ["Grand Final", "Bracket Reset"]

    def test_participants_by_id(self, names):
        bracket = generate_arbitrary_bracket(names(5), 'single')
        display = get_bracket_display(bracket)
        assert set(display['participants_by_id']) == {p.id for p in bracket['participants']}
        assert display['byes'] == 3
        assert display['bye_seeds'] == [1, 2, 3]

    def test_match_round_name(self, names):
        bracket = generate_arbitrary_bracket(names(3), 'double')
        losers = [m for m in bracket['matches'] if m.side == LOSERS]
        assert get_match_round_name(bracket, losers[0]) == "Losers Final"
        assert get_match_round_name(bracket, bracket['matches'][0]) == "Winners Semifinal"


class TestFindMatch:
    """Tests for find_match."""

    def test_found(self, names):
        bracket = generate_arbitrary_bracket(names(4), 'single')
        assert find_match(bracket, 2) is bracket['matches'][2]

    def test_missing(self, names):
        bracket = generate_arbitrary_bracket(names(4), 'single')
        assert find_match(bracket, 99) is None
