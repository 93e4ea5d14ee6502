from random import Random

import pytest

from truco.cards import Card, Rank, Suit
from truco.deck import (
    compare_cards,
    create_deck,
    deal_cards,
    deck_size,
    find_winning_card,
    get_card_power,
    is_valid_play,
    remove_card_from_hand,
    shuffle_deck,
    validate_deck,
)
from truco.errors import DeckError


@pytest.mark.parametrize("deck_type", ["spanish", "french"])
def test_create_deck_has_unique_cards(deck_type):
    deck = create_deck(deck_type)

    assert len(deck) == 40
    assert len(deck) == deck_size(deck_type)
    assert len({card.id for card in deck}) == len(deck)
    assert validate_deck(deck, deck_type)


def test_card_id_is_derived_from_suit_and_rank():
    assert Card(Suit.HEARTS, Rank.ACE).id == "hearts-A"
    assert Card(Suit.CLUBS, Rank.FOUR) == Card(Suit.CLUBS, Rank.FOUR)


def test_shuffle_is_a_permutation_and_leaves_input_alone():
    deck = create_deck()
    original = list(deck)

    shuffled = shuffle_deck(deck, Random(3))

    assert deck == original
    assert len(shuffled) == len(deck)
    assert sorted(card.id for card in shuffled) == sorted(card.id for card in deck)


def test_shuffle_is_reproducible_with_seed():
    deck = create_deck()
    assert shuffle_deck(deck, Random(11)) == shuffle_deck(deck, Random(11))


def test_deal_gives_disjoint_hands_and_remainder():
    deck = create_deck()
    hands, remaining = deal_cards(deck, 4, 3, rng=Random(5))

    assert [len(hand) for hand in hands] == [3, 3, 3, 3]
    assert len(remaining) == len(deck) - 12
    dealt = [card.id for hand in hands for card in hand] + [card.id for card in remaining]
    assert len(dealt) == len(set(dealt)) == len(deck)


def test_deal_is_round_robin_over_the_shuffled_deck():
    deck = create_deck()
    shuffled = shuffle_deck(deck, Random(9))
    hands, _ = deal_cards(deck, 2, 3, rng=Random(9))

    assert hands[0] == [shuffled[0], shuffled[2], shuffled[4]]
    assert hands[1] == [shuffled[1], shuffled[3], shuffled[5]]


def test_deal_rejects_small_deck():
    with pytest.raises(DeckError):
        deal_cards(create_deck()[:5], 2, 3)


def test_power_order_puts_three_on_top():
    ranks = [Rank.FOUR, Rank.FIVE, Rank.SIX, Rank.SEVEN, Rank.QUEEN, Rank.JACK, Rank.KING, Rank.ACE, Rank.TWO, Rank.THREE]
    powers = [get_card_power(Card(Suit.SPADES, rank)) for rank in ranks]
    assert powers == sorted(powers)
    assert len(set(powers)) == len(powers)


def test_compare_cards_is_antisymmetric():
    deck = create_deck()
    for first in deck[:10]:
        for second in deck[10:20]:
            assert compare_cards(first, second) == -compare_cards(second, first)
    assert compare_cards(Card(Suit.HEARTS, Rank.KING), Card(Suit.CLUBS, Rank.KING)) == 0


def test_first_play_wins_ties():
    plays = [
        ("p1", Card(Suit.HEARTS, Rank.SEVEN)),
        ("p2", Card(Suit.CLUBS, Rank.THREE)),
        ("p3", Card(Suit.SPADES, Rank.THREE)),
    ]
    assert find_winning_card(plays) == plays[1]
    assert find_winning_card([]) is None


def test_remove_card_from_hand():
    hand = [Card(Suit.HEARTS, Rank.ACE), Card(Suit.CLUBS, Rank.TWO), Card(Suit.SPADES, Rank.FOUR)]
    target = Card(Suit.CLUBS, Rank.TWO)

    result = remove_card_from_hand(target, hand)

    assert len(result) == len(hand) - 1
    assert not is_valid_play(target, result)
    assert is_valid_play(target, hand)
    assert len(hand) == 3


def test_validate_deck_detects_duplicates():
    deck = create_deck()
    deck[1] = deck[0]
    assert not validate_deck(deck)
    assert not validate_deck(create_deck()[:-1])
