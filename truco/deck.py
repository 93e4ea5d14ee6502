"""Deck construction, dealing and card ranking for Truco.

Every function here is pure: inputs are never mutated and the only source
of randomness is the ``Random`` instance handed in by the caller.
"""

from __future__ import annotations

from random import Random
from typing import Iterable, List, Literal, Optional, Sequence, Tuple, TypeVar

from .cards import Card, Rank, RANK_POWER, Suit
from .errors import DeckError

DeckType = Literal["spanish", "french"]

# The Spanish deck drops the 8s, 9s and 10s.
SPANISH_RANKS: list[Rank] = [
    Rank.FOUR,
    Rank.FIVE,
    Rank.SIX,
    Rank.SEVEN,
    Rank.QUEEN,
    Rank.JACK,
    Rank.KING,
    Rank.ACE,
    Rank.TWO,
    Rank.THREE,
]

# Same ten ranks, ordered from the two upwards.
FRENCH_RANKS: list[Rank] = [
    Rank.TWO,
    Rank.THREE,
    Rank.FOUR,
    Rank.FIVE,
    Rank.SIX,
    Rank.SEVEN,
    Rank.QUEEN,
    Rank.JACK,
    Rank.KING,
    Rank.ACE,
]

DECK_RANKS: dict[str, list[Rank]] = {
    "spanish": SPANISH_RANKS,
    "french": FRENCH_RANKS,
}

# Nominal sizes used by configuration checks.
NOMINAL_DECK_SIZES: dict[str, int] = {
    "spanish": 40,
    "french": 52,
}

ALL_SUITS: list[Suit] = [Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES]

T = TypeVar("T")


def _ranks_for(deck_type: str) -> list[Rank]:
    try:
        return DECK_RANKS[deck_type]
    except KeyError:
        raise DeckError(f"Unknown deck type: {deck_type!r}") from None


def create_deck(deck_type: DeckType = "spanish") -> List[Card]:
    """Return the ordered deck for ``deck_type``, one card per suit and rank."""
    ranks = _ranks_for(deck_type)
    return [Card(suit, rank) for suit in ALL_SUITS for rank in ranks]


def deck_size(deck_type: DeckType = "spanish") -> int:
    """Number of cards ``create_deck`` actually produces."""
    return len(ALL_SUITS) * len(_ranks_for(deck_type))


def shuffle_deck(deck: Sequence[T], rng: Optional[Random] = None) -> List[T]:
    """Return a Fisher-Yates permutation of ``deck``; the input is left untouched."""
    if rng is None:
        rng = Random()
    shuffled = list(deck)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def deal_cards(
    deck: Sequence[Card],
    num_players: int,
    cards_per_player: int,
    *,
    rng: Optional[Random] = None,
) -> Tuple[List[List[Card]], List[Card]]:
    """Shuffle ``deck`` and deal round-robin.

    Returns the per-player hands in deal order and the undealt remainder.

    Raises:
        DeckError: the deck holds fewer than ``num_players * cards_per_player`` cards.
    """
    needed = num_players * cards_per_player
    if needed > len(deck):
        raise DeckError(f"Cannot deal {needed} cards from a deck of {len(deck)}.")

    shuffled = shuffle_deck(deck, rng)
    hands: List[List[Card]] = [[] for _ in range(num_players)]
    for index in range(needed):
        hands[index % num_players].append(shuffled[index])
    return hands, shuffled[needed:]


def get_card_power(card: Card) -> int:
    return RANK_POWER.get(card.rank, 0)


def compare_cards(first: Card, second: Card) -> int:
    """Return 1 if ``first`` wins, -1 if ``second`` wins and 0 on a tie."""
    diff = get_card_power(first) - get_card_power(second)
    return (diff > 0) - (diff < 0)


def find_winning_card(played: Iterable[Tuple[str, Card]]) -> Optional[Tuple[str, Card]]:
    """Return the ``(player_id, card)`` play with the highest power.

    Ties keep the earlier play. ``None`` when nothing was played.
    """
    winner: Optional[Tuple[str, Card]] = None
    for play in played:
        if winner is None or compare_cards(play[1], winner[1]) > 0:
            winner = play
    return winner


def is_valid_play(card: Card, hand: Iterable[Card]) -> bool:
    return any(held.id == card.id for held in hand)


def remove_card_from_hand(card: Card, hand: Sequence[Card]) -> List[Card]:
    """Return a new hand without the first card sharing ``card``'s id."""
    remaining = list(hand)
    for index, held in enumerate(remaining):
        if held.id == card.id:
            del remaining[index]
            break
    return remaining


def validate_deck(deck: Sequence[Card], deck_type: DeckType = "spanish") -> bool:
    """True if ``deck`` is a complete deck of ``deck_type`` with no duplicates."""
    if len(deck) != deck_size(deck_type):
        return False
    return len({card.id for card in deck}) == len(deck)
