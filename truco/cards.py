"""Card-related data structures and helpers for Truco."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping


class Suit(Enum):
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    def __str__(self) -> str:
        return self.value


class Rank(Enum):
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    QUEEN = "Q"
    JACK = "J"
    KING = "K"
    ACE = "A"
    TWO = "2"
    THREE = "3"

    def __str__(self) -> str:
        return self.value


# Plain card strength, lowest to highest. The 3 is the strongest plain card.
RANK_POWER: dict[Rank, int] = {
    Rank.FOUR: 1,
    Rank.FIVE: 2,
    Rank.SIX: 3,
    Rank.SEVEN: 4,
    Rank.QUEEN: 5,
    Rank.JACK: 6,
    Rank.KING: 7,
    Rank.ACE: 8,
    Rank.TWO: 9,
    Rank.THREE: 10,
}

# Manilha tier sits above every plain card. Nothing marks a card as a
# manilha yet since the vira is not dealt.
MANILHA_POWER: dict[Suit, int] = {
    Suit.CLUBS: 11,
    Suit.HEARTS: 12,
    Suit.SPADES: 13,
    Suit.DIAMONDS: 14,
}

RANK_NAMES: dict[Rank, str] = {
    Rank.ACE: "Ace",
    Rank.TWO: "2",
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.JACK: "Jack",
    Rank.QUEEN: "Queen",
    Rank.KING: "King",
}


@dataclass(frozen=True)
class Card:
    """Immutable representation of a playing card."""

    suit: Suit
    rank: Rank

    @property
    def id(self) -> str:
        return f"{self.suit.value}-{self.rank.value}"

    def __str__(self) -> str:
        return self.id


def card_label(card: Card) -> str:
    return f"{RANK_NAMES[card.rank]} of {card.suit.value.title()}"


def serialize_card(card: Card) -> dict[str, str]:
    return {"id": card.id, "suit": card.suit.value, "rank": card.rank.value}


def deserialize_card(payload: Mapping[str, str]) -> Card:
    return Card(Suit(payload["suit"].lower()), Rank(payload["rank"].upper()))


def parse_card_id(card_id: str) -> Card:
    """Rebuild a card from its ``suit-rank`` identifier."""
    suit, _, rank = card_id.partition("-")
    return Card(Suit(suit), Rank(rank))
