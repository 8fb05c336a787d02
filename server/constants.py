"""
Card strength and table constants for Daifugo.

This module is the single source of truth for rank strengths and the
fixed enumeration orders used by the deck and hand sorting.

Strength ordering (suit never affects strength):
    - 3 is the weakest card (1)
    - K = 11, A = 12, 2 = 13 (strongest numbered card)
    - Joker = 15 (strongest overall)
"""

from config import config


# =============================================================================
# Card Strength - Single Source of Truth
# =============================================================================

RANK_ORDER: list[str] = ["3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A", "2"]

RANK_STRENGTH: dict[str, int] = {
    "3": 1,
    "4": 2,
    "5": 3,
    "6": 4,
    "7": 5,
    "8": 6,
    "9": 7,
    "10": 8,
    "J": 9,
    "Q": 10,
    "K": 11,
    "A": 12,
    "2": 13,
    "joker": 15,
}

# Deck enumeration order (before shuffling)
DECK_SUIT_ORDER: list[str] = ["spades", "hearts", "diamonds", "clubs"]

# Tie-break order when sorting a hand: clubs < diamonds < hearts < spades < joker
SORT_SUIT_ORDER: dict[str, int] = {
    "clubs": 0,
    "diamonds": 1,
    "hearts": 2,
    "spades": 3,
    "joker": 4,
}

DECK_SIZE = 53

# Rank that clears the table and keeps the turn
CLEAR_RANK = "8"

# Cards moved in each direction during the exchange step
EXCHANGE_CARD_COUNT = 2


# =============================================================================
# Room Constants
# =============================================================================

MAX_PLAYERS = config.MAX_PLAYERS_PER_ROOM
MIN_PLAYERS = config.MIN_PLAYERS
ROOM_CODE_LENGTH = config.ROOM_CODE_LENGTH

# Poorest role is only handed out at tables of at least this many players
MIN_PLAYERS_FOR_POOREST = 3
