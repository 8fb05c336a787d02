"""
Pure table rules: play validation and turn sequencing.

Nothing in this module mutates its arguments. The Game applies the
consequences (moving cards, changing the turn) after asking these
functions what is legal.
"""

from collections import Counter
from enum import Enum
from typing import Optional, Sequence


class Rejection(Enum):
    """Reasons a play attempt is refused, checked in declaration order."""

    EMPTY_SELECTION = "Select at least one card."
    CARD_NOT_IN_HAND = "You don't have that card."
    MIXED_RANKS = "You can only play cards of the same rank together."
    COUNT_MISMATCH = "Play the same number of cards as the field."
    TOO_WEAK = "Play a stronger card than the field."

    @property
    def message(self) -> str:
        return self.value


def anchor_card(cards: Sequence):
    """First non-joker card, or the first card when every card is a joker."""
    for card in cards:
        if not card.is_joker:
            return card
    return cards[0]


def validate_play(attempt: Sequence, hand: Sequence, field: Sequence) -> Optional[Rejection]:
    """
    Decide whether ``attempt`` may be played from ``hand`` onto ``field``.

    Args:
        attempt: Cards the player wants to play.
        hand: The player's current hand.
        field: Cards currently on the table (empty when the table is clear).

    Returns:
        None if the play is legal, otherwise the first Rejection that applies.
    """
    if not attempt:
        return Rejection.EMPTY_SELECTION

    # Multiset check: playing the same card twice needs two copies in hand
    available = Counter(hand)
    for card, wanted in Counter(attempt).items():
        if available[card] < wanted:
            return Rejection.CARD_NOT_IN_HAND

    anchor = anchor_card(attempt)
    for card in attempt:
        if not card.is_joker and card.rank != anchor.rank:
            return Rejection.MIXED_RANKS

    if field:
        if len(attempt) != len(field):
            return Rejection.COUNT_MISMATCH
        if anchor.value <= anchor_card(field).value:
            return Rejection.TOO_WEAK

    return None


def next_turn(players: Sequence, from_index: int) -> Optional[int]:
    """
    Find the next seat that is still playing, scanning clockwise.

    ``from_index`` may point at a player who has just finished, or be -1 to
    start the scan at seat 0. The seat itself is only reconsidered after a
    full lap.

    Returns:
        Index of the next player with status ``playing``, or None if nobody
        is still playing.
    """
    count = len(players)
    for step in range(1, count + 1):
        index = (from_index + step) % count
        if players[index].is_playing:
            return index
    return None
