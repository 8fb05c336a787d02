"""
Game logic for Daifugo.

This module implements the core mechanics of the Daifugo shedding game:
card/deck management, player state, turn flow, round end, roles and the
card exchange between rounds.

Daifugo Rules Summary:
    - 53 cards (52 + 1 joker) are dealt round-robin to 2-4 players
    - On your turn, play one or more cards of a single rank that beat the
      field (same count, strictly higher strength), or pass
    - Once everyone else has passed, the table clears and the last player
      to play leads again
    - Any 8 clears the table immediately and the same player goes again
    - The first player out becomes "richest", the last "poorest" (3+ players)
    - Between rounds the poorest hands their two best cards to the richest,
      who hands back their two worst

Phase flow:
    WAITING -> PLAYING -> FINISHED -> EXCHANGE -> PLAYING ...
                                   \\-> WAITING (series over / host stops)
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from constants import (
    CLEAR_RANK,
    DECK_SUIT_ORDER,
    EXCHANGE_CARD_COUNT,
    MAX_PLAYERS,
    MIN_PLAYERS,
    MIN_PLAYERS_FOR_POOREST,
    RANK_ORDER,
    RANK_STRENGTH,
    SORT_SUIT_ORDER,
)
from errors import (
    AlreadySeated,
    InvalidPlay,
    InvariantViolation,
    NotEnoughPlayers,
    NotHost,
    NotYourTurn,
    RoomFull,
    RoomNotJoinable,
    WrongPhase,
)
from rules import next_turn, validate_play

logger = logging.getLogger(__name__)


class Suit(Enum):
    """Card suits. The joker carries its own suit."""

    SPADES = "spades"
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    JOKER = "joker"


class Rank(Enum):
    """Card ranks, listed weakest to strongest."""

    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"
    TWO = "2"
    JOKER = "joker"


# Map Rank enum to strength (derived from constants.py as single source of truth)
RANK_VALUES: dict[Rank, int] = {rank: RANK_STRENGTH[rank.value] for rank in Rank}


@dataclass(frozen=True)
class Card:
    """
    An immutable playing card.

    Two cards are equal when suit and rank match, so a Card can be used
    directly as a dict key or Counter element.
    """

    suit: Suit
    rank: Rank

    @property
    def value(self) -> int:
        """Strength used for comparisons (3 = 1 ... 2 = 13, joker = 15)."""
        return RANK_VALUES[self.rank]

    @property
    def is_joker(self) -> bool:
        return self.rank == Rank.JOKER

    def sort_key(self) -> tuple[int, int]:
        return (self.value, SORT_SUIT_ORDER[self.suit.value])

    def to_dict(self) -> dict:
        """Convert card to dictionary for JSON serialization."""
        return {
            "suit": self.suit.value,
            "rank": self.rank.value,
            "value": self.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Card":
        """Build a Card from a ``{suit, rank}`` dict (raises ValueError if unknown)."""
        return cls(Suit(data["suit"]), Rank(data["rank"]))

    def __str__(self) -> str:
        if self.is_joker:
            return "joker"
        return f"{self.rank.value} of {self.suit.value}"


# -------------------------------------------------------------------------
# Deck
# -------------------------------------------------------------------------

def build_deck() -> list[Card]:
    """
    Build an unshuffled 53-card deck.

    Enumeration order is fixed: spades, hearts, diamonds, clubs, each from
    3 up to 2, followed by the single joker.
    """
    deck = [
        Card(Suit(suit), Rank(rank))
        for suit in DECK_SUIT_ORDER
        for rank in RANK_ORDER
    ]
    deck.append(Card(Suit.JOKER, Rank.JOKER))
    return deck


def shuffle(deck: list[Card], rng: Optional[random.Random] = None) -> list[Card]:
    """
    Shuffle a deck in place with an unbiased Fisher-Yates permutation.

    Args:
        deck: Cards to shuffle.
        rng: Optional Random instance, for reproducible deals in tests.

    Returns:
        The same list, shuffled.
    """
    (rng or random).shuffle(deck)
    return deck


def sort_hand(hand: list[Card]) -> None:
    """Sort a hand in place by strength, then by suit."""
    hand.sort(key=Card.sort_key)


def deal_to(players: list["Player"], deck: list[Card]) -> None:
    """
    Deal the whole deck round-robin starting at seat 0.

    Every hand is cleared first and sorted afterwards. The deck is left
    empty. Hand sizes differ by at most one card.
    """
    for player in players:
        player.hand = []
    for index, card in enumerate(deck):
        players[index % len(players)].hand.append(card)
    deck.clear()
    for player in players:
        sort_hand(player.hand)


# -------------------------------------------------------------------------
# Players
# -------------------------------------------------------------------------

class PlayerStatus(Enum):
    PLAYING = "playing"
    PASSED = "passed"
    FINISHED = "finished"


class Role(Enum):
    COMMONER = "commoner"
    RICHEST = "richest"
    POOREST = "poorest"


@dataclass
class Player:
    """
    A seated player in a Daifugo game.

    Attributes:
        id: Connection-scoped identifier.
        name: Display name.
        hand: Cards held, kept sorted.
        status: playing, passed (until the table clears) or finished.
        role: Role earned in the previous round.
        rank: Finishing position in the current round (1 = first out).
    """

    id: str
    name: str
    hand: list[Card] = field(default_factory=list)
    status: PlayerStatus = PlayerStatus.PLAYING
    role: Role = Role.COMMONER
    rank: Optional[int] = None

    @property
    def is_playing(self) -> bool:
        return self.status == PlayerStatus.PLAYING

    @property
    def is_finished(self) -> bool:
        return self.status == PlayerStatus.FINISHED

    def remove_cards(self, cards: list[Card]) -> None:
        """Remove one copy of each card from the hand (cards must be present)."""
        for card in cards:
            self.hand.remove(card)

    def receive_cards(self, cards: list[Card]) -> None:
        self.hand.extend(cards)
        sort_hand(self.hand)

    def reset(self) -> None:
        """Clear all round and series progress (back to the lobby)."""
        self.hand = []
        self.status = PlayerStatus.PLAYING
        self.role = Role.COMMONER
        self.rank = None


# -------------------------------------------------------------------------
# Game state
# -------------------------------------------------------------------------

class GamePhase(Enum):
    """
    Phases of a Daifugo room.

    Flow: WAITING -> PLAYING -> FINISHED -> EXCHANGE -> PLAYING
    FINISHED may also return to WAITING when the series ends.
    """

    WAITING = "waiting"      # Lobby, waiting for the host to start
    PLAYING = "playing"      # Cards being played
    EXCHANGE = "exchange"    # Between rounds, richest/poorest swapping cards
    FINISHED = "finished"    # Round complete, roles assigned


class SeriesOutcome(Enum):
    """What happens after a round finishes."""

    SERIES_OVER = "series_over"       # Round limit reached
    ASK_HOST = "ask_host"             # Endless series, host decides
    AUTO_EXCHANGE = "auto_exchange"   # Rounds remain, continue automatically


@dataclass
class GameSettings:
    """Host-controlled settings. ``limit`` 0 means an endless series."""

    limit: int = 0
    host_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {"limit": self.limit, "hostId": self.host_id}


@dataclass
class LastPlay:
    player_id: str
    cards: list[Card]


@dataclass
class PlayOutcome:
    """Result of a successful play, used to build room notifications."""

    player_id: str
    cards: list[Card]
    cleared_by_eight: bool = False
    table_cleared: bool = False
    finished_rank: Optional[int] = None
    round_over: bool = False


@dataclass
class PassOutcome:
    player_id: str
    table_cleared: bool = False


@dataclass
class RemoveOutcome:
    """What removing a player did to the room."""

    player: Player
    new_host_id: Optional[str] = None
    room_empty: bool = False
    forced_reset: bool = False
    round_over: bool = False


@dataclass
class ExchangeResult:
    richest_id: str
    poorest_id: str
    to_richest: list[Card]
    to_poorest: list[Card]


@dataclass
class Game:
    """
    State machine for one Daifugo room.

    Owns seating, host assignment, turn flow, round end, roles and the
    exchange step. Every operation that a player triggers checks the
    actor first and raises a GameError without changing anything if the
    action is not allowed.

    Attributes:
        code: Room code, for logging.
        players: Seated players in seating (and turn) order.
        phase: Current phase.
        turn_index: Seat whose turn it is, or None.
        table: Cards currently on the field (empty when clear).
        discard_pile: Cards that have left the field this round.
        last_play: Most recent non-pass play still on the table.
        pass_count: Consecutive passes since the last play.
        game_count: Rounds started in the current series.
        settings: Round limit and host.
        ranks: Player ids in finishing order for the current round.
        generation: Bumped on every phase change, so deferred transitions
            can tell whether the state they were scheduled for still holds.
        hands_dealt: True between run_exchange() and the next start_round(),
            when the next round's hands are already in place.
    """

    code: str = ""
    players: list[Player] = field(default_factory=list)
    phase: GamePhase = GamePhase.WAITING
    turn_index: Optional[int] = None
    table: list[Card] = field(default_factory=list)
    discard_pile: list[Card] = field(default_factory=list)
    last_play: Optional[LastPlay] = None
    pass_count: int = 0
    game_count: int = 0
    settings: GameSettings = field(default_factory=GameSettings)
    ranks: list[str] = field(default_factory=list)
    generation: int = 0
    hands_dealt: bool = False
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_player(self, player_id: str) -> Optional[Player]:
        """Find a seated player by ID."""
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def get_player_index(self, player_id: Optional[str]) -> Optional[int]:
        for index, player in enumerate(self.players):
            if player.id == player_id:
                return index
        return None

    def current_player(self) -> Optional[Player]:
        """Get the player whose turn it currently is."""
        if self.turn_index is None:
            return None
        return self.players[self.turn_index]

    def is_host(self, player_id: str) -> bool:
        return player_id is not None and self.settings.host_id == player_id

    def card_count(self) -> int:
        """Total cards in play: hands, field and discard pile."""
        return (
            sum(len(p.hand) for p in self.players)
            + len(self.table)
            + len(self.discard_pile)
        )

    def _remaining_count(self) -> int:
        """Players who still hold cards this round."""
        return sum(1 for p in self.players if not p.is_finished)

    def _set_phase(self, phase: GamePhase) -> None:
        self.phase = phase
        self.generation += 1

    # -------------------------------------------------------------------------
    # Membership
    # -------------------------------------------------------------------------

    def add_player(self, player_id: str, name: str) -> Player:
        """
        Seat a new player at the end of the table.

        The first player seated becomes the host.

        Raises:
            AlreadySeated: The id is already at this table.
            RoomFull: The table already has the maximum number of players.
            RoomNotJoinable: A series is in progress.
        """
        if self.get_player(player_id):
            raise AlreadySeated()
        if len(self.players) >= MAX_PLAYERS:
            raise RoomFull()
        if self.phase != GamePhase.WAITING:
            raise RoomNotJoinable()

        player = Player(id=player_id, name=name)
        self.players.append(player)
        if self.settings.host_id is None:
            self.settings.host_id = player_id
        return player

    def configure(self, limit: int) -> None:
        """Set the round limit (0 = endless). Negative values count as 0."""
        self.settings.limit = max(0, int(limit))

    def remove_player(self, player_id: str) -> Optional[RemoveOutcome]:
        """
        Remove a player from the table in any phase.

        Handles host reassignment (first remaining seat), turn repair and
        the forced reset when too few players remain for a round.

        Args:
            player_id: ID of the player to remove.

        Returns:
            A RemoveOutcome, or None if the player was not seated.
        """
        index = self.get_player_index(player_id)
        if index is None:
            return None

        was_turn = self.turn_index == index
        player = self.players.pop(index)
        outcome = RemoveOutcome(player=player)
        # Pre-dealt hands no longer cover the full deck
        self.hands_dealt = False

        if not self.players:
            self.settings.host_id = None
            self.turn_index = None
            outcome.room_empty = True
            return outcome

        if self.settings.host_id == player_id:
            self.settings.host_id = self.players[0].id
            outcome.new_host_id = self.settings.host_id

        if self.phase != GamePhase.WAITING and len(self.players) < MIN_PLAYERS:
            logger.info(f"Room {self.code}: not enough players left, resetting to lobby")
            self.reset_to_waiting()
            outcome.forced_reset = True
            return outcome

        if self.turn_index is not None and index < self.turn_index:
            self.turn_index -= 1

        if self.phase == GamePhase.PLAYING:
            # The leaver's cards leave the round with them
            if self._remaining_count() <= 1:
                self._finish_round()
                outcome.round_over = True
            elif was_turn:
                self.turn_index = None
                if self._everyone_passed():
                    self._clear_and_lead(index - 1)
                else:
                    self._advance_turn(index - 1)
            elif self._everyone_passed():
                # Scan from the turn holder's own seat so they keep the lead
                self._clear_and_lead(self.turn_index - 1)

        return outcome

    # -------------------------------------------------------------------------
    # Round lifecycle
    # -------------------------------------------------------------------------

    def start_game(self, player_id: str) -> None:
        """
        Host starts the first round from the lobby.

        Raises:
            NotHost: Caller is not the host.
            WrongPhase: The room is not in the lobby.
            NotEnoughPlayers: Fewer than MIN_PLAYERS are seated.
        """
        if not self.is_host(player_id):
            raise NotHost("start the game")
        if self.phase != GamePhase.WAITING:
            raise WrongPhase("The game has already started.")
        if len(self.players) < MIN_PLAYERS:
            raise NotEnoughPlayers(MIN_PLAYERS)
        self.start_round()

    def start_round(self) -> None:
        """
        Initialize a new round.

        Resets the table and every player's status and finishing rank, deals
        a fresh shuffled deck (unless the exchange step already did), and
        gives the first turn to last round's poorest player, or to a random
        seat when there is none.
        """
        if len(self.players) < MIN_PLAYERS:
            raise NotEnoughPlayers(MIN_PLAYERS)

        self.game_count += 1
        self.table = []
        self.discard_pile = []
        self.last_play = None
        self.pass_count = 0
        self.ranks = []
        for player in self.players:
            player.status = PlayerStatus.PLAYING
            player.rank = None

        if not self.hands_dealt:
            deal_to(self.players, shuffle(build_deck(), self.rng))
        self.hands_dealt = False

        poorest_index = next(
            (i for i, p in enumerate(self.players) if p.role == Role.POOREST),
            None,
        )
        if poorest_index is not None:
            self.turn_index = poorest_index
        else:
            self.turn_index = self.rng.randrange(len(self.players))

        self._set_phase(GamePhase.PLAYING)
        logger.debug(
            f"Room {self.code}: round {self.game_count} started, "
            f"{self.players[self.turn_index].name} leads"
        )

    def reset_to_waiting(self) -> None:
        """
        Return the room to the lobby.

        Players and host are kept; hands, statuses, ranks, roles and the
        series round counter are cleared.
        """
        for player in self.players:
            player.reset()
        self.table = []
        self.discard_pile = []
        self.last_play = None
        self.pass_count = 0
        self.ranks = []
        self.turn_index = None
        self.game_count = 0
        self.hands_dealt = False
        self._set_phase(GamePhase.WAITING)

    def _record_finish(self, player: Player) -> None:
        player.status = PlayerStatus.FINISHED
        self.ranks.append(player.id)
        player.rank = len(self.ranks)

    def _finish_round(self) -> None:
        """Auto-finish whoever is left, assign roles and enter FINISHED."""
        for player in self.players:
            if not player.is_finished:
                self._record_finish(player)
        self.turn_index = None
        self._assign_roles()
        self._set_phase(GamePhase.FINISHED)
        logger.debug(f"Room {self.code}: round {self.game_count} finished, order={self.ranks}")

    def _assign_roles(self) -> None:
        """
        First finisher becomes richest; last finisher becomes poorest, but
        only at tables of more than two players. Everyone else is a commoner.
        Finishers who have since left the room get nothing.
        """
        for player in self.players:
            player.role = Role.COMMONER
        if not self.ranks:
            return

        richest = self.get_player(self.ranks[0])
        if richest:
            richest.role = Role.RICHEST

        if len(self.players) >= MIN_PLAYERS_FOR_POOREST:
            poorest = self.get_player(self.ranks[-1])
            if poorest and poorest is not richest:
                poorest.role = Role.POOREST

    def series_outcome(self) -> SeriesOutcome:
        """Round-limit policy applied when a round finishes."""
        if self.settings.limit == 0:
            return SeriesOutcome.ASK_HOST
        if self.game_count >= self.settings.limit:
            return SeriesOutcome.SERIES_OVER
        return SeriesOutcome.AUTO_EXCHANGE

    def continue_decision(self, player_id: str, decision: bool) -> None:
        """
        Host answers the continue prompt of an endless series.

        Args:
            player_id: Must be the host.
            decision: True moves to the exchange phase, False back to the lobby.
        """
        if not self.is_host(player_id):
            raise NotHost("decide whether to continue")
        if self.phase != GamePhase.FINISHED or self.settings.limit != 0:
            raise WrongPhase()
        if decision:
            self._set_phase(GamePhase.EXCHANGE)
        else:
            self.reset_to_waiting()

    def enter_exchange(self) -> None:
        if self.phase != GamePhase.FINISHED:
            raise WrongPhase()
        self._set_phase(GamePhase.EXCHANGE)

    def run_exchange(self) -> Optional[ExchangeResult]:
        """
        Deal the next round's hands and swap cards between richest and poorest.

        The poorest player's two strongest cards go to the richest player and
        the richest player's two weakest go to the poorest. Both selections
        are made before either transfer.

        Returns:
            The ExchangeResult, or None if the exchange is skipped (fewer
            than two players, or nobody holds one of the roles). When None
            is returned no cards were dealt.
        """
        if self.phase != GamePhase.EXCHANGE:
            raise WrongPhase()

        richest = next((p for p in self.players if p.role == Role.RICHEST), None)
        poorest = next((p for p in self.players if p.role == Role.POOREST), None)
        if len(self.players) < MIN_PLAYERS or richest is None or poorest is None:
            return None

        deal_to(self.players, shuffle(build_deck(), self.rng))
        self.table = []
        self.discard_pile = []

        to_richest = poorest.hand[-EXCHANGE_CARD_COUNT:]
        to_poorest = richest.hand[:EXCHANGE_CARD_COUNT]
        poorest.remove_cards(to_richest)
        richest.remove_cards(to_poorest)
        richest.receive_cards(to_richest)
        poorest.receive_cards(to_poorest)
        self.hands_dealt = True

        return ExchangeResult(
            richest_id=richest.id,
            poorest_id=poorest.id,
            to_richest=to_richest,
            to_poorest=to_poorest,
        )

    # -------------------------------------------------------------------------
    # Turn actions
    # -------------------------------------------------------------------------

    def _require_turn(self, player_id: str) -> Player:
        if self.phase != GamePhase.PLAYING:
            raise WrongPhase("No round is in progress.")
        current = self.current_player()
        if current is None or current.id != player_id:
            raise NotYourTurn()
        return current

    def _advance_turn(self, from_index: int) -> None:
        index = next_turn(self.players, from_index)
        if index is None:
            raise InvariantViolation(
                f"Room {self.code}: no playing seat after index {from_index}"
            )
        self.turn_index = index

    def _clear_table(self) -> None:
        """Move the field to the discard pile; passed players rejoin."""
        self.discard_pile.extend(self.table)
        self.table = []
        self.last_play = None
        self.pass_count = 0
        for player in self.players:
            if not player.is_finished:
                player.status = PlayerStatus.PLAYING

    def _everyone_passed(self) -> bool:
        """Passes since the last play have caught up with the players still in."""
        playing = sum(1 for p in self.players if p.is_playing)
        return self.pass_count >= playing

    def _clear_and_lead(self, from_index: Optional[int] = None) -> None:
        """
        Clear the table and hand out the next lead.

        Passed players rejoin, and the lead goes back to whoever made the
        last play if they are still holding cards, otherwise to the next
        playing seat after ``from_index`` (default: the current turn).
        """
        leader_id = self.last_play.player_id if self.last_play else None
        self._clear_table()

        leader_index = self.get_player_index(leader_id)
        if leader_index is not None and self.players[leader_index].is_playing:
            self.turn_index = leader_index
        else:
            if from_index is None:
                from_index = self.turn_index if self.turn_index is not None else -1
            self._advance_turn(from_index)

    def play_cards(self, player_id: str, cards: list[Card]) -> PlayOutcome:
        """
        Play cards from the current player's hand onto the field.

        Args:
            player_id: Must be the player whose turn it is.
            cards: Cards to play.

        Returns:
            PlayOutcome describing side effects (8 clear, finish, round end).

        Raises:
            WrongPhase: No round in progress.
            NotYourTurn: Caller does not hold the turn.
            InvalidPlay: The validator rejected the cards.
        """
        player = self._require_turn(player_id)

        rejection = validate_play(cards, player.hand, self.table)
        if rejection is not None:
            raise InvalidPlay(rejection)

        cards = list(cards)
        player.remove_cards(cards)
        self.discard_pile.extend(self.table)
        self.table = cards
        self.last_play = LastPlay(player_id=player.id, cards=cards)
        player.status = PlayerStatus.PLAYING
        self.pass_count = 0

        outcome = PlayOutcome(player_id=player.id, cards=cards)

        if any(card.rank.value == CLEAR_RANK for card in cards):
            self._clear_table()
            outcome.cleared_by_eight = True

        if not player.hand:
            self._record_finish(player)
            outcome.finished_rank = player.rank

        if self._remaining_count() <= 1:
            self._finish_round()
            outcome.round_over = True
        elif outcome.cleared_by_eight and not player.is_finished:
            pass  # same player leads again
        elif not any(p.is_playing for p in self.players if p is not player):
            # Everyone else had already passed on this trick
            self._clear_and_lead()
            outcome.table_cleared = True
        else:
            self._advance_turn(self.turn_index)

        return outcome

    def pass_turn(self, player_id: str) -> PassOutcome:
        """
        Current player passes.

        The player sits out until the table clears. Once the passes since
        the last play reach the number of players still in, the table clears.
        """
        player = self._require_turn(player_id)

        player.status = PlayerStatus.PASSED
        self.pass_count += 1
        outcome = PassOutcome(player_id=player.id)

        if self._everyone_passed():
            self._clear_and_lead()
            outcome.table_cleared = True
        else:
            self._advance_turn(self.turn_index)

        return outcome

    # -------------------------------------------------------------------------
    # State Queries
    # -------------------------------------------------------------------------

    def get_state(self, for_player_id: str) -> dict:
        """
        Get the room state as seen by one player.

        Only the recipient's own hand is included; other players are shown
        with a card count. In the lobby only the roster is sent.

        Args:
            for_player_id: The player who will receive this state.

        Returns:
            An ``updateState`` message dict.
        """
        is_host = self.is_host(for_player_id)

        if self.phase == GamePhase.WAITING:
            return {
                "type": "updateState",
                "roomCode": self.code,
                "gameState": self.phase.value,
                "players": [
                    {"id": p.id, "name": p.name, "isHost": self.is_host(p.id)}
                    for p in self.players
                ],
                "myId": for_player_id,
                "isHost": is_host,
                "gameSettings": self.settings.to_dict(),
            }

        current = self.current_player()
        me = self.get_player(for_player_id)

        players_data = []
        for player in self.players:
            players_data.append({
                "id": player.id,
                "name": player.name,
                "handCount": len(player.hand),
                "isTurn": current is player,
                "role": player.role.value,
                "rank": player.rank,
                "status": player.status.value,
                "isHost": self.is_host(player.id),
            })

        last_play = None
        if self.last_play:
            last_play = {
                "playerId": self.last_play.player_id,
                "cards": [c.to_dict() for c in self.last_play.cards],
            }

        return {
            "type": "updateState",
            "roomCode": self.code,
            "gameState": self.phase.value,
            "field": [c.to_dict() for c in self.table],
            "lastPlay": last_play,
            "turnIndex": self.turn_index if self.turn_index is not None else -1,
            "roundNumber": self.game_count,
            "players": players_data,
            "myHand": [c.to_dict() for c in me.hand] if me else [],
            "myId": for_player_id,
            "isHost": is_host,
            "gameSettings": self.settings.to_dict(),
        }
