"""
Inbound WebSocket event models.

Each client message is a JSON object with a ``type`` discriminator. The
handler for a type validates the rest of the payload with the matching
model; anything that does not validate is answered with an errorMessage
to the sender only. startGame and pass carry no payload.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config import config
from constants import DECK_SIZE
from game import Card, Rank, Suit


class InboundEvent(BaseModel):
    """Base model: strips whitespace, accepts camelCase wire names."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)


class CardPayload(InboundEvent):
    suit: Suit
    rank: Rank

    def to_card(self) -> Card:
        return Card(self.suit, self.rank)


class CreateRoomEvent(InboundEvent):
    name: str = Field(..., min_length=1, max_length=config.MAX_NAME_LENGTH)
    game_limit: int = Field(0, ge=0, alias="gameLimit")


class JoinRoomEvent(InboundEvent):
    name: str = Field(..., min_length=1, max_length=config.MAX_NAME_LENGTH)
    room_code: str = Field(..., min_length=1, max_length=10, alias="roomCode")

    @field_validator("room_code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        return v.upper()


class PlayCardsEvent(InboundEvent):
    # An empty selection is reported by the play validator, not here
    cards: list[CardPayload] = Field(default_factory=list, max_length=DECK_SIZE)

    def to_cards(self) -> list[Card]:
        return [c.to_card() for c in self.cards]


class ContinueGameEvent(InboundEvent):
    decision: bool
