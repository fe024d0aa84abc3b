"""
Type definitions used across layers
"""

from enum import Enum, StrEnum, auto


class Side(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Side":
        return Side.BLACK if self is Side.WHITE else Side.WHITE


class SessionStatus(Enum):
    ACTIVE = auto()
    TERMINATED = auto()


class Outcome(StrEnum):
    CHECKMATE = "checkmate"
    DRAW = "draw"
    RESIGNATION = "resignation"
    ABANDONMENT = "abandonment"
