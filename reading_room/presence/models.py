from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """
    A connected reader. Same name with a different color is a different
    reader; the pair is only joined into a string on the wire.
    """

    name: str
    color: str

    def wire_key(self) -> str:
        return f"{self.name}:{self.color}"


@dataclass(frozen=True)
class Position:
    # Client-supplied and stored verbatim; bounds are not checked.
    start_element: int
    start_percent: float
    end_element: int
    end_percent: float


@dataclass(frozen=True)
class UserPosition:
    name: str
    color: str
    position: Position

    @property
    def identity(self) -> Identity:
        return Identity(self.name, self.color)


@dataclass
class RegistryEntry:
    user: UserPosition
    last_seen: float
