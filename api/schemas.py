from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from reading_room.presence import Identity, Position


class PositionPayload(BaseModel):
    start_element: int
    # Range is not checked, but the value must survive JSON serialization on /positions.
    start_percent: float = Field(allow_inf_nan=False)
    end_element: int
    end_percent: float = Field(allow_inf_nan=False)

    def to_position(self) -> Position:
        return Position(
            start_element=self.start_element,
            start_percent=self.start_percent,
            end_element=self.end_element,
            end_percent=self.end_percent,
        )


class PositionUpdate(BaseModel):
    name: str
    color: str
    position: PositionPayload
    password_hash: Optional[str] = None

    @property
    def identity(self) -> Identity:
        return Identity(name=self.name, color=self.color)
