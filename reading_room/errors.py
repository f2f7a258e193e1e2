from __future__ import annotations


class ReadingRoomError(Exception):
    """Base class for errors raised by the reading room core."""


class PackageDecodeError(ReadingRoomError):
    """The book package could not be opened or holds no readable chapters."""


class ImageNotFoundError(ReadingRoomError, KeyError):
    def __init__(self, image_id: str):
        super().__init__(image_id)
        self.image_id = image_id

    def __str__(self) -> str:
        return f"Image not found: {self.image_id}"
