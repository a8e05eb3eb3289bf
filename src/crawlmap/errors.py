class CrawlmapError(Exception):
    """Base error for crawlmap domain exceptions."""


class GenerationExhausted(CrawlmapError):
    """Raised when the attempt cap is reached without a valid room graph."""

    def __init__(self, attempts: int, min_rooms: int, max_rooms: int) -> None:
        self.attempts = attempts
        self.min_rooms = min_rooms
        self.max_rooms = max_rooms
        super().__init__(
            f"No valid dungeon after {attempts} attempts "
            f"(rooms {min_rooms}..{max_rooms} with a boss leaf required)"
        )


class InvalidSettings(CrawlmapError):
    """Raised when generation settings fail validation."""


class RoomStateError(CrawlmapError):
    """Raised when a room is asked to move backwards through its lifecycle."""


class DuplicateRoomError(CrawlmapError):
    """Raised when a second room is registered at an occupied coordinate."""
