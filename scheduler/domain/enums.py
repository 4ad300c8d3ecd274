from enum import IntEnum

from ..config import SUCCESS_THRESHOLD
from .errors import InvalidRating


class Rating(IntEnum):
    AGAIN = 0
    HARD = 1
    GOOD = 2
    EASY = 3

    @property
    def is_success(self) -> bool:
        return self >= SUCCESS_THRESHOLD

    @property
    def label(self) -> str:
        return RATING_LABELS[self]

    @classmethod
    def parse(cls, value) -> "Rating":
        """Validate a raw rating coming in from outside the scheduler."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidRating(f"Rating must be an integer between 0 and 3, got {value!r}")
        try:
            return cls(value)
        except ValueError:
            raise InvalidRating(f"Rating must be between 0 and 3, got {value}") from None


RATING_LABELS = {
    Rating.AGAIN: "Again",
    Rating.HARD: "Hard",
    Rating.GOOD: "Good",
    Rating.EASY: "Easy",
}
