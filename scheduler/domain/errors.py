class SchedulerError(Exception):
    """Base class for errors raised by the review scheduler."""


class InvalidInput(SchedulerError, ValueError):
    pass


class InvalidRating(InvalidInput):
    pass


class UnratableCard(InvalidInput):
    """Card has no front or back text yet, so it cannot be studied."""


class SessionComplete(InvalidInput):
    pass


class NotFound(SchedulerError, LookupError):
    pass


class CardNotFound(NotFound):
    pass


class DeckNotFound(NotFound):
    pass
