from .data.models import Card, Deck, ReviewRecord  # noqa: F401
