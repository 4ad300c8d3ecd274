"""Builds the ordered study queue for a session.

New cards come first, then cards whose review date has arrived. Each group
is sorted by deck position, with the card id as the last tie-break so the
order is total even when positions collide across decks.
"""
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping, Tuple

from .logic import is_due


@dataclass(frozen=True)
class DueStats:
    total: int
    due: int
    new: int
    to_study: int


@dataclass(frozen=True)
class StudyQueue:
    cards: Tuple[Any, ...]
    stats: DueStats

    @property
    def card_ids(self) -> list:
        return [card.id for card in self.cards]

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self):
        return iter(self.cards)

    def __bool__(self) -> bool:
        return bool(self.cards)


def _order_key(card):
    return (card.position, str(card.id))


def select_due(
    cards: Iterable[Any],
    reviews_by_card_id: Mapping[Any, Any],
    today: date,
) -> StudyQueue:
    """Pick the cards to study on ``today``.

    ``cards`` need ``id`` and ``position``; the records in
    ``reviews_by_card_id`` need ``next_review_date``. A card with no record
    is new. Neither input is modified.
    """
    cards = list(cards)

    new_cards = []
    reviewed = []
    for card in cards:
        record = reviews_by_card_id.get(card.id)
        if record is None:
            new_cards.append(card)
        else:
            reviewed.append((card, record))

    due_cards = [
        card for card, record in reviewed if is_due(record.next_review_date, today)
    ]

    new_cards.sort(key=_order_key)
    due_cards.sort(key=_order_key)
    ordered = tuple(new_cards + due_cards)

    return StudyQueue(
        cards=ordered,
        stats=DueStats(
            total=len(cards),
            due=len(due_cards),
            new=len(new_cards),
            to_study=len(ordered),
        ),
    )
