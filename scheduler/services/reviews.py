from dataclasses import dataclass, field
from typing import Any, List

import structlog
from django.db import DatabaseError
from django.utils import timezone

from ..data.models import ReviewRecord
from ..data.repos import (
    get_card,
    get_deck,
    list_cards_for_deck,
    list_cards_for_owner,
    reviews_by_card_id,
    upsert_review,
)
from ..domain.enums import Rating
from ..domain.errors import SchedulerError, UnratableCard
from ..domain.selector import StudyQueue, select_due
from ..domain.session import StudySession
from ..utils.time import review_date

logger = structlog.get_logger()


@dataclass(frozen=True)
class ReviewOutcome:
    record: ReviewRecord
    created: bool


@dataclass(frozen=True)
class FailedReview:
    card_id: Any
    rating: Any
    error: str


@dataclass
class BatchOutcome:
    saved: List[ReviewRecord] = field(default_factory=list)
    failed: List[FailedReview] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def record_review(user_id, card_id, rating, now=None) -> ReviewOutcome:
    now = now or timezone.now()
    logger.info("review_received",
        user_id=str(user_id),
        card_id=str(card_id),
        rating=rating,
    )

    rating = Rating.parse(rating)
    card = get_card(card_id)
    if not card.is_ratable:
        raise UnratableCard(f"Card {card_id} has no front or back text")

    record, created = upsert_review(user_id, card, rating, now)

    logger.info("review_scheduled",
        user_id=str(user_id),
        card_id=str(card_id),
        rating=rating.label,
        created=created,
        ease_factor=record.ease_factor,
        interval_days=record.interval,
        repetitions=record.repetitions,
        next_review_date=record.next_review_date.isoformat(),
    )
    return ReviewOutcome(record=record, created=created)


def submit_reviews(user_id, ratings, now=None) -> BatchOutcome:
    """
    Persist a batch of (card_id, rating) pairs. Each one is saved on its own;
    a failure is reported and does not undo or stop the others.
    """
    now = now or timezone.now()
    outcome = BatchOutcome()

    for card_id, rating in ratings:
        try:
            outcome.saved.append(record_review(user_id, card_id, rating, now).record)
        except (SchedulerError, DatabaseError) as exc:
            logger.warning("review_failed",
                user_id=str(user_id),
                card_id=str(card_id),
                rating=rating,
                error=str(exc),
            )
            outcome.failed.append(FailedReview(card_id=card_id, rating=rating, error=str(exc)))

    logger.info("review_batch_submitted",
        user_id=str(user_id),
        saved=len(outcome.saved),
        failed=len(outcome.failed),
    )
    return outcome


def submit_session(user_id, session: StudySession, now=None) -> BatchOutcome:
    return submit_reviews(
        user_id, [(r.card_id, int(r.rating)) for r in session.ratings], now
    )


def _queue(user_id, cards, today) -> StudyQueue:
    reviews = reviews_by_card_id(user_id, [card.id for card in cards])
    return select_due(cards, reviews, today)


def deck_study_queue(user_id, deck_id, today=None) -> StudyQueue:
    today = today or review_date()
    deck = get_deck(deck_id)
    queue = _queue(user_id, list_cards_for_deck(deck.pk), today)
    logger.info("deck_queue_built",
        user_id=str(user_id),
        deck_id=str(deck.pk),
        today=today.isoformat(),
        **vars(queue.stats),
    )
    return queue


def collection_study_queue(user_id, today=None) -> StudyQueue:
    today = today or review_date()
    queue = _queue(user_id, list_cards_for_owner(user_id), today)
    logger.info("collection_queue_built",
        user_id=str(user_id),
        today=today.isoformat(),
        **vars(queue.stats),
    )
    return queue


def start_session(user_id, deck_id=None, today=None, started_at=None) -> StudySession:
    started_at = started_at or timezone.now()
    today = today or review_date(started_at)
    if deck_id is None:
        queue = collection_study_queue(user_id, today)
    else:
        queue = deck_study_queue(user_id, deck_id, today)
    records = reviews_by_card_id(user_id, queue.card_ids)
    states = {card_id: record.state for card_id, record in records.items()}
    return StudySession(queue, today, states, started_at=started_at)
