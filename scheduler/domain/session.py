from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from .enums import Rating
from .errors import SessionComplete
from .logic import ScheduleResult, SchedulerState, advance


@dataclass(frozen=True)
class SessionRating:
    card_id: Any
    rating: Rating
    result: ScheduleResult


@dataclass(frozen=True)
class SessionStats:
    cards_reviewed: int
    correct: int
    accuracy: float
    time_spent_seconds: int


class StudySession:
    """Walks a study queue one card at a time and buffers the outcomes.

    Ratings are scheduled as they come in so the caller can show the next
    review date, but nothing is saved here: the buffered ``ratings`` are
    handed to the review service when the session is submitted.
    """

    def __init__(
        self,
        queue,
        today: date,
        states: Optional[Dict[Any, SchedulerState]] = None,
        started_at: Optional[datetime] = None,
    ):
        self.cards = list(queue)
        self.states = dict(states or {})
        self.today = today
        self.started_at = started_at
        self._ratings: List[SessionRating] = []

    @property
    def current(self):
        if self.is_complete:
            return None
        return self.cards[len(self._ratings)]

    @property
    def remaining(self) -> int:
        return len(self.cards) - len(self._ratings)

    @property
    def is_complete(self) -> bool:
        return len(self._ratings) == len(self.cards)

    @property
    def ratings(self) -> List[SessionRating]:
        return list(self._ratings)

    def rate(self, rating) -> ScheduleResult:
        rating = Rating.parse(rating)
        card = self.current
        if card is None:
            raise SessionComplete("Every card in this session has already been rated")

        state = self.states.get(card.id) or SchedulerState.initial()
        result = advance(state, rating, self.today)
        self._ratings.append(SessionRating(card_id=card.id, rating=rating, result=result))
        return result

    def stats(self, now: Optional[datetime] = None) -> SessionStats:
        """Summary so far. Time spent is only known when both ``started_at``
        and ``now`` are given; otherwise it is reported as 0."""
        elapsed = 0
        if self.started_at is not None and now is not None:
            elapsed = max(0, int((now - self.started_at).total_seconds()))
        reviewed = len(self._ratings)
        correct = sum(1 for r in self._ratings if r.rating.is_success)
        return SessionStats(
            cards_reviewed=reviewed,
            correct=correct,
            accuracy=correct / reviewed if reviewed else 0.0,
            time_spent_seconds=elapsed,
        )
