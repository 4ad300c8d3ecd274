import uuid

from django.db import models
from django.utils import timezone

from ..config import INITIAL_EASE_FACTOR
from ..domain.logic import SchedulerState


class Deck(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner_id = models.UUIDField()
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    source_url = models.URLField(blank=True, default="")
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        indexes = [
            models.Index(fields=["owner_id"], name="scheduler_d_owner_i_5b1c0e_idx"),
        ]

    def __str__(self):
        return self.title


class Card(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    deck = models.ForeignKey(Deck, on_delete=models.CASCADE, related_name="cards")
    front = models.TextField()
    back = models.TextField()
    is_reversible = models.BooleanField(default=False)
    position = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["deck", "position"]

    @property
    def is_ratable(self) -> bool:
        return bool(self.front.strip()) and bool(self.back.strip())


class ReviewRecord(models.Model):
    """Review state of one card for one user. Updated in place on every rating."""

    user_id = models.UUIDField()
    card = models.ForeignKey(Card, on_delete=models.CASCADE, related_name="reviews")
    ease_factor = models.FloatField(default=INITIAL_EASE_FACTOR)
    interval = models.PositiveIntegerField(default=0)     # days
    repetitions = models.PositiveIntegerField(default=0)
    next_review_date = models.DateField(default=timezone.localdate)
    last_reviewed_at = models.DateTimeField(default=timezone.now)

    class Meta:
        unique_together = (("user_id", "card"),)
        indexes = [
            models.Index(fields=["user_id", "next_review_date"], name="scheduler_r_user_id_8f3a2d_idx"),
        ]

    @property
    def state(self) -> SchedulerState:
        return SchedulerState(
            ease_factor=self.ease_factor,
            interval=self.interval,
            repetitions=self.repetitions,
        )

    def apply(self, result, reviewed_at):
        self.ease_factor = result.ease_factor
        self.interval = result.interval
        self.repetitions = result.repetitions
        self.next_review_date = result.next_review_date
        self.last_reviewed_at = reviewed_at
