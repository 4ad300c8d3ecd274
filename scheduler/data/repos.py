import uuid

from django.db import IntegrityError, transaction
from django.utils import timezone

from ..domain.errors import CardNotFound, DeckNotFound
from ..domain.logic import SchedulerState, advance
from ..utils.time import review_date
from .models import Card, Deck, ReviewRecord


def _as_uuid(value):
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def get_card(card_id):
    pk = _as_uuid(card_id)
    if pk is None:
        raise CardNotFound(f"Card {card_id} not found")
    try:
        return Card.objects.get(pk=pk)
    except Card.DoesNotExist:
        raise CardNotFound(f"Card {card_id} not found") from None


def get_deck(deck_id):
    pk = _as_uuid(deck_id)
    if pk is None:
        raise DeckNotFound(f"Deck {deck_id} not found")
    try:
        return Deck.objects.get(pk=pk)
    except Deck.DoesNotExist:
        raise DeckNotFound(f"Deck {deck_id} not found") from None


def get_review(user_id, card_id):
    return ReviewRecord.objects.filter(user_id=user_id, card_id=card_id).first()


def list_cards_for_deck(deck_id):
    return list(Card.objects.filter(deck_id=deck_id).order_by("position"))


def list_cards_for_owner(owner_id):
    return list(
        Card.objects.filter(deck__owner_id=owner_id).order_by("position", "deck_id")
    )


def reviews_by_card_id(user_id, card_ids):
    records = ReviewRecord.objects.filter(user_id=user_id, card_id__in=list(card_ids))
    return {record.card_id: record for record in records}


def _lock_review(user_id, card):
    """
    Fetch the review row and lock it for update.
    Returns an unsaved row seeded with the initial state if none exists yet.
    """
    try:
        return (ReviewRecord.objects
                .select_for_update()
                .get(user_id=user_id, card=card)), False
    except ReviewRecord.DoesNotExist:
        initial = SchedulerState.initial()
        return ReviewRecord(
            user_id=user_id, card=card,
            ease_factor=initial.ease_factor,
            interval=initial.interval,
            repetitions=initial.repetitions,
        ), True


def upsert_review(user_id, card, rating, now=None):
    """
    Apply one rating to the (user, card) record as a single atomic
    read-modify-write. A brand-new record is advanced before its first save.
    """
    now = now or timezone.now()
    today = review_date(now)

    for attempt in range(2):
        try:
            with transaction.atomic():
                record, created = _lock_review(user_id, card)
                record.apply(advance(record.state, rating, today), reviewed_at=now)
                record.save()
                return record, created
        except IntegrityError:
            # Lost the race to insert the first row; the retry locks the winner's.
            if attempt:
                raise
