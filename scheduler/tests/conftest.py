import uuid

import pytest

from scheduler.data.models import Card, Deck


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def deck(user_id):
    deck = Deck.objects.create(owner_id=user_id, title="Capitals")
    for position, (front, back) in enumerate([
        ("France", "Paris"),
        ("Japan", "Tokyo"),
        ("Peru", "Lima"),
    ]):
        Card.objects.create(deck=deck, front=front, back=back, position=position)
    return deck


@pytest.fixture
def cards(deck):
    return list(deck.cards.order_by("position"))
