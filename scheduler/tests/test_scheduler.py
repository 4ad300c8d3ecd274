import pytest
import logging
from django.urls import reverse
from django.utils import timezone
from datetime import date, timedelta
import uuid

from scheduler.data.models import ReviewRecord

logger = logging.getLogger(__name__)

LABELS = {0: "Again", 1: "Hard", 2: "Good", 3: "Easy"}

# Helpers

def make_review(client, user_id, card_id, rating):
    url = reverse("review")
    payload = {
        "user_id": str(user_id),
        "card_id": str(card_id),
        "rating": rating,
    }
    resp = client.post(url, data=payload, content_type="application/json")
    logger.info(
        "POST /reviews rating=%s (%s) → status=%s",
        rating,
        LABELS.get(rating, "?"),
        resp.status_code,
    )
    return resp


def get_deck_due(client, deck_id, user_id, today=None):
    url = reverse("deck-due", kwargs={"deck_id": str(deck_id)})
    params = {"user_id": str(user_id)}
    if today:
        params["today"] = today.isoformat()
    resp = client.get(url, params)
    logger.info("GET /decks/%s/due → status=%s", deck_id, resp.status_code)
    return resp


def get_due_cards(client, user_id, today=None):
    url = reverse("due-cards", kwargs={"user_id": str(user_id)})
    params = {"today": today.isoformat()} if today else {}
    resp = client.get(url, params)
    logger.info("GET /users/%s/due-cards → status=%s", user_id, resp.status_code)
    return resp


# Tests

@pytest.mark.django_db
def test_first_review_creates_record(client, user_id, cards):
    """First rating returns 201 and an already-advanced record."""
    resp = make_review(client, user_id, cards[0].id, 3)
    data = resp.json()["review"]

    assert resp.status_code == 201
    assert data["card_id"] == str(cards[0].id)
    assert data["user_id"] == str(user_id)
    assert data["repetitions"] == 1
    assert data["interval"] == 1
    assert data["ease_factor"] == pytest.approx(2.6)
    expected = timezone.localdate() + timedelta(days=1)
    assert data["next_review_date"] == expected.isoformat()
    logger.info("✓ Passed: first Easy rating scheduled for tomorrow")


@pytest.mark.django_db
def test_second_review_updates_record(client, user_id, cards):
    make_review(client, user_id, cards[0].id, 2)

    resp = make_review(client, user_id, cards[0].id, 2)
    data = resp.json()["review"]

    assert resp.status_code == 200
    assert data["repetitions"] == 2
    assert data["interval"] == 6
    assert ReviewRecord.objects.filter(user_id=user_id).count() == 1
    logger.info("✓ Passed: second Good rating gives 6 days")


@pytest.mark.django_db
@pytest.mark.parametrize("rating", [-1, 4, "easy"])
def test_invalid_rating_rejected(client, user_id, cards, rating):
    resp = make_review(client, user_id, cards[0].id, rating)

    assert resp.status_code == 400
    assert "rating" in resp.json()
    assert ReviewRecord.objects.count() == 0


@pytest.mark.django_db
def test_missing_fields_rejected(client, user_id):
    resp = client.post(
        reverse("review"),
        data={"user_id": str(user_id), "rating": 2},
        content_type="application/json",
    )

    assert resp.status_code == 400
    assert "card_id" in resp.json()


@pytest.mark.django_db
def test_unknown_card_is_404(client, user_id):
    resp = make_review(client, user_id, uuid.uuid4(), 2)

    assert resp.status_code == 404
    assert "not found" in resp.json()["error"]


@pytest.mark.django_db
def test_batch_reports_partial_failure(client, user_id, cards):
    """One unknown card does not roll back the others."""
    missing = uuid.uuid4()
    payload = {
        "user_id": str(user_id),
        "reviews": [
            {"card_id": str(cards[0].id), "rating": 3},
            {"card_id": str(missing), "rating": 1},
            {"card_id": str(cards[1].id), "rating": 0},
        ],
    }
    resp = client.post(reverse("review-batch"), data=payload, content_type="application/json")
    data = resp.json()

    assert resp.status_code == 207
    assert [r["card_id"] for r in data["saved"]] == [str(cards[0].id), str(cards[1].id)]
    assert data["failed"][0]["card_id"] == str(missing)
    assert data["failed"][0]["rating"] == 1
    assert ReviewRecord.objects.filter(user_id=user_id).count() == 2
    logger.info("✓ Passed: batch kept 2 saves and reported 1 failure")


@pytest.mark.django_db
def test_batch_all_saved(client, user_id, cards):
    payload = {
        "user_id": str(user_id),
        "reviews": [{"card_id": str(c.id), "rating": 2} for c in cards],
    }
    resp = client.post(reverse("review-batch"), data=payload, content_type="application/json")

    assert resp.status_code == 200
    assert len(resp.json()["saved"]) == 3
    assert resp.json()["failed"] == []


@pytest.mark.django_db
def test_batch_with_invalid_rating_is_rejected_whole(client, user_id, cards):
    payload = {
        "user_id": str(user_id),
        "reviews": [
            {"card_id": str(cards[0].id), "rating": 2},
            {"card_id": str(cards[1].id), "rating": 7},
        ],
    }
    resp = client.post(reverse("review-batch"), data=payload, content_type="application/json")

    assert resp.status_code == 400
    assert ReviewRecord.objects.count() == 0


@pytest.mark.django_db
def test_deck_due_new_cards_first(client, user_id, cards):
    """Fresh deck: everything is new and comes back in position order."""
    resp = get_deck_due(client, cards[0].deck_id, user_id)
    data = resp.json()

    assert resp.status_code == 200
    assert [c["id"] for c in data["cards"]] == [str(c.id) for c in cards]
    assert data["stats"] == {"total": 3, "due": 0, "new": 3, "to_study": 3}


@pytest.mark.django_db
def test_deck_due_excludes_future_reviews(client, user_id, cards):
    make_review(client, user_id, cards[0].id, 2)
    make_review(client, user_id, cards[1].id, 2)

    today = timezone.localdate()
    resp_today = get_deck_due(client, cards[0].deck_id, user_id, today)
    resp_tomorrow = get_deck_due(client, cards[0].deck_id, user_id, today + timedelta(days=1))

    assert [c["id"] for c in resp_today.json()["cards"]] == [str(cards[2].id)]
    assert [c["id"] for c in resp_tomorrow.json()["cards"]] == [
        str(cards[2].id), str(cards[0].id), str(cards[1].id),
    ]
    assert resp_tomorrow.json()["stats"] == {"total": 3, "due": 2, "new": 1, "to_study": 3}
    logger.info("✓ Passed: due boundary is inclusive")


@pytest.mark.django_db
def test_deck_due_unknown_deck_is_404(client, user_id):
    resp = get_deck_due(client, uuid.uuid4(), user_id)

    assert resp.status_code == 404


@pytest.mark.django_db
def test_deck_due_requires_user_id(client, cards):
    url = reverse("deck-due", kwargs={"deck_id": str(cards[0].deck_id)})

    resp = client.get(url)

    assert resp.status_code == 400


@pytest.mark.django_db
def test_due_cards_for_collection(client, user_id, cards):
    resp = get_due_cards(client, user_id, date(2030, 1, 1))
    data = resp.json()

    assert resp.status_code == 200
    assert data["user_id"] == str(user_id)
    assert data["today"] == "2030-01-01"
    assert data["card_ids"] == [str(c.id) for c in cards]
    assert data["stats"]["to_study"] == 3


@pytest.mark.django_db
def test_due_cards_empty_for_unknown_user(client):
    resp = get_due_cards(client, uuid.uuid4())

    assert resp.status_code == 200
    assert resp.json()["card_ids"] == []
