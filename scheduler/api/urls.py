from django.urls import path
from .views import ReviewView, BatchReviewView, DeckDueView, DueCardsView

urlpatterns = [
    path("reviews", ReviewView.as_view(), name="review"),
    path("reviews/batch", BatchReviewView.as_view(), name="review-batch"),
    path("decks/<uuid:deck_id>/due", DeckDueView.as_view(), name="deck-due"),
    path("users/<uuid:user_id>/due-cards", DueCardsView.as_view(), name="due-cards"),
]
