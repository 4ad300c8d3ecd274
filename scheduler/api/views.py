from rest_framework import views, status
from rest_framework.response import Response
import structlog
import uuid
from ..services.reviews import (
    collection_study_queue,
    deck_study_queue,
    record_review,
    submit_reviews,
)
from ..utils.time import review_date
from .serializers import (
    BatchReviewInSerializer,
    CardSerializer,
    CollectionDueQuerySerializer,
    DueQuerySerializer,
    DueStatsSerializer,
    FailedReviewSerializer,
    ReviewInSerializer,
    ReviewRecordSerializer,
)

base_logger = structlog.get_logger()


class ReviewView(views.APIView):
    def post(self, request):
        # Create a unique request_id
        request_id = str(uuid.uuid4())
        logger = base_logger.bind(request_id=request_id)

        s = ReviewInSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        user_id = s.validated_data["user_id"]
        card_id = s.validated_data["card_id"]
        rating = s.validated_data["rating"]

        outcome = record_review(user_id, card_id, rating)
        status_code = status.HTTP_201_CREATED if outcome.created else status.HTTP_200_OK

        logger.info(
            "review_api_response",
            user_id=str(user_id),
            card_id=str(card_id),
            rating=rating,
            created=outcome.created,
            interval_days=outcome.record.interval,
            next_review_date=outcome.record.next_review_date.isoformat(),
            status=status_code,
        )

        return Response(
            {"review": ReviewRecordSerializer(outcome.record).data},
            status=status_code,
        )


class BatchReviewView(views.APIView):
    def post(self, request):
        request_id = str(uuid.uuid4())
        logger = base_logger.bind(request_id=request_id)

        s = BatchReviewInSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        user_id = s.validated_data["user_id"]
        pairs = [(item["card_id"], item["rating"]) for item in s.validated_data["reviews"]]

        outcome = submit_reviews(user_id, pairs)
        # Partial failures are reported, the successful updates stay saved.
        status_code = status.HTTP_200_OK if outcome.ok else status.HTTP_207_MULTI_STATUS

        logger.info(
            "review_batch_api_response",
            user_id=str(user_id),
            submitted=len(pairs),
            saved=len(outcome.saved),
            failed=len(outcome.failed),
            status=status_code,
        )

        return Response(
            {
                "saved": ReviewRecordSerializer(outcome.saved, many=True).data,
                "failed": FailedReviewSerializer(outcome.failed, many=True).data,
            },
            status=status_code,
        )


class DeckDueView(views.APIView):
    def get(self, request, deck_id):
        request_id = str(uuid.uuid4())
        logger = base_logger.bind(request_id=request_id)

        qs = DueQuerySerializer(data=request.query_params)
        qs.is_valid(raise_exception=True)
        user_id = qs.validated_data["user_id"]
        today = qs.validated_data.get("today") or review_date()

        queue = deck_study_queue(user_id, deck_id, today)

        logger.info(
            "deck_due_api_response",
            user_id=str(user_id),
            deck_id=str(deck_id),
            today=today.isoformat(),
            card_count=len(queue),
        )

        return Response(
            {
                "cards": CardSerializer(queue.cards, many=True).data,
                "stats": DueStatsSerializer(queue.stats).data,
            }
        )


class DueCardsView(views.APIView):
    def get(self, request, user_id):
        request_id = str(uuid.uuid4())
        logger = base_logger.bind(request_id=request_id)

        qs = CollectionDueQuerySerializer(data=request.query_params)
        qs.is_valid(raise_exception=True)
        today = qs.validated_data.get("today") or review_date()

        queue = collection_study_queue(user_id, today)
        card_ids = [str(card_id) for card_id in queue.card_ids]

        logger.info(
            "due_cards_api_response",
            user_id=str(user_id),
            today=today.isoformat(),
            card_count=len(card_ids),
        )

        return Response(
            {
                "user_id": str(user_id),
                "today": today.isoformat(),
                "card_ids": card_ids,
                "cards": CardSerializer(queue.cards, many=True).data,
                "stats": DueStatsSerializer(queue.stats).data,
            }
        )
