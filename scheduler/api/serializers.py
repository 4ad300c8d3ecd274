from rest_framework import serializers

from ..data.models import Card, ReviewRecord


class ReviewInSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    card_id = serializers.UUIDField()
    rating = serializers.IntegerField(min_value=0, max_value=3)


class BatchItemSerializer(serializers.Serializer):
    card_id = serializers.UUIDField()
    rating = serializers.IntegerField(min_value=0, max_value=3)


class BatchReviewInSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    reviews = BatchItemSerializer(many=True, allow_empty=False)


class DueQuerySerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    today = serializers.DateField(required=False)  # ISO-8601, defaults to local today


class CollectionDueQuerySerializer(serializers.Serializer):
    today = serializers.DateField(required=False)


class ReviewRecordSerializer(serializers.ModelSerializer):
    card_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = ReviewRecord
        fields = [
            "user_id",
            "card_id",
            "ease_factor",
            "interval",
            "repetitions",
            "next_review_date",
            "last_reviewed_at",
        ]


class CardSerializer(serializers.ModelSerializer):
    deck_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Card
        fields = ["id", "deck_id", "front", "back", "is_reversible", "position"]


class DueStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    due = serializers.IntegerField()
    new = serializers.IntegerField()
    to_study = serializers.IntegerField()


class FailedReviewSerializer(serializers.Serializer):
    card_id = serializers.UUIDField()
    rating = serializers.IntegerField()
    error = serializers.CharField()
