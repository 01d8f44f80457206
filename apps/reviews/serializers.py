from rest_framework import serializers
from .models import Review, Checkin, WishlistItem
from apps.accounts.models import User
from apps.pubs.models import Pub


class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'display_name']
        read_only_fields = fields

    def get_display_name(self, obj):
        return obj.get_display_name()


class PubMinimalSerializer(serializers.ModelSerializer):
    """Minimal pub info for nested serialization."""

    area = serializers.CharField(read_only=True)

    class Meta:
        model = Pub
        fields = ['id', 'place_id', 'slug', 'name', 'area', 'rating', 'photo_url']
        read_only_fields = fields


class ReviewSerializer(serializers.ModelSerializer):
    """Main review serializer."""

    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = Review
        fields = [
            'id',
            'pub',
            'user',
            'rating',
            'title',
            'body',
            'photos',
            'is_edited',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class MyReviewSerializer(ReviewSerializer):
    pub = PubMinimalSerializer(read_only=True)


class ReviewCreateSerializer(serializers.Serializer):
    """Input for POST /api/reviews/."""

    pub_id = serializers.CharField()
    rating = serializers.IntegerField(min_value=1, max_value=5)
    title = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    body = serializers.CharField(min_length=10, max_length=2000)
    photos = serializers.ListField(child=serializers.URLField(), max_length=5, required=False, default=list)


class ReviewUpdateSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5, required=False)
    title = serializers.CharField(max_length=100, required=False, allow_blank=True)
    body = serializers.CharField(min_length=10, max_length=2000, required=False)
    photos = serializers.ListField(child=serializers.URLField(), max_length=5, required=False)


class CheckinSerializer(serializers.ModelSerializer):
    pub = PubMinimalSerializer(read_only=True)

    class Meta:
        model = Checkin
        fields = ['id', 'pub', 'note', 'visited_at', 'created_at']
        read_only_fields = fields


class CheckinCreateSerializer(serializers.Serializer):
    pub_id = serializers.CharField()
    note = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    visited_at = serializers.DateTimeField(required=False)


class WishlistItemSerializer(serializers.ModelSerializer):
    pub = PubMinimalSerializer(read_only=True)

    class Meta:
        model = WishlistItem
        fields = ['id', 'pub', 'created_at']
        read_only_fields = fields


class WishlistCreateSerializer(serializers.Serializer):
    pub_id = serializers.CharField()


class PubUserDataSerializer(serializers.Serializer):
    user_review_count = serializers.IntegerField()
    user_rating_avg = serializers.FloatField()
    wishlist_count = serializers.IntegerField()
    checkin_count = serializers.IntegerField()
    has_reviewed = serializers.BooleanField(required=False)
    has_checked_in = serializers.BooleanField(required=False)
    in_wishlist = serializers.BooleanField(required=False)


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()
