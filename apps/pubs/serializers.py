from rest_framework import serializers
from .models import City, Borough, Amenity, Pub, PubPhoto, AreaFeaturedPub
from .services.pub_search import price_range_for_rating


class BoroughSerializer(serializers.ModelSerializer):

    class Meta:
        model = Borough
        fields = ['id', 'name']
        read_only_fields = ['id']


class CitySerializer(serializers.ModelSerializer):
    boroughs = BoroughSerializer(many=True, read_only=True)

    class Meta:
        model = City
        fields = ['id', 'name', 'boroughs']
        read_only_fields = ['id']


class AmenitySerializer(serializers.ModelSerializer):

    class Meta:
        model = Amenity
        fields = ['id', 'key', 'label']
        read_only_fields = ['id']


class PubPhotoSerializer(serializers.ModelSerializer):

    class Meta:
        model = PubPhoto
        fields = ['id', 'url', 'is_cover', 'uploaded_by', 'created_at']
        read_only_fields = fields


class PubSummarySerializer(serializers.ModelSerializer):
    """Compact pub used by search results and map pins."""

    borough = serializers.CharField(source='area', read_only=True)
    features = serializers.SerializerMethodField()
    summary = serializers.SerializerMethodField()

    class Meta:
        model = Pub
        fields = [
            'id',
            'place_id',
            'slug',
            'name',
            'borough',
            'lat',
            'lng',
            'rating',
            'type',
            'features',
            'address',
            'summary',
        ]
        read_only_fields = fields

    def get_features(self, obj):
        return obj.display_features()

    def get_summary(self, obj):
        return {
            'has_photo': bool(obj.photo_url or obj.photo_name),
            'has_website': bool(obj.website),
            'has_phone': bool(obj.phone),
        }


class PubSerializer(serializers.ModelSerializer):
    """Full public pub detail."""

    area = serializers.CharField(read_only=True)
    city_name = serializers.CharField(source='city.name', read_only=True, default=None)
    features = serializers.SerializerMethodField()
    amenities = serializers.SerializerMethodField()
    price_range = serializers.SerializerMethodField()

    class Meta:
        model = Pub
        fields = [
            'id',
            'place_id',
            'slug',
            'name',
            'description',
            'type',
            'area',
            'city_name',
            'features',
            'amenities',
            'rating',
            'review_count',
            'price_range',
            'address',
            'postcode',
            'phone',
            'website',
            'opening_hours',
            'lat',
            'lng',
            'photo_url',
            'photo_name',
            'user_review_count',
            'user_rating_avg',
            'checkin_count',
            'wishlist_count',
            'last_updated',
        ]
        read_only_fields = fields

    def get_features(self, obj):
        return obj.display_features()

    def get_amenities(self, obj):
        return [
            {'key': pa.amenity.key, 'label': pa.amenity.label, 'value': pa.value}
            for pa in obj.pub_amenities.all()
        ]

    def get_price_range(self, obj):
        return price_range_for_rating(obj.rating or 0)


class RandomPubSerializer(PubSerializer):
    """Pub detail plus the selection weight it was drawn with."""

    weight = serializers.SerializerMethodField()

    class Meta(PubSerializer.Meta):
        fields = PubSerializer.Meta.fields + ['weight']
        read_only_fields = fields

    def get_weight(self, obj):
        from .services.random_selection import pub_weight
        return round(pub_weight(obj), 4)


class PubAdminSerializer(serializers.ModelSerializer):
    """Editable pub fields for the admin back-office."""

    area = serializers.CharField(read_only=True)
    has_manager_password = serializers.SerializerMethodField()

    class Meta:
        model = Pub
        fields = [
            'id',
            'place_id',
            'slug',
            'name',
            'description',
            'type',
            'features',
            'rating',
            'review_count',
            'address',
            'postcode',
            'phone',
            'website',
            'opening_hours',
            'lat',
            'lng',
            'photo_url',
            'photo_name',
            'city',
            'borough',
            'area',
            'manager_email',
            'has_manager_password',
            'last_updated',
            'updated_by',
            'created_at',
        ]
        read_only_fields = ['id', 'slug', 'area', 'has_manager_password', 'last_updated', 'updated_by', 'created_at']

    def get_has_manager_password(self, obj):
        return bool(obj.manager_password)

    def validate_features(self, value):
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise serializers.ValidationError('Features must be a list of strings')
        return value


class AreaTopPubSerializer(serializers.ModelSerializer):
    """Pub card on an area page."""

    url = serializers.SerializerMethodField()
    image = serializers.CharField(source='photo_url', read_only=True)
    price_range = serializers.SerializerMethodField()
    badges = serializers.SerializerMethodField()

    class Meta:
        model = Pub
        fields = ['id', 'name', 'url', 'image', 'rating', 'review_count', 'price_range', 'badges', 'lat', 'lng']
        read_only_fields = fields

    def get_url(self, obj):
        return f'/pubs/{obj.slug}'

    def get_price_range(self, obj):
        return price_range_for_rating(obj.rating or 0)

    def get_badges(self, obj):
        return obj.amenity_labels()[:5]


class AreaFeaturedPubSerializer(serializers.ModelSerializer):
    pub_name = serializers.CharField(source='pub.name', read_only=True)
    pub_slug = serializers.CharField(source='pub.slug', read_only=True)

    class Meta:
        model = AreaFeaturedPub
        fields = ['id', 'area_name', 'pub', 'pub_name', 'pub_slug', 'image_url', 'created_at']
        read_only_fields = ['id', 'pub_name', 'pub_slug', 'created_at']


class AmenityFilterSerializer(serializers.Serializer):
    slug = serializers.CharField()
    title = serializers.CharField()
    description = serializers.CharField()
    icon = serializers.CharField()


class BoundsSerializer(serializers.Serializer):
    north = serializers.FloatField()
    south = serializers.FloatField()
    east = serializers.FloatField()
    west = serializers.FloatField()


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class PubSearchQuerySerializer(serializers.Serializer):
    """
    Validate /api/pubs/search/ query parameters.

    ``features`` is a comma separated list; ``bounds`` is a JSON object.
    """

    search = serializers.CharField(required=False, allow_blank=True)
    borough = serializers.CharField(required=False, allow_blank=True)
    type = serializers.CharField(required=False, allow_blank=True)
    features = serializers.CharField(required=False, allow_blank=True)
    min_rating = serializers.FloatField(required=False, min_value=0, max_value=5)
    price_range = serializers.CharField(required=False, allow_blank=True)
    opening = serializers.CharField(required=False, allow_blank=True)
    bounds = serializers.JSONField(required=False)
    sort_by = serializers.ChoiceField(choices=['name', 'rating', 'review_count'], default='name')
    sort_order = serializers.ChoiceField(choices=['asc', 'desc'], default='asc')
    page = serializers.IntegerField(required=False, default=1, min_value=1)
    limit = serializers.IntegerField(required=False, default=20, min_value=1, max_value=2000)

    def validate_bounds(self, value):
        if isinstance(value, str):
            import json
            try:
                value = json.loads(value)
            except ValueError:
                raise serializers.ValidationError('Bounds must be a JSON object')
        bounds = BoundsSerializer(data=value)
        bounds.is_valid(raise_exception=True)
        return bounds.validated_data


class RandomPubQuerySerializer(serializers.Serializer):
    """Validate /api/random-pub/ query parameters."""

    area = serializers.CharField(required=False, allow_blank=True)
    amenities = serializers.CharField(required=False, allow_blank=True)
    open_now = serializers.BooleanField(required=False, default=False)
    min_rating = serializers.FloatField(required=False, min_value=0, max_value=5)
    exclude_ids = serializers.CharField(required=False, allow_blank=True)
    search_selections = serializers.CharField(required=False, allow_blank=True)
