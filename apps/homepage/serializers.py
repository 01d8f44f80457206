from rest_framework import serializers
from .models import HomepageSlot


class HomepageSlotSerializer(serializers.ModelSerializer):
    class Meta:
        model = HomepageSlot
        fields = [
            'id', 'area_slug', 'amenity_slug', 'title', 'subtitle', 'href', 'icon',
            'pub_count', 'score', 'is_seasonal', 'is_active', 'position', 'updated_at',
        ]
        read_only_fields = fields


class HomepageTileSerializer(serializers.ModelSerializer):
    """Active slot in the shape the homepage renders."""

    id = serializers.CharField(read_only=True)
    city = serializers.SerializerMethodField()
    amenity = serializers.SerializerMethodField()

    class Meta:
        model = HomepageSlot
        fields = [
            'id', 'title', 'subtitle', 'href', 'icon', 'city', 'amenity',
            'pub_count', 'score', 'is_seasonal',
        ]

    @staticmethod
    def _title_case(slug):
        return slug.replace('-', ' ').title()

    def get_city(self, obj):
        return self._title_case(obj.area_slug)

    def get_amenity(self, obj):
        return self._title_case(obj.amenity_slug) if obj.amenity_slug else 'All Pubs'


class SlotInputSerializer(serializers.Serializer):
    area_slug = serializers.SlugField(max_length=100)
    amenity_slug = serializers.SlugField(max_length=100)
    title = serializers.CharField(max_length=255)
    subtitle = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    href = serializers.CharField(max_length=500)
    icon = serializers.CharField(max_length=20, required=False, default='🍺')
    pub_count = serializers.IntegerField(min_value=0, required=False, default=0)
    score = serializers.FloatField(required=False, default=0)
    is_seasonal = serializers.BooleanField(required=False, default=False)
    position = serializers.IntegerField(min_value=1, required=False)


class SlotActionSerializer(serializers.Serializer):
    action = serializers.CharField()
    slots = SlotInputSerializer(many=True, required=False)


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()
