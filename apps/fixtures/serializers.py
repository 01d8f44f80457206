from rest_framework import serializers
from .models import UpcomingFixture


class UpcomingFixtureSerializer(serializers.ModelSerializer):
    class Meta:
        model = UpcomingFixture
        fields = [
            'id', 'event_id', 'name', 'sport', 'league', 'image_url',
            'starting_at', 'channel_slug', 'channel_name', 'channel_link', 'country',
        ]
        read_only_fields = fields


class LiveScoreSerializer(serializers.Serializer):
    home_score = serializers.IntegerField(allow_null=True)
    away_score = serializers.IntegerField(allow_null=True)
    progress = serializers.CharField(allow_null=True)


class CronResultSerializer(serializers.Serializer):
    message = serializers.CharField()
    count = serializers.IntegerField()
    timestamp = serializers.DateTimeField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()
