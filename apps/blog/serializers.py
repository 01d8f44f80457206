from rest_framework import serializers
from .models import BlogPost, BlogSubscription


class BlogPostListSerializer(serializers.ModelSerializer):
    reading_time = serializers.IntegerField(read_only=True)

    class Meta:
        model = BlogPost
        fields = [
            'slug',
            'title',
            'excerpt',
            'author',
            'published_at',
            'image_url',
            'tags',
            'reading_time',
        ]


class RelatedPostSerializer(serializers.ModelSerializer):
    class Meta:
        model = BlogPost
        fields = ['slug', 'title', 'excerpt', 'image_url', 'published_at']


class BlogPostDetailSerializer(serializers.ModelSerializer):
    """Public view of a published post."""

    reading_time = serializers.IntegerField(read_only=True)
    related = serializers.SerializerMethodField()

    class Meta:
        model = BlogPost
        fields = [
            'slug',
            'title',
            'excerpt',
            'content',
            'author',
            'published_at',
            'meta_title',
            'meta_description',
            'image_url',
            'suggested_link_type',
            'suggested_link_slug',
            'suggested_link_label',
            'map_config',
            'tags',
            'reading_time',
            'related',
        ]

    def get_related(self, obj):
        related = self.context.get('related', [])
        return RelatedPostSerializer(related, many=True).data


class AdminBlogPostSerializer(serializers.ModelSerializer):
    class Meta:
        model = BlogPost
        fields = [
            'id',
            'slug',
            'title',
            'excerpt',
            'content',
            'author',
            'published',
            'published_at',
            'meta_title',
            'meta_description',
            'image_url',
            'suggested_link_type',
            'suggested_link_slug',
            'suggested_link_label',
            'map_config',
            'tags',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class BlogPostWriteSerializer(serializers.Serializer):
    """
    Admin create/update payload.

    Every field is optional; updates only touch the fields sent.
    """

    slug = serializers.CharField(max_length=255, required=False, allow_blank=True)
    title = serializers.CharField(max_length=255, required=False)
    excerpt = serializers.CharField(required=False, allow_blank=True)
    content = serializers.CharField(required=False, allow_blank=True)
    author = serializers.CharField(max_length=100, required=False)
    published = serializers.BooleanField(required=False)
    meta_title = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    meta_description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    image_url = serializers.CharField(max_length=1000, required=False, allow_blank=True, allow_null=True)
    suggested_link_type = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    suggested_link_slug = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    suggested_link_label = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    map_config = serializers.JSONField(required=False, allow_null=True)
    tags = serializers.JSONField(required=False, allow_null=True, help_text='List of tags or comma separated string')

    def validate_tags(self, value):
        if value is not None and not isinstance(value, (list, str)):
            raise serializers.ValidationError('Tags must be a list or a comma separated string.')
        return value


class AdminPostListQuerySerializer(serializers.Serializer):
    published = serializers.ChoiceField(choices=['true', 'false'], required=False)
    limit = serializers.IntegerField(min_value=1, default=50)
    offset = serializers.IntegerField(min_value=0, default=0)


class SubscribeSerializer(serializers.Serializer):
    email = serializers.CharField()


class BlogSubscriptionSerializer(serializers.ModelSerializer):
    class Meta:
        model = BlogSubscription
        fields = ['id', 'email', 'created_at']


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()
