from rest_framework import serializers
from apps.pubs.models import Pub
from .models import Manager, PubRequest, PubManagerConnectionRequest


class ManagerLoginSerializer(serializers.Serializer):
    email = serializers.CharField()
    password = serializers.CharField(trim_whitespace=False)


class ManagedPubSerializer(serializers.ModelSerializer):
    class Meta:
        model = Pub
        fields = ['id', 'name', 'slug']


class ManagerSessionSerializer(serializers.Serializer):
    """Output of the verify endpoint."""

    pub_id = serializers.UUIDField(source='pub.id')
    pub_name = serializers.CharField(source='pub.name')
    email = serializers.EmailField()
    pubs = ManagedPubSerializer(many=True)


class ManagerPubUpdateSerializer(serializers.Serializer):
    """Fields a manager may change on their pub."""

    pub_id = serializers.UUIDField(required=False)
    name = serializers.CharField(required=False, max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=50)
    website = serializers.CharField(required=False, allow_blank=True, max_length=500)
    opening_hours = serializers.CharField(required=False, allow_blank=True)
    amenities = serializers.ListField(child=serializers.CharField(), required=False)


class ManagedPubDetailSerializer(serializers.ModelSerializer):
    amenities = serializers.SerializerMethodField()

    class Meta:
        model = Pub
        fields = [
            'id', 'name', 'description', 'phone', 'website', 'opening_hours',
            'amenities', 'last_updated', 'updated_by',
        ]

    def get_amenities(self, obj):
        return [pa.amenity.key for pa in obj.pub_amenities.select_related('amenity')]


class ChangeRequestCreateSerializer(serializers.Serializer):
    type = serializers.CharField(allow_blank=True)
    subject = serializers.CharField(allow_blank=True)
    description = serializers.CharField(allow_blank=True)
    pub_id = serializers.UUIDField(required=False)


class ChangeRequestSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    type = serializers.CharField()
    subject = serializers.CharField()
    status = serializers.CharField()
    created_at = serializers.DateTimeField()
    pub_name = serializers.CharField()


class PubRequestSerializer(serializers.ModelSerializer):
    class Meta:
        model = PubRequest
        fields = [
            'id', 'pub_name', 'postcode', 'manager_name', 'contact_email',
            'contact_phone', 'status', 'notes', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class PubRequestUpdateSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    status = serializers.CharField()
    notes = serializers.JSONField(required=False, allow_null=True)


class ConnectionRequestSerializer(serializers.ModelSerializer):
    pub_name = serializers.CharField(source='pub.name', read_only=True)

    class Meta:
        model = PubManagerConnectionRequest
        fields = ['id', 'pub_id', 'pub_name', 'status', 'created_at', 'updated_at']
        read_only_fields = fields


class AdminConnectionRequestSerializer(ConnectionRequestSerializer):
    slug = serializers.CharField(source='pub.slug', read_only=True)
    area = serializers.CharField(source='pub.area', read_only=True)

    class Meta(ConnectionRequestSerializer.Meta):
        fields = ['id', 'email', 'pub_id', 'pub_name', 'slug', 'area', 'status', 'created_at', 'updated_at']
        read_only_fields = fields


class ConnectionRequestCreateSerializer(serializers.Serializer):
    pub_id = serializers.CharField(required=False, allow_blank=True)


class ConnectionDecisionSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    status = serializers.CharField()


class ConnectablePubSerializer(serializers.ModelSerializer):
    area = serializers.CharField(read_only=True)

    class Meta:
        model = Pub
        fields = ['id', 'name', 'slug', 'area']


class ManagerListSerializer(serializers.ModelSerializer):
    """Manager row for the admin dashboard."""

    pubs = serializers.SerializerMethodField()
    last_login = serializers.SerializerMethodField()
    login_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Manager
        fields = ['id', 'email', 'name', 'created_at', 'pubs', 'last_login', 'login_count']

    def get_pubs(self, obj):
        return [
            {'pub': ManagedPubSerializer(link.pub).data, 'role': link.role}
            for link in obj.pub_links.all()
        ]

    def get_last_login(self, obj):
        from .services import last_login_for

        login = last_login_for(obj)
        if login is None:
            return None
        return {
            'logged_in_at': login.created_at,
            'pub': {'id': str(login.pub_id), 'name': login.pub.name},
        }


class AddManagerSerializer(serializers.Serializer):
    email = serializers.CharField(required=False, allow_blank=True)
    name = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    role = serializers.CharField(required=False, default='owner')


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()
