from datetime import timedelta

from rest_framework import status, viewsets
from rest_framework.decorators import api_view, permission_classes, authentication_classes
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from apps.managers.authentication import PubManagerAuthentication
from apps.managers.permissions import IsPubManager
from .analytics import AnalyticsQueries
from .models import AdminAudit
from .permissions import CanViewPubAnalytics, ALL_PUBS
from .serializers import (
    # Input serializers
    EventBatchSerializer,
    PubAnalyticsQuerySerializer,
    BenchmarkQuerySerializer,
    OverviewQuerySerializer,
    # Response serializers
    EventBatchResponseSerializer,
    PubAnalyticsResponseSerializer,
    BenchmarkResponseSerializer,
    AdminOverviewSerializer,
    AdminAuditSerializer,
    ErrorSerializer,
)

DATE_RANGE_PARAMETERS = [
    OpenApiParameter('from', OpenApiTypes.DATE, description='Start date (YYYY-MM-DD)'),
    OpenApiParameter('to', OpenApiTypes.DATE, description='End date (YYYY-MM-DD)'),
    OpenApiParameter('period', OpenApiTypes.INT, description='Number of days to consider', default=30),
]


@extend_schema(
    request=EventBatchSerializer,
    responses={
        200: EventBatchResponseSerializer,
        400: ErrorSerializer,
    },
    description="Record a batch of browser analytics events.",
    tags=['analytics'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def track_events(request):
    """Store analytics events - thin HTTP handler."""
    from .services import ingest_events
    from .exceptions import InvalidEventsError

    try:
        processed = ingest_events(events=request.data.get('events'), user=request.user)
    except InvalidEventsError as e:
        return Response(
            {'error': str(e)},
            status=status.HTTP_400_BAD_REQUEST
        )

    return Response({'success': True, 'processed': processed})


@extend_schema(
    parameters=[
        OpenApiParameter('pub_id', OpenApiTypes.STR, description="Pub ID or 'all' for every managed pub"),
        *DATE_RANGE_PARAMETERS,
    ],
    responses={
        200: PubAnalyticsResponseSerializer,
        403: ErrorSerializer,
    },
    description="Traffic and engagement for the manager's pub (or all of their pubs).",
    tags=['pub-manager'],
)
@api_view(['GET'])
@authentication_classes([PubManagerAuthentication])
@permission_classes([IsPubManager, CanViewPubAnalytics])
def pub_analytics(request):
    """Pub manager analytics - thin HTTP handler."""
    from apps.managers.services import resolve_managed_pub, ManagersServiceError

    query_serializer = PubAnalyticsQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    session = request.user
    if params.get('pub_id') == ALL_PUBS:
        pub_ids = [pub.id for pub in session.pubs]
    else:
        try:
            pub_ids = [resolve_managed_pub(session=session, pub_id=params.get('pub_id')).id]
        except ManagersServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    data = AnalyticsQueries.pub_analytics(
        pub_ids=pub_ids,
        start=params['start'],
        end=params['end'],
    )
    return Response(data)


@extend_schema(
    parameters=[
        OpenApiParameter('pub_id', OpenApiTypes.STR, description='Pub ID (defaults to the token pub)'),
        OpenApiParameter('period', OpenApiTypes.INT, description='Number of days to consider', default=30),
        OpenApiParameter('radius', OpenApiTypes.FLOAT, description='Nearby radius in km', default=5),
    ],
    responses={
        200: BenchmarkResponseSerializer,
        403: ErrorSerializer,
    },
    description="Compare the pub with every pub and with pubs nearby.",
    tags=['pub-manager'],
)
@api_view(['GET'])
@authentication_classes([PubManagerAuthentication])
@permission_classes([IsPubManager, CanViewPubAnalytics])
def pub_benchmark(request):
    """Pub manager benchmark - thin HTTP handler."""
    from django.utils import timezone
    from apps.managers.services import resolve_managed_pub, ManagersServiceError

    query_serializer = BenchmarkQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    pub_id = params.get('pub_id')
    if pub_id == ALL_PUBS:
        pub_id = None
    try:
        pub = resolve_managed_pub(session=request.user, pub_id=pub_id)
    except ManagersServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    end = timezone.now()
    data = AnalyticsQueries.pub_benchmark(
        pub=pub,
        start=end - timedelta(days=params['period']),
        end=end,
        radius_km=params['radius'],
    )
    return Response(data)


@extend_schema(
    parameters=DATE_RANGE_PARAMETERS,
    responses={200: AdminOverviewSerializer},
    description="Site-wide analytics for the admin dashboard.",
    tags=['admin'],
)
@api_view(['GET'])
@permission_classes([IsAdminUser])
def admin_analytics_overview(request):
    """Admin overview - thin HTTP handler."""
    query_serializer = OverviewQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    return Response(AnalyticsQueries.admin_overview(start=params['start'], end=params['end']))


class AuditPagination(PageNumberPagination):
    """Pagination for the audit log."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class AdminAuditViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Admin audit log, newest first.

    list: Paged entries, optionally filtered by ``entity``, ``entity_id`` or ``action``
    retrieve: One entry
    """

    serializer_class = AdminAuditSerializer
    permission_classes = [IsAdminUser]
    pagination_class = AuditPagination

    def get_queryset(self):
        queryset = AdminAudit.objects.all()
        for param in ('entity', 'entity_id', 'action'):
            value = self.request.query_params.get(param)
            if value:
                queryset = queryset.filter(**{param: value})
        return queryset

    @extend_schema(
        parameters=[
            OpenApiParameter('entity', OpenApiTypes.STR, description='Filter by entity kind'),
            OpenApiParameter('entity_id', OpenApiTypes.STR, description='Filter by entity ID'),
            OpenApiParameter('action', OpenApiTypes.STR, description='Filter by action'),
        ],
        tags=['admin'],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)
