import logging

from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from .authentication import CronSecretAuthentication
from .permissions import IsCronJob
from .serializers import (
    UpcomingFixtureSerializer,
    CronResultSerializer,
    ErrorResponseSerializer,
)

logger = logging.getLogger(__name__)

LIVESCORES_CACHE_CONTROL = 'public, s-maxage=60, stale-while-revalidate=30'


# =============================================================================
# Cron
# =============================================================================

@extend_schema(
    responses={200: CronResultSerializer, 400: ErrorResponseSerializer, 401: ErrorResponseSerializer},
    description="Replace stored fixtures with the next 14 days of UK televised sport.",
    tags=['cron'],
)
@api_view(['GET', 'POST'])
@authentication_classes([CronSecretAuthentication])
@permission_classes([IsCronJob])
def cron_refresh_fixtures(request):
    from .services import refresh_fixtures, SportsDbNotConfiguredError

    try:
        count = refresh_fixtures()
    except SportsDbNotConfiguredError as e:
        logger.error("Fixtures refresh skipped: %s", e)
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'message': 'Fixtures refreshed',
        'count': count,
        'timestamp': timezone.now().isoformat(),
    })


@extend_schema(
    responses={200: CronResultSerializer, 401: ErrorResponseSerializer},
    description="Delete every stored fixture.",
    tags=['cron'],
)
@api_view(['GET', 'POST'])
@authentication_classes([CronSecretAuthentication])
@permission_classes([IsCronJob])
def cron_clear_fixtures(request):
    from .services import clear_fixtures

    return Response({
        'message': 'Fixtures cleared',
        'count': clear_fixtures(),
        'timestamp': timezone.now().isoformat(),
    })


# =============================================================================
# Public
# =============================================================================

@extend_schema(
    parameters=[
        OpenApiParameter('channel', OpenApiTypes.STR, description='Channel slug or name, e.g. sky-sports'),
    ],
    responses={200: UpcomingFixtureSerializer(many=True)},
    description="Stored fixtures that have not kicked off yet, earliest first.",
    tags=['fixtures'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def upcoming(request):
    from .services import upcoming_fixtures

    fixtures = upcoming_fixtures(channel=request.query_params.get('channel'))
    return Response({'fixtures': UpcomingFixtureSerializer(fixtures, many=True).data})


@extend_schema(
    responses={200: OpenApiTypes.OBJECT},
    description="Live football scores keyed by event ID. Empty when unavailable.",
    tags=['fixtures'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def livescores(request):
    from .services import live_scores

    response = Response({'scores': live_scores()})
    response['Cache-Control'] = LIVESCORES_CACHE_CONTROL
    return response
