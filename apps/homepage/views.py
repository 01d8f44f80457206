import logging

from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema
from drf_spectacular.types import OpenApiTypes
from apps.fixtures.authentication import CronSecretAuthentication
from apps.fixtures.permissions import IsCronJob
from .serializers import (
    HomepageSlotSerializer,
    HomepageTileSerializer,
    SlotActionSerializer,
    ErrorResponseSerializer,
)

logger = logging.getLogger(__name__)

SLOTS_CACHE_CONTROL = 'public, s-maxage=300, stale-while-revalidate=600'
SLOT_ACTIONS = ('regenerate', 'set_slots')


# =============================================================================
# Public
# =============================================================================

@extend_schema(
    responses={200: OpenApiTypes.OBJECT},
    description=(
        "Homepage tiles: active slots by position then score, or tiles generated "
        "from pub data when no slot is active."
    ),
    tags=['homepage'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def homepage_slots(request):
    from .services import active_slots, generated_tiles

    slots = list(active_slots())
    if slots:
        tiles, source = HomepageTileSerializer(slots, many=True).data, 'database'
    else:
        tiles, source = generated_tiles(), 'generated'

    response = Response({
        'tiles': tiles,
        'total': len(tiles),
        'source': source,
        'generated_at': timezone.now().isoformat(),
    })
    response['Cache-Control'] = SLOTS_CACHE_CONTROL
    return response


# =============================================================================
# Admin
# =============================================================================

@extend_schema(
    methods=['GET'],
    responses={200: HomepageSlotSerializer(many=True)},
    description="Active homepage slots.",
    tags=['admin'],
)
@extend_schema(
    methods=['POST'],
    request=SlotActionSerializer,
    responses={200: OpenApiTypes.OBJECT, 400: ErrorResponseSerializer},
    description="action=regenerate rescores all candidates; action=set_slots activates the given slots.",
    tags=['admin'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAdminUser])
def admin_homepage_slots(request):
    from apps.analytics.services import record_audit
    from .services import active_slots, regenerate_slots, set_slots, InvalidSlotsError

    if request.method == 'GET':
        return Response({'slots': HomepageSlotSerializer(active_slots(), many=True).data})

    if request.data.get('action') not in SLOT_ACTIONS:
        return Response({'error': 'Invalid action'}, status=status.HTTP_400_BAD_REQUEST)

    serializer = SlotActionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    action = serializer.validated_data['action']

    if action == 'regenerate':
        slots, source = regenerate_slots()
        message = 'Homepage slots regenerated successfully'
    else:
        try:
            slots = set_slots(slots=serializer.validated_data.get('slots', []))
        except InvalidSlotsError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        source = 'manual'
        message = 'Homepage slots set successfully'

    record_audit(
        actor=request.user.email, action=action, entity='homepage_slot',
        diff={'slots': [slot.href for slot in slots], 'source': source},
    )
    return Response({
        'message': message,
        'source': source,
        'slots': HomepageSlotSerializer(slots, many=True).data,
    })


@extend_schema(
    responses={200: OpenApiTypes.OBJECT},
    description="Area x amenity combinations eligible for a slot, most pubs first.",
    tags=['admin'],
)
@api_view(['GET'])
@permission_classes([IsAdminUser])
def admin_slot_candidates(request):
    from .services import list_candidates

    return Response({'candidates': list_candidates()})


# =============================================================================
# Cron
# =============================================================================

@extend_schema(
    responses={200: OpenApiTypes.OBJECT, 401: ErrorResponseSerializer},
    description="Scheduled regeneration of the homepage slots.",
    tags=['cron'],
)
@api_view(['GET', 'POST'])
@authentication_classes([CronSecretAuthentication])
@permission_classes([IsCronJob])
def cron_regenerate_slots(request):
    from .services import regenerate_slots

    slots, source = regenerate_slots()
    return Response({
        'message': 'Homepage slots regenerated successfully',
        'count': len(slots),
        'source': source,
        'timestamp': timezone.now().isoformat(),
    })
