from django.http import HttpResponse
from django.utils import timezone
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import (
    api_view, permission_classes, authentication_classes, parser_classes, renderer_classes,
)
from rest_framework.parsers import MultiPartParser, FormParser, JSONParser
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.renderers import JSONRenderer
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from .models import Pub, AreaFeaturedPub, Amenity, City
from .renderers import AnyMediaJSONRenderer
from .serializers import (
    PubSerializer,
    PubSummarySerializer,
    RandomPubSerializer,
    PubAdminSerializer,
    AreaTopPubSerializer,
    AreaFeaturedPubSerializer,
    AmenitySerializer,
    CitySerializer,
    AmenityFilterSerializer,
    PubSearchQuerySerializer,
    RandomPubQuerySerializer,
)

NO_CACHE = 'no-cache, no-store, must-revalidate'
IMAGE_RENDERERS = [JSONRenderer, AnyMediaJSONRenderer]
PHOTO_CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'GET, OPTIONS',
    'Access-Control-Allow-Headers': 'Content-Type',
}


# =============================================================================
# Public pub endpoints
# =============================================================================

@extend_schema(
    responses={200: PubSerializer},
    description="Get a pub by Google Place ID, id or slug.",
    tags=['pubs'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def pub_detail(request, identifier):
    """Single pub lookup."""
    from .services import get_pub, PubNotFoundError

    try:
        pub = get_pub(identifier=identifier)
    except PubNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(PubSerializer(pub).data)


@extend_schema(
    parameters=[
        OpenApiParameter('search', OpenApiTypes.STR, description='Search in name, description and address'),
        OpenApiParameter('borough', OpenApiTypes.STR, description='Area name'),
        OpenApiParameter('type', OpenApiTypes.STR, description='Pub type'),
        OpenApiParameter('features', OpenApiTypes.STR, description='Comma separated features, all required'),
        OpenApiParameter('min_rating', OpenApiTypes.FLOAT, description='Minimum rating'),
        OpenApiParameter('price_range', OpenApiTypes.STR, description='Budget, Mid-range, Premium or Luxury'),
        OpenApiParameter('opening', OpenApiTypes.STR, description="'Late Night (After 11pm)'"),
        OpenApiParameter('bounds', OpenApiTypes.STR, description='JSON {north, south, east, west}'),
        OpenApiParameter('sort_by', OpenApiTypes.STR, description='name, rating or review_count', default='name'),
        OpenApiParameter('sort_order', OpenApiTypes.STR, description='asc or desc', default='asc'),
        OpenApiParameter('page', OpenApiTypes.INT, default=1),
        OpenApiParameter('limit', OpenApiTypes.INT, default=20),
    ],
    responses={200: PubSummarySerializer(many=True)},
    description="Search and filter pubs for the directory and the map.",
    tags=['pubs'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def pub_search(request):
    """Search pubs - thin HTTP handler."""
    from .services import search_pubs, parse_csv_list, InvalidFilterError

    query_serializer = PubSearchQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        result = search_pubs(
            search=params.get('search'),
            borough=params.get('borough'),
            pub_type=params.get('type'),
            features=parse_csv_list(params.get('features')),
            min_rating=params.get('min_rating'),
            price_range=params.get('price_range'),
            opening=params.get('opening'),
            bounds=params.get('bounds'),
            sort_by=params['sort_by'],
            sort_order=params['sort_order'],
            page=params['page'],
            limit=params['limit'],
        )
    except InvalidFilterError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    result['pubs'] = PubSummarySerializer(result['pubs'], many=True).data
    return Response(result)


def _random_filters(request):
    from .services import RandomPubFilters, parse_search_selections, parse_csv_list

    query_serializer = RandomPubQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    return RandomPubFilters(
        area=params.get('area') or None,
        amenities=parse_csv_list(params.get('amenities')),
        open_now=params['open_now'],
        min_rating=params.get('min_rating'),
        exclude_ids=parse_csv_list(params.get('exclude_ids')),
        search_selections=parse_search_selections(params.get('search_selections')),
    )


@extend_schema(
    parameters=[
        OpenApiParameter('area', OpenApiTypes.STR, description='Area name (substring)'),
        OpenApiParameter('amenities', OpenApiTypes.STR, description='Comma separated amenities, all required'),
        OpenApiParameter('open_now', OpenApiTypes.BOOL, default=False),
        OpenApiParameter('min_rating', OpenApiTypes.FLOAT),
        OpenApiParameter('exclude_ids', OpenApiTypes.STR, description='Comma separated pub ids already shown'),
        OpenApiParameter('search_selections', OpenApiTypes.STR, description='JSON list of {type, data}'),
    ],
    responses={200: RandomPubSerializer},
    description="Pick a random pub, weighted towards well rated and well reviewed pubs.",
    tags=['pubs'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def random_pub(request):
    """Weighted random pub."""
    from .services import pick_random_pub, PubsServiceError, InvalidFilterError

    try:
        filters = _random_filters(request)
        result = pick_random_pub(filters=filters)
    except InvalidFilterError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except PubsServiceError as e:
        response = Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        response['Cache-Control'] = NO_CACHE
        return response

    response = Response({
        'pub': RandomPubSerializer(result['pub']).data,
        'total_candidates': result['total_candidates'],
        'available_after_exclusions': result['available_after_exclusions'],
        'filters': filters.as_dict(),
        'timestamp': timezone.now().isoformat(),
    })
    response['Cache-Control'] = NO_CACHE
    return response


@extend_schema(
    responses={200: RandomPubSerializer(many=True)},
    description="Pubs the random picker would currently choose from, with their weights.",
    tags=['pubs'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def random_pub_candidates(request):
    from .services import get_candidates, InvalidFilterError

    try:
        filters = _random_filters(request)
    except InvalidFilterError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    candidates = get_candidates(filters=filters)
    response = Response({
        'candidates': RandomPubSerializer(candidates, many=True).data,
        'total': len(candidates),
        'filters': filters.as_dict(),
    })
    response['Cache-Control'] = NO_CACHE
    return response


# =============================================================================
# Areas & suggestions
# =============================================================================

@extend_schema(
    parameters=[
        OpenApiParameter('min_pubs', OpenApiTypes.INT, description='Only areas with at least this many pubs', default=1),
    ],
    description="All areas with pub counts.",
    tags=['areas'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def area_list(request):
    from .services import list_areas

    try:
        min_pubs = int(request.query_params.get('min_pubs', 1))
    except ValueError:
        return Response({'error': 'min_pubs must be an integer'}, status=status.HTTP_400_BAD_REQUEST)

    return Response(list_areas(min_pubs=min_pubs))


@extend_schema(
    description="Area landing page: top pubs, bounds, summary and top amenities.",
    tags=['areas'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def area_detail(request, slug):
    from .services import get_area, AreaNotFoundError

    try:
        area = get_area(slug=slug)
    except AreaNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    area['top_pubs'] = AreaTopPubSerializer(area['top_pubs'], many=True).data
    area['featured_pubs'] = AreaFeaturedPubSerializer(area['featured_pubs'], many=True).data
    return Response(area)


@extend_schema(
    parameters=[
        OpenApiParameter('page', OpenApiTypes.INT, default=1),
        OpenApiParameter('limit', OpenApiTypes.INT, default=20),
    ],
    description="Paginated pubs of an area.",
    tags=['areas'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def area_pubs(request, slug):
    from .services import get_area_pubs_page, AreaNotFoundError

    try:
        page = int(request.query_params.get('page', 1))
        limit = int(request.query_params.get('limit', 20))
    except ValueError:
        return Response({'error': 'page and limit must be integers'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        result = get_area_pubs_page(slug=slug, page=page, limit=limit)
    except AreaNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    result['pubs'] = PubSummarySerializer(result['pubs'], many=True).data
    return Response(result)


@extend_schema(
    description="Pubs in an area offering one amenity, e.g. beer gardens in Camden.",
    tags=['areas'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def area_amenity(request, slug, amenity_slug):
    from .services import get_area_amenity_page, AreaNotFoundError, AmenityFilterNotFoundError

    try:
        result = get_area_amenity_page(slug=slug, amenity_slug=amenity_slug)
    except (AreaNotFoundError, AmenityFilterNotFoundError) as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    result['amenity'] = AmenityFilterSerializer(result['amenity']).data
    result['pubs'] = AreaTopPubSerializer(result['pubs'], many=True).data
    return Response(result)


@extend_schema(
    description="The fixed list of amenity filters.",
    tags=['areas'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def amenity_filter_list(request):
    from .services import AMENITY_FILTERS

    return Response(AmenityFilterSerializer(AMENITY_FILTERS, many=True).data)


@extend_schema(
    parameters=[
        OpenApiParameter('q', OpenApiTypes.STR, description='Text typed so far'),
        OpenApiParameter('limit', OpenApiTypes.INT, default=9),
    ],
    description="Search-box suggestions for areas, amenities and pubs.",
    tags=['pubs'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def search_suggestions(request):
    from .services import get_suggestions

    try:
        limit = max(1, min(int(request.query_params.get('limit', 9)), 30))
    except ValueError:
        limit = 9

    return Response(get_suggestions(query=request.query_params.get('q', ''), limit=limit))


# =============================================================================
# Photo proxy
# =============================================================================

def _photo_response(result, extra_headers):
    response = HttpResponse(result.content, content_type=result.content_type)
    for header, value in {**PHOTO_CORS_HEADERS, **result.headers, **extra_headers}.items():
        response[header] = value
    return response


def _photo_error(message, status_code):
    response = Response({'error': message}, status=status_code, content_type='application/json')
    for header, value in PHOTO_CORS_HEADERS.items():
        response[header] = value
    return response


def _preflight():
    response = HttpResponse(status=204)
    for header, value in PHOTO_CORS_HEADERS.items():
        response[header] = value
    response['Access-Control-Max-Age'] = '86400'
    return response


@extend_schema(
    parameters=[
        OpenApiParameter('ref', OpenApiTypes.STR, required=True, description='Places photo reference or photo URL'),
        OpenApiParameter('w', OpenApiTypes.INT, description='Requested width (64-1280)', default=480),
    ],
    responses={(200, 'image/*'): OpenApiTypes.BINARY},
    description="Proxy a Google Places photo with long-lived cache headers.",
    tags=['photos'],
)
@api_view(['GET', 'OPTIONS'])
@authentication_classes([])
@renderer_classes(IMAGE_RENDERERS)
@permission_classes([AllowAny])
def photo_proxy(request):
    """Legacy Places photo proxy."""
    from django.conf import settings
    from .services import fetch_photo_by_reference, clamp_width, cache_headers, PhotoFetchError
    from .services.photo_proxy import extract_photo_reference

    if request.method == 'OPTIONS':
        return _preflight()

    ref = request.query_params.get('ref')
    if not ref:
        return _photo_error('Missing photo reference parameter', status.HTTP_400_BAD_REQUEST)

    reference = extract_photo_reference(ref)
    width = clamp_width(request.query_params.get('w'))
    ttl = settings.PHOTO_CACHE_TTL_SECONDS

    try:
        result = fetch_photo_by_reference(reference=reference, width=width)
    except PhotoFetchError as e:
        return _photo_error(str(e), e.status)

    return _photo_response(result, {
        **cache_headers(ttl),
        'X-Source': 'google-places-photo',
        'X-Photo-Reference': reference,
        'X-Requested-Width': str(width),
        'X-Cache-TTL': str(ttl),
    })


@extend_schema(
    parameters=[
        OpenApiParameter('ref', OpenApiTypes.STR, description='Legacy photo reference'),
        OpenApiParameter('photo_name', OpenApiTypes.STR, description='Places API (New) photo name'),
        OpenApiParameter('place_id', OpenApiTypes.STR, description='Google Place ID'),
        OpenApiParameter('w', OpenApiTypes.INT, default=480),
    ],
    responses={(200, 'image/*'): OpenApiTypes.BINARY},
    description="Best photo for a pub; falls back to a placeholder image instead of failing.",
    tags=['photos'],
)
@api_view(['GET', 'OPTIONS'])
@authentication_classes([])
@renderer_classes(IMAGE_RENDERERS)
@permission_classes([AllowAny])
def photo_by_place(request):
    from django.conf import settings
    from .services import fetch_photo_for_place, clamp_width, cache_headers

    if request.method == 'OPTIONS':
        return _preflight()

    width = clamp_width(request.query_params.get('w'))
    result = fetch_photo_for_place(
        reference=request.query_params.get('ref'),
        photo_name=request.query_params.get('photo_name'),
        place_id=request.query_params.get('place_id'),
        width=width,
    )

    headers = {'X-Source': result.source}
    if result.source != 'fallback':
        ttl = settings.PHOTO_CACHE_TTL_SECONDS
        headers.update(cache_headers(ttl))
        headers['X-Requested-Width'] = str(result.width)
        headers['X-Cache-TTL'] = str(ttl)
    return _photo_response(result, headers)


# =============================================================================
# Admin back-office
# =============================================================================

@extend_schema(
    parameters=[
        OpenApiParameter('search', OpenApiTypes.STR),
        OpenApiParameter('page', OpenApiTypes.INT, default=1),
        OpenApiParameter('limit', OpenApiTypes.INT, default=50),
    ],
    responses={200: PubAdminSerializer(many=True)},
    description="Admin pub list.",
    tags=['admin'],
)
@api_view(['GET'])
@permission_classes([IsAdminUser])
def admin_pub_list(request):
    from .services import search_pubs

    try:
        page = int(request.query_params.get('page', 1))
        limit = int(request.query_params.get('limit', 50))
    except ValueError:
        return Response({'error': 'page and limit must be integers'}, status=status.HTTP_400_BAD_REQUEST)

    result = search_pubs(
        search=request.query_params.get('search'),
        page=page,
        limit=min(limit, 200),
    )
    result['pubs'] = PubAdminSerializer(result['pubs'], many=True).data
    return Response(result)


@extend_schema(
    request=PubAdminSerializer,
    responses={200: PubAdminSerializer},
    description="Get, edit or delete a pub.",
    tags=['admin'],
)
@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAdminUser])
def admin_pub_detail(request, pub_id):
    from apps.analytics.services import record_audit

    pub = get_object_or_404(Pub, id=pub_id)

    if request.method == 'GET':
        return Response(PubAdminSerializer(pub).data)

    if request.method == 'DELETE':
        record_audit(actor=request.user.email, action='delete_pub', entity='pub', entity_id=pub.id,
                     diff={'name': pub.name})
        pub.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = PubAdminSerializer(pub, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    before = {field: getattr(pub, field) for field in serializer.validated_data}
    pub = serializer.save(last_updated=timezone.now(), updated_by=request.user.email)
    record_audit(
        actor=request.user.email,
        action='update_pub',
        entity='pub',
        entity_id=pub.id,
        diff={
            field: {'from': str(before[field]), 'to': str(getattr(pub, field))}
            for field in before
            if before[field] != getattr(pub, field)
        },
    )
    return Response(PubAdminSerializer(pub).data)


@extend_schema(
    responses={200: AreaFeaturedPubSerializer(many=True), 201: AreaFeaturedPubSerializer},
    parameters=[OpenApiParameter('area', OpenApiTypes.STR, description='Filter by area name')],
    description="List or add featured pubs for area pages.",
    tags=['admin'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAdminUser])
def admin_featured_pubs(request):
    if request.method == 'GET':
        queryset = AreaFeaturedPub.objects.select_related('pub')
        area = request.query_params.get('area')
        if area:
            queryset = queryset.filter(area_name__iexact=area)
        return Response(AreaFeaturedPubSerializer(queryset, many=True).data)

    serializer = AreaFeaturedPubSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    featured = serializer.save()
    return Response(AreaFeaturedPubSerializer(featured).data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=AreaFeaturedPubSerializer,
    responses={200: AreaFeaturedPubSerializer},
    tags=['admin'],
)
@api_view(['PATCH', 'DELETE'])
@permission_classes([IsAdminUser])
def admin_featured_pub_detail(request, featured_id):
    featured = get_object_or_404(AreaFeaturedPub, id=featured_id)

    if request.method == 'DELETE':
        featured.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = AreaFeaturedPubSerializer(featured, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    featured = serializer.save()
    return Response(AreaFeaturedPubSerializer(featured).data)


@extend_schema(
    request={'multipart/form-data': {'type': 'object', 'properties': {
        'file': {'type': 'string', 'format': 'binary'},
        'dry_run': {'type': 'boolean'},
    }}},
    description="Import pubs from a CSV upload.",
    tags=['admin'],
)
@api_view(['POST'])
@permission_classes([IsAdminUser])
@parser_classes([MultiPartParser, FormParser, JSONParser])
def admin_pub_upload(request):
    from apps.analytics.services import record_audit
    from .services import import_pubs_from_csv

    upload = request.FILES.get('file')
    if upload is not None:
        csv_text = upload.read().decode('utf-8', errors='replace')
    else:
        csv_text = request.data.get('csv', '')
    if not csv_text.strip():
        return Response({'error': 'A CSV file is required'}, status=status.HTTP_400_BAD_REQUEST)

    dry_run = str(request.data.get('dry_run', '')).lower() in ('1', 'true', 'yes')
    report = import_pubs_from_csv(csv_text=csv_text, dry_run=dry_run)

    if not dry_run:
        record_audit(actor=request.user.email, action='import_pubs', entity='pub', entity_id='',
                     diff={'created': report.created, 'updated': report.updated})

    return Response({'dry_run': dry_run, **report.as_dict()})


@extend_schema(
    request={'multipart/form-data': {'type': 'object', 'properties': {
        'file': {'type': 'string', 'format': 'binary'},
    }}},
    description="Replace pub amenities from a CSV grid of place_id plus one boolean column per amenity.",
    tags=['admin'],
)
@api_view(['POST'])
@permission_classes([IsAdminUser])
@parser_classes([MultiPartParser, FormParser, JSONParser])
def admin_amenity_upload(request):
    from apps.analytics.services import record_audit
    from .services import import_amenities_from_csv, PubImportError

    upload = request.FILES.get('file')
    if upload is not None:
        csv_text = upload.read().decode('utf-8', errors='replace')
    else:
        csv_text = request.data.get('csv', '')
    if not csv_text.strip():
        return Response({'error': 'No file uploaded'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        report = import_amenities_from_csv(csv_text=csv_text)
    except PubImportError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    record_audit(actor=request.user.email, action='import_amenities', entity='pub_amenity', entity_id='',
                 diff={'updated_pubs': report.updated_pubs, 'amenities': report.amenities})
    return Response(report.as_dict())


@extend_schema(
    responses={200: AmenitySerializer(many=True)},
    description="All amenities, by label.",
    tags=['admin'],
)
@api_view(['GET'])
@permission_classes([IsAdminUser])
def admin_amenity_list(request):
    return Response(AmenitySerializer(Amenity.objects.order_by('label'), many=True).data)


@extend_schema(
    responses={200: CitySerializer(many=True)},
    description="Cities with their boroughs.",
    tags=['admin'],
)
@api_view(['GET'])
@permission_classes([IsAdminUser])
def admin_city_list(request):
    cities = City.objects.prefetch_related('boroughs').order_by('name')
    return Response(CitySerializer(cities, many=True).data)
