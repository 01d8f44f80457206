from rest_framework import status, viewsets, mixins
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly, AllowAny
from rest_framework.response import Response
from rest_framework.exceptions import NotFound
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from .models import Review
from .serializers import (
    ReviewSerializer,
    MyReviewSerializer,
    ReviewCreateSerializer,
    ReviewUpdateSerializer,
    CheckinSerializer,
    CheckinCreateSerializer,
    WishlistItemSerializer,
    WishlistCreateSerializer,
    PubUserDataSerializer,
    ErrorResponseSerializer,
)
from .permissions import IsReviewAuthorOrReadOnly


def _resolve_pub(identifier):
    from apps.pubs.services import get_pub, PubNotFoundError

    try:
        return get_pub(identifier=identifier)
    except PubNotFoundError as e:
        raise NotFound(str(e))


class ReviewViewSet(mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    ViewSet for Review CRUD operations.

    create: Review a pub (one review per user per pub)
    retrieve: Get a specific review
    partial_update: Edit a review (author only)
    destroy: Delete a review (author only)
    """

    queryset = Review.objects.select_related('user', 'pub')
    serializer_class = ReviewSerializer
    permission_classes = [IsAuthenticatedOrReadOnly, IsReviewAuthorOrReadOnly]
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    @extend_schema(request=ReviewCreateSerializer, responses={201: ReviewSerializer, 400: ErrorResponseSerializer})
    def create(self, request, *args, **kwargs):
        """Create review using service layer."""
        from apps.reviews.services import create_review, DuplicateReviewError, InvalidReviewError

        serializer = ReviewCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        pub = _resolve_pub(data['pub_id'])

        try:
            review = create_review(
                user=request.user,
                pub=pub,
                rating=data['rating'],
                title=data.get('title', ''),
                body=data['body'],
                photos=data.get('photos'),
            )
        except (DuplicateReviewError, InvalidReviewError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ReviewUpdateSerializer, responses={200: ReviewSerializer})
    def partial_update(self, request, *args, **kwargs):
        """Update review using service layer."""
        from apps.reviews.services import update_review, InvalidReviewError

        review = self.get_object()
        serializer = ReviewUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            review = update_review(review_id=review.id, user=request.user, **serializer.validated_data)
        except InvalidReviewError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ReviewSerializer(review).data)

    def destroy(self, request, *args, **kwargs):
        """Delete review using service layer."""
        from apps.reviews.services import delete_review

        review = self.get_object()
        delete_review(review_id=review.id, user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(
    parameters=[
        OpenApiParameter('page', OpenApiTypes.INT, default=1),
        OpenApiParameter('limit', OpenApiTypes.INT, description='Page size (max 50)', default=10),
    ],
    responses={200: ReviewSerializer(many=True), 404: ErrorResponseSerializer},
    description="Visible reviews of a pub, newest first.",
    tags=['reviews'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def pub_reviews(request, identifier):
    from apps.reviews.services import get_pub_reviews

    pub = _resolve_pub(identifier)
    try:
        page = int(request.query_params.get('page', 1))
        limit = int(request.query_params.get('limit', 10))
    except ValueError:
        return Response({'error': 'page and limit must be integers'}, status=status.HTTP_400_BAD_REQUEST)

    result = get_pub_reviews(pub=pub, page=page, limit=limit)
    result['reviews'] = ReviewSerializer(result['reviews'], many=True).data

    response = Response(result)
    response['Cache-Control'] = 'public, max-age=60, stale-while-revalidate=300'
    return response


@extend_schema(
    responses={200: PubUserDataSerializer},
    description="Community counters for a pub plus the caller's own review, check-in and wishlist state.",
    tags=['reviews'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def pub_user_data(request, identifier):
    from apps.reviews.services import get_pub_user_data

    pub = _resolve_pub(identifier)
    data = get_pub_user_data(pub=pub, user=request.user)
    return Response(PubUserDataSerializer(data).data)


# =============================================================================
# Check-ins
# =============================================================================

@extend_schema(
    request=CheckinCreateSerializer,
    responses={201: CheckinSerializer, 400: ErrorResponseSerializer},
    description="Check in to a pub.",
    tags=['checkins'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def checkin_create(request):
    from apps.reviews.services import create_checkin, DuplicateCheckinError

    serializer = CheckinCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    pub = _resolve_pub(serializer.validated_data['pub_id'])

    try:
        checkin = create_checkin(
            user=request.user,
            pub=pub,
            note=serializer.validated_data.get('note', ''),
            visited_at=serializer.validated_data.get('visited_at'),
        )
    except DuplicateCheckinError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(CheckinSerializer(checkin).data, status=status.HTTP_201_CREATED)


@extend_schema(
    responses={204: None, 404: ErrorResponseSerializer},
    description="Remove the caller's check-in for a pub.",
    tags=['checkins'],
)
@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def checkin_delete(request, pub_id):
    from apps.reviews.services import delete_checkin, CheckinNotFoundError

    pub = _resolve_pub(pub_id)
    try:
        delete_checkin(user=request.user, pub=pub)
    except CheckinNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Wishlist
# =============================================================================

@extend_schema(
    request=WishlistCreateSerializer,
    responses={201: WishlistItemSerializer, 400: ErrorResponseSerializer},
    description="Add a pub to the caller's wishlist.",
    tags=['wishlist'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def wishlist_add(request):
    from apps.reviews.services import add_to_wishlist, DuplicateWishlistItemError

    serializer = WishlistCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    pub = _resolve_pub(serializer.validated_data['pub_id'])

    try:
        item = add_to_wishlist(user=request.user, pub=pub)
    except DuplicateWishlistItemError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(WishlistItemSerializer(item).data, status=status.HTTP_201_CREATED)


@extend_schema(
    responses={204: None, 404: ErrorResponseSerializer},
    tags=['wishlist'],
)
@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def wishlist_remove(request, pub_id):
    from apps.reviews.services import remove_from_wishlist, WishlistItemNotFoundError

    pub = _resolve_pub(pub_id)
    try:
        remove_from_wishlist(user=request.user, pub=pub)
    except WishlistItemNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Current user's lists
# =============================================================================

@extend_schema(responses={200: MyReviewSerializer(many=True)}, tags=['users'])
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_reviews(request):
    from apps.reviews.services import get_user_reviews

    return Response(MyReviewSerializer(get_user_reviews(user=request.user), many=True).data)


@extend_schema(responses={200: CheckinSerializer(many=True)}, tags=['users'])
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_checkins(request):
    from apps.reviews.services import get_user_checkins

    return Response(CheckinSerializer(get_user_checkins(user=request.user), many=True).data)


@extend_schema(responses={200: WishlistItemSerializer(many=True)}, tags=['users'])
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_wishlist(request):
    from apps.reviews.services import get_user_wishlist

    return Response(WishlistItemSerializer(get_user_wishlist(user=request.user), many=True).data)
