from django.http import HttpResponse
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, renderer_classes
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.renderers import JSONRenderer
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from apps.pubs.renderers import AnyMediaJSONRenderer
from .serializers import (
    BlogPostListSerializer,
    BlogPostDetailSerializer,
    AdminBlogPostSerializer,
    BlogPostWriteSerializer,
    AdminPostListQuerySerializer,
    SubscribeSerializer,
    BlogSubscriptionSerializer,
    ErrorResponseSerializer,
)

RSS_CACHE_CONTROL = 'public, max-age=3600, s-maxage=3600'


# =============================================================================
# Public
# =============================================================================

@extend_schema(
    parameters=[
        OpenApiParameter('limit', OpenApiTypes.INT, description='Posts per page', default=20),
        OpenApiParameter('offset', OpenApiTypes.INT, description='Posts to skip', default=0),
    ],
    responses={200: OpenApiTypes.OBJECT},
    description="Published posts, newest first. coming_soon is true while too few posts are published.",
    tags=['blog'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def blog_list(request):
    from .services import blog_config, list_published_posts

    try:
        limit = max(1, min(int(request.query_params.get('limit', 20)), 100))
        offset = max(0, int(request.query_params.get('offset', 0)))
    except ValueError:
        return Response({'error': 'limit and offset must be integers'}, status=status.HTTP_400_BAD_REQUEST)

    config = blog_config()
    posts = list_published_posts(limit=limit, offset=offset)
    return Response({
        'posts': BlogPostListSerializer(posts, many=True).data,
        'coming_soon': config['coming_soon'],
        'published_count': config['published_count'],
    })


@extend_schema(
    responses={200: BlogPostDetailSerializer, 404: ErrorResponseSerializer},
    description="A published post with its reading time and related posts.",
    tags=['blog'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def blog_detail(request, slug):
    from .services import get_published_post, related_posts, BlogPostNotFoundError

    try:
        post = get_published_post(slug=slug)
    except BlogPostNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    serializer = BlogPostDetailSerializer(post, context={'related': related_posts(post=post)})
    return Response(serializer.data)


@extend_schema(
    responses={(200, 'application/rss+xml'): OpenApiTypes.STR, 204: None},
    description="RSS 2.0 feed of the latest posts. 204 while the blog is coming soon.",
    tags=['blog'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
@renderer_classes([JSONRenderer, AnyMediaJSONRenderer])
def blog_rss(request):
    from .services import blog_config, build_rss_feed

    if blog_config()['coming_soon']:
        return Response(status=status.HTTP_204_NO_CONTENT)

    response = HttpResponse(build_rss_feed(), content_type='application/rss+xml; charset=utf-8')
    response['Cache-Control'] = RSS_CACHE_CONTROL
    return response


@extend_schema(
    request=SubscribeSerializer,
    responses={200: OpenApiTypes.OBJECT, 201: OpenApiTypes.OBJECT, 400: ErrorResponseSerializer},
    description="Subscribe to blog updates.",
    tags=['blog'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def subscribe(request):
    from .services import subscribe as subscribe_email, InvalidSubscriptionError

    try:
        _, created = subscribe_email(email=request.data.get('email'))
    except InvalidSubscriptionError as e:
        return Response({'success': False, 'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    if not created:
        return Response({
            'success': True,
            'message': "You're already subscribed! Thanks for your interest.",
        })
    return Response(
        {'success': True, 'message': "Thanks for subscribing! We'll be in touch soon."},
        status=status.HTTP_201_CREATED
    )


# =============================================================================
# Admin
# =============================================================================

@extend_schema(
    methods=['GET'],
    parameters=[
        OpenApiParameter('published', OpenApiTypes.STR, description="'true' or 'false'"),
        OpenApiParameter('limit', OpenApiTypes.INT, description='Max 100', default=50),
        OpenApiParameter('offset', OpenApiTypes.INT, default=0),
    ],
    responses={200: OpenApiTypes.OBJECT},
    description="All posts, most recently edited first.",
    tags=['admin'],
)
@extend_schema(
    methods=['POST'],
    request=BlogPostWriteSerializer,
    responses={201: AdminBlogPostSerializer, 400: ErrorResponseSerializer},
    description="Create a post. The slug defaults to the slugified title.",
    tags=['admin'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAdminUser])
def admin_blog_posts(request):
    from .services import list_posts, create_post, BlogServiceError

    if request.method == 'GET':
        query = AdminPostListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data
        published = params.get('published')

        posts, total = list_posts(
            published=None if published is None else published == 'true',
            limit=params['limit'],
            offset=params['offset'],
        )
        return Response({
            'posts': AdminBlogPostSerializer(posts, many=True).data,
            'total': total,
        })

    serializer = BlogPostWriteSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        post = create_post(data=serializer.validated_data)
    except BlogServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({'post': AdminBlogPostSerializer(post).data}, status=status.HTTP_201_CREATED)


@extend_schema(
    methods=['PUT', 'PATCH'],
    request=BlogPostWriteSerializer,
    responses={200: AdminBlogPostSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    tags=['admin'],
)
@extend_schema(
    methods=['GET', 'DELETE'],
    responses={200: AdminBlogPostSerializer, 404: ErrorResponseSerializer},
    tags=['admin'],
)
@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminUser])
def admin_blog_post_detail(request, post_id):
    from .services import get_post, update_post, delete_post, BlogPostNotFoundError, SlugInUseError

    try:
        if request.method == 'GET':
            return Response({'post': AdminBlogPostSerializer(get_post(post_id=post_id)).data})

        if request.method == 'DELETE':
            delete_post(post_id=post_id)
            return Response({'success': True})

        serializer = BlogPostWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        post = update_post(post_id=post_id, data=serializer.validated_data)
    except BlogPostNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except SlugInUseError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({'post': AdminBlogPostSerializer(post).data})


@extend_schema(
    responses={200: OpenApiTypes.OBJECT},
    description="Areas and amenity filters for the suggested link and map pickers.",
    tags=['admin'],
)
@api_view(['GET'])
@permission_classes([IsAdminUser])
def admin_blog_options(request):
    from .services import blog_link_options

    return Response(blog_link_options())


@extend_schema(
    responses={200: BlogSubscriptionSerializer(many=True)},
    description="Blog newsletter subscribers, newest first.",
    tags=['admin'],
)
@api_view(['GET'])
@permission_classes([IsAdminUser])
def admin_blog_subscriptions(request):
    from .services import list_subscriptions

    subscriptions = list_subscriptions()
    return Response({
        'subscriptions': BlogSubscriptionSerializer(subscriptions, many=True).data,
        'total': subscriptions.count(),
    })
