from django.conf import settings
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, authentication_classes, parser_classes
from rest_framework.parsers import MultiPartParser, FormParser, JSONParser
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.response import Response
from rest_framework.exceptions import NotFound
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from apps.pubs.serializers import PubPhotoSerializer
from .authentication import PubManagerAuthentication
from .permissions import IsPubManager
from .serializers import (
    ManagerLoginSerializer,
    ManagerSessionSerializer,
    ManagerPubUpdateSerializer,
    ManagedPubDetailSerializer,
    ChangeRequestCreateSerializer,
    ChangeRequestSerializer,
    PubRequestSerializer,
    PubRequestUpdateSerializer,
    ConnectionRequestSerializer,
    AdminConnectionRequestSerializer,
    ConnectionRequestCreateSerializer,
    ConnectionDecisionSerializer,
    ConnectablePubSerializer,
    ManagerListSerializer,
    AddManagerSerializer,
    ErrorResponseSerializer,
)


def _error(e, code):
    return Response({'error': str(e)}, status=code)


def _access_error_status(e):
    from .services import PubAccessDeniedError

    if isinstance(e, PubAccessDeniedError):
        return status.HTTP_403_FORBIDDEN
    return status.HTTP_404_NOT_FOUND


# =============================================================================
# Portal authentication
# =============================================================================

@extend_schema(
    request=ManagerLoginSerializer,
    responses={200: OpenApiTypes.OBJECT, 401: ErrorResponseSerializer},
    description="Log in to the pub-manager portal. Sets the pub-manager cookie.",
    tags=['pub-manager'],
)
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def manager_login(request):
    from .services import login_manager, InvalidCredentialsError, NoPasswordSetError, InvalidManagerRequestError

    try:
        result = login_manager(email=request.data.get('email'), password=request.data.get('password'))
    except InvalidManagerRequestError as e:
        return _error(e, status.HTTP_400_BAD_REQUEST)
    except (InvalidCredentialsError, NoPasswordSetError) as e:
        return _error(e, status.HTTP_401_UNAUTHORIZED)

    pub = result['pub']
    response = Response({
        'success': True,
        'token': result['token'],
        'pub_id': str(pub.id),
        'pub_name': pub.name,
        'message': 'Login successful',
    })
    response.set_cookie(
        settings.PUB_MANAGER_COOKIE_NAME,
        result['token'],
        max_age=int(settings.PUB_MANAGER_TOKEN_LIFETIME.total_seconds()),
        httponly=True,
        samesite='Lax',
        secure=not settings.DEBUG,
    )
    return response


@extend_schema(
    responses={200: ManagerSessionSerializer},
    description="Verify the pub-manager token and list the pubs it can manage.",
    tags=['pub-manager'],
)
@api_view(['GET', 'POST'])
@authentication_classes([PubManagerAuthentication])
@permission_classes([IsPubManager])
def manager_verify(request):
    return Response(ManagerSessionSerializer(request.user).data)


# =============================================================================
# Pub edits
# =============================================================================

@extend_schema(
    request=ManagerPubUpdateSerializer,
    responses={200: ManagedPubDetailSerializer, 400: ErrorResponseSerializer, 403: ErrorResponseSerializer},
    description="Update name, description, contact details, opening hours or amenities of a managed pub.",
    tags=['pub-manager'],
)
@api_view(['PUT'])
@authentication_classes([PubManagerAuthentication])
@permission_classes([IsPubManager])
def manager_update_pub(request):
    from .services import update_managed_pub, InvalidManagerRequestError, PubAccessDeniedError, ManagedPubNotFoundError

    serializer = ManagerPubUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    updates = dict(serializer.validated_data)
    pub_id = updates.pop('pub_id', None)

    try:
        pub = update_managed_pub(session=request.user, updates=updates, pub_id=pub_id)
    except InvalidManagerRequestError as e:
        return _error(e, status.HTTP_400_BAD_REQUEST)
    except (PubAccessDeniedError, ManagedPubNotFoundError) as e:
        return _error(e, _access_error_status(e))

    return Response({
        'success': True,
        'message': 'Pub data updated successfully',
        'pub': ManagedPubDetailSerializer(pub).data,
    })


# =============================================================================
# Requests
# =============================================================================

@extend_schema(
    request=ChangeRequestCreateSerializer,
    parameters=[OpenApiParameter('pub_id', OpenApiTypes.UUID, description='Only requests for this pub')],
    responses={200: ChangeRequestSerializer(many=True), 201: ChangeRequestSerializer},
    description="List or raise change requests for managed pubs.",
    tags=['pub-manager'],
)
@api_view(['GET', 'POST'])
@authentication_classes([PubManagerAuthentication])
@permission_classes([IsPubManager])
def manager_change_requests(request):
    from .services import (
        create_change_request,
        list_change_requests,
        describe_change_request,
        InvalidManagerRequestError,
        PubAccessDeniedError,
        ManagedPubNotFoundError,
    )

    if request.method == 'GET':
        requests = list_change_requests(session=request.user, pub_id=request.query_params.get('pub_id'))
        return Response({'requests': ChangeRequestSerializer(requests, many=True).data})

    serializer = ChangeRequestCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        pub_request = create_change_request(
            session=request.user,
            request_type=data['type'],
            subject=data['subject'],
            description=data['description'],
            pub_id=data.get('pub_id'),
        )
    except InvalidManagerRequestError as e:
        return _error(e, status.HTTP_400_BAD_REQUEST)
    except (PubAccessDeniedError, ManagedPubNotFoundError) as e:
        return _error(e, _access_error_status(e))

    return Response(
        {'request': ChangeRequestSerializer(describe_change_request(pub_request)).data},
        status=status.HTTP_201_CREATED,
    )


@extend_schema(
    request=OpenApiTypes.OBJECT,
    responses={201: OpenApiTypes.OBJECT, 400: ErrorResponseSerializer},
    description="Ask for a pub to be listed. All fields are required.",
    tags=['pub-manager'],
)
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def pub_request_submit(request):
    from .services import submit_pub_request, InvalidManagerRequestError

    try:
        pub_request = submit_pub_request(
            pub_name=request.data.get('pub_name'),
            postcode=request.data.get('postcode'),
            manager_name=request.data.get('manager_name'),
            contact_email=request.data.get('contact_email'),
            contact_phone=request.data.get('contact_phone'),
        )
    except InvalidManagerRequestError as e:
        return _error(e, status.HTTP_400_BAD_REQUEST)

    return Response(
        {'success': True, 'message': 'Request submitted successfully', 'id': str(pub_request.id)},
        status=status.HTTP_201_CREATED,
    )


# =============================================================================
# Connections & newsletter
# =============================================================================

@extend_schema(
    request=ConnectionRequestCreateSerializer,
    responses={200: OpenApiTypes.OBJECT, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    description="List own connection requests or ask to manage another pub.",
    tags=['pub-manager'],
)
@api_view(['GET', 'POST'])
@authentication_classes([PubManagerAuthentication])
@permission_classes([IsPubManager])
def manager_connect(request):
    from .services import (
        list_connection_requests,
        request_connection,
        InvalidManagerRequestError,
        AlreadyManagedError,
        ManagedPubNotFoundError,
    )

    if request.method == 'GET':
        return Response({
            'requests': ConnectionRequestSerializer(list_connection_requests(session=request.user), many=True).data,
            'linked_pub_ids': sorted(request.user.pub_ids),
        })

    serializer = ConnectionRequestCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        connection = request_connection(session=request.user, pub_id=serializer.validated_data.get('pub_id'))
    except (InvalidManagerRequestError, AlreadyManagedError) as e:
        return _error(e, status.HTTP_400_BAD_REQUEST)
    except ManagedPubNotFoundError as e:
        return _error(e, status.HTTP_404_NOT_FOUND)

    return Response({
        'success': True,
        'message': "Request sent. We'll verify and connect you soon.",
        'request': ConnectionRequestSerializer(connection).data,
    })


@extend_schema(
    parameters=[
        OpenApiParameter('q', OpenApiTypes.STR, description='Pub name (2+ characters)'),
        OpenApiParameter('limit', OpenApiTypes.INT, default=20),
    ],
    responses={200: ConnectablePubSerializer(many=True)},
    description="Find pubs to request a connection to.",
    tags=['pub-manager'],
)
@api_view(['GET'])
@authentication_classes([PubManagerAuthentication])
@permission_classes([IsPubManager])
def manager_pub_search(request):
    from .services import search_connectable_pubs

    try:
        limit = int(request.query_params.get('limit', 20))
    except ValueError:
        limit = 20
    pubs = search_connectable_pubs(query=request.query_params.get('q', ''), limit=limit)
    return Response({'pubs': ConnectablePubSerializer(pubs, many=True).data})


@extend_schema(
    request=None,
    responses={200: OpenApiTypes.OBJECT},
    description="Whether the pub is signed up for monthly insights; POST signs it up.",
    tags=['pub-manager'],
)
@api_view(['GET', 'POST'])
@authentication_classes([PubManagerAuthentication])
@permission_classes([IsPubManager])
def manager_newsletter(request):
    from .services import is_signed_up, sign_up_for_newsletter

    if request.method == 'GET':
        return Response({'signed_up': is_signed_up(session=request.user)})

    sign_up_for_newsletter(session=request.user)
    return Response({'signed_up': True, 'message': 'You are signed up for monthly insights.'})


# =============================================================================
# Photos
# =============================================================================

@extend_schema(
    parameters=[OpenApiParameter('pub_id', OpenApiTypes.UUID, description='Defaults to the logged-in pub')],
    responses={200: PubPhotoSerializer(many=True), 201: PubPhotoSerializer, 403: ErrorResponseSerializer},
    description="List photos of a managed pub or upload one (multipart: file, pub_id, is_cover).",
    tags=['pub-manager'],
)
@api_view(['GET', 'POST'])
@authentication_classes([PubManagerAuthentication])
@permission_classes([IsPubManager])
@parser_classes([MultiPartParser, FormParser])
def manager_photos(request):
    from .services import list_photos, upload_photo, InvalidManagerRequestError, PubAccessDeniedError, ManagedPubNotFoundError

    try:
        if request.method == 'GET':
            photos = list_photos(session=request.user, pub_id=request.query_params.get('pub_id'))
            return Response({'photos': PubPhotoSerializer(photos, many=True).data})

        photo = upload_photo(
            session=request.user,
            upload=request.FILES.get('file'),
            pub_id=request.data.get('pub_id'),
            is_cover=str(request.data.get('is_cover', '')).lower() == 'true',
        )
    except InvalidManagerRequestError as e:
        return _error(e, status.HTTP_400_BAD_REQUEST)
    except (PubAccessDeniedError, ManagedPubNotFoundError) as e:
        return _error(e, _access_error_status(e))

    return Response({'photo': PubPhotoSerializer(photo).data}, status=status.HTTP_201_CREATED)


@extend_schema(
    request=OpenApiTypes.OBJECT,
    responses={200: PubPhotoSerializer, 204: None, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    description="Set or unset a photo as cover, or delete it.",
    tags=['pub-manager'],
)
@api_view(['PUT', 'PATCH', 'DELETE'])
@authentication_classes([PubManagerAuthentication])
@permission_classes([IsPubManager])
@parser_classes([JSONParser])
def manager_photo_detail(request, photo_id):
    from .services import set_photo_cover, delete_photo, PhotoNotFoundError, PubAccessDeniedError

    try:
        if request.method == 'DELETE':
            delete_photo(session=request.user, photo_id=photo_id)
            return Response(status=status.HTTP_204_NO_CONTENT)
        photo = set_photo_cover(session=request.user, photo_id=photo_id, is_cover=bool(request.data.get('is_cover')))
    except PhotoNotFoundError as e:
        return _error(e, status.HTTP_404_NOT_FOUND)
    except PubAccessDeniedError as e:
        return _error(e, status.HTTP_403_FORBIDDEN)

    return Response({'photo': PubPhotoSerializer(photo).data})


# =============================================================================
# Admin
# =============================================================================

@extend_schema(
    responses={200: ManagerListSerializer(many=True)},
    description="All pub managers with their pubs, last login and login count.",
    tags=['admin'],
)
@api_view(['GET'])
@permission_classes([IsAdminUser])
def admin_manager_list(request):
    from .services import list_managers

    return Response(ManagerListSerializer(list_managers(), many=True).data)


@extend_schema(
    request=AddManagerSerializer,
    parameters=[OpenApiParameter('manager_id', OpenApiTypes.UUID, description='Manager to unlink (DELETE)')],
    responses={200: OpenApiTypes.OBJECT, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    description="Link a manager to a pub, or unlink one.",
    tags=['admin'],
)
@api_view(['POST', 'DELETE'])
@permission_classes([IsAdminUser])
def admin_pub_managers(request, identifier):
    from apps.pubs.services import get_pub, PubNotFoundError
    from .services import add_manager_to_pub, remove_manager_from_pub, InvalidManagerRequestError, ManagerLinkNotFoundError

    try:
        pub = get_pub(identifier=identifier)
    except PubNotFoundError as e:
        raise NotFound(str(e))

    if request.method == 'DELETE':
        try:
            remove_manager_from_pub(
                actor=request.user.email,
                pub=pub,
                manager_id=request.query_params.get('manager_id'),
            )
        except InvalidManagerRequestError as e:
            return _error(e, status.HTTP_400_BAD_REQUEST)
        except ManagerLinkNotFoundError as e:
            return _error(e, status.HTTP_404_NOT_FOUND)
        return Response({'success': True})

    serializer = AddManagerSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        link = add_manager_to_pub(
            actor=request.user.email,
            pub=pub,
            email=data.get('email'),
            password=data.get('password'),
            name=data.get('name', ''),
            role=data.get('role', 'owner'),
        )
    except InvalidManagerRequestError as e:
        return _error(e, status.HTTP_400_BAD_REQUEST)

    return Response({
        'success': True,
        'manager': {
            'id': str(link.manager.id),
            'email': link.manager.email,
            'name': link.manager.name,
            'role': link.role,
        },
    })


@extend_schema(
    request=ConnectionDecisionSerializer,
    responses={200: AdminConnectionRequestSerializer(many=True), 400: ErrorResponseSerializer},
    description="List connection requests (pending first) or approve/reject one.",
    tags=['admin'],
)
@api_view(['GET', 'PATCH'])
@permission_classes([IsAdminUser])
def admin_connection_requests(request):
    from .services import (
        list_all_connection_requests,
        process_connection_request,
        InvalidManagerRequestError,
        RequestNotFoundError,
        RequestAlreadyProcessedError,
    )

    if request.method == 'GET':
        return Response({
            'requests': AdminConnectionRequestSerializer(list_all_connection_requests(), many=True).data,
        })

    serializer = ConnectionDecisionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        connection = process_connection_request(
            request_id=serializer.validated_data['id'],
            status=serializer.validated_data['status'],
        )
    except (InvalidManagerRequestError, RequestAlreadyProcessedError) as e:
        return _error(e, status.HTTP_400_BAD_REQUEST)
    except RequestNotFoundError as e:
        return _error(e, status.HTTP_404_NOT_FOUND)

    return Response({'success': True, 'status': connection.status})


@extend_schema(
    request=PubRequestUpdateSerializer,
    parameters=[OpenApiParameter('status', OpenApiTypes.STR, description='pending, reviewed, approved, rejected or all')],
    responses={200: PubRequestSerializer(many=True), 400: ErrorResponseSerializer},
    description="List pub requests or change the status of one.",
    tags=['admin'],
)
@api_view(['GET', 'PATCH'])
@permission_classes([IsAdminUser])
def admin_pub_requests(request):
    from .services import list_pub_requests, update_pub_request, InvalidManagerRequestError, RequestNotFoundError

    if request.method == 'GET':
        requests = list_pub_requests(status=request.query_params.get('status'))
        return Response({'pub_requests': PubRequestSerializer(requests, many=True).data})

    serializer = PubRequestUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        pub_request = update_pub_request(request_id=data['id'], status=data['status'], notes=data.get('notes'))
    except InvalidManagerRequestError as e:
        return _error(e, status.HTTP_400_BAD_REQUEST)
    except RequestNotFoundError as e:
        return _error(e, status.HTTP_404_NOT_FOUND)

    return Response({'success': True, 'pub_request': PubRequestSerializer(pub_request).data})
