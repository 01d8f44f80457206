"""Photos uploaded by managers."""

import logging
import os

from django.core.exceptions import ValidationError
from django.core.files.storage import default_storage
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone
from django.utils.text import get_valid_filename

from apps.pubs.models import PubPhoto
from .access import PubManagerSession, resolve_managed_pub
from .exceptions import PhotoNotFoundError, PubAccessDeniedError, InvalidManagerRequestError

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = ('image/jpeg', 'image/png', 'image/webp', 'image/gif')


def list_photos(*, session: PubManagerSession, pub_id=None) -> QuerySet[PubPhoto]:
    """Cover photo first, then newest first."""
    pub = resolve_managed_pub(session=session, pub_id=pub_id)
    return PubPhoto.objects.filter(pub=pub).order_by('-is_cover', '-created_at')


def _unset_cover(pub_id, exclude_id=None):
    queryset = PubPhoto.objects.filter(pub_id=pub_id, is_cover=True)
    if exclude_id:
        queryset = queryset.exclude(id=exclude_id)
    queryset.update(is_cover=False)


@transaction.atomic
def upload_photo(*, session: PubManagerSession, upload, pub_id=None, is_cover: bool = False) -> PubPhoto:
    """
    Store an uploaded image under ``uploads/{pub_id}/{timestamp}-{name}``.

    Raises:
        InvalidManagerRequestError: If no file was sent or it is not an image
        PubAccessDeniedError: If ``pub_id`` is not managed by the caller
    """
    if upload is None:
        raise InvalidManagerRequestError("No file provided")
    content_type = getattr(upload, 'content_type', '') or ''
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise InvalidManagerRequestError("Only JPEG, PNG, WebP and GIF images are allowed")

    pub = resolve_managed_pub(session=session, pub_id=pub_id)
    timestamp = int(timezone.now().timestamp() * 1000)
    filename = get_valid_filename(os.path.basename(upload.name or 'photo'))
    stored_name = default_storage.save(f"{pub.id}/{timestamp}-{filename}", upload)

    if is_cover:
        _unset_cover(pub.id)

    photo = PubPhoto.objects.create(
        pub=pub,
        url=default_storage.url(stored_name),
        is_cover=is_cover,
        uploaded_by=session.email,
    )
    logger.info("Photo %s uploaded for pub %s by %s", photo.id, pub.id, session.email)
    return photo


def _get_accessible_photo(session: PubManagerSession, photo_id) -> PubPhoto:
    try:
        photo = PubPhoto.objects.get(id=photo_id)
    except (PubPhoto.DoesNotExist, ValidationError, ValueError):
        raise PhotoNotFoundError("Photo not found")
    if not session.can_access(photo.pub_id):
        raise PubAccessDeniedError("Access denied to this pub")
    return photo


@transaction.atomic
def set_photo_cover(*, session: PubManagerSession, photo_id, is_cover: bool) -> PubPhoto:
    """
    Raises:
        PhotoNotFoundError: If the photo does not exist
        PubAccessDeniedError: If the photo belongs to another pub
    """
    photo = _get_accessible_photo(session, photo_id)
    if is_cover:
        _unset_cover(photo.pub_id, exclude_id=photo.id)
    photo.is_cover = is_cover
    photo.save(update_fields=['is_cover'])
    return photo


@transaction.atomic
def delete_photo(*, session: PubManagerSession, photo_id) -> None:
    """
    Raises:
        PhotoNotFoundError: If the photo does not exist
        PubAccessDeniedError: If the photo belongs to another pub
    """
    photo = _get_accessible_photo(session, photo_id)
    media_url = default_storage.url('')
    if photo.url.startswith(media_url):
        default_storage.delete(photo.url[len(media_url):])
    photo.delete()
