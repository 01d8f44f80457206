import hmac

from django.conf import settings
from rest_framework import authentication, exceptions


class CronJob:
    """Principal for requests made by the scheduler."""

    is_authenticated = True
    is_anonymous = False
    is_staff = False

    def __str__(self):
        return 'cron'


class CronSecretAuthentication(authentication.BaseAuthentication):
    """
    Authenticates scheduled jobs by ``Authorization: Bearer <CRON_SECRET>``.

    An empty CRON_SECRET rejects every request.
    """

    keyword = 'Bearer'

    def authenticate(self, request):
        header = authentication.get_authorization_header(request).split()
        if not header or header[0].lower() != self.keyword.lower().encode():
            return None
        if len(header) != 2:
            raise exceptions.AuthenticationFailed('Unauthorized')

        secret = settings.CRON_SECRET or ''
        supplied = header[1].decode('latin-1')
        if not secret or not hmac.compare_digest(supplied, secret):
            raise exceptions.AuthenticationFailed('Unauthorized')
        return CronJob(), None

    def authenticate_header(self, request):
        return f'{self.keyword} realm="cron"'
