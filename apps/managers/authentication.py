from django.conf import settings
from rest_framework import authentication, exceptions


class PubManagerAuthentication(authentication.BaseAuthentication):
    """
    Authenticates pub-manager portal requests.

    The token comes from ``Authorization: Bearer <token>`` or, failing
    that, the pub-manager cookie. ``request.user`` becomes a
    PubManagerSession.
    """

    keyword = 'Bearer'

    def get_raw_token(self, request):
        header = authentication.get_authorization_header(request).split()
        if header and header[0].lower() == self.keyword.lower().encode():
            if len(header) != 2:
                raise exceptions.AuthenticationFailed('Invalid authorization header.')
            return header[1].decode('latin-1')
        return request.COOKIES.get(settings.PUB_MANAGER_COOKIE_NAME)

    def authenticate(self, request):
        from apps.managers.services import load_session, InvalidTokenError

        token = self.get_raw_token(request)
        if not token:
            return None
        try:
            session = load_session(token=token)
        except InvalidTokenError as e:
            raise exceptions.AuthenticationFailed(str(e))
        return session, token

    def authenticate_header(self, request):
        return f'{self.keyword} realm="pub-manager"'
