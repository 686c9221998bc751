from collections import namedtuple
from django.contrib.auth import get_user_model
from rest_framework import exceptions
from rest_framework.authentication import TokenAuthentication
from rest_framework.authtoken.models import Token
from .exceptions import UnauthorizedError

Requester = namedtuple('Requester', ['user_id', 'role'])


def resolve_requester(token):
    """Resolve an opaque bearer token to the user behind it."""
    if not token:
        raise UnauthorizedError('Authentication token missing')
    try:
        token = Token.objects.select_related('user').get(key=token)
    except Token.DoesNotExist:
        raise UnauthorizedError('Invalid token')
    if not token.user.is_active:
        raise UnauthorizedError('User inactive or deleted')
    return Requester(token.user.pk, getattr(token.user, 'role', None))


class BearerTokenAuthentication(TokenAuthentication):
    """`Authorization: Bearer <token>`, same tokens as DRF's authtoken."""
    keyword = 'Bearer'

    def authenticate_credentials(self, key):
        try:
            requester = resolve_requester(key)
        except UnauthorizedError as e:
            raise exceptions.AuthenticationFailed(e.message) from e
        user = get_user_model().objects.get(pk=requester.user_id)
        return user, key
