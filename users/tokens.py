# users/tokens.py
from django.conf import settings
from django.core import signing

TOKEN_SALT = 'users.auth-token'


def make_token(user):
    payload = {
        'sub':   user.pk,
        'email': user.email,
        'role':  user.role,
    }
    return signing.dumps(payload, salt=TOKEN_SALT)


def read_token(token):
    """Return the signed payload, or None when the token is forged or expired."""
    try:
        return signing.loads(token, salt=TOKEN_SALT, max_age=settings.AUTH_TOKEN_MAX_AGE)
    except signing.BadSignature:
        return None
