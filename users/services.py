# users/services.py
import logging

from django.db import IntegrityError, transaction

from core.exceptions import Conflict, ValidationFailure
from .models import User
from .tokens import make_token

logger = logging.getLogger(__name__)


def register_user(email, password, first_name, last_name, role=User.ROLE_CUSTOMER):
    email = User.objects.normalize_email(email)
    if User.objects.filter(email=email).exists():
        raise Conflict("User with this email already exists")

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
                role=role,
            )
    except IntegrityError:
        raise Conflict("User with this email already exists")

    logger.info(f"User registered: {user.email} ({user.role})")
    return user


def login_user(email, password):
    user = User.objects.filter(email=User.objects.normalize_email(email)).first()
    if user is None:
        raise ValidationFailure("Invalid email or password", status_code=401)

    if not user.check_password(password):
        logger.warning(f"Failed login for {user.email}")
        raise ValidationFailure("Invalid email or password", status_code=401)

    if not user.is_active:
        raise ValidationFailure("User account is deactivated", status_code=403)

    logger.info(f"User logged in: {user.email}")
    return {'user': user, 'token': make_token(user)}


def get_current_user(user_id):
    """Inactive users are still returned; callers decide what to do with them."""
    return User.objects.filter(pk=user_id).first()