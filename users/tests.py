import pytest

from core.exceptions import Conflict, ValidationFailure
from users.models import User
from users.services import register_user, login_user, get_current_user
from users.tokens import make_token, read_token

pytestmark = pytest.mark.django_db


def test_register_normalizes_email_and_hashes_password():
    user = register_user(' New@Example.COM ', 'secret123', 'New', 'Customer')

    assert user.email == 'new@example.com'
    assert user.role == User.ROLE_CUSTOMER
    assert user.password != 'secret123'
    assert user.check_password('secret123')


def test_register_duplicate_email(user):
    with pytest.raises(Conflict, match='User with this email already exists'):
        register_user('JANE@example.com', 'secret123', 'Jane', 'Again')


def test_login_returns_readable_token(user):
    result = login_user('jane@example.com', 'secret123')

    assert result['user'] == user
    claims = read_token(result['token'])
    assert claims == {'sub': user.pk, 'email': 'jane@example.com', 'role': 'customer'}


@pytest.mark.parametrize('email, password', [
    ('jane@example.com', 'wrong-password'),
    ('nobody@example.com', 'secret123'),
])
def test_login_rejects_bad_credentials(user, email, password):
    with pytest.raises(ValidationFailure, match='Invalid email or password') as excinfo:
        login_user(email, password)
    assert excinfo.value.status_code == 401


def test_login_rejects_deactivated_account(user):
    User.objects.filter(pk=user.pk).update(is_active=False)

    with pytest.raises(ValidationFailure, match='User account is deactivated') as excinfo:
        login_user('jane@example.com', 'secret123')
    assert excinfo.value.status_code == 403


def test_current_user_includes_inactive(user):
    User.objects.filter(pk=user.pk).update(is_active=False)

    assert get_current_user(user.pk) == user
    assert get_current_user(9999) is None


def test_tampered_token_is_rejected(user):
    token = make_token(user)

    assert read_token(token + 'x') is None
    assert read_token('garbage') is None


# ==================== PROCEDURES ====================

def test_register_procedure(rpc):
    status, body = rpc.post('auth.register', {
        'email': 'shopper@example.com',
        'password': 'longenough',
        'first_name': 'Sam',
        'last_name': 'Shopper',
    })

    assert status == 200
    assert body['data']['email'] == 'shopper@example.com'
    assert body['data']['role'] == 'customer'
    assert 'password' not in body['data']


def test_register_procedure_validates_password_length(rpc):
    status, body = rpc.post('auth.register', {
        'email': 'shopper@example.com',
        'password': '123',
        'first_name': 'Sam',
        'last_name': 'Shopper',
    })

    assert status == 400
    assert body['code'] == 'BAD_REQUEST'
    assert 'password' in body['details']


def test_login_procedure_error_envelope(rpc, user):
    status, body = rpc.post('auth.login', {'email': 'jane@example.com', 'password': 'nope'})

    assert status == 401
    assert body == {'success': False, 'error': 'Invalid email or password', 'code': 'VALIDATION_FAILED'}


def test_get_current_user_procedure(rpc, user):
    status, body = rpc.get('auth.getCurrentUser', {'userId': user.pk})

    assert status == 200
    assert body['data']['id'] == user.pk
