# users/procedures.py
from core.rpc import procedure
from . import services
from .forms import RegisterForm, LoginForm, CurrentUserForm


def serialize_user(user):
    if user is None:
        return None
    return {
        'id':         user.pk,
        'email':      user.email,
        'first_name': user.first_name,
        'last_name':  user.last_name,
        'role':       user.role,
        'is_active':  user.is_active,
        'created_at': user.created_at,
        'updated_at': user.updated_at,
    }


@procedure('auth.register', form=RegisterForm, mutation=True)
def auth_register(data):
    return serialize_user(services.register_user(**data))


@procedure('auth.login', form=LoginForm, mutation=True)
def auth_login(data):
    result = services.login_user(data['email'], data['password'])
    return {'user': serialize_user(result['user']), 'token': result['token']}


@procedure('auth.getCurrentUser', form=CurrentUserForm)
def auth_get_current_user(data):
    return serialize_user(services.get_current_user(data['userId']))
