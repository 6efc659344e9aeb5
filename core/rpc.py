# core/rpc.py
"""
Named remote procedures served at ``/rpc/<name>``.

Apps register their procedures with the ``procedure`` decorator in their own
``procedures.py``; each ``AppConfig.ready`` imports that module so the
registry is complete before the first request.
"""
import json
import logging

from django.core.exceptions import ImproperlyConfigured
from django.core.serializers.json import DjangoJSONEncoder
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt

from core.exceptions import AppError
from users.tokens import read_token

logger = logging.getLogger(__name__)

_registry = {}


class Procedure:
    def __init__(self, name, func, form_class=None, mutation=False):
        self.name = name
        self.func = func
        self.form_class = form_class
        self.mutation = mutation

    def __repr__(self):
        kind = 'mutation' if self.mutation else 'query'
        return f'<Procedure {self.name} ({kind})>'


def procedure(name, form=None, mutation=False):
    """Register ``func(data)`` under ``name``; ``data`` is the cleaned form input."""
    def decorator(func):
        if name in _registry:
            raise ImproperlyConfigured(f'Procedure {name} is already registered')
        _registry[name] = Procedure(name, func, form, mutation)
        return func
    return decorator


def get_procedure(name):
    return _registry.get(name)


def registered_names():
    return sorted(_registry)


def error_response(code, message, status, details=None):
    body = {'success': False, 'error': message, 'code': code}
    if details is not None:
        body['details'] = details
    return JsonResponse(body, status=status)


def read_input(request):
    if request.method == 'GET':
        raw = request.GET.get('input', '')
    else:
        raw = request.body.decode('utf-8') if request.body else ''

    if not raw.strip():
        return {}
    payload = json.loads(raw)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValueError('Procedure input must be a JSON object')
    return payload


def resolve_user_id(request):
    header = request.headers.get('Authorization', '')
    if not header.startswith('Bearer '):
        return None
    claims = read_token(header[len('Bearer '):].strip())
    return claims.get('sub') if claims else None


@csrf_exempt
def rpc_view(request, name):
    request.rpc_procedure = name
    request.rpc_user_id = resolve_user_id(request)

    proc = get_procedure(name)
    if proc is None:
        return error_response('NOT_FOUND', f'No procedure named {name}', 404)

    if request.method not in ('GET', 'POST'):
        return error_response('METHOD_NOT_SUPPORTED', f'{request.method} is not supported', 405)
    if proc.mutation and request.method != 'POST':
        return error_response('METHOD_NOT_SUPPORTED', f'{name} is a mutation and requires POST', 405)

    try:
        payload = read_input(request)
    except ValueError as e:
        return error_response('PARSE_ERROR', f'Malformed input: {e}', 400)

    data = {}
    if proc.form_class is not None:
        form = proc.form_class(data=payload)
        if not form.is_valid():
            details = {field: list(messages) for field, messages in form.errors.items()}
            return error_response('BAD_REQUEST', 'Invalid input', 400, details=details)
        data = form.cleaned_input()

    try:
        result = proc.func(data)
    except AppError as e:
        logger.warning(f'{name} rejected: {e.code} {e.message}')
        return error_response(e.code, e.message, e.status_code)

    return JsonResponse({'success': True, 'data': result}, encoder=DjangoJSONEncoder)
