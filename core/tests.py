import json
import logging
from datetime import date
from decimal import Decimal

import pytest

from core.exceptions import ValidationFailure
from core.logging_config import JSONFormatter
from core.models import DailyVisit, SiteSetting
from core.money import to_money
from core.services import (
    update_setting, get_public_settings, initialize_default_settings, delete_setting, record_visit,
)
from users.tokens import make_token

pytestmark = pytest.mark.django_db


def test_to_money_rounds_half_up():
    assert to_money(Decimal('6.997')) == Decimal('7.00')
    assert to_money(Decimal('0.005')) == Decimal('0.01')
    assert to_money(4.5) == Decimal('4.50')
    assert to_money(None) == Decimal('0.00')


def test_json_formatter_carries_extras():
    record = logging.LogRecord('orders', logging.INFO, __file__, 1, 'Order %s created', (7,), None)
    record.request_id = 'abc'
    record.procedure = 'orders.create'

    payload = json.loads(JSONFormatter().format(record))

    assert payload['message'] == 'Order 7 created'
    assert payload['service'] == 'digital-store'
    assert payload['request_id'] == 'abc'
    assert payload['procedure'] == 'orders.create'
    assert 'status_code' not in payload


# ==================== SETTINGS ====================

def test_update_setting_upserts():
    update_setting('site_name', 'Pixel Shop')
    update_setting('site_name', 'Pixel Store')

    assert SiteSetting.objects.get(key='site_name').value == 'Pixel Store'
    assert SiteSetting.objects.count() == 1


def test_initialize_keeps_existing_values():
    update_setting('site_name', 'Pixel Store')

    assert initialize_default_settings() == {'success': True}
    initialize_default_settings()

    assert SiteSetting.objects.get(key='site_name').value == 'Pixel Store'
    assert SiteSetting.objects.filter(key='contact_email').exists()


def test_public_settings_hide_internal_keys():
    initialize_default_settings()

    public = get_public_settings()

    assert public['site_name'] == 'Digital Store'
    assert 'max_file_upload_size' not in public


def test_protected_setting_cannot_be_deleted():
    initialize_default_settings()

    with pytest.raises(ValidationFailure, match='Cannot delete critical system setting: site_name'):
        delete_setting('site_name')

    assert delete_setting('business_hours') == {'success': True}
    assert delete_setting('business_hours') == {'success': False}


# ==================== VISITS ====================

def test_record_visit_counts_per_day():
    record_visit(date(2024, 3, 1))
    record_visit(date(2024, 3, 1))
    record_visit(date(2024, 3, 2))

    assert DailyVisit.objects.get(date=date(2024, 3, 1)).visitors == 2
    assert DailyVisit.objects.get(date=date(2024, 3, 2)).visitors == 1


def test_middleware_counts_one_visit_per_session(client):
    # First response issues the cookie; the visit counts once it comes back
    client.get('/rpc/healthcheck')
    client.get('/rpc/healthcheck')
    client.get('/rpc/healthcheck')

    assert DailyVisit.objects.get().visitors == 1


# ==================== RPC ====================

def test_healthcheck(rpc):
    status, body = rpc.get('healthcheck')

    assert status == 200
    assert body['data']['status'] == 'ok'


def test_unknown_procedure(rpc):
    status, body = rpc.get('nope.nothing')

    assert status == 404
    assert body['code'] == 'NOT_FOUND'


def test_malformed_json(client):
    response = client.post('/rpc/auth.login', data='{not json', content_type='application/json')

    assert response.status_code == 400
    assert response.json()['code'] == 'PARSE_ERROR'


def test_input_must_be_an_object(client):
    response = client.post('/rpc/auth.login', data='[1, 2]', content_type='application/json')

    assert response.status_code == 400
    assert response.json()['code'] == 'PARSE_ERROR'


def test_request_id_is_echoed(client):
    response = client.get('/rpc/healthcheck', headers={'X-Request-ID': 'req-123'})

    assert response['X-Request-ID'] == 'req-123'


def test_bearer_token_is_resolved(client, user):
    response = client.get('/rpc/healthcheck', headers={'Authorization': f'Bearer {make_token(user)}'})

    assert response.wsgi_request.rpc_user_id == user.pk


def test_settings_procedures(rpc):
    rpc.post('settings.initialize')

    status, body = rpc.post('settings.update', {'key': 'site_name', 'value': 'Renamed'})
    assert status == 200
    assert body['data']['value'] == 'Renamed'

    status, body = rpc.get('settings.getPublic')
    assert body['data']['site_name'] == 'Renamed'

    status, body = rpc.post('settings.delete', {'key': 'contact_email'})
    assert status == 400
    assert body['code'] == 'VALIDATION_FAILED'


def test_middleware_ignores_requests_without_session_cookie(client):
    for _ in range(3):
        client.cookies.clear()
        client.get('/rpc/healthcheck')

    assert not DailyVisit.objects.filter(visitors__gt=0).exists()
