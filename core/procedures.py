# core/procedures.py
from django import forms
from django.utils import timezone

from . import services
from .forms import RPCForm
from .rpc import procedure


def serialize_setting(setting):
    if setting is None:
        return None
    return {
        'id':          setting.pk,
        'key':         setting.key,
        'value':       setting.value,
        'description': setting.description,
        'created_at':  setting.created_at,
        'updated_at':  setting.updated_at,
    }


class SettingKeyForm(RPCForm):
    key = forms.CharField(max_length=100)


class UpdateSettingForm(RPCForm):
    key = forms.CharField(max_length=100)
    value = forms.CharField(strip=False, required=False)


@procedure('healthcheck')
def healthcheck(data):
    return {'status': 'ok', 'timestamp': timezone.now()}


@procedure('settings.list')
def settings_list(data):
    return [serialize_setting(s) for s in services.list_settings()]


@procedure('settings.getByKey', form=SettingKeyForm)
def settings_get_by_key(data):
    return serialize_setting(services.get_setting(data['key']))


@procedure('settings.update', form=UpdateSettingForm, mutation=True)
def settings_update(data):
    return serialize_setting(services.update_setting(data['key'], data.get('value', '')))


@procedure('settings.getPublic')
def settings_get_public(data):
    return services.get_public_settings()


@procedure('settings.initialize', mutation=True)
def settings_initialize(data):
    return services.initialize_default_settings()


@procedure('settings.delete', form=SettingKeyForm, mutation=True)
def settings_delete(data):
    return services.delete_setting(data['key'])
