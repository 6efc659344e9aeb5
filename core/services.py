# core/services.py
import logging

from django.conf import settings
from django.db import transaction
from django.db.models import F

from .exceptions import ValidationFailure
from .models import SiteSetting, DailyVisit

logger = logging.getLogger(__name__)


# ==================== SETTINGS ====================

def list_settings():
    return SiteSetting.objects.all()


def get_setting(key):
    return SiteSetting.objects.filter(key=key).first()


def update_setting(key, value):
    """Upsert: a missing key is created without a description."""
    setting, created = SiteSetting.objects.update_or_create(key=key, defaults={'value': value})
    logger.info(f"Setting {key} {'created' if created else 'updated'}")
    return setting


def get_public_settings():
    public = SiteSetting.objects.filter(key__in=settings.STORE_PUBLIC_SETTING_KEYS)
    return {s.key: s.value for s in public}


def initialize_default_settings():
    created_keys = []
    for key, value, description in settings.STORE_DEFAULT_SETTINGS:
        _, created = SiteSetting.objects.get_or_create(
            key=key,
            defaults={'value': value, 'description': description},
        )
        if created:
            created_keys.append(key)

    if created_keys:
        logger.info(f"Initialized default settings: {', '.join(created_keys)}")
    return {'success': True}


def delete_setting(key):
    if key in settings.STORE_PROTECTED_SETTING_KEYS:
        raise ValidationFailure(f"Cannot delete critical system setting: {key}")

    deleted, _ = SiteSetting.objects.filter(key=key).delete()
    return {'success': deleted > 0}


# ==================== VISITS ====================

@transaction.atomic
def record_visit(day):
    DailyVisit.objects.get_or_create(date=day)
    DailyVisit.objects.filter(date=day).update(visitors=F('visitors') + 1)
