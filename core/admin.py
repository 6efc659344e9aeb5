from django.contrib import admin
from unfold.admin import ModelAdmin

from .models import SiteSetting, DailyVisit


@admin.register(SiteSetting)
class SiteSettingAdmin(ModelAdmin):
    list_display = ("key", "value", "updated_at")
    search_fields = ("key", "description")


@admin.register(DailyVisit)
class DailyVisitAdmin(ModelAdmin):
    list_display = ("date", "visitors")
    date_hierarchy = "date"
