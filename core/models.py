# core/models.py
from django.db import models


class SiteSetting(models.Model):
    """Key/value store settings editable from the back office"""
    key = models.CharField(max_length=100, unique=True, db_index=True)
    value = models.TextField()
    description = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'site_settings'
        ordering = ['key']

    def __str__(self):
        return self.key


class DailyVisit(models.Model):
    """One row per calendar day, counting new sessions"""
    date = models.DateField(unique=True, db_index=True)
    visitors = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'daily_visits'
        ordering = ['-date']

    def __str__(self):
        return f"{self.date}: {self.visitors}"
