from django import forms

from catalog.models import Product
from core.forms import RPCForm


class DaysForm(RPCForm):
    days = forms.IntegerField(required=False, min_value=1, max_value=366)


class MonthsForm(RPCForm):
    months = forms.IntegerField(required=False, min_value=1, max_value=120)


class DateRangeForm(RPCForm):
    start_date = forms.DateField()
    end_date = forms.DateField()

    def clean(self):
        cleaned = super().clean()
        start, end = cleaned.get('start_date'), cleaned.get('end_date')
        if start and end and start > end:
            self.add_error('end_date', 'End date must not be before start date.')
        return cleaned


class SalesReportForm(DateRangeForm):
    FORMAT_JSON = 'json'
    FORMAT_CSV = 'csv'

    format = forms.ChoiceField(
        choices=[(FORMAT_JSON, 'JSON'), (FORMAT_CSV, 'CSV')],
        required=False,
    )


class ProductReportForm(RPCForm):
    category_id = forms.IntegerField(min_value=1, required=False)
    product_type = forms.ChoiceField(choices=Product.PRODUCT_TYPES, required=False)


class RevenueReportForm(DateRangeForm):
    group_by = forms.ChoiceField(choices=[('day', 'Day'), ('week', 'Week'), ('month', 'Month')])