# promotions/forms.py
from decimal import Decimal

from django import forms

from core.forms import RPCForm, IdForm
from .models import Coupon


class CouponCreateForm(RPCForm):
    code = forms.CharField(max_length=50)
    type = forms.ChoiceField(choices=Coupon.DISCOUNT_TYPES)
    value = forms.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'))
    minimum_order_amount = forms.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'), required=False)
    usage_limit = forms.IntegerField(min_value=1, required=False)
    expires_at = forms.DateTimeField(required=False)

    def clean_code(self):
        return self.cleaned_data['code'].strip()

    def clean(self):
        cleaned = super().clean()
        if cleaned.get('type') == Coupon.TYPE_PERCENTAGE and cleaned.get('value') and cleaned['value'] > 100:
            self.add_error('value', 'Percentage coupons cannot exceed 100.')
        return cleaned


class CouponUpdateForm(IdForm):
    is_active = forms.NullBooleanField(required=False)
    usage_limit = forms.IntegerField(min_value=1, required=False)
    expires_at = forms.DateTimeField(required=False)


class CouponCodeForm(RPCForm):
    code = forms.CharField(max_length=50)


class CouponValidateForm(RPCForm):
    code = forms.CharField(max_length=50)
    orderAmount = forms.DecimalField(min_value=Decimal('0'))
