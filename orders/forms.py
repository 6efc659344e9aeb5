# orders/forms.py
from decimal import Decimal

from django import forms
from django.conf import settings

from core.forms import RPCForm, IdForm, PageForm, ListOfFormsField
from core.money import MAX_AMOUNT
from .models import Order


class OrderLineForm(RPCForm):
    product_id = forms.IntegerField(min_value=1)
    quantity = forms.IntegerField(min_value=1, max_value=settings.STORE_MAX_LINE_QUANTITY)
    price = forms.DecimalField(min_value=Decimal('0.01'), max_value=MAX_AMOUNT)


class CreateOrderForm(RPCForm):
    user_id = forms.IntegerField(min_value=1)
    items = ListOfFormsField(OrderLineForm)
    coupon_code = forms.CharField(max_length=50, required=False)

    def clean_coupon_code(self):
        return (self.cleaned_data.get('coupon_code') or '').strip() or None


class CancelOrderForm(IdForm):
    user_id = forms.IntegerField(min_value=1, required=False)


class UpdateStatusForm(IdForm):
    status = forms.ChoiceField(choices=Order.ORDER_STATUS)


class UpdatePaymentStatusForm(IdForm):
    payment_status = forms.ChoiceField(choices=Order.PAYMENT_STATUS)


class OrderListForm(PageForm):
    user_id = forms.IntegerField(min_value=1, required=False)
    status = forms.ChoiceField(choices=Order.ORDER_STATUS, required=False)
    payment_status = forms.ChoiceField(choices=Order.PAYMENT_STATUS, required=False)


class UserOrdersForm(RPCForm):
    userId = forms.IntegerField(min_value=1)
