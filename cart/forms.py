# cart/forms.py
from django import forms
from django.conf import settings

from core.forms import RPCForm, IdForm


class AddToCartForm(RPCForm):
    user_id = forms.IntegerField(min_value=1)
    product_id = forms.IntegerField(min_value=1)
    quantity = forms.IntegerField(min_value=1, max_value=settings.STORE_MAX_LINE_QUANTITY)


class UpdateCartItemForm(IdForm):
    quantity = forms.IntegerField(min_value=1, max_value=settings.STORE_MAX_LINE_QUANTITY)


class CartOwnerForm(RPCForm):
    userId = forms.IntegerField(min_value=1)


class RemoveFromCartForm(RPCForm):
    itemId = forms.IntegerField(min_value=1)
    userId = forms.IntegerField(min_value=1)
