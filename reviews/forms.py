# reviews/forms.py
from django import forms

from core.forms import RPCForm, NullableCharField


class ReviewCreateForm(RPCForm):
    user_id = forms.IntegerField(min_value=1)
    product_id = forms.IntegerField(min_value=1)
    rating = forms.IntegerField(min_value=1, max_value=5)
    comment = NullableCharField()


class ProductReviewsForm(RPCForm):
    productId = forms.IntegerField(min_value=1)
    approved = forms.NullBooleanField(required=False)


class UserReviewsForm(RPCForm):
    userId = forms.IntegerField(min_value=1)


class RatingSummaryForm(RPCForm):
    productId = forms.IntegerField(min_value=1)
