# catalog/forms.py
from decimal import Decimal

from django import forms

from core.forms import RPCForm, IdForm, PageForm, NullableCharField
from .models import Product


class CategoryCreateForm(RPCForm):
    name = forms.CharField(max_length=100)
    description = NullableCharField()
    slug = forms.SlugField()


class CategoryUpdateForm(IdForm):
    name = forms.CharField(max_length=100, required=False)
    description = NullableCharField()
    slug = forms.SlugField(required=False)
    is_active = forms.NullBooleanField(required=False)


class ProductCreateForm(RPCForm):
    name = forms.CharField(max_length=255)
    description = NullableCharField()
    price = forms.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'))
    type = forms.ChoiceField(choices=Product.PRODUCT_TYPES)
    category_id = forms.IntegerField(min_value=1)
    image_url = NullableCharField(max_length=500)
    download_url = NullableCharField(max_length=500)
    stock_quantity = forms.IntegerField(required=False, min_value=0)


class ProductUpdateForm(IdForm):
    name = forms.CharField(max_length=255, required=False)
    description = NullableCharField()
    price = forms.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'), required=False)
    type = forms.ChoiceField(choices=Product.PRODUCT_TYPES, required=False)
    category_id = forms.IntegerField(min_value=1, required=False)
    image_url = NullableCharField(max_length=500)
    download_url = NullableCharField(max_length=500)
    stock_quantity = forms.IntegerField(required=False, min_value=0)
    is_active = forms.NullBooleanField(required=False)

    def clean(self):
        cleaned = super().clean()
        # Optional fields may be omitted, but not sent as null
        for name in ('name', 'price', 'type', 'category_id', 'is_active'):
            if name in self.data and cleaned.get(name) in (None, ''):
                self.add_error(name, 'This field cannot be null.')
        return cleaned


class ProductListForm(PageForm):
    category_id = forms.IntegerField(min_value=1, required=False)
    type = forms.ChoiceField(choices=Product.PRODUCT_TYPES, required=False)
    is_active = forms.NullBooleanField(required=False)


class ProductSearchForm(RPCForm):
    query = forms.CharField(max_length=200)
    limit = forms.IntegerField(min_value=1, required=False)
