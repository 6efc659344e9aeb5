# content/forms.py
from django import forms

from core.forms import RPCForm, IdForm, PageForm, NullableCharField


class BlogPostCreateForm(RPCForm):
    title = forms.CharField(max_length=200)
    content = forms.CharField(strip=False)
    excerpt = NullableCharField()
    slug = forms.SlugField(max_length=200)
    author_id = forms.IntegerField(min_value=1)
    featured_image_url = NullableCharField(max_length=500)
    is_published = forms.NullBooleanField(required=False)

    def clean_is_published(self):
        return bool(self.cleaned_data.get('is_published'))


class BlogPostUpdateForm(IdForm):
    title = forms.CharField(max_length=200, required=False)
    content = forms.CharField(strip=False, required=False)
    excerpt = NullableCharField()
    slug = forms.SlugField(max_length=200, required=False)
    featured_image_url = NullableCharField(max_length=500)
    is_published = forms.NullBooleanField(required=False)

    def clean(self):
        cleaned = super().clean()
        for name in ('title', 'content', 'slug', 'is_published'):
            if name in self.data and cleaned.get(name) in (None, ''):
                self.add_error(name, 'This field cannot be empty.')
        return cleaned


class BlogListForm(PageForm):
    is_published = forms.NullBooleanField(required=False)
    author_id = forms.IntegerField(min_value=1, required=False)


class SlugForm(RPCForm):
    slug = forms.SlugField(max_length=200)


class ContactCreateForm(RPCForm):
    name = forms.CharField(max_length=200)
    email = forms.EmailField()
    subject = forms.CharField(max_length=255)
    message = forms.CharField(strip=False)


class ContactListForm(PageForm):
    is_read = forms.NullBooleanField(required=False)
