# core/forms.py
from django import forms


class RPCForm(forms.Form):
    """
    Base form for procedure input.

    The decoded JSON object is bound as ``data``; ``cleaned_input`` drops
    optional fields the caller did not send so services can apply partial
    updates and their own defaults.
    """

    def cleaned_input(self):
        return {
            name: value
            for name, value in self.cleaned_data.items()
            if name in self.data
        }


class IdForm(RPCForm):
    id = forms.IntegerField(min_value=1)


class PageForm(RPCForm):
    limit = forms.IntegerField(required=False, min_value=1)
    offset = forms.IntegerField(required=False, min_value=0)


class LimitForm(RPCForm):
    limit = forms.IntegerField(required=False, min_value=1)


class NullableCharField(forms.CharField):
    """CharField that keeps an explicit JSON ``null`` as ``None``."""

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('empty_value', None)
        super().__init__(**kwargs)


class ListOfFormsField(forms.Field):
    """Validates a JSON array whose elements are each cleaned by ``form_class``."""

    default_error_messages = {
        'invalid': 'Enter a list of objects.',
        'empty': 'At least one entry is required.',
    }

    def __init__(self, form_class, allow_empty=False, **kwargs):
        self.form_class = form_class
        self.allow_empty = allow_empty
        super().__init__(**kwargs)

    def clean(self, value):
        if value in self.empty_values:
            if self.required and not self.allow_empty:
                raise forms.ValidationError(self.error_messages['required'], code='required')
            return []
        if not isinstance(value, list):
            raise forms.ValidationError(self.error_messages['invalid'], code='invalid')
        if not value and not self.allow_empty:
            raise forms.ValidationError(self.error_messages['empty'], code='empty')

        cleaned = []
        errors = []
        for index, entry in enumerate(value):
            if not isinstance(entry, dict):
                errors.append(forms.ValidationError(f'Entry {index}: expected an object', code='invalid'))
                continue
            form = self.form_class(data=entry)
            if form.is_valid():
                cleaned.append(form.cleaned_data)
            else:
                for field, messages in form.errors.items():
                    for message in messages:
                        errors.append(forms.ValidationError(f'Entry {index} {field}: {message}', code='invalid'))
        if errors:
            raise forms.ValidationError(errors)
        return cleaned
