# users/forms.py
from django import forms

from core.forms import RPCForm
from .models import User


class RegisterForm(RPCForm):
    email = forms.EmailField()
    password = forms.CharField(min_length=6, strip=False)
    first_name = forms.CharField(max_length=150, min_length=1)
    last_name = forms.CharField(max_length=150, min_length=1)
    role = forms.ChoiceField(choices=User.ROLES, required=False)

    def clean_email(self):
        return self.cleaned_data["email"].lower().strip()

    def clean_role(self):
        return self.cleaned_data.get("role") or User.ROLE_CUSTOMER


class LoginForm(RPCForm):
    email = forms.EmailField()
    password = forms.CharField(strip=False)

    def clean_email(self):
        return self.cleaned_data["email"].lower().strip()


class CurrentUserForm(RPCForm):
    userId = forms.IntegerField(min_value=1)
