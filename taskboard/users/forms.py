from django.contrib.auth import forms as admin_forms

from taskboard.users.models import User


class UserAdminChangeForm(admin_forms.UserChangeForm):
    class Meta(admin_forms.UserChangeForm.Meta):
        model = User


class UserAdminCreationForm(admin_forms.UserCreationForm):
    """Admin creation form; email is required because it is unique."""

    class Meta(admin_forms.UserCreationForm.Meta):
        model = User
        fields = ("username", "email")
