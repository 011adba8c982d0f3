from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Project(models.Model):
    """A kanban project. Its id names the realtime room collaborators join."""

    name = models.CharField(_("Name"), max_length=255)
    description = models.TextField(_("Description"), blank=True, default="")
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="owned_projects",
    )
    members = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        blank=True,
        related_name="projects",
    )
    is_public = models.BooleanField(default=False)
    color = models.CharField(max_length=7, default="#3B82F6")
    # Audit timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.name

    def has_member(self, user_or_id) -> bool:
        """True when the user owns the project or is listed as a member."""

        user_id = getattr(user_or_id, "pk", user_or_id)
        if user_id is None:
            return False
        if str(self.owner_id) == str(user_id):
            return True
        return self.members.filter(pk=user_id).exists()
