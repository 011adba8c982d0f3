from django.db.models.signals import m2m_changed
from django.db.transaction import on_commit
from django.dispatch import receiver

from taskboard.realtime.events.projects import publish_members_changed

from .models import Project


@receiver(m2m_changed, sender=Project.members.through)
def send_membership_ws(sender, instance, action, reverse, pk_set, **kwargs):
    """Announce membership changes made through Django to the project room."""

    if reverse or not pk_set:
        return
    if action == "post_add":
        event = "member-joined"
    elif action == "post_remove":
        event = "member-left"
    else:
        return

    member_ids = sorted(pk_set)
    on_commit(lambda: publish_members_changed(instance, event, member_ids))
