from unittest import mock

import pytest

from tests.factories import create_project
from tests.factories import create_user

pytestmark = pytest.mark.django_db

PUBLISH = "taskboard.realtime.events.projects.emit_event_to_project"


def test_member_added_is_announced(django_capture_on_commit_callbacks):
    owner = create_user("owner")
    member = create_user("member", first_name="Mia", last_name="Ng")
    project = create_project("Roadmap", owner=owner)

    with mock.patch(PUBLISH) as emit:
        with django_capture_on_commit_callbacks(execute=True):
            project.members.add(member)

    emit.assert_called_once()
    project_id, event, payload = emit.call_args.args
    assert project_id == project.pk
    assert event == "member-joined"
    assert payload["projectId"] == str(project.pk)
    assert payload["member"]["username"] == "member"
    assert payload["member"]["name"] == "Mia Ng"
    assert "password" not in payload["member"]


def test_member_removed_is_announced(django_capture_on_commit_callbacks):
    owner = create_user("owner")
    member = create_user("member")
    project = create_project("Roadmap", owner=owner, members=[member])

    with mock.patch(PUBLISH) as emit:
        with django_capture_on_commit_callbacks(execute=True):
            project.members.remove(member)

    assert emit.call_args.args[1] == "member-left"


def test_nothing_published_before_commit(django_capture_on_commit_callbacks):
    owner = create_user("owner")
    member = create_user("member")
    project = create_project("Roadmap", owner=owner)

    with mock.patch(PUBLISH) as emit:
        with django_capture_on_commit_callbacks(execute=False) as callbacks:
            project.members.add(member)

    assert len(callbacks) == 1
    emit.assert_not_called()


def test_clear_is_not_announced(django_capture_on_commit_callbacks):
    owner = create_user("owner")
    member = create_user("member")
    project = create_project("Roadmap", owner=owner, members=[member])

    with mock.patch(PUBLISH) as emit:
        with django_capture_on_commit_callbacks(execute=True):
            project.members.clear()

    emit.assert_not_called()
