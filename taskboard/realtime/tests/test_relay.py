import pytest

from taskboard.realtime import protocol
from taskboard.realtime.connection import Connection
from taskboard.realtime.relay import HANDLERS
from taskboard.realtime.relay import join_target
from taskboard.realtime.rooms import RoomTable
from tests.factories import make_identity


def handle(connection, rooms, event, payload):
    return HANDLERS[event](connection, rooms, payload)


class TestRelay:
    def setup_method(self):
        self.rooms = RoomTable()
        self.alice = Connection("sid-a", make_identity("1", "alice", name="Alice Doe"))
        self.bob = Connection("sid-b", make_identity("2", "bob", name="Bob Roe"))
        self.carol = Connection("sid-c", make_identity("3", "carol"))

    def test_task_moved_reaches_peer_with_mover(self):
        handle(self.alice, self.rooms, "join-project", "proj-1")
        handle(self.bob, self.rooms, "join-project", "proj-1")
        payload = {
            "task": {"id": "t1"},
            "projectId": "proj-1",
            "fromColumn": "todo",
            "toColumn": "done",
        }

        messages = handle(self.alice, self.rooms, "task-moved", payload)

        assert len(messages) == 1
        message = messages[0]
        assert message.event == "task-moved"
        assert message.recipients == ("sid-b",)
        assert message.payload == {**payload, "movedBy": self.alice.identity.as_payload()}
        assert message.payload["movedBy"]["id"] == "1"

    def test_payload_is_not_mutated(self):
        handle(self.alice, self.rooms, "join-project", "proj-1")
        handle(self.bob, self.rooms, "join-project", "proj-1")
        payload = {"task": {"id": "t1"}, "projectId": "proj-1"}

        handle(self.alice, self.rooms, "task-created", payload)

        assert payload == {"task": {"id": "t1"}, "projectId": "proj-1"}

    def test_sender_never_receives_own_event(self):
        handle(self.alice, self.rooms, "join-project", "proj-1")
        handle(self.bob, self.rooms, "join-project", "proj-1")
        handle(self.carol, self.rooms, "join-project", "proj-1")

        messages = handle(
            self.bob,
            self.rooms,
            "comment-added",
            {"comment": {"id": "c1"}, "projectId": "proj-1"},
        )

        assert messages[0].recipients == ("sid-a", "sid-c")

    def test_other_rooms_receive_nothing(self):
        handle(self.alice, self.rooms, "join-project", "proj-1")
        handle(self.bob, self.rooms, "join-project", "proj-2")

        messages = handle(
            self.alice,
            self.rooms,
            "task-updated",
            {"task": {"id": "t1"}, "projectId": "proj-1"},
        )

        assert messages == []

    def test_left_connection_receives_nothing(self):
        handle(self.alice, self.rooms, "join-project", "proj-1")
        handle(self.bob, self.rooms, "join-project", "proj-1")
        handle(self.bob, self.rooms, "leave-project", "proj-1")

        messages = handle(
            self.alice,
            self.rooms,
            "task-deleted",
            {"taskId": "t1", "projectId": "proj-1"},
        )

        assert messages == []

    @pytest.mark.parametrize(
        ("event", "payload", "sender_field"),
        [
            ("task-created", {"task": {"id": "t1"}}, "createdBy"),
            ("task-updated", {"task": {"id": "t1"}}, "updatedBy"),
            ("task-deleted", {"taskId": "t1"}, "deletedBy"),
            ("comment-added", {"comment": {"id": "c1"}}, "addedBy"),
            ("comment-updated", {"comment": {"id": "c1"}}, "updatedBy"),
            ("comment-deleted", {"commentId": "c1"}, "deletedBy"),
            ("member-joined", {"member": {"id": "9"}}, "joinedBy"),
            ("member-left", {"member": {"id": "9"}}, "leftBy"),
        ],
    )
    def test_sender_field_per_event(self, event, payload, sender_field):
        handle(self.alice, self.rooms, "join-project", "proj-1")
        handle(self.bob, self.rooms, "join-project", "proj-1")

        (message,) = handle(self.alice, self.rooms, event, {**payload, "projectId": "proj-1"})

        assert message.event == event
        assert message.payload[sender_field] == self.alice.identity.as_payload()
        for key, value in payload.items():
            assert message.payload[key] == value

    def test_missing_project_id_is_dropped(self):
        handle(self.alice, self.rooms, "join-project", "proj-1")
        handle(self.bob, self.rooms, "join-project", "proj-1")

        assert handle(self.alice, self.rooms, "task-created", {"task": {}}) == []
        assert handle(self.alice, self.rooms, "task-created", "not-an-object") == []
        assert handle(self.alice, self.rooms, "task-created", None) == []

    def test_malformed_payload_is_forwarded_as_is(self):
        handle(self.alice, self.rooms, "join-project", "proj-1")
        handle(self.bob, self.rooms, "join-project", "proj-1")

        (message,) = handle(
            self.alice,
            self.rooms,
            "task-moved",
            {"projectId": "proj-1", "whatever": [1, 2]},
        )

        assert message.payload["whatever"] == [1, 2]
        assert "movedBy" in message.payload

    def test_sender_outside_room_still_relays(self):
        handle(self.bob, self.rooms, "join-project", "proj-1")

        (message,) = handle(
            self.alice,
            self.rooms,
            "task-created",
            {"task": {"id": "t1"}, "projectId": "proj-1"},
        )

        assert message.recipients == ("sid-b",)


class TestTyping:
    def setup_method(self):
        self.rooms = RoomTable()
        self.alice = Connection("sid-a", make_identity("1", "alice", name="Alice Doe"))
        self.bob = Connection("sid-b", make_identity("2", "bob"))
        handle(self.alice, self.rooms, "join-project", "proj-1")
        handle(self.bob, self.rooms, "join-project", "proj-1")

    def test_typing_start(self):
        (message,) = handle(
            self.alice,
            self.rooms,
            "typing-start",
            {"projectId": "proj-1", "taskId": "t1"},
        )

        assert message.event == "user-typing"
        assert message.recipients == ("sid-b",)
        assert message.payload == {"userId": "1", "userName": "Alice Doe", "taskId": "t1"}

    def test_typing_stop_without_task(self):
        (message,) = handle(self.alice, self.rooms, "typing-stop", {"projectId": "proj-1"})

        assert message.event == "user-stopped-typing"
        assert message.payload == {"userId": "1", "taskId": None}

    def test_typing_alone_in_room(self):
        handle(self.bob, self.rooms, "leave-project", "proj-1")

        assert handle(self.alice, self.rooms, "typing-start", {"projectId": "proj-1"}) == []


class TestJoinTarget:
    @pytest.mark.parametrize(
        ("payload", "expected"),
        [
            ("proj-1", "proj-1"),
            (42, "42"),
            ({"projectId": "proj-1"}, "proj-1"),
            ("", None),
            (None, None),
            (True, None),
            ({"other": 1}, None),
        ],
    )
    def test_join_target(self, payload, expected):
        assert join_target(payload) == expected

    def test_join_without_project_is_ignored(self):
        rooms = RoomTable()
        connection = Connection("sid-a", make_identity("1", "alice"))

        assert HANDLERS[protocol.JOIN_PROJECT](connection, rooms, None) == []
        assert rooms.room_count == 0
