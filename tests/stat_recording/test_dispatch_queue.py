"""
Tests for StatDispatchQueue and UndoSlot.
"""

import pytest

from stat_recording.dispatch_queue import CommandKind, StatDispatchQueue
from stat_recording.stat_event import StatEvent, StatModifier, StatType
from stat_recording.undo_slot import UndoSlot


def made_shot(players, key="a1"):
    return StatEvent.create("game-1", players[key].team_id, StatType.FIELD_GOAL, StatModifier.MADE, players[key])


@pytest.fixture
def queue(memory_gateway):
    return StatDispatchQueue(memory_gateway)


class TestSubmit:
    """Test enqueue-now, write-later behavior"""

    def test_submit_does_not_write(self, queue, memory_gateway, players):
        queue.submit(made_shot(players))
        assert queue.pending_count == 1
        assert memory_gateway.record_calls == []

    def test_drain_writes_in_order(self, queue, memory_gateway, players):
        first = made_shot(players, "a1")
        second = made_shot(players, "b1")
        queue.submit(first)
        queue.submit(second)

        results = queue.drain()

        assert [r.command.event for r in results] == [first, second]
        assert memory_gateway.record_calls == [first, second]
        assert queue.pending_count == 0

    def test_schedule_drain_called_per_submit(self, memory_gateway, players):
        requests = []
        queue = StatDispatchQueue(memory_gateway, schedule_drain=lambda: requests.append(True))
        queue.submit(made_shot(players))
        queue.submit(made_shot(players))
        assert len(requests) == 2


class TestFailures:
    """Test per-write error handling"""

    def test_failure_is_reported_not_retried(self, queue, memory_gateway, players):
        failures = []
        queue.add_failure_listener(failures.append)
        memory_gateway.fail_record = True

        queue.submit(made_shot(players))
        queue.drain()
        queue.drain()

        assert len(memory_gateway.record_calls) == 1
        assert len(failures) == 1
        assert "store unavailable" in failures[0].message

    def test_failure_does_not_block_later_writes(self, queue, memory_gateway, players):
        queue.submit(made_shot(players, "a1"))
        memory_gateway.fail_record = True
        queue.drain()
        memory_gateway.fail_record = False

        queue.submit(made_shot(players, "b1"))
        results = queue.drain()
        assert len(results) == 1
        assert len(queue.failures) == 1


class TestUndo:
    """Test single-slot undo"""

    def test_undo_deletes_last_recorded_stat(self, queue, memory_gateway, players):
        queue.submit(made_shot(players, "a1"))
        queue.submit(made_shot(players, "b1"))
        queue.drain()

        command = queue.undo_last()
        assert command.kind == CommandKind.DELETE
        queue.drain()

        assert memory_gateway.delete_calls == ["2"]
        assert list(memory_gateway.stats) == ["1"]

    def test_only_one_undo(self, queue, players):
        queue.submit(made_shot(players))
        queue.drain()
        assert queue.undo_last() is not None
        assert queue.undo_last() is None

    def test_failed_write_is_not_undoable(self, queue, memory_gateway, players):
        memory_gateway.fail_record = True
        queue.submit(made_shot(players))
        queue.drain()
        assert not queue.undo_slot.can_undo

    def test_undo_slot_replaced_by_newer_stat(self, players):
        slot = UndoSlot()
        slot.remember("1", made_shot(players, "a1"))
        slot.remember("2", made_shot(players, "b1"))
        assert slot.take().stat_id == "2"
        assert slot.take() is None

    def test_undo_withdraws_pending_record(self, queue, memory_gateway, players):
        steal = StatEvent.create("game-1", "team-a", StatType.STEAL, player=players["a1"])
        queue.submit(steal)
        queue.drain()

        three = StatEvent.create("game-1", "team-a", StatType.THREE_POINTER, StatModifier.MADE, players["a2"])
        queue.submit(three)
        command = queue.undo_last()
        queue.drain()

        assert command.kind == CommandKind.RECORD
        assert command.event is three
        assert memory_gateway.delete_calls == []
        assert [stat.stat_type for stat in memory_gateway.stats.values()] == [StatType.STEAL]
        assert queue.undo_last() is None

    def test_failed_newest_write_leaves_older_stat_alone(self, queue, memory_gateway, players):
        queue.submit(made_shot(players, "a1"))
        queue.drain()
        memory_gateway.fail_record = True
        queue.submit(made_shot(players, "b1"))
        queue.drain()

        assert queue.undo_last() is None
        assert list(memory_gateway.stats) == ["1"]

    def test_failure_context_names_the_write(self, queue, memory_gateway, players):
        memory_gateway.fail_record = True
        event = made_shot(players)
        queue.submit(event)
        queue.drain()

        context = queue.failures[0].context
        assert context["event_id"] == event.event_id
        assert context["action"] == "record field_goal (made)"
