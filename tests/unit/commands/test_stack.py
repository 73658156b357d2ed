"""Tests for CommandStack undo/redo behavior."""

from __future__ import annotations

from motionprof.core.commands.nodes import AddNode, DeleteNode, MoveNode, MoveNodes
from motionprof.core.commands.stack import CommandStack
from motionprof.core.document.document import MotionDocument
from motionprof.core.profiles.models import MotionNode, ProfileConstraints
from motionprof.core.profiles.profile import MotorProfile


def _move(profile: MotorProfile, index: int, value: float) -> MoveNode:
    old = profile.nodes()[index]
    return MoveNode(profile, index, old, old.with_value(value))


class TestPush:
    """Tests for push()."""

    def test_push_applies(self, stack: CommandStack, ramp_profile: MotorProfile) -> None:
        """A valid command is applied and recorded."""
        assert stack.push(AddNode(ramp_profile, MotionNode.of(1000, 10)))
        assert ramp_profile.node_count == 3
        assert stack.count == 1
        assert stack.can_undo
        assert stack.undo_text == "Add Node"

    def test_rejected_command_not_recorded(
        self, stack: CommandStack, ramp_profile: MotorProfile
    ) -> None:
        """A command failing validation changes nothing."""
        assert not stack.push(AddNode(ramp_profile, MotionNode.of(1000, 500)))
        assert ramp_profile.node_count == 2
        assert stack.count == 0

    def test_push_truncates_redo_tail(
        self, stack: CommandStack, ramp_profile: MotorProfile
    ) -> None:
        """Pushing after an undo discards the undone commands."""
        stack.push(AddNode(ramp_profile, MotionNode.of(500, 1)))
        stack.push(AddNode(ramp_profile, MotionNode.of(600, 2)))
        stack.undo()
        stack.push(DeleteNode(ramp_profile, 0))
        assert stack.count == 2
        assert not stack.can_redo
        assert stack.command(1).text == "Delete Node"

    def test_changed_signal(self, stack: CommandStack, ramp_profile: MotorProfile) -> None:
        """changed fires for push, undo and redo."""
        calls: list[int] = []
        stack.changed.connect(lambda: calls.append(1))
        stack.push(AddNode(ramp_profile, MotionNode.of(500, 1)))
        stack.undo()
        stack.redo()
        assert len(calls) == 3


class TestUndoRedo:
    """Tests for undo() and redo()."""

    def test_empty_stack(self, stack: CommandStack) -> None:
        """Undo and redo on an empty stack do nothing."""
        assert not stack.undo()
        assert not stack.redo()
        assert stack.undo_text == ""
        assert stack.redo_text == ""

    def test_full_history_round_trip(
        self, stack: CommandStack, three_node_profile: MotorProfile
    ) -> None:
        """Undoing everything restores the initial nodes; redoing restores the final ones."""
        initial = three_node_profile.nodes()
        stack.push(AddNode(three_node_profile, MotionNode.of(500, 20)))
        stack.push(_move(three_node_profile, 2, -30))
        stack.push(DeleteNode(three_node_profile, 0))
        final = three_node_profile.nodes()

        while stack.undo():
            pass
        assert three_node_profile.nodes() == initial
        while stack.redo():
            pass
        assert three_node_profile.nodes() == final

    def test_end_to_end_move_scenario(self, stack: CommandStack) -> None:
        """Out-of-range move is rejected, the clamped move commits, undo and redo work."""
        profile = MotorProfile(
            "pan", constraints=ProfileConstraints(y_min=-100, y_max=100, max_slope=1000)
        )
        profile.add_node(MotionNode.of(0, 0))
        profile.add_node(MotionNode.of(2000, 50))

        rejected = MoveNode(profile, 1, MotionNode.of(2000, 50), MotionNode.of(2000, 150))
        assert not stack.push(rejected)
        assert profile.nodes()[1] == MotionNode.of(2000, 50)

        assert stack.push(MoveNode(profile, 1, MotionNode.of(2000, 50), MotionNode.of(2000, 100)))
        assert profile.nodes()[1] == MotionNode.of(2000, 100)

        assert stack.undo()
        assert profile.nodes()[1] == MotionNode.of(2000, 50)
        assert stack.redo()
        assert profile.nodes()[1] == MotionNode.of(2000, 100)

    def test_redo_after_undo_chain_with_ties(
        self, stack: CommandStack, empty_profile: MotorProfile
    ) -> None:
        """Redo of several adds at one time restores their order."""
        for value in (1, 2, 3):
            stack.push(AddNode(empty_profile, MotionNode.of(100, value)))
        order = [n.value for n in empty_profile.nodes()]
        for _ in range(3):
            stack.undo()
        for _ in range(3):
            stack.redo()
        assert [n.value for n in empty_profile.nodes()] == order


class TestMerging:
    """Tests for merging consecutive moves."""

    def test_drag_merges_into_one_step(
        self, stack: CommandStack, three_node_profile: MotorProfile
    ) -> None:
        """Several moves of one node undo in a single step."""
        for value in (41, 42, 43):
            stack.push(_move(three_node_profile, 1, value))
        assert stack.count == 1
        stack.undo()
        assert three_node_profile.nodes()[1].value == 40.0

    def test_merge_follows_node_across_resort(
        self, stack: CommandStack, three_node_profile: MotorProfile
    ) -> None:
        """A drag that reorders the node still merges."""
        stack.push(MoveNode(three_node_profile, 0, MotionNode.of(0, 0), MotionNode.of(1500, 0)))
        stack.push(
            MoveNode(three_node_profile, 1, MotionNode.of(1500, 0), MotionNode.of(2500, 0))
        )
        assert stack.count == 1
        stack.undo()
        assert three_node_profile.nodes()[0] == MotionNode.of(0, 0)

    def test_different_nodes_do_not_merge(
        self, stack: CommandStack, three_node_profile: MotorProfile
    ) -> None:
        """Moves of different nodes stay separate steps."""
        stack.push(_move(three_node_profile, 0, 5))
        stack.push(_move(three_node_profile, 1, 5))
        assert stack.count == 2

    def test_no_merge_into_clean_state(
        self, stack: CommandStack, three_node_profile: MotorProfile
    ) -> None:
        """A move after saving starts a new undo step."""
        stack.push(_move(three_node_profile, 1, 41))
        stack.set_clean()
        stack.push(_move(three_node_profile, 1, 42))
        assert stack.count == 2
        stack.undo()
        assert stack.is_clean
        assert three_node_profile.nodes()[1].value == 41.0


class TestCleanState:
    """Tests for the clean (saved) marker."""

    def test_new_stack_is_clean(self, stack: CommandStack) -> None:
        """An empty stack is clean."""
        assert stack.is_clean

    def test_clean_changed(self, stack: CommandStack, ramp_profile: MotorProfile) -> None:
        """clean_changed reports each flip."""
        flips: list[bool] = []
        stack.clean_changed.connect(flips.append)
        stack.push(AddNode(ramp_profile, MotionNode.of(500, 1)))
        stack.set_clean()
        stack.undo()
        stack.redo()
        assert flips == [False, True, False, True]

    def test_clean_lost_when_tail_truncated(
        self, stack: CommandStack, ramp_profile: MotorProfile
    ) -> None:
        """If the saved state is discarded from the redo tail it can't be reached again."""
        stack.push(AddNode(ramp_profile, MotionNode.of(500, 1)))
        stack.set_clean()
        stack.undo()
        stack.push(AddNode(ramp_profile, MotionNode.of(600, 1)))
        stack.undo()
        assert not stack.is_clean

    def test_clear_is_clean(self, stack: CommandStack, ramp_profile: MotorProfile) -> None:
        """clear() empties the history and marks it clean."""
        stack.push(AddNode(ramp_profile, MotionNode.of(500, 1)))
        stack.clear()
        assert stack.count == 0
        assert stack.is_clean
        assert ramp_profile.node_count == 3


class TestLimit:
    """Tests for the history limit."""

    def test_drops_oldest(self, ramp_profile: MotorProfile) -> None:
        """Only the newest commands are kept."""
        stack = CommandStack(limit=2)
        for t in (100, 200, 300):
            stack.push(AddNode(ramp_profile, MotionNode.of(t, 0)))
        assert stack.count == 2
        assert stack.index == 2
        stack.undo()
        stack.undo()
        assert not stack.undo()
        assert [n.time for n in ramp_profile.nodes()] == [0.0, 100.0, 2000.0]

    def test_negative_limit_is_unlimited(self) -> None:
        """Negative limits mean no limit."""
        assert CommandStack(limit=-3).limit == 0


class TestDiscardProfile:
    """Tests for dropping history of removed profiles."""

    def test_drops_commands_of_profile(
        self, stack: CommandStack, ramp_profile: MotorProfile, three_node_profile: MotorProfile
    ) -> None:
        """Commands of the removed profile go, others stay undoable."""
        stack.push(AddNode(ramp_profile, MotionNode.of(500, 1)))
        stack.push(AddNode(three_node_profile, MotionNode.of(500, 1)))
        stack.push(AddNode(ramp_profile, MotionNode.of(600, 1)))
        stack.discard_profile(ramp_profile)
        assert stack.count == 1
        assert stack.index == 1
        assert stack.undo()
        assert three_node_profile.node_count == 3

    def test_batch_keeps_other_members(
        self, stack: CommandStack, ramp_profile: MotorProfile, three_node_profile: MotorProfile
    ) -> None:
        """A batch spanning profiles keeps the moves of the remaining profile."""
        stack.push(
            MoveNodes.from_positions(
                [
                    (ramp_profile, 0, MotionNode.of(0, 0), MotionNode.of(0, 5)),
                    (three_node_profile, 0, MotionNode.of(0, 0), MotionNode.of(0, 5)),
                ]
            )
        )
        stack.discard_profile(ramp_profile)
        assert stack.count == 1
        assert stack.command(0).profiles() == {three_node_profile}
        stack.undo()
        assert three_node_profile.nodes()[0] == MotionNode.of(0, 0)

    def test_unrelated_profile_is_noop(
        self, stack: CommandStack, ramp_profile: MotorProfile, three_node_profile: MotorProfile
    ) -> None:
        """Discarding a profile without commands emits nothing."""
        stack.push(AddNode(ramp_profile, MotionNode.of(500, 1)))
        calls: list[int] = []
        stack.changed.connect(lambda: calls.append(1))
        stack.discard_profile(three_node_profile)
        assert calls == []
        assert stack.count == 1

    def test_attached_document_removal(self, stack: CommandStack) -> None:
        """Removing a motor from an attached document drops its history."""
        document = MotionDocument()
        pan = document.add_motor("pan")
        tilt = document.add_motor("tilt")
        stack.attach(document)
        stack.push(AddNode(pan, MotionNode.of(0, 0)))
        stack.push(AddNode(tilt, MotionNode.of(0, 0)))
        document.remove_motor(pan)
        assert stack.count == 1
        assert stack.command(0).profiles() == {tilt}

    def test_attached_document_clear(self, stack: CommandStack) -> None:
        """Clearing an attached document clears the history."""
        document = MotionDocument()
        pan = document.add_motor("pan")
        stack.attach(document)
        stack.push(AddNode(pan, MotionNode.of(0, 0)))
        document.clear()
        assert stack.count == 0
        stack.detach(document)
        assert len(document.document_cleared) == 0
