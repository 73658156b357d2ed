"""Tests for node edit commands."""

from __future__ import annotations

from motionprof.core.commands.nodes import AddNode, DeleteNode, MoveNode, MoveNodes, resolve_index
from motionprof.core.profiles.models import MotionNode, ProfileConstraints
from motionprof.core.profiles.profile import MotorProfile


def _pairs(profile: MotorProfile) -> list[tuple[float, float]]:
    return [node.as_pair() for node in profile.nodes()]


class TestAddNode:
    """Tests for AddNode."""

    def test_validate_rejects_out_of_range(self, ramp_profile: MotorProfile) -> None:
        """Values outside the range fail validation."""
        assert not AddNode(ramp_profile, MotionNode.of(100, 150)).validate()

    def test_apply_invert_round_trip(self, ramp_profile: MotorProfile) -> None:
        """invert removes exactly the node apply inserted."""
        before = _pairs(ramp_profile)
        command = AddNode(ramp_profile, MotionNode.of(1000, 10))
        assert command.apply()
        assert command.index == 1
        assert command.invert()
        assert _pairs(ramp_profile) == before

    def test_invert_removes_right_duplicate(self, empty_profile: MotorProfile) -> None:
        """With equal nodes present, undo removes the one that was added."""
        empty_profile.internal_add(MotionNode.of(100, 5))
        existing_id = empty_profile.node_id_at(0)
        command = AddNode(empty_profile, MotionNode.of(100, 5))
        command.apply()
        command.invert()
        assert empty_profile.node_id_at(0) == existing_id

    def test_redo_restores_handle(self, ramp_profile: MotorProfile) -> None:
        """Re-applying keeps the node's handle."""
        command = AddNode(ramp_profile, MotionNode.of(1000, 10))
        command.apply()
        node_id = command.node_id
        command.invert()
        command.apply()
        assert ramp_profile.index_of(node_id) == 1

    def test_invert_before_apply_fails(self, ramp_profile: MotorProfile) -> None:
        """There is nothing to undo before the first apply."""
        assert not AddNode(ramp_profile, MotionNode.of(1000, 10)).invert()

    def test_disposed_profile(self, ramp_profile: MotorProfile) -> None:
        """Commands on disposed profiles fail."""
        ramp_profile.dispose()
        command = AddNode(ramp_profile, MotionNode.of(1000, 10))
        assert not command.validate()
        assert not command.apply()


class TestDeleteNode:
    """Tests for DeleteNode."""

    def test_round_trip(self, three_node_profile: MotorProfile) -> None:
        """Delete then undo restores the node at its original index."""
        before = _pairs(three_node_profile)
        command = DeleteNode(three_node_profile, 1)
        assert command.validate()
        assert command.apply()
        assert _pairs(three_node_profile) == [(0.0, 0.0), (2000.0, -20.0)]
        assert command.invert()
        assert _pairs(three_node_profile) == before

    def test_restores_tie_order(self, empty_profile: MotorProfile) -> None:
        """Among nodes sharing a time, undo puts the node back in its slot."""
        for value in (1, 2, 3):
            empty_profile.internal_add(MotionNode.of(100, value))
        command = DeleteNode(empty_profile, 0)
        command.apply()
        command.invert()
        assert [n.value for n in empty_profile.nodes()] == [1.0, 2.0, 3.0]

    def test_invalid_index(self, three_node_profile: MotorProfile) -> None:
        """An index outside the profile fails validation."""
        command = DeleteNode(three_node_profile, 9)
        assert command.node is None
        assert not command.validate()
        assert not command.apply()

    def test_follows_node_after_resort(self, three_node_profile: MotorProfile) -> None:
        """A delete created before a re-sort still removes the same node."""
        command = DeleteNode(three_node_profile, 0)
        three_node_profile.update_node(0, MotionNode.of(0, 1))
        three_node_profile.add_node(MotionNode.of(0, -5))
        assert command.apply()
        assert (0.0, 1.0) not in _pairs(three_node_profile)
        assert (0.0, -5.0) in _pairs(three_node_profile)

    def test_stale_reference_fails(self, three_node_profile: MotorProfile) -> None:
        """When the node is gone and nothing matches, the command fails."""
        command = DeleteNode(three_node_profile, 1)
        three_node_profile.delete_node(1)
        assert not command.validate()
        assert not command.apply()
        assert three_node_profile.node_count == 2


class TestMoveNode:
    """Tests for MoveNode."""

    def test_round_trip(self, three_node_profile: MotorProfile) -> None:
        """Move then undo restores the original nodes."""
        before = _pairs(three_node_profile)
        command = MoveNode(three_node_profile, 1, MotionNode.of(1000, 40), MotionNode.of(1500, 60))
        assert command.validate()
        assert command.apply()
        assert _pairs(three_node_profile)[1] == (1500.0, 60.0)
        assert command.invert()
        assert _pairs(three_node_profile) == before

    def test_move_past_neighbor_resorts(self, three_node_profile: MotorProfile) -> None:
        """Moving a node past another re-sorts and updates the index."""
        command = MoveNode(three_node_profile, 0, MotionNode.of(0, 0), MotionNode.of(2500, 0))
        command.apply()
        assert command.index == 2
        assert [n.time for n in three_node_profile.nodes()] == [1000.0, 2000.0, 2500.0]
        command.invert()
        assert three_node_profile.nodes()[0] == MotionNode.of(0, 0)

    def test_rejects_invalid_target(self, three_node_profile: MotorProfile) -> None:
        """A target outside the range fails validation."""
        command = MoveNode(three_node_profile, 1, MotionNode.of(1000, 40), MotionNode.of(1000, 150))
        assert not command.validate()

    def test_restores_tie_order(self, empty_profile: MotorProfile) -> None:
        """Undo puts a node back between equal-time neighbours."""
        for value in (1, 2, 3):
            empty_profile.internal_add(MotionNode.of(100, value))
        command = MoveNode(empty_profile, 1, MotionNode.of(100, 2), MotionNode.of(500, 2))
        command.apply()
        command.invert()
        assert [n.value for n in empty_profile.nodes()] == [1.0, 2.0, 3.0]

    def test_merge_same_node(self, three_node_profile: MotorProfile) -> None:
        """Consecutive moves of one node merge: first origin, last target."""
        first = MoveNode(three_node_profile, 1, MotionNode.of(1000, 40), MotionNode.of(1100, 45))
        first.apply()
        second = MoveNode(three_node_profile, 1, MotionNode.of(1100, 45), MotionNode.of(1200, 50))
        second.apply()
        assert first.merge_with(second)
        assert first.old_pos == MotionNode.of(1000, 40)
        assert first.new_pos == MotionNode.of(1200, 50)
        assert first.invert()
        assert three_node_profile.nodes()[1] == MotionNode.of(1000, 40)

    def test_no_merge_different_node(self, three_node_profile: MotorProfile) -> None:
        """Moves of different nodes do not merge."""
        first = MoveNode(three_node_profile, 0, MotionNode.of(0, 0), MotionNode.of(0, 5))
        first.apply()
        second = MoveNode(three_node_profile, 1, MotionNode.of(1000, 40), MotionNode.of(1000, 30))
        assert not first.merge_with(second)

    def test_no_merge_across_profiles(
        self, three_node_profile: MotorProfile, ramp_profile: MotorProfile
    ) -> None:
        """Moves on different profiles do not merge even with equal handles."""
        first = MoveNode(three_node_profile, 0, MotionNode.of(0, 0), MotionNode.of(0, 5))
        second = MoveNode(ramp_profile, 0, MotionNode.of(0, 0), MotionNode.of(0, 5))
        assert not first.merge_with(second)

    def test_no_merge_with_other_command_type(self, three_node_profile: MotorProfile) -> None:
        """MoveNode never absorbs an AddNode."""
        move = MoveNode(three_node_profile, 0, MotionNode.of(0, 0), MotionNode.of(0, 5))
        assert not move.merge_with(AddNode(three_node_profile, MotionNode.of(10, 0)))

    def test_stale_index_falls_back_to_value_search(self, empty_profile: MotorProfile) -> None:
        """With no handle, the node is found by its expected position."""
        empty_profile.internal_add(MotionNode.of(0, 0))
        empty_profile.internal_add(MotionNode.of(100, 10))
        assert resolve_index(empty_profile, None, 0, MotionNode.of(100, 10)) == 1
        assert resolve_index(empty_profile, None, 5, MotionNode.of(50, 10)) is None


class TestMoveNodes:
    """Tests for batched moves."""

    def test_round_trip_across_profiles(
        self, three_node_profile: MotorProfile, ramp_profile: MotorProfile
    ) -> None:
        """A batch moves nodes on several profiles and undoes them together."""
        before_a, before_b = _pairs(three_node_profile), _pairs(ramp_profile)
        batch = MoveNodes.from_positions(
            [
                (three_node_profile, 1, MotionNode.of(1000, 40), MotionNode.of(1000, 30)),
                (ramp_profile, 1, MotionNode.of(2000, 50), MotionNode.of(2500, 60)),
            ]
        )
        assert batch.validate()
        assert batch.apply()
        assert three_node_profile.nodes()[1].value == 30.0
        assert ramp_profile.nodes()[1] == MotionNode.of(2500, 60)
        assert batch.invert()
        assert _pairs(three_node_profile) == before_a
        assert _pairs(ramp_profile) == before_b

    def test_empty_batch_invalid(self) -> None:
        """A batch needs at least one move."""
        assert not MoveNodes([]).validate()

    def test_invalid_member_invalidates_batch(self, three_node_profile: MotorProfile) -> None:
        """One invalid move rejects the whole batch."""
        batch = MoveNodes.from_positions(
            [
                (three_node_profile, 0, MotionNode.of(0, 0), MotionNode.of(0, 5)),
                (three_node_profile, 1, MotionNode.of(1000, 40), MotionNode.of(1000, 500)),
            ]
        )
        assert not batch.validate()

    def test_failed_member_rolls_back(self, three_node_profile: MotorProfile) -> None:
        """If a member cannot apply, members already applied are undone."""
        before = _pairs(three_node_profile)
        batch = MoveNodes.from_positions(
            [
                (three_node_profile, 0, MotionNode.of(0, 0), MotionNode.of(0, 5)),
                (three_node_profile, 1, MotionNode.of(1000, 40), MotionNode.of(1000, 30)),
            ]
        )
        three_node_profile.delete_node(1)
        assert not batch.apply()
        assert _pairs(three_node_profile) == [before[0], before[2]]

    def test_without_profile(
        self, three_node_profile: MotorProfile, ramp_profile: MotorProfile
    ) -> None:
        """Dropping a profile keeps the members for other profiles."""
        batch = MoveNodes.from_positions(
            [
                (three_node_profile, 0, MotionNode.of(0, 0), MotionNode.of(0, 5)),
                (ramp_profile, 0, MotionNode.of(0, 0), MotionNode.of(0, 5)),
            ]
        )
        reduced = batch.without_profile(ramp_profile)
        assert isinstance(reduced, MoveNodes)
        assert reduced.profiles() == {three_node_profile}
        assert reduced.without_profile(three_node_profile) is None
        other = MotorProfile("other", constraints=ProfileConstraints())
        assert batch.without_profile(other) is batch
