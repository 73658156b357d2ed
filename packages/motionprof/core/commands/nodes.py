"""Node edit commands: add, delete, move, and batched move.

Commands remember the node handle (see MotorProfile.node_id_at) of the node
they edit and resolve it back to an index whenever they run. If the handle
is gone they fall back to the remembered index when the node there still has
the expected position, then to a search by value. Only when all of that
fails is the command reported as failed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from motionprof.core.commands.base import Command
from motionprof.core.profiles.models import MotionNode
from motionprof.core.profiles.profile import MotorProfile
from motionprof.core.utils.math import VALUE_EPSILON, is_close

logger = logging.getLogger(__name__)


def _same_position(a: MotionNode | None, b: MotionNode) -> bool:
    if a is None:
        return False
    return is_close(a.time, b.time, VALUE_EPSILON) and is_close(a.value, b.value, VALUE_EPSILON)


def resolve_index(
    profile: MotorProfile, node_id: int | None, index: int, expected: MotionNode
) -> int | None:
    """Find the current index of a node previously seen at index.

    Args:
        profile: Profile holding the node.
        node_id: Stable handle of the node, if known.
        index: Index the node had when it was last seen.
        expected: Position the node should currently have.

    Returns:
        Current index, or None if the node cannot be found.
    """
    if node_id is not None:
        found = profile.index_of(node_id)
        if found is not None:
            return found
    if 0 <= index < profile.node_count and _same_position(profile.nodes()[index], expected):
        return index
    found = profile.find_node(expected, near=index)
    if found is None:
        logger.warning(
            f"Stale node reference: {expected.as_pair()} (index {index}) "
            f"not found in {profile.name!r}"
        )
    return found


class AddNode(Command):
    """Insert a node into a profile."""

    text = "Add Node"

    def __init__(self, profile: MotorProfile, node: MotionNode) -> None:
        self.profile = profile
        self.node = node
        self.index = -1
        self.node_id: int | None = None

    def validate(self) -> bool:
        return not self.profile.disposed and self.profile.is_node_valid(self.node)

    def apply(self) -> bool:
        if self.profile.disposed:
            return False
        hint = self.index if self.index >= 0 else None
        self.index = self.profile.internal_add(self.node, index_hint=hint, node_id=self.node_id)
        self.node_id = self.profile.node_id_at(self.index)
        self.profile.emit_data_changed()
        return True

    def invert(self) -> bool:
        if self.index < 0 or self.profile.disposed:
            return False
        index = resolve_index(self.profile, self.node_id, self.index, self.node)
        if index is None:
            return False
        self.profile.internal_remove(index)
        self.index = index
        self.profile.emit_data_changed()
        return True

    def profiles(self) -> set[MotorProfile]:
        return {self.profile}


class DeleteNode(Command):
    """Remove the node at index from a profile."""

    text = "Delete Node"

    def __init__(self, profile: MotorProfile, index: int) -> None:
        self.profile = profile
        self.index = index
        self.node = profile.node_at(index)
        self.node_id = profile.node_id_at(index)

    def validate(self) -> bool:
        if self.profile.disposed or self.node is None:
            return False
        return resolve_index(self.profile, self.node_id, self.index, self.node) is not None

    def apply(self) -> bool:
        if self.profile.disposed or self.node is None:
            return False
        index = resolve_index(self.profile, self.node_id, self.index, self.node)
        if index is None:
            return False
        self.node_id = self.profile.node_id_at(index)
        self.node = self.profile.internal_remove(index)
        self.index = index
        self.profile.emit_data_changed()
        return True

    def invert(self) -> bool:
        if self.profile.disposed or self.node is None:
            return False
        self.index = self.profile.internal_add(
            self.node, index_hint=self.index, node_id=self.node_id
        )
        self.profile.emit_data_changed()
        return True

    def profiles(self) -> set[MotorProfile]:
        return {self.profile}


class MoveNode(Command):
    """Move one node from old_pos to new_pos (real coordinates).

    Consecutive moves of the same node merge into one undo step that keeps
    the first move's origin and the last move's target, so a continuous drag
    undoes in one go.
    """

    text = "Move Node"

    def __init__(
        self,
        profile: MotorProfile,
        index: int,
        old_pos: MotionNode,
        new_pos: MotionNode,
    ) -> None:
        self.profile = profile
        self.index = index
        self.old_pos = old_pos
        self.new_pos = new_pos
        self.node_id = profile.node_id_at(index)
        # Index before the first apply, used to restore tie order on undo.
        self.origin_index = index

    def validate(self) -> bool:
        if self.profile.disposed or not self.profile.is_node_valid(self.new_pos):
            return False
        return resolve_index(self.profile, self.node_id, self.index, self.old_pos) is not None

    def apply(self) -> bool:
        if self.profile.disposed:
            return False
        index = resolve_index(self.profile, self.node_id, self.index, self.old_pos)
        if index is None:
            return False
        self.node_id = self.profile.node_id_at(index)
        self.origin_index = index
        self.profile.internal_move(index, self.new_pos)
        self.profile.sort_nodes()
        self.index = self.profile.index_of(self.node_id)
        self.profile.emit_data_changed()
        return True

    def invert(self) -> bool:
        if self.profile.disposed:
            return False
        index = resolve_index(self.profile, self.node_id, self.index, self.new_pos)
        if index is None:
            return False
        self.profile.internal_move(index, self.old_pos, index_hint=self.origin_index)
        self.profile.sort_nodes()
        self.index = self.profile.index_of(self.node_id)
        self.profile.emit_data_changed()
        return True

    def merge_with(self, other: Command) -> bool:
        if type(other) is not MoveNode or other.profile is not self.profile:
            return False
        if self.node_id is None or other.node_id != self.node_id:
            return False
        self.new_pos = other.new_pos
        self.index = other.index
        return True

    def profiles(self) -> set[MotorProfile]:
        return {self.profile}


class MoveNodes(Command):
    """Several node moves applied as one undo step.

    Members apply in order and invert in reverse order. If a member fails
    the members already run are rolled back and the batch reports failure.
    """

    text = "Move Nodes"

    def __init__(self, moves: Iterable[MoveNode]) -> None:
        self.moves = list(moves)

    @classmethod
    def from_positions(
        cls, moves: Iterable[tuple[MotorProfile, int, MotionNode, MotionNode]]
    ) -> MoveNodes:
        """Build a batch from (profile, index, old_pos, new_pos) tuples.

        All indices refer to the state before the batch runs.
        """
        return cls(MoveNode(profile, index, old, new) for profile, index, old, new in moves)

    def validate(self) -> bool:
        return bool(self.moves) and all(move.validate() for move in self.moves)

    def apply(self) -> bool:
        done: list[MoveNode] = []
        for move in self.moves:
            if not move.apply():
                for applied in reversed(done):
                    applied.invert()
                return False
            done.append(move)
        return True

    def invert(self) -> bool:
        done: list[MoveNode] = []
        for move in reversed(self.moves):
            if not move.invert():
                for inverted in reversed(done):
                    inverted.apply()
                return False
            done.append(move)
        return True

    def profiles(self) -> set[MotorProfile]:
        return {move.profile for move in self.moves}

    def without_profile(self, profile: MotorProfile) -> Command | None:
        kept = [move for move in self.moves if move.profile is not profile]
        if not kept:
            return None
        if len(kept) == len(self.moves):
            return self
        return MoveNodes(kept)
