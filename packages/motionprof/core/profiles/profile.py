"""MotorProfile: one motor's node sequence and its constraints.

Nodes are kept sorted by time. Equal times are allowed (instantaneous
steps) and keep their insertion order, since sorting is stable.

Each stored node carries an integer handle that survives re-sorting, so
callers that need to refer to "the same node" across edits can resolve its
current index with index_of(). Indices are only valid until the next
mutation.

Two mutation APIs exist:
- add_node / update_node / delete_node validate and notify; they bypass the
  undo history and are meant for load/import and scripting.
- internal_add / internal_remove / internal_move perform raw, unvalidated
  edits and do not notify. They exist for commands, which validate first,
  apply the raw edit and then call emit_data_changed().
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from motionprof.core.events import Signal
from motionprof.core.profiles.constraints import (
    find_slope_violations,
    is_node_valid,
    repair_nodes,
)
from motionprof.core.profiles.models import MotionNode, ProfileConstraints
from motionprof.core.profiles.sampling import interpolate_linear, sample_nodes
from motionprof.core.utils.math import VALUE_EPSILON, is_close

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Slot:
    node_id: int
    node: MotionNode


class MotorProfile:
    """Piecewise-linear motion curve for a single motor.

    Attributes:
        data_changed: Signal emitted after the node sequence changed.
        constraints_changed: Signal emitted after y_min, y_max or max_slope changed.

    Example:
        >>> profile = MotorProfile("pan", "#c83232")
        >>> profile.add_node(MotionNode(time=0, value=0))
        0
        >>> profile.add_node(MotionNode(time=2000, value=50))
        1
        >>> profile.sample_at(1000)
        25.0
    """

    def __init__(
        self,
        name: str,
        color: str | None = None,
        constraints: ProfileConstraints | None = None,
    ) -> None:
        """Create an empty profile.

        Args:
            name: Motor name.
            color: Display color tag (opaque to the model).
            constraints: Initial range and slope limit (defaults if None).
        """
        constraints = constraints or ProfileConstraints()
        self._name = name
        self._color = color
        self._y_min = constraints.y_min
        self._y_max = constraints.y_max
        self._max_slope = constraints.max_slope
        self._slots: list[_Slot] = []
        self._ids = itertools.count(1)
        self._disposed = False

        self.data_changed = Signal("data_changed")
        self.constraints_changed = Signal("constraints_changed")

    def __repr__(self) -> str:
        return (
            f"MotorProfile(name={self._name!r}, nodes={len(self._slots)}, "
            f"y_min={self._y_min}, y_max={self._y_max}, max_slope={self._max_slope})"
        )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def color(self) -> str | None:
        return self._color

    @property
    def y_min(self) -> float:
        return self._y_min

    @property
    def y_max(self) -> float:
        return self._y_max

    @property
    def max_slope(self) -> float:
        return self._max_slope

    @property
    def constraints(self) -> ProfileConstraints:
        """Snapshot of the current constraints."""
        return ProfileConstraints(y_min=self._y_min, y_max=self._y_max, max_slope=self._max_slope)

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def node_count(self) -> int:
        return len(self._slots)

    def __len__(self) -> int:
        return len(self._slots)

    @property
    def end_time(self) -> float:
        """Time of the last node, 0.0 for an empty profile."""
        return self._slots[-1].node.time if self._slots else 0.0

    def nodes(self) -> list[MotionNode]:
        """Nodes in display order (sorted by time)."""
        return [slot.node for slot in self._slots]

    def node_at(self, index: int) -> MotionNode | None:
        if not self._in_range(index):
            logger.warning(
                f"node_at: index {index} out of bounds for {self._name!r} "
                f"(size {len(self._slots)})"
            )
            return None
        return self._slots[index].node

    def node_id_at(self, index: int) -> int | None:
        """Stable handle of the node currently at index."""
        if not self._in_range(index):
            return None
        return self._slots[index].node_id

    def index_of(self, node_id: int) -> int | None:
        """Current index of the node with the given handle, None if gone."""
        for i, slot in enumerate(self._slots):
            if slot.node_id == node_id:
                return i
        return None

    def find_node(self, node: MotionNode, near: int | None = None) -> int | None:
        """Index of a node equal to node (within tolerance).

        When several nodes match, the one closest to near wins.
        """
        matches = [
            i
            for i, slot in enumerate(self._slots)
            if is_close(slot.node.time, node.time, VALUE_EPSILON)
            and is_close(slot.node.value, node.value, VALUE_EPSILON)
        ]
        if not matches:
            return None
        if near is None:
            return matches[0]
        return min(matches, key=lambda i: abs(i - near))

    def max_abs_value(self) -> float:
        return max(abs(self._y_min), abs(self._y_max))

    def is_node_valid(self, node: MotionNode) -> bool:
        """True if node has time >= 0 and a value inside [y_min, y_max]."""
        return is_node_valid(node, self.constraints)

    def slope_violations(self) -> list[int]:
        """Indices i whose segment (i-1, i) is steeper than max_slope."""
        return find_slope_violations(self.nodes(), self._max_slope)

    def sample_at(self, time: float) -> float:
        """Interpolated value at time (ms); 0.0 for an empty profile."""
        return interpolate_linear(self.nodes(), time)

    def sample_range(self, sample_rate_hz: float, end_time_ms: float) -> list[tuple[float, float]]:
        """Rows (time_ms, value) on the export grid."""
        return sample_nodes(self.nodes(), sample_rate_hz, end_time_ms)

    # ------------------------------------------------------------------
    # Constraints
    # ------------------------------------------------------------------

    def set_y_min(self, value: float) -> None:
        if self._y_min != value:
            self._y_min = value
            self.constraints_changed.emit()

    def set_y_max(self, value: float) -> None:
        if self._y_max != value:
            self._y_max = value
            self.constraints_changed.emit()

    def set_max_slope(self, value: float) -> None:
        value = max(0.0, value)
        if self._max_slope != value:
            self._max_slope = value
            self.constraints_changed.emit()

    def check_all_nodes(self) -> bool:
        """Run the repair sweep against the current constraints.

        Clamps values into range, then limits slopes in a single forward
        pass. Emits data_changed once if anything changed.

        Returns:
            True if any node changed.
        """
        current = self.nodes()
        repaired = repair_nodes(current, self.constraints)
        changed = False
        for slot, old, new in zip(self._slots, current, repaired):
            if new != old:
                slot.node = new
                changed = True

        if changed:
            logger.debug(f"Repair sweep adjusted nodes of {self._name!r}")
            self.data_changed.emit()
        return changed

    # ------------------------------------------------------------------
    # Validated edits (no undo history)
    # ------------------------------------------------------------------

    def add_node(self, node: MotionNode) -> int | None:
        """Insert a node if it passes basic validation.

        Returns:
            The node's index after sorting, or None if rejected.
        """
        if not self.is_node_valid(node):
            logger.debug(f"Rejected node {node.as_pair()} for {self._name!r}")
            return None
        index = self.internal_add(node)
        self.data_changed.emit()
        return index

    def update_node(self, index: int, node: MotionNode) -> bool:
        """Replace the node at index, re-validating and re-sorting."""
        if not self._in_range(index):
            return False
        if not self.is_node_valid(node):
            logger.debug(f"Rejected update of node {index} to {node.as_pair()} for {self._name!r}")
            return False
        self._slots[index].node = node
        self.sort_nodes()
        self.data_changed.emit()
        return True

    def delete_node(self, index: int) -> bool:
        if not self._in_range(index):
            return False
        del self._slots[index]
        self.data_changed.emit()
        return True

    def replace_nodes(self, nodes: Sequence[MotionNode]) -> None:
        """Replace all nodes without validation (load/import path)."""
        self._slots = [_Slot(next(self._ids), node) for node in nodes]
        self.sort_nodes()
        self.data_changed.emit()

    # ------------------------------------------------------------------
    # Raw edits for commands
    # ------------------------------------------------------------------

    def internal_add(
        self,
        node: MotionNode,
        *,
        index_hint: int | None = None,
        node_id: int | None = None,
    ) -> int:
        """Insert node without validation or notification.

        Args:
            node: Node to insert.
            index_hint: Preferred position. Used when inserting there keeps
                the sequence sorted, otherwise the node is appended and the
                sequence re-sorted.
            node_id: Handle to reuse (re-inserting a previously removed node).

        Returns:
            Index of the inserted node.
        """
        slot = _Slot(node_id if node_id is not None else next(self._ids), node)
        self._place(slot, index_hint)
        return self._slots.index(slot)

    def internal_remove(self, index: int) -> MotionNode | None:
        """Remove the node at index without notification."""
        if not self._in_range(index):
            logger.warning(f"internal_remove: invalid index {index} for {self._name!r}")
            return None
        return self._slots.pop(index).node

    def internal_move(self, index: int, pos: MotionNode, *, index_hint: int | None = None) -> bool:
        """Overwrite the node at index without validation or notification.

        Without index_hint the sequence is left unsorted; the caller sorts.
        With index_hint the node is repositioned like internal_add does.
        """
        if not self._in_range(index):
            logger.warning(f"internal_move: invalid index {index} for {self._name!r}")
            return False
        slot = self._slots[index]
        slot.node = pos
        if index_hint is not None:
            self._slots.pop(index)
            self._place(slot, index_hint)
        return True

    def sort_nodes(self) -> None:
        self._slots.sort(key=lambda slot: slot.node.time)

    def emit_data_changed(self) -> None:
        self.data_changed.emit()

    def dispose(self) -> None:
        """Detach all listeners. The profile must not be edited afterwards."""
        self._disposed = True
        self.data_changed.disconnect_all()
        self.constraints_changed.disconnect_all()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _in_range(self, index: int) -> bool:
        return 0 <= index < len(self._slots)

    def _place(self, slot: _Slot, index_hint: int | None) -> None:
        if index_hint is not None and self._fits_at(index_hint, slot.node.time):
            self._slots.insert(index_hint, slot)
            return
        self._slots.append(slot)
        self.sort_nodes()

    def _fits_at(self, index: int, time: float) -> bool:
        if not 0 <= index <= len(self._slots):
            return False
        if index > 0 and self._slots[index - 1].node.time > time:
            return False
        if index < len(self._slots) and self._slots[index].node.time < time:
            return False
        return True
