"""Editing session: a document, its undo history and the view settings.

This is the glue an editing surface talks to. Pointer positions arrive in
display units, are snapped and constrained with the view settings, and every
change is pushed through the command stack so it can be undone.
"""

from __future__ import annotations

import logging
from pathlib import Path

from motionprof.core.commands.nodes import AddNode, DeleteNode, MoveNode
from motionprof.core.commands.stack import CommandStack
from motionprof.core.config.models import AppConfig, ViewConfig
from motionprof.core.display.transform import (
    constrain_display_point,
    grid_step_y,
    to_real,
    visual_scale,
)
from motionprof.core.document.colors import ColorSequence
from motionprof.core.document.document import MotionDocument
from motionprof.core.profiles.models import MotionNode
from motionprof.core.profiles.profile import MotorProfile
from motionprof.core.utils.math import VALUE_EPSILON, is_close

logger = logging.getLogger(__name__)


class EditSession:
    """Undoable editing of one MotionDocument.

    The command stack is attached to the document, so removing a motor drops
    its history and loading a file clears it.

    Example:
        >>> session = EditSession.from_config(AppConfig())
        >>> pan = session.document.add_motor("pan")
        >>> session.add_node(pan, MotionNode(time=0, value=0))
        True
        >>> session.stack.undo()
        True
    """

    def __init__(
        self,
        document: MotionDocument | None = None,
        stack: CommandStack | None = None,
        view: ViewConfig | None = None,
    ) -> None:
        self.document = document if document is not None else MotionDocument()
        self.stack = stack if stack is not None else CommandStack()
        self.view = view if view is not None else ViewConfig()
        self.stack.attach(self.document)

    @classmethod
    def from_config(cls, config: AppConfig) -> EditSession:
        """Build a session with defaults, colors, history limit and view from config."""
        document = MotionDocument(
            profile_defaults=config.profile_defaults.to_constraints(),
            colors=ColorSequence(config.editing.color_seed),
        )
        document.doc_id = config.export.default_id
        return cls(document, CommandStack(limit=config.editing.history_limit), config.view)

    @property
    def is_modified(self) -> bool:
        """True if there are edits since the last save or load."""
        return not self.stack.is_clean

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------

    def scale_of(self, profile: MotorProfile | None) -> float:
        return visual_scale(profile, self.view.reference_value)

    def snap_steps(self) -> tuple[float, float]:
        """(time, display value) grid steps; zeros when snapping is off."""
        if not self.view.snap_to_grid:
            return (0.0, 0.0)
        return (
            self.view.grid_size_x,
            grid_step_y(self.view.reference_value, self.view.y_divisions),
        )

    def display_to_node(
        self, profile: MotorProfile, time: float, display_value: float
    ) -> MotionNode:
        """Real node for a dragged display position (snapped and constrained)."""
        step_x, step_y = self.snap_steps()
        return constrain_display_point(
            profile,
            time,
            display_value,
            self.scale_of(profile),
            snap_step_x=step_x,
            snap_step_y=step_y,
        )

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def add_node(self, profile: MotorProfile, node: MotionNode) -> bool:
        """Push an AddNode; invalid nodes are rejected, not clamped."""
        return self.stack.push(AddNode(profile, node))

    def add_node_at(self, time: float, display_value: float) -> bool:
        """Add a node to the active motor at a display position.

        The position is converted to real units but not clamped, so a point
        outside the motor's range or before t=0 is rejected.
        """
        profile = self.document.active_profile
        if profile is None:
            logger.debug("add_node_at: no active motor")
            return False
        value = to_real(display_value, self.scale_of(profile))
        return self.add_node(profile, MotionNode(time=time, value=value))

    def delete_node(self, profile: MotorProfile, index: int) -> bool:
        return self.stack.push(DeleteNode(profile, index))

    def move_node(self, profile: MotorProfile, index: int, new_pos: MotionNode) -> bool:
        """Move a node to an exact real position.

        Returns:
            False if the node does not exist, the position is unchanged, or
            the new position is invalid.
        """
        old_pos = profile.node_at(index)
        if old_pos is None:
            return False
        if is_close(old_pos.time, new_pos.time, VALUE_EPSILON) and is_close(
            old_pos.value, new_pos.value, VALUE_EPSILON
        ):
            return False
        return self.stack.push(MoveNode(profile, index, old_pos, new_pos))

    def drag_node(
        self, profile: MotorProfile, index: int, time: float, display_value: float
    ) -> bool:
        """Commit one step of a drag given in display units.

        Successive steps of the same drag merge into one undo entry.
        """
        return self.move_node(profile, index, self.display_to_node(profile, time, display_value))

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def save(self, path: str | Path) -> bool:
        """Save the document and mark the history clean on success."""
        if not self.document.save_to_file(path):
            return False
        self.stack.set_clean()
        return True

    def load(self, path: str | Path) -> bool:
        """Load a document; the history is cleared on success."""
        return self.document.load_from_file(path)
