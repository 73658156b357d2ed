"""Linear undo/redo history of Commands.

Pushing validates and applies a command, merges it into the previous one
when they describe the same continuous gesture, and discards anything that
had been undone. The stack must be the only writer of the profiles it edits;
direct mutation in between desynchronizes the recorded before/after states.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from motionprof.core.commands.base import Command
from motionprof.core.events import Signal

if TYPE_CHECKING:
    from motionprof.core.document.document import MotionDocument
    from motionprof.core.profiles.profile import MotorProfile

logger = logging.getLogger(__name__)


class CommandStack:
    """Undo/redo stack.

    Attributes:
        changed: Emitted after every push, undo, redo, clear or discard.
        clean_changed: Emitted with the new is_clean value when it flips.

    Example:
        >>> stack = CommandStack()
        >>> stack.push(AddNode(profile, MotionNode(time=0, value=0)))
        True
        >>> stack.undo()
        True
    """

    def __init__(self, limit: int = 0) -> None:
        """Create an empty stack.

        Args:
            limit: Maximum number of commands kept (0 = unlimited).
        """
        self._commands: list[Command] = []
        self._index = 0
        self._clean_index: int | None = 0
        self._limit = max(0, limit)

        self.changed = Signal("changed")
        self.clean_changed = Signal("clean_changed")

    def __len__(self) -> int:
        return len(self._commands)

    @property
    def count(self) -> int:
        return len(self._commands)

    @property
    def index(self) -> int:
        """Number of commands currently applied."""
        return self._index

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._commands)

    @property
    def undo_text(self) -> str:
        return self._commands[self._index - 1].text if self.can_undo else ""

    @property
    def redo_text(self) -> str:
        return self._commands[self._index].text if self.can_redo else ""

    @property
    def is_clean(self) -> bool:
        return self._clean_index == self._index

    def command(self, index: int) -> Command:
        return self._commands[index]

    def push(self, command: Command) -> bool:
        """Validate, apply and record command.

        Returns:
            False if the command was rejected; nothing is applied or recorded then.
        """
        if not command.validate():
            logger.debug(f"Rejected command: {command.text}")
            return False
        if not command.apply():
            logger.warning(f"Command failed to apply: {command.text}")
            return False

        was_clean = self.is_clean
        del self._commands[self._index :]
        if self._clean_index is not None and self._clean_index > self._index:
            self._clean_index = None

        # A clean state marks a saved snapshot; never merge across it.
        merged = False
        if self._index > 0 and not was_clean:
            merged = self._commands[self._index - 1].merge_with(command)

        if not merged:
            self._commands.append(command)
            self._index += 1
            self._enforce_limit()

        self._notify(was_clean)
        return True

    def undo(self) -> bool:
        if not self.can_undo:
            return False
        command = self._commands[self._index - 1]
        was_clean = self.is_clean
        if not command.invert():
            logger.warning(f"Undo failed: {command.text}")
            return False
        self._index -= 1
        self._notify(was_clean)
        return True

    def redo(self) -> bool:
        if not self.can_redo:
            return False
        command = self._commands[self._index]
        was_clean = self.is_clean
        if not command.apply():
            logger.warning(f"Redo failed: {command.text}")
            return False
        self._index += 1
        self._notify(was_clean)
        return True

    def clear(self) -> None:
        """Drop the whole history; the empty stack is clean."""
        was_clean = self.is_clean
        self._commands.clear()
        self._index = 0
        self._clean_index = 0
        self._notify(was_clean)

    def set_clean(self) -> None:
        """Mark the current state as saved."""
        was_clean = self.is_clean
        self._clean_index = self._index
        self._notify(was_clean, structural=False)

    def discard_profile(self, profile: MotorProfile) -> None:
        """Forget every recorded edit of profile.

        Called when the profile leaves its document so that no command keeps
        a reference to it. Commands on other profiles are unaffected because
        each command only touches the profiles it references.
        """
        filtered = [command.without_profile(profile) for command in self._commands]
        if all(new is old for new, old in zip(filtered, self._commands)):
            return

        was_clean = self.is_clean
        applied = sum(1 for new in filtered[: self._index] if new is not None)
        if self._clean_index is not None:
            self._clean_index = sum(1 for new in filtered[: self._clean_index] if new is not None)
        kept = [new for new in filtered if new is not None]
        logger.debug(
            f"Dropped {len(self._commands) - len(kept)} command(s) for {profile.name!r}"
        )
        self._commands = kept
        self._index = applied
        self._notify(was_clean)

    def attach(self, document: MotionDocument) -> None:
        """Keep the history consistent with document membership."""
        document.motor_removed.connect(self.discard_profile)
        document.document_cleared.connect(self.clear)

    def detach(self, document: MotionDocument) -> None:
        document.motor_removed.disconnect(self.discard_profile)
        document.document_cleared.disconnect(self.clear)

    def _enforce_limit(self) -> None:
        if not self._limit:
            return
        overflow = len(self._commands) - self._limit
        if overflow <= 0:
            return
        del self._commands[:overflow]
        self._index -= overflow
        if self._clean_index is not None:
            self._clean_index -= overflow
            if self._clean_index < 0:
                self._clean_index = None

    def _notify(self, was_clean: bool, structural: bool = True) -> None:
        if structural:
            self.changed.emit()
        if was_clean != self.is_clean:
            self.clean_changed.emit(self.is_clean)
