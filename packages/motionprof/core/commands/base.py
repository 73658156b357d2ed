"""Command protocol for the undo/redo stack."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from motionprof.core.profiles.profile import MotorProfile


class Command(ABC):
    """A reversible edit of one or more motor profiles.

    Lifecycle: the stack calls validate() once, then apply(); afterwards
    invert() and apply() alternate as the user undoes and redoes. Both return
    False when the edit cannot be carried out (for example the target node no
    longer exists); the profile is then left untouched.
    """

    text: str = ""

    @abstractmethod
    def validate(self) -> bool:
        """Check the edit against current constraints before the first apply."""

    @abstractmethod
    def apply(self) -> bool:
        """Perform (or redo) the edit."""

    @abstractmethod
    def invert(self) -> bool:
        """Undo the edit."""

    def merge_with(self, other: Command) -> bool:
        """Absorb other (already applied) into self. Default: never merge."""
        return False

    @abstractmethod
    def profiles(self) -> set[MotorProfile]:
        """Profiles this command holds references to."""

    def without_profile(self, profile: MotorProfile) -> Command | None:
        """Copy of this command with every reference to profile dropped.

        Returns None when nothing is left.
        """
        return None if profile in self.profiles() else self
