"""MotionDocument: the set of motor profiles edited together.

The document owns its profiles, tracks the active one, and is the unit of
saving, loading and sampled export.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from motionprof.core.document.colors import ColorSequence
from motionprof.core.document.io import (
    build_document_file,
    build_sample_file,
    read_document,
    write_document,
)
from motionprof.core.document.schema import DEFAULT_DOCUMENT_ID, DocumentFile, MotorRecord
from motionprof.core.errors import PersistenceError
from motionprof.core.events import Signal
from motionprof.core.profiles.models import MotionNode, ProfileConstraints
from motionprof.core.profiles.profile import MotorProfile

logger = logging.getLogger(__name__)

DEFAULT_MIN_END_TIME_MS = 2000.0


class MotionDocument:
    """Ordered collection of MotorProfiles with one optional active profile.

    Attributes:
        motor_added: Emitted with the new profile.
        motor_removed: Emitted with the profile leaving the document.
        document_cleared: Emitted before a load replaces all profiles.
        active_motor_changed: Emitted with (active, previous).
        model_changed: Emitted after any structural change.

    Example:
        >>> doc = MotionDocument()
        >>> pan = doc.add_motor("pan")
        >>> doc.set_active_motor(pan)
        True
        >>> doc.active_profile is pan
        True
    """

    def __init__(
        self,
        profile_defaults: ProfileConstraints | None = None,
        colors: ColorSequence | None = None,
    ) -> None:
        """Create an empty document.

        Args:
            profile_defaults: Constraints for new motors and for loaded motors
                whose file carries none.
            colors: Color source for motors added without a color.
        """
        self._profiles: list[MotorProfile] = []
        self._active: MotorProfile | None = None
        self._defaults = profile_defaults or ProfileConstraints()
        self._colors = colors or ColorSequence()
        self.doc_id = DEFAULT_DOCUMENT_ID

        self.motor_added = Signal("motor_added")
        self.motor_removed = Signal("motor_removed")
        self.document_cleared = Signal("document_cleared")
        self.active_motor_changed = Signal("active_motor_changed")
        self.model_changed = Signal("model_changed")

    def __len__(self) -> int:
        return len(self._profiles)

    def __iter__(self) -> Iterator[MotorProfile]:
        return iter(list(self._profiles))

    def __contains__(self, profile: object) -> bool:
        return any(p is profile for p in self._profiles)

    @property
    def motor_profiles(self) -> tuple[MotorProfile, ...]:
        return tuple(self._profiles)

    @property
    def active_profile(self) -> MotorProfile | None:
        return self._active

    @property
    def active_profile_index(self) -> int:
        """Index of the active profile, -1 if none."""
        return self._index_of(self._active) if self._active is not None else -1

    @property
    def profile_defaults(self) -> ProfileConstraints:
        return self._defaults

    def find(self, name: str) -> MotorProfile | None:
        """First profile with the given name."""
        for profile in self._profiles:
            if profile.name == name:
                return profile
        return None

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def add_motor(
        self,
        name: str,
        color: str | None = None,
        constraints: ProfileConstraints | None = None,
    ) -> MotorProfile:
        """Create and append a profile.

        Args:
            name: Motor name.
            color: Display color; drawn from the color sequence if None.
            constraints: Initial constraints; document defaults if None.
        """
        profile = MotorProfile(
            name,
            color if color is not None else self._colors.next(),
            constraints or self._defaults,
        )
        self._profiles.append(profile)
        logger.debug(f"Added motor {name!r}")
        self.motor_added.emit(profile)
        self.model_changed.emit()
        return profile

    def remove_motor(self, profile: MotorProfile) -> bool:
        """Remove profile from the document and dispose it.

        If it was active, the profile before it becomes active (or the new
        first profile, or none). Callers must not keep references to the
        profile after this returns.

        Returns:
            False if profile is not part of the document.
        """
        index = self._index_of(profile)
        if index < 0:
            return False

        del self._profiles[index]
        was_active = self._active is profile
        if was_active:
            self._active = self._profiles[max(0, index - 1)] if self._profiles else None

        # The active profile is reassigned before anyone hears of the removal
        self.motor_removed.emit(profile)
        if was_active:
            self.active_motor_changed.emit(self._active, profile)

        self.model_changed.emit()
        # Listeners have all been notified, so the profile can be torn down
        profile.dispose()
        logger.debug(f"Removed motor {profile.name!r}")
        return True

    def set_active_motor(self, profile: MotorProfile | None) -> bool:
        """Make profile the active one (None clears the selection).

        Returns:
            True if the active profile changed.
        """
        if profile is not None and profile not in self:
            logger.warning(f"Cannot activate motor {profile.name!r}: not in document")
            return False
        if profile is self._active:
            return False
        previous = self._active
        self._active = profile
        self.active_motor_changed.emit(profile, previous)
        return True

    def clear(self) -> None:
        """Remove every profile."""
        self.document_cleared.emit()
        self._replace_profiles([])

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_file_model(self, doc_id: str | None = None) -> DocumentFile:
        return build_document_file(self._profiles, doc_id or self.doc_id)

    def default_export_end_time(self, min_end_time_ms: float = DEFAULT_MIN_END_TIME_MS) -> float:
        """Suggested export end: the last node time over all motors, at least min_end_time_ms."""
        return max([min_end_time_ms, *(p.end_time for p in self._profiles if len(p))])

    def save_to_file(self, path: str | Path, doc_id: str | None = None) -> bool:
        """Save all motors (.json keeps constraints and colors; YAML is compact).

        Returns:
            False if the file could not be written.
        """
        try:
            write_document(path, self.to_file_model(doc_id))
        except PersistenceError as e:
            logger.warning(str(e))
            return False
        if doc_id:
            self.doc_id = doc_id
        return True

    def load_from_file(self, path: str | Path) -> bool:
        """Replace all motors with the content of path.

        The file is parsed completely before anything changes; on failure the
        document is left as it was. On success document_cleared is emitted,
        the profiles are replaced, and the first profile becomes active.

        Returns:
            False if the file could not be read or parsed.
        """
        try:
            loaded = read_document(path)
        except PersistenceError as e:
            logger.warning(str(e))
            return False

        profiles = [self._profile_from_record(record) for record in loaded.motors]

        self.document_cleared.emit()
        self.doc_id = loaded.id
        self._replace_profiles(profiles)
        if self._profiles:
            self.set_active_motor(self._profiles[0])
        logger.info(f"Loaded {len(profiles)} motor(s) from {path}")
        return True

    def export_samples_to_file(
        self,
        path: str | Path,
        sample_rate_hz: float,
        end_time_ms: float,
        doc_id: str | None = None,
    ) -> bool:
        """Write every motor sampled at sample_rate_hz from 0 to end_time_ms.

        Returns:
            False if the file could not be written.
        """
        sampled = build_sample_file(
            self._profiles, doc_id or self.doc_id, sample_rate_hz, end_time_ms
        )
        try:
            write_document(path, sampled, compact=True)
        except PersistenceError as e:
            logger.warning(str(e))
            return False
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _index_of(self, profile: MotorProfile) -> int:
        for i, p in enumerate(self._profiles):
            if p is profile:
                return i
        return -1

    def _replace_profiles(self, profiles: list[MotorProfile]) -> None:
        old = self._profiles
        previous = self._active
        self._profiles = []
        self._active = None
        if previous is not None:
            self.active_motor_changed.emit(None, previous)
        for profile in old:
            profile.dispose()
        for profile in profiles:
            self._profiles.append(profile)
            self.motor_added.emit(profile)
        self.model_changed.emit()

    def _profile_from_record(self, record: MotorRecord) -> MotorProfile:
        defaults = self._defaults
        constraints = ProfileConstraints(
            y_min=record.y_min if record.y_min is not None else defaults.y_min,
            y_max=record.y_max if record.y_max is not None else defaults.y_max,
            max_slope=record.max_slope if record.max_slope is not None else defaults.max_slope,
        )
        profile = MotorProfile(
            record.name,
            record.color if record.color is not None else self._colors.next(),
            constraints,
        )
        profile.replace_nodes([MotionNode(time=t, value=v) for t, v in record.pairs()])
        return profile
