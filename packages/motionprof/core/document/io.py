"""Reading and writing document files.

The file extension selects the syntax (.json, .yaml, .yml). All failures
are raised as PersistenceError; MotionDocument turns them into a False
result.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from motionprof.core.config.loader import detect_format, load_config
from motionprof.core.document.schema import DocumentFile, MotorRecord, NodeRecord
from motionprof.core.errors import PersistenceError
from motionprof.core.profiles.profile import MotorProfile
from motionprof.core.utils.json import write_json

logger = logging.getLogger(__name__)


def profile_to_record(profile: MotorProfile) -> MotorRecord:
    return MotorRecord(
        name=profile.name,
        color=profile.color,
        y_min=profile.y_min,
        y_max=profile.y_max,
        max_slope=profile.max_slope,
        nodes=[NodeRecord(time=node.time, value=node.value) for node in profile.nodes()],
    )


def build_document_file(profiles: Iterable[MotorProfile], doc_id: str) -> DocumentFile:
    return DocumentFile(id=doc_id, motors=[profile_to_record(p) for p in profiles])


def build_sample_file(
    profiles: Iterable[MotorProfile], doc_id: str, sample_rate_hz: float, end_time_ms: float
) -> DocumentFile:
    """Document whose motors hold sampled rows instead of editable nodes."""
    motors = [
        MotorRecord(
            name=profile.name,
            nodes=[
                NodeRecord(time=t, value=v)
                for t, v in profile.sample_range(sample_rate_hz, end_time_ms)
            ],
        )
        for profile in profiles
    ]
    return DocumentFile(id=doc_id, motors=motors)


def write_data(path: str | Path, data: dict[str, Any]) -> None:
    """Write a mapping as JSON or YAML, by extension.

    Raises:
        PersistenceError: On unsupported extension or I/O failure.
    """
    path = Path(path)
    try:
        fmt = detect_format(path)
        if fmt == "json":
            write_json(path, data)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, sort_keys=False, default_flow_style=None)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise PersistenceError(f"Could not write {path}: {e}") from e


def write_document(
    path: str | Path, document: DocumentFile, *, compact: bool | None = None
) -> None:
    """Write document in the layout suited to the file type.

    YAML defaults to the compact layout and JSON to the full layout.
    """
    if compact is None:
        compact = _is_yaml(path)
    write_data(path, document.to_compact() if compact else document.to_full())
    logger.info(f"Wrote {len(document.motors)} motor(s) to {path}")


def read_document(path: str | Path) -> DocumentFile:
    """Read a document in either layout.

    Raises:
        PersistenceError: If the file is missing, unreadable or malformed.
    """
    try:
        data = load_config(path)
        return DocumentFile.from_data(data)
    except (OSError, ValueError, ValidationError) as e:
        raise PersistenceError(f"Could not read {path}: {e}") from e


def _is_yaml(path: str | Path) -> bool:
    try:
        return detect_format(path) == "yaml"
    except ValueError:
        return False
