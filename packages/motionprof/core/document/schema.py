"""Persisted document schema.

Two layouts are supported, independent of JSON/YAML syntax:

- Full: {"id": ..., "motors": [{"name", "color", "y_min", "y_max",
  "max_slope", "nodes": [{"time", "value"}, ...]}, ...]}
- Compact: {"id": ..., "<motor>": [[[t, v], [t, v], ...]], ...}; one entry
  per motor holding a single sequence of [time, value] pairs. The flat form
  "<motor>": [[t, v], ...] is accepted on read.

Both are read into DocumentFile. Compact files carry no constraints, so the
constraint fields of their MotorRecords are None.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter

DEFAULT_DOCUMENT_ID = "default_id"
UNNAMED_MOTOR = "unnamed_motor"

NodePair = tuple[float, float]
_PAIRS = TypeAdapter(list[NodePair])


class NodeRecord(BaseModel):
    """One node of the full layout.

    Readers accept the legacy keys "x" (time) and "y" (value).
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    time: float = Field(validation_alias=AliasChoices("time", "x"))
    value: float = Field(validation_alias=AliasChoices("value", "y"))


class MotorRecord(BaseModel):
    """One motor as stored on disk."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    color: str | None = None
    y_min: float | None = None
    y_max: float | None = None
    max_slope: float | None = Field(default=None, ge=0.0)
    nodes: list[NodeRecord] = Field(default_factory=list)

    def pairs(self) -> list[NodePair]:
        return [(node.time, node.value) for node in self.nodes]


class DocumentFile(BaseModel):
    """A whole document as stored on disk."""

    model_config = ConfigDict(extra="ignore")

    id: str = DEFAULT_DOCUMENT_ID
    motors: list[MotorRecord] = Field(default_factory=list)

    @classmethod
    def from_data(cls, data: Any) -> DocumentFile:
        """Validate parsed JSON/YAML content in either layout.

        Raises:
            ValueError: If the content matches neither layout (pydantic's
                ValidationError is a ValueError).
        """
        if not isinstance(data, dict):
            raise ValueError("Document root must be a mapping")
        if _is_full_layout(data):
            return cls.model_validate(data)
        return cls.from_compact(data)

    @classmethod
    def from_compact(cls, data: dict[str, Any]) -> DocumentFile:
        doc_id = data.get("id")
        motors = []
        for key, value in data.items():
            if key == "id":
                continue
            pairs = _PAIRS.validate_python(_unwrap_pairs(value))
            motors.append(
                MotorRecord(
                    name=str(key),
                    nodes=[NodeRecord(time=t, value=v) for t, v in pairs],
                )
            )
        return cls(id=str(doc_id) if doc_id is not None else DEFAULT_DOCUMENT_ID, motors=motors)

    def to_compact(self) -> dict[str, Any]:
        """Compact layout with sanitized, unique motor keys."""
        data: dict[str, Any] = {"id": self.id}
        for motor in self.motors:
            key = unique_key(sanitize_motor_key(motor.name), data)
            data[key] = [[list(pair) for pair in motor.pairs()]]
        return data

    def to_full(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


def sanitize_motor_key(name: str) -> str:
    """Make a motor name safe as a compact-layout key.

    Example:
        >>> sanitize_motor_key("base joint:1")
        'base_joint_1'
    """
    key = name.replace(":", "_").replace(" ", "_")
    return key or UNNAMED_MOTOR


def unique_key(key: str, taken: dict[str, Any]) -> str:
    """Suffix key with _2, _3, ... until it is not in taken."""
    if key not in taken:
        return key
    n = 2
    while f"{key}_{n}" in taken:
        n += 1
    return f"{key}_{n}"


def _unwrap_pairs(value: Any) -> Any:
    # [[[t, v], ...]] -> [[t, v], ...]; a bare [] or None means no nodes
    if value is None:
        return []
    if (
        isinstance(value, list)
        and len(value) == 1
        and isinstance(value[0], list)
        and (not value[0] or isinstance(value[0][0], list))
    ):
        return value[0]
    return value


def _is_full_layout(data: dict[str, Any]) -> bool:
    # A compact motor named "motors" holds pair lists, never mappings
    motors = data.get("motors")
    return isinstance(motors, list) and all(isinstance(m, dict) for m in motors)
