"""Motion documents and their persisted form."""

from motionprof.core.document.colors import ColorSequence
from motionprof.core.document.document import MotionDocument
from motionprof.core.document.io import read_document, write_document
from motionprof.core.document.schema import DocumentFile, MotorRecord, NodeRecord

__all__ = [
    "ColorSequence",
    "DocumentFile",
    "MotionDocument",
    "MotorRecord",
    "NodeRecord",
    "read_document",
    "write_document",
]
