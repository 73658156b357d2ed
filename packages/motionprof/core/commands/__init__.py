"""Undo/redo commands for profile edits."""

from motionprof.core.commands.base import Command
from motionprof.core.commands.nodes import AddNode, DeleteNode, MoveNode, MoveNodes
from motionprof.core.commands.stack import CommandStack

__all__ = [
    "AddNode",
    "Command",
    "CommandStack",
    "DeleteNode",
    "MoveNode",
    "MoveNodes",
]
