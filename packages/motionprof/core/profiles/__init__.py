"""Motor profiles: nodes, constraints, sampling."""

from motionprof.core.profiles.constraints import find_slope_violations, repair_nodes
from motionprof.core.profiles.models import MotionNode, ProfileConstraints
from motionprof.core.profiles.profile import MotorProfile
from motionprof.core.profiles.sampling import interpolate_linear, sample_nodes, sample_times

__all__ = [
    "MotionNode",
    "MotorProfile",
    "ProfileConstraints",
    "find_slope_violations",
    "interpolate_linear",
    "repair_nodes",
    "sample_nodes",
    "sample_times",
]
