"""motionprof - motor motion profile editing toolkit."""

__version__ = "0.1.0"
