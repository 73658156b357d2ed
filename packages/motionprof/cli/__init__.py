"""Command-line interface for motionprof."""
