"""Test suite for motionprof.

Test Structure:
- unit/: Unit tests per area (profiles, commands, display, document, config,
  events, session, utils, cli)
- fixtures/: Sample document files
"""
