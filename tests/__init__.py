"""Test package for MiniMath.

Generator, statistics, persistence and session tests are pure Python and run
anywhere.  The UI smoke tests use pygame's dummy video driver so no window is
opened.  Run ``pytest`` from the project root.
"""
