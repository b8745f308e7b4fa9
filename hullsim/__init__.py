"""
Hull Stability Simulator
========================

Real-time rotational stability of a floating rectangular hull carrying a
movable point load.
"""

__version__ = "0.1.0"
