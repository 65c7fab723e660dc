"""
Structural Compare
Verifies that a markup + stylesheet implementation structurally matches a design tree.
"""

__version__ = "0.1.0"
