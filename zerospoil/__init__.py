"""
ZeroSpoil: food waste tracking dashboard backed by Firebase.
"""

__version__ = "1.0.0"
