"""
Quote Builder - hierarchical contractor quotes with surcharge resolution.
"""

__version__ = "1.0.0"
