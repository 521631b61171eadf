"""
Travel Recap: statistics engine for Google Timeline exports.
"""

__version__ = "0.1.0"
