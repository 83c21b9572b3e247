"""
freespan - find uninterrupted free time inside availability windows.
"""

__version__ = "0.1.0"
