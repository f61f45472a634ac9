"""
Slot availability and conflict detection for clinic appointment booking.
"""

__version__ = "0.1.0"
