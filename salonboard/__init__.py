"""
salonboard - layout and drag-to-reschedule engine for a salon scheduling board.
"""

__version__ = "0.1.0"
