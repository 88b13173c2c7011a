"""
bookingwindow - validate booking time windows against working hours.
"""

__version__ = "0.1.0"
