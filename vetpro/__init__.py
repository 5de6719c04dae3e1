"""
VetPro care scheduling - protocol due dates and appointment slots.
"""

__version__ = "0.1.0"
