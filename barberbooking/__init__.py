"""
barberbooking - slot availability and booking core for the barbershop site.
"""

__version__ = "1.0.0"
