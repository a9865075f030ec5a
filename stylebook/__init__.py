"""
stylebook - bookable appointment slots derived from a stylist's weekly hours.
"""

__version__ = "0.1.0"
