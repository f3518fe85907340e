"""
Input validation utilities.
"""

from .coordinate_validator import CoordinateValidator

__all__ = ["CoordinateValidator"]
