"""
Coordinate validation for synthesized pointer input.
"""

from typing import Iterable, Optional, Tuple

from ...schemas.commands import Point


class CoordinateValidator:
    """
    Validates command coordinates against the screen before dispatch.
    """

    def __init__(self, screen_width: int, screen_height: int):
        """
        Initialize validator with screen dimensions.

        Args:
            screen_width: Screen width in pixels
            screen_height: Screen height in pixels
        """
        self.screen_width = screen_width
        self.screen_height = screen_height

    def is_within_bounds(self, x: int, y: int) -> bool:
        """
        Check if coordinates are on screen.

        Args:
            x: X coordinate
            y: Y coordinate

        Returns:
            True if coordinates are valid
        """
        return 0 <= x < self.screen_width and 0 <= y < self.screen_height

    def validate_point(self, point: Point) -> Tuple[bool, Optional[str]]:
        """
        Validate a single point.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not self.is_within_bounds(point.x, point.y):
            return (
                False,
                f"Coordinates ({point.x}, {point.y}) are outside screen bounds "
                f"{self.screen_width}x{self.screen_height}",
            )
        return (True, None)

    def validate_points(self, points: Iterable[Point]) -> Tuple[bool, Optional[str]]:
        """
        Validate every point, stopping at the first invalid one.

        Returns:
            Tuple of (is_valid, error_message)
        """
        for point in points:
            is_valid, error = self.validate_point(point)
            if not is_valid:
                return (False, error)
        return (True, None)
