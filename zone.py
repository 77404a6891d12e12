"""World region bounds and charging station layout for the rescue swarm."""

from dataclasses import dataclass
from typing import List, Tuple

import config
from entities import ChargingPoint


@dataclass
class Region:
    """Represents the rectangular area searched by the swarm."""
    width: float = config.REGION_WIDTH
    height: float = config.REGION_HEIGHT

    @property
    def center(self) -> Tuple[float, float]:
        return (self.width / 2, self.height / 2)

    def reflect(self, x: float, y: float, vx: float,
                vy: float) -> Tuple[float, float, float, float]:
        """
        Apply elastic wall collisions.

        Any coordinate past a wall is clamped onto it and the matching
        velocity component is negated.

        Returns:
            (x, y, vx, vy) after reflection
        """
        if x < 0:
            x = 0.0
            vx = -vx
        if x > self.width:
            x = self.width
            vx = -vx
        if y < 0:
            y = 0.0
            vy = -vy
        if y > self.height:
            y = self.height
            vy = -vy
        return x, y, vx, vy


def default_charging_points(region: Region) -> List[ChargingPoint]:
    """
    Canonical charging stations: the four quadrant centers plus the map center.

    Args:
        region: The region the stations are scaled to

    Returns:
        List of five ChargingPoint objects
    """
    w = region.width
    h = region.height
    positions = [
        (w * 0.25, h * 0.25),  # top-left quadrant
        (w * 0.50, h * 0.50),  # whole map
        (w * 0.75, h * 0.25),  # top-right quadrant
        (w * 0.75, h * 0.75),  # bottom-right quadrant
        (w * 0.25, h * 0.75),  # bottom-left quadrant
    ]
    return [ChargingPoint(id=i, x=x, y=y) for i, (x, y) in enumerate(positions)]
