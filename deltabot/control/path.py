"""
Path driver
Walks a fixed list of waypoints, one move at a time
"""

import time
import logging
from typing import Callable, Iterable, List, Tuple

from ..exceptions import DeltaError
from ..motion import MotorCommand
from .controller import DeltaController

logger = logging.getLogger(__name__)


class PathDriver:
    """Move through waypoints in order with a fixed delay between moves"""

    def __init__(self, controller: DeltaController, move_delay: float = 0.5,
                 sleep: Callable[[float], None] = time.sleep):
        self.controller = controller
        self.move_delay = move_delay
        self._sleep = sleep

    def run(self, waypoints: Iterable[Tuple[float, float, float]]) -> List[List[MotorCommand]]:
        """
        Execute the path

        Args:
            waypoints: (x, y, z) targets

        Returns:
            Command batch sent for each waypoint

        Raises:
            Unreachable: a waypoint is outside the workspace; the moves
                before it have already been sent
        """
        waypoints = list(waypoints)
        batches = []

        for index, (x, y, z) in enumerate(waypoints):
            try:
                batches.append(self.controller.move_to(x, y, z))
            except DeltaError as e:
                logger.error(f"❌ Path stopped at waypoint {index} ({x}, {y}, {z}): {e}")
                raise

            # Let the motors finish before the next move
            if index < len(waypoints) - 1:
                self._sleep(self.move_delay)

        logger.info(f"✅ Path complete ({len(batches)} moves)")
        return batches
