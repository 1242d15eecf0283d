"""
Per-frame animation state for epicycle rendering.

The coefficient and metrics functions are pure; everything that changes
from frame to frame (the rotation time and the trail of traced points)
lives in an ``EpicycleState`` owned by the renderer.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from .coefficients import HarmonicCoefficient, epicycle_chain
from .waves import WaveKind, resolve_wave_kind

logger = logging.getLogger(__name__)

# Radians advanced per frame at speed 1.0
TIME_STEP = 0.02


@dataclass
class Frame:
    """Snapshot of one animation tick."""
    time: float                     # Time at which the chain was evaluated
    joints: NDArray[np.float64]     # Shape (n_harmonics + 1, 2)
    trail: NDArray[np.float64]      # Tip y-values, newest first

    @property
    def tip(self) -> NDArray[np.float64]:
        """Position of the last epicycle."""
        return self.joints[-1]


class EpicycleState:
    """
    Mutable animation state advanced once per frame.

    Parameters
    ----------
    speed : float, optional
        Animation speed multiplier (default 1.0).
    trail_length : int, optional
        Maximum number of traced points kept (default 300).
    """

    def __init__(self, speed: float = 1.0, trail_length: int = 300):
        self.speed = speed
        self.time = 0.0
        self.trail: deque[float] = deque(maxlen=trail_length)
        self._target: Optional[tuple[WaveKind, int]] = None

    @property
    def trail_length(self) -> int:
        return self.trail.maxlen

    @property
    def cycle_time(self) -> float:
        """Current time wrapped to [0, 2π)."""
        return float(np.mod(self.time, 2 * np.pi))

    def reset(self) -> None:
        """Clear the trail and rewind time."""
        self.time = 0.0
        self.trail.clear()

    def retarget(self, wave_kind: Union[str, WaveKind], num_terms: int) -> bool:
        """
        Record the series being drawn, clearing the trail if it changed.

        Returns
        -------
        changed : bool
            True if the trail was cleared.
        """
        target = (resolve_wave_kind(wave_kind), int(num_terms))
        if target == self._target:
            return False
        if self._target is not None:
            logger.debug("Series changed to %s x%d, clearing trail", target[0].value, target[1])
        self._target = target
        self.trail.clear()
        return True

    def step(
        self,
        coefficients: Sequence[HarmonicCoefficient],
        scale: float = 1.0
    ) -> Frame:
        """
        Evaluate the chain at the current time and advance one tick.

        The tip's y-value is pushed to the front of the trail; the oldest
        point is dropped once the trail is full.

        Parameters
        ----------
        coefficients : sequence of HarmonicCoefficient
            Harmonics to draw.
        scale : float, optional
            Radius scale for the chain (default 1.0).

        Returns
        -------
        frame : Frame
            Snapshot taken before time was advanced.
        """
        t = self.time
        joints = epicycle_chain(coefficients, t, scale)
        self.trail.appendleft(float(joints[-1, 1]))
        self.time += self.speed * TIME_STEP
        return Frame(time=t, joints=joints, trail=np.array(self.trail, dtype=np.float64))

    def run(
        self,
        coefficients: Sequence[HarmonicCoefficient],
        n_frames: int,
        scale: float = 1.0
    ) -> list[Frame]:
        """Advance ``n_frames`` ticks and return every frame."""
        return [self.step(coefficients, scale) for _ in range(n_frames)]
