"""Moving average engine."""

from ta_engine.averages.moving_average import (
    MovingAverageDescriptor,
    MovingAverageType,
    apply_moving_average,
    available_moving_averages,
    exponential_smoothing,
)

__all__ = [
    'MovingAverageDescriptor',
    'MovingAverageType',
    'apply_moving_average',
    'available_moving_averages',
    'exponential_smoothing',
]
