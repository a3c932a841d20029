"""Control-loop timing helpers: rate dividers and IMU-to-motor latency."""

from __future__ import annotations

UINT32_MAX = 0xFFFFFFFF
_NS_PER_US = 1000


class LoopDivider:
    """Fires once every ``divisor`` calls, starting with the first call."""

    def __init__(self, divisor: int) -> None:
        if divisor < 1:
            raise ValueError(f"divisor must be at least 1, got {divisor}")
        self.divisor = divisor
        self._countdown = 0

    def expired(self) -> bool:
        """Count one loop iteration; return True when the divided rate is due."""
        if self._countdown > 0:
            self._countdown -= 1
            return False
        self._countdown = self.divisor - 1
        return True


def imu_to_motor_latency_us(imu_interrupt_timestamp_ns: int, motor_signal_timestamp_ns: int) -> int:
    """Latency from IMU sample to motor signal in whole microseconds.

    Returns 0 when either timestamp is missing (zero) or the motor signal does
    not come after the IMU sample; saturates at the largest 32-bit value.
    """
    if (
        imu_interrupt_timestamp_ns == 0
        or motor_signal_timestamp_ns == 0
        or motor_signal_timestamp_ns <= imu_interrupt_timestamp_ns
    ):
        return 0
    latency_ns = motor_signal_timestamp_ns - imu_interrupt_timestamp_ns
    if latency_ns >= UINT32_MAX * _NS_PER_US:
        return UINT32_MAX
    return latency_ns // _NS_PER_US