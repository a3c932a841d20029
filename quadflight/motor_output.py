"""Motor command output to a DShot device, with bench-test overrides."""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from quadflight.dshot_device import SimulatedDShot

MOTOR_COUNT = 4
MOTOR_IDLE_THROTTLE = 0.0
DSHOT_DISARMED = 0
DSHOT_MIN = 48
DSHOT_MAX = 2047
_DSHOT_SPAN = DSHOT_MAX - DSHOT_MIN


def _clamp(value: float, low: float, high: float) -> float:
    if value < low:
        return low
    if value > high:
        return high
    return value


def motor_to_dshot(normalized: float, armed: bool) -> int:
    """Map a normalised motor command in [0, 1] to a DShot throttle value."""
    min_output = MOTOR_IDLE_THROTTLE if armed else 0.0
    clamped = _clamp(normalized, min_output, 1.0)
    if not armed or clamped <= 0.0:
        return DSHOT_DISARMED
    return int(DSHOT_MIN + clamped * _DSHOT_SPAN + 0.5)


@dataclass(frozen=True)
class MotorOutputRecord:
    """What was last sent to the motors."""

    motors: tuple[float, ...]
    raw: tuple[int, ...]
    armed: bool
    test_mode: bool


def _check_count(name: str, values: Sequence) -> None:
    if len(values) != MOTOR_COUNT:
        raise ValueError(f"{name} must have {MOTOR_COUNT} values, got {len(values)}")


def _check_index(index: int) -> None:
    if not 0 <= index < MOTOR_COUNT:
        raise IndexError(f"motor index must be 0..{MOTOR_COUNT - 1}, got {index}")


def _check_u16(value: int) -> None:
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"raw motor value must fit in 16 bits, got {value}")


class MotorOutput:
    """Writes four motor commands to a DShot device and records each output.

    Bench tests may override the flight commands with normalised values or
    raw DShot throttle values; the overrides are safe to set from another
    thread. Each write is stored in ``last_output`` and passed to
    ``listener`` when one is given.
    """

    def __init__(
        self,
        device: SimulatedDShot | None = None,
        listener: Callable[[MotorOutputRecord], None] | None = None,
    ) -> None:
        self.device = device if device is not None else SimulatedDShot()
        self.listener = listener
        self._lock = threading.Lock()
        self._test_active = False
        self._test_values = [0.0] * MOTOR_COUNT
        self._raw_test_active = False
        self._raw_test_values = [DSHOT_DISARMED] * MOTOR_COUNT
        self.last_output: MotorOutputRecord | None = None
        self.clear_test()
        self.clear_raw_test()
        self._publish((0.0,) * MOTOR_COUNT, (DSHOT_DISARMED,) * MOTOR_COUNT, False, False)

    def _publish(
        self, motors: tuple[float, ...], raw: tuple[int, ...], armed: bool, test_mode: bool
    ) -> None:
        record = MotorOutputRecord(motors=motors, raw=raw, armed=armed, test_mode=test_mode)
        self.last_output = record
        if self.listener is not None:
            self.listener(record)

    def _trigger(self) -> int:
        self.device.trigger()
        return self.device.last_trigger_ns()

    def ready(self) -> bool:
        """True when the device drives all four motors."""
        return self.device.channel_count() >= MOTOR_COUNT

    def write_all(self, motors: Sequence[float], armed: bool, test_mode: bool) -> int:
        """Send normalised motor commands; return the trigger time in ns.

        Disarmed output is always zero throttle.
        """
        _check_count("motors", motors)
        min_output = MOTOR_IDLE_THROTTLE if armed and not test_mode else 0.0
        applied = []
        raw = []
        for index, value in enumerate(motors):
            level = _clamp(value, min_output, 1.0) if armed else 0.0
            dshot = motor_to_dshot(level, armed and level > 0.0)
            applied.append(level)
            raw.append(dshot)
            self.device.data_set(index, dshot, False)

        self._publish(tuple(applied), tuple(raw), armed, test_mode)
        return self._trigger()

    def write_all_raw(self, raw: Sequence[int], test_mode: bool) -> int:
        """Send raw DShot values; return the trigger time in ns.

        Non-zero values are clamped into 48..2047. The output counts as armed
        when any motor receives a non-zero value.
        """
        _check_count("raw", raw)
        for value in raw:
            _check_u16(value)
        applied = []
        clamped = []
        armed = False
        for index, value in enumerate(raw):
            if value != DSHOT_DISARMED and value < DSHOT_MIN:
                value = DSHOT_MIN
            value = min(value, DSHOT_MAX)
            clamped.append(value)
            if value == DSHOT_DISARMED:
                applied.append(0.0)
            else:
                applied.append((value - DSHOT_MIN) / _DSHOT_SPAN)
                armed = True
            self.device.data_set(index, value, False)

        self._publish(tuple(applied), tuple(clamped), armed, test_mode)
        return self._trigger()

    def test_values(self) -> tuple[float, ...] | None:
        """The normalised test override, or ``None`` when inactive."""
        with self._lock:
            return tuple(self._test_values) if self._test_active else None

    def set_test(self, index: int, value: float) -> None:
        """Override one motor with a value clamped into [0, 1]."""
        _check_index(index)
        with self._lock:
            self._test_values[index] = _clamp(value, 0.0, 1.0)
            self._test_active = True

    def clear_test(self) -> None:
        with self._lock:
            self._test_values = [0.0] * MOTOR_COUNT
            self._test_active = False

    def raw_test_values(self) -> tuple[int, ...] | None:
        """The raw DShot test override, or ``None`` when inactive."""
        with self._lock:
            return tuple(self._raw_test_values) if self._raw_test_active else None

    def set_raw_test(self, index: int, value: int) -> None:
        """Override one motor with a raw DShot value."""
        _check_index(index)
        _check_u16(value)
        with self._lock:
            self._raw_test_values[index] = value
            self._raw_test_active = True

    def set_raw_test_all(self, value: int) -> None:
        """Override all motors with the same raw DShot value."""
        _check_u16(value)
        with self._lock:
            self._raw_test_values = [value] * MOTOR_COUNT
            self._raw_test_active = True

    def clear_raw_test(self) -> None:
        with self._lock:
            self._raw_test_values = [DSHOT_DISARMED] * MOTOR_COUNT
            self._raw_test_active = False