"""Auto-level attitude controller producing desired body rates."""

from __future__ import annotations

from dataclasses import dataclass

from quadflight.attitude_estimator import AttitudeEuler
from quadflight.pid import PidAxis

RC_US_CENTER = 1500
RC_US_HALF_SPAN = 500.0
MAX_AUTO_LEVEL_TILT_RAD = 0.61086524
AUTO_LEVEL_ROLL_P_GAIN = 4.0
AUTO_LEVEL_PITCH_P_GAIN = 4.0


@dataclass(frozen=True)
class RateTriplet:
    roll: float = 0.0
    pitch: float = 0.0
    yaw: float = 0.0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def rc_norm_centered(pulse_us: int) -> float:
    """Map an RC pulse width around 1500 us onto [-1, 1]."""
    return _clamp((pulse_us - RC_US_CENTER) / RC_US_HALF_SPAN, -1.0, 1.0)


def attitude_desired_from_rc(roll_us: int, pitch_us: int, attitude: AttitudeEuler) -> AttitudeEuler:
    """Desired attitude from the roll and pitch sticks, holding the current yaw."""
    return AttitudeEuler(
        roll=rc_norm_centered(roll_us) * MAX_AUTO_LEVEL_TILT_RAD,
        pitch=rc_norm_centered(pitch_us) * MAX_AUTO_LEVEL_TILT_RAD,
        yaw=attitude.yaw,
    )


def _p_only_axis(kp: float, limit: float) -> PidAxis:
    return PidAxis(kp=kp, ki=0.0, kd=0.0, i_limit=0.0, output_limit=limit)


class AttitudeController:
    """Proportional roll/pitch angle loops feeding the rate controller.

    Yaw is flown in rate mode straight from the yaw stick.
    """

    def __init__(self, max_rate_rad_s: float, max_yaw_rate_rad_s: float) -> None:
        self.max_rate_rad_s = max_rate_rad_s
        self.max_yaw_rate_rad_s = max_yaw_rate_rad_s
        self.roll = _p_only_axis(AUTO_LEVEL_ROLL_P_GAIN, max_rate_rad_s)
        self.pitch = _p_only_axis(AUTO_LEVEL_PITCH_P_GAIN, max_rate_rad_s)
        self.reset()

    def reset(self) -> None:
        """Clear the dynamic state of both angle loops."""
        self.roll.reset()
        self.pitch.reset()

    def _axis_rate(self, axis: PidAxis, setpoint: float, measurement: float, dt: float) -> float:
        axis.setpoint = setpoint
        axis.measurement = measurement
        axis.step(dt, False)
        return _clamp(axis.u, -self.max_rate_rad_s, self.max_rate_rad_s)

    def step(
        self,
        attitude: AttitudeEuler,
        attitude_desired: AttitudeEuler,
        yaw_us: int,
        dt: float,
    ) -> RateTriplet:
        """Return desired body rates for one control period of ``dt`` seconds."""
        if dt <= 0.0:
            raise ValueError(f"dt must be positive, got {dt}")
        return RateTriplet(
            roll=self._axis_rate(self.roll, attitude_desired.roll, attitude.roll, dt),
            pitch=self._axis_rate(self.pitch, attitude_desired.pitch, attitude.pitch, dt),
            yaw=-rc_norm_centered(yaw_us) * self.max_yaw_rate_rad_s,
        )