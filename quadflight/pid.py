"""Single-axis PID controller with a filtered derivative on measurement."""

from __future__ import annotations

import math
from dataclasses import dataclass

DEFAULT_KP = 0.12
DEFAULT_KI = 0.35
DEFAULT_KD = 0.0015
DEFAULT_I_LIMIT = 0.2
DEFAULT_OUTPUT_LIMIT = 0.35
DEFAULT_F_CUT = 25.0
FILTER_OMEGA_SCALE = 2.0 * math.pi
UNWIND_TAU_S = 0.001


def _clamp(value: float, low: float, high: float) -> float:
    if value < low:
        return low
    if value > high:
        return high
    return value


@dataclass
class PidAxis:
    """PID state for one control axis.

    The derivative acts on a first-order low-pass filtered measurement with
    cut-off ``f_cut`` Hz; a non-positive ``f_cut`` disables the filter and the
    derivative term. When integration is disabled, the integrator decays
    towards zero with a short time constant.
    """

    kp: float = DEFAULT_KP
    ki: float = DEFAULT_KI
    kd: float = DEFAULT_KD
    i_limit: float = DEFAULT_I_LIMIT
    output_limit: float = DEFAULT_OUTPUT_LIMIT
    f_cut: float = DEFAULT_F_CUT
    e_int: float = 0.0
    meas_filt: float = math.nan
    error: float = 0.0
    setpoint: float = 0.0
    measurement: float = 0.0
    u: float = 0.0

    def reset(self) -> None:
        """Clear the dynamic state while keeping the gains."""
        self.e_int = 0.0
        self.meas_filt = math.nan
        self.error = 0.0
        self.setpoint = 0.0
        self.measurement = 0.0
        self.u = 0.0

    def step(self, dt: float, integrate: bool) -> float:
        """Advance the controller by ``dt`` seconds and return the output.

        A non-positive ``dt`` leaves the state untouched.
        """
        if dt <= 0.0:
            return self.u

        derivative = 0.0
        if self.f_cut > 0.0:
            tau = 1.0 / (FILTER_OMEGA_SCALE * self.f_cut)
            if math.isnan(self.meas_filt):
                self.meas_filt = self.measurement
            else:
                derivative = (self.measurement - self.meas_filt) / tau
                self.meas_filt += dt * derivative
        else:
            self.meas_filt = self.measurement

        self.error = self.setpoint - self.measurement

        if integrate:
            self.e_int += self.ki * self.error * dt
            self.e_int = _clamp(self.e_int, -self.i_limit, self.i_limit)
        elif self.e_int != 0.0:
            self.e_int *= max(0.0, 1.0 - dt / UNWIND_TAU_S)

        self.u = _clamp(
            self.kp * self.error + self.e_int - self.kd * derivative,
            -self.output_limit,
            self.output_limit,
        )
        return self.u