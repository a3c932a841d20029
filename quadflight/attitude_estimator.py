"""Complementary quaternion attitude estimator driven by gyro and accelerometer."""

from __future__ import annotations

import math
from dataclasses import dataclass

GRAVITY_M_S2 = 9.81
CORRECTION_KP = 0.35
CORRECTION_KI = 0.02
ACCEL_MIN_G = 0.6
ACCEL_MAX_G = 1.4


@dataclass(frozen=True)
class Vec3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def norm(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)


@dataclass(frozen=True)
class AttitudeEuler:
    roll: float = 0.0
    pitch: float = 0.0
    yaw: float = 0.0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class AttitudeEstimator:
    """Mahony-style filter: gyro integration with accelerometer tilt correction.

    Body axes are forward-left-up, angles in radians.
    """

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Return to the identity attitude with zero gyro bias."""
        self.q_w = 1.0
        self.q_x = 0.0
        self.q_y = 0.0
        self.q_z = 0.0
        self.gyro_bias = Vec3()

    def _normalize(self) -> None:
        norm_sq = self.q_w**2 + self.q_x**2 + self.q_y**2 + self.q_z**2
        if norm_sq <= 1.0e-6:
            self.q_w, self.q_x, self.q_y, self.q_z = 1.0, 0.0, 0.0, 0.0
            return
        inv = 1.0 / math.sqrt(norm_sq)
        self.q_w *= inv
        self.q_x *= inv
        self.q_y *= inv
        self.q_z *= inv

    def _set_from_euler(self, roll: float, pitch: float, yaw: float) -> None:
        cr, sr = math.cos(roll * 0.5), math.sin(roll * 0.5)
        cp, sp = math.cos(pitch * 0.5), math.sin(pitch * 0.5)
        cy, sy = math.cos(yaw * 0.5), math.sin(yaw * 0.5)
        self.q_w = cy * cp * cr + sy * sp * sr
        self.q_x = cy * cp * sr - sy * sp * cr
        self.q_y = sy * cp * sr + cy * sp * cr
        self.q_z = sy * cp * cr - cy * sp * sr
        self._normalize()

    def reset_from_accel(self, accel: Vec3 | None) -> None:
        """Reset bias and level the attitude from a gravity reading (yaw zero)."""
        self.reset()
        roll = pitch = 0.0
        if accel is not None:
            roll = math.atan2(accel.y, accel.z)
            pitch = math.atan2(-accel.x, math.hypot(accel.y, accel.z))
        self._set_from_euler(roll, pitch, 0.0)

    def predict(self, gyro: Vec3, accel: Vec3, dt: float) -> None:
        """Integrate body rates over ``dt`` seconds, corrected towards gravity.

        The accelerometer corrects only when its magnitude lies between
        0.6 g and 1.4 g. A non-positive ``dt`` is ignored.
        """
        if gyro is None or accel is None or dt <= 0.0:
            return

        gx, gy, gz = gyro.x, gyro.y, gyro.z
        bias = self.gyro_bias
        accel_norm = accel.norm()

        if ACCEL_MIN_G * GRAVITY_M_S2 <= accel_norm <= ACCEL_MAX_G * GRAVITY_M_S2:
            ax, ay, az = accel.x / accel_norm, accel.y / accel_norm, accel.z / accel_norm
            qw, qx, qy, qz = self.q_w, self.q_x, self.q_y, self.q_z
            grav_x = 2.0 * (qx * qz - qw * qy)
            grav_y = 2.0 * (qw * qx + qy * qz)
            grav_z = qw * qw - qx * qx - qy * qy + qz * qz
            err_x = ay * grav_z - az * grav_y
            err_y = az * grav_x - ax * grav_z
            err_z = ax * grav_y - ay * grav_x

            bias = Vec3(
                bias.x + CORRECTION_KI * err_x * dt,
                bias.y + CORRECTION_KI * err_y * dt,
                bias.z + CORRECTION_KI * err_z * dt,
            )
            self.gyro_bias = bias
            gx += bias.x + CORRECTION_KP * err_x
            gy += bias.y + CORRECTION_KP * err_y
            gz += bias.z + CORRECTION_KP * err_z
        else:
            gx += bias.x
            gy += bias.y
            gz += bias.z

        qw, qx, qy, qz = self.q_w, self.q_x, self.q_y, self.q_z
        self.q_w += 0.5 * (-qx * gx - qy * gy - qz * gz) * dt
        self.q_x += 0.5 * (qw * gx + qy * gz - qz * gy) * dt
        self.q_y += 0.5 * (qw * gy - qx * gz + qz * gx) * dt
        self.q_z += 0.5 * (qw * gz + qx * gy - qy * gx) * dt
        self._normalize()

    def attitude(self) -> AttitudeEuler:
        """Return the current attitude as roll, pitch and yaw."""
        qw, qx, qy, qz = self.q_w, self.q_x, self.q_y, self.q_z
        roll = math.atan2(2.0 * qw * qx + 2.0 * qy * qz, 1.0 - 2.0 * (qx * qx + qy * qy))
        pitch = math.asin(_clamp(2.0 * qw * qy - 2.0 * qz * qx, -1.0, 1.0))
        yaw = math.atan2(2.0 * qw * qz + 2.0 * qx * qy, 1.0 - 2.0 * (qy * qy + qz * qz))
        return AttitudeEuler(roll, pitch, yaw)