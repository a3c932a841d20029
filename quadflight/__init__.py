"""Quadcopter flight-control building blocks: PID, attitude estimation and control, DShot and motor output."""

__version__ = "0.1.0"

__all__ = [
    "attitude_control",
    "attitude_estimator",
    "dshot_device",
    "dshot_protocol",
    "flight_mode",
    "latency_stats",
    "motor_output",
    "motor_shell",
    "pid",
    "timing",
]