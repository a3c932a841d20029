"""Bench motor commands: spin, raw, raw_all, stop and status."""

from __future__ import annotations

import errno
import re
from collections.abc import Callable, Sequence

from quadflight.motor_output import (
    DSHOT_DISARMED,
    DSHOT_MAX,
    DSHOT_MIN,
    MOTOR_COUNT,
    MotorOutput,
)

_INT_RE = re.compile(r"\s*[+-]?\d+")
_FLOAT_RE = re.compile(
    r"\s*[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)

_INDEX_ERROR = "index must be 0..3"
_SPIN_VALUE_ERROR = "value must be 0.0..1.0"
_RAW_VALUE_ERROR = f"value must be 0 or {DSHOT_MIN}..{DSHOT_MAX}"
_NOT_READY = "dshot not ready"


class MotorCommandError(Exception):
    """A motor command failed; ``errno`` holds the matching error number."""

    def __init__(self, message: str, error_number: int) -> None:
        super().__init__(message)
        self.message = message
        self.errno = error_number


def _parse_int(text: str) -> int | None:
    if not text or not _INT_RE.fullmatch(text):
        return None
    return int(text)


def _parse_float(text: str) -> float | None:
    if not text or not _FLOAT_RE.fullmatch(text):
        return None
    return float(text)


def _require_ready(output: MotorOutput) -> None:
    if not output.ready():
        raise MotorCommandError(_NOT_READY, errno.ENODEV)


def _parse_index(text: str) -> int:
    index = _parse_int(text)
    if index is None or not 0 <= index < MOTOR_COUNT:
        raise MotorCommandError(_INDEX_ERROR, errno.EINVAL)
    return index


def _parse_raw_value(text: str) -> int:
    value = _parse_int(text)
    if value is None or value < 0 or value > DSHOT_MAX:
        raise MotorCommandError(_RAW_VALUE_ERROR, errno.EINVAL)
    if value != DSHOT_DISARMED and value < DSHOT_MIN:
        raise MotorCommandError(_RAW_VALUE_ERROR, errno.EINVAL)
    return value


def _cmd_status(output: MotorOutput, args: Sequence[str]) -> list[str]:
    test_values = output.test_values()
    raw_test_values = output.raw_test_values()
    test_motors = test_values if test_values is not None else (0.0,) * MOTOR_COUNT
    test_raw = raw_test_values if raw_test_values is not None else (0,) * MOTOR_COUNT

    last = output.last_output
    if last is None:
        motors, raw, armed, test_mode = (0.0,) * MOTOR_COUNT, (0,) * MOTOR_COUNT, False, False
    else:
        motors, raw, armed, test_mode = last.motors, last.raw, last.armed, last.test_mode

    test_part = " ".join(f"test_m{i}={v:.3f}" for i, v in enumerate(test_motors))
    raw_part = " ".join(f"raw_m{i}={v}" for i, v in enumerate(test_raw))
    out_part = " ".join(f"m{i}={m:.3f}/{r}" for i, (m, r) in enumerate(zip(motors, raw)))
    return [
        f"motor_test={int(test_values is not None)} {test_part}",
        f"raw_test={int(raw_test_values is not None)} {raw_part}",
        f"last_out armed={int(armed)} test_mode={int(test_mode)} {out_part}",
        "guess: m0=front-right m1=rear-right m2=rear-left m3=front-left",
    ]


def _cmd_stop(output: MotorOutput, args: Sequence[str]) -> list[str]:
    output.clear_test()
    output.clear_raw_test()
    if output.ready():
        output.write_all((0.0,) * MOTOR_COUNT, False, False)
    return ["all motor tests stopped"]


def _cmd_spin(output: MotorOutput, args: Sequence[str]) -> list[str]:
    _require_ready(output)
    index = _parse_index(args[0])
    value = _parse_float(args[1])
    if value is None or value < 0.0 or value > 1.0:
        raise MotorCommandError(_SPIN_VALUE_ERROR, errno.EINVAL)
    output.set_test(index, value)
    return [f"motor {index} set to {value:.3f}"]


def _cmd_raw(output: MotorOutput, args: Sequence[str]) -> list[str]:
    _require_ready(output)
    index = _parse_index(args[0])
    value = _parse_raw_value(args[1])
    output.clear_test()
    output.set_raw_test(index, value)
    return [f"raw motor {index} set to {value}"]


def _cmd_raw_all(output: MotorOutput, args: Sequence[str]) -> list[str]:
    _require_ready(output)
    value = _parse_raw_value(args[0])
    output.clear_test()
    output.set_raw_test_all(value)
    return [f"all raw motors set to {value}"]


# name -> (handler, required argument count or None when unchecked)
_COMMANDS: dict[str, tuple[Callable[[MotorOutput, Sequence[str]], list[str]], int | None]] = {
    "spin": (_cmd_spin, 2),
    "raw": (_cmd_raw, 2),
    "raw_all": (_cmd_raw_all, 1),
    "stop": (_cmd_stop, None),
    "status": (_cmd_status, None),
}


def run_motor_command(output: MotorOutput, argv: Sequence[str]) -> list[str]:
    """Run one motor subcommand and return the lines it prints.

    ``argv`` starts with the subcommand name. Raises MotorCommandError with
    ENODEV when the motor device is not ready and EINVAL on bad arguments.
    """
    if not argv:
        raise MotorCommandError("missing subcommand", errno.EINVAL)
    name, args = argv[0], list(argv[1:])
    try:
        handler, arg_count = _COMMANDS[name]
    except KeyError:
        raise MotorCommandError(f"unknown subcommand: {name}", errno.EINVAL) from None
    if arg_count is not None and len(args) != arg_count:
        raise MotorCommandError(
            f"{name} takes {arg_count} argument(s), got {len(args)}", errno.EINVAL
        )
    return handler(output, args)