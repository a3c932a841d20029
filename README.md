# quadflight

Building blocks for a quadcopter flight controller. It is written in plain
Python and has no third-party dependencies.

## Modules

- `quadflight.pid`: `PidAxis` is a single-axis PID controller. Its derivative
  acts on a low-pass filtered measurement. The integral is clamped to
  `i_limit`, and when integration is switched off the integral winds down
  quickly. `PidAxis.step(dt, integrate)` returns the clamped output `u`, and
  `PidAxis.reset()` clears the state while keeping the gains.
- `quadflight.flight_mode`: `FlightMode` has the members `ACRO` and
  `AUTO_LEVEL`.
  - `flight_mode_from_rc(channels)` picks `AUTO_LEVEL` when channel 5 is at
    1500 us or above.
  - `flight_mode_name(mode)` returns the mode's name, or `"UNKNOWN"`.
- `quadflight.latency_stats`: `LatencyStats` keeps the last value, minimum,
  maximum, running mean and population standard deviation of latencies in
  microseconds. A latency of zero is ignored. `snapshot()` returns a frozen
  `LatencySnapshot`, or `None` before the first sample. It is thread-safe.
- `quadflight.attitude_estimator`: `AttitudeEstimator` is a quaternion
  complementary filter. It uses body axes forward-left-up and angles in
  radians.
  - `reset_from_accel(accel)` levels the attitude from a gravity reading.
  - `predict(gyro, accel, dt)` integrates body rates. It corrects towards
    gravity only when the accelerometer reads between 0.6 g and 1.4 g.
  - `attitude()` returns an `AttitudeEuler`.
  - Vectors are given as `Vec3`.
- `quadflight.attitude_control`:
  - `rc_norm_centered(pulse_us)` maps a pulse width around 1500 us onto
    [-1, 1].
  - `attitude_desired_from_rc(roll_us, pitch_us, attitude)` turns the sticks
    into target angles and holds the current yaw.
  - `AttitudeController(max_rate_rad_s, max_yaw_rate_rad_s)` runs proportional
    roll and pitch angle loops. Its `step(attitude, attitude_desired, yaw_us,
    dt)` returns a `RateTriplet`, with yaw taken as a rate straight from the
    yaw stick. A non-positive `dt` raises `ValueError`.
- `quadflight.dshot_protocol`:
  - `encode_packet(throttle, telemetry, bidirectional)` builds a 16-bit DShot
    packet. Bidirectional DShot uses the inverted checksum.
  - `expand_data(packet)` expands a packet into 48 bits of line symbols.
  - `decode_erpm_response(raw_response)` decodes bidirectional telemetry into
    eRPM. It raises `DShotFrameError` or `DShotChecksumError`, both
    subclasses of `DShotError`, which is a `ValueError`.
- `quadflight.dshot_device`:
  - `DShotChannel` holds one output's pending frame, its `DShotState` and its
    telemetry error counters. `set_throttle` prepares a frame, and
    `decode_response` updates the eRPM or the counters.
  - `SimulatedDShot(channel_count=4, clock=time.monotonic_ns)` accepts frames
    through `data_set` and records the time of each `trigger`. It reports
    zero for every entry of `rpm()`.
- `quadflight.timing`:
  - `LoopDivider(divisor).expired()` fires on the first call and then once
    every `divisor` calls.
  - `imu_to_motor_latency_us` gives whole microseconds between two
    nanosecond timestamps. It returns 0 when a timestamp is missing or out of
    order, and saturates at 2**32 - 1.
- `quadflight.motor_output`:
  - `motor_to_dshot(normalized, armed)` maps a value in [0, 1] onto DShot
    values 48..2047. When disarmed it returns 0.
  - `MotorOutput(device=None, listener=None)` writes four motors to a
    `SimulatedDShot`. `write_all` takes normalised commands and
    `write_all_raw` takes raw DShot values; both return the trigger time in
    ns. Each write is kept in `last_output` as a `MotorOutputRecord` and is
    also passed to `listener`.
  - Bench-test overrides are set with `set_test`, `set_raw_test` and
    `set_raw_test_all`, read back with `test_values` and `raw_test_values`,
    and cleared with `clear_test` and `clear_raw_test`.
- `quadflight.motor_shell`: `run_motor_command(output, argv)` runs one of the
  bench subcommands and returns the lines it would print:
  - `spin <index> <value>`
  - `raw <index> <value>`
  - `raw_all <value>`
  - `stop`
  - `status`

  Failures raise `MotorCommandError`. Its `errno` is `ENODEV` when the device
  is not ready and `EINVAL` on bad arguments.

## Examples

```python
from quadflight.pid import PidAxis

pid = PidAxis()
pid.setpoint = 1.0
pid.measurement = 0.2
print(pid.step(0.000625, integrate=True))
```

```python
from quadflight.dshot_device import SimulatedDShot
from quadflight.motor_output import MotorOutput
from quadflight.motor_shell import run_motor_command

output = MotorOutput(SimulatedDShot())
print(run_motor_command(output, ["spin", "0", "0.25"]))  # ['motor 0 set to 0.250']
for line in run_motor_command(output, ["status"]):
    print(line)
```

## What it does not do

The package provides parts of a flight controller, not a whole one.

- It has no control loop that ties the parts together.
- It has no rate controller or motor mixer.
- It does not read an IMU or an RC receiver.
- It does not talk to real DShot hardware. `SimulatedDShot` is the only
  device, and its speed telemetry is always zero.
- It has no command-line program or interactive shell.
  `run_motor_command` is a function to call from your own code.

## Tests

```
pip install -e .[test]
pytest
```