import math

import pytest

from quadflight.pid import PidAxis


def test_defaults_and_initial_state():
    pid = PidAxis()
    assert pid.kp == 0.12
    assert pid.ki == 0.35
    assert pid.kd == 0.0015
    assert pid.i_limit == 0.2
    assert pid.output_limit == 0.35
    assert pid.f_cut == 25.0
    assert math.isnan(pid.meas_filt)
    assert pid.u == 0.0


def test_first_step_is_pure_proportional():
    pid = PidAxis()
    pid.setpoint = 1.0
    pid.measurement = 0.0
    u = pid.step(0.001, False)
    assert u == pytest.approx(pid.kp * 1.0)
    assert pid.meas_filt == 0.0
    assert pid.error == 1.0


def test_output_is_clamped():
    pid = PidAxis()
    pid.setpoint = 100.0
    assert pid.step(0.001, False) == pid.output_limit
    pid.setpoint = -100.0
    assert pid.step(0.001, False) == -pid.output_limit


def test_integrator_is_limited():
    pid = PidAxis()
    pid.setpoint = 1.0
    for _ in range(10000):
        pid.step(0.01, True)
    assert pid.e_int == pytest.approx(pid.i_limit)


def test_integrator_unwinds_when_not_integrating():
    pid = PidAxis()
    pid.setpoint = 1.0
    pid.step(0.01, True)
    assert pid.e_int > 0.0
    pid.step(0.01, False)
    assert pid.e_int == 0.0


def test_partial_unwind_scales_integrator():
    pid = PidAxis()
    pid.e_int = 0.1
    pid.step(0.0005, False)
    assert 0.0 < pid.e_int < 0.1


def test_non_positive_dt_is_ignored():
    pid = PidAxis()
    pid.setpoint = 1.0
    pid.step(0.0, True)
    pid.step(-1.0, True)
    assert pid.e_int == 0.0
    assert math.isnan(pid.meas_filt)


def test_zero_cutoff_tracks_measurement_directly():
    pid = PidAxis(f_cut=0.0)
    pid.measurement = 0.5
    pid.step(0.001, False)
    pid.measurement = 0.7
    pid.step(0.001, False)
    assert pid.meas_filt == 0.7


def test_filtered_measurement_moves_towards_measurement():
    pid = PidAxis()
    pid.measurement = 0.0
    pid.step(0.001, False)
    pid.measurement = 1.0
    pid.step(0.001, False)
    assert 0.0 < pid.meas_filt < 1.0


def test_reset_keeps_gains_and_clears_state():
    pid = PidAxis(kp=2.0)
    pid.setpoint = 1.0
    pid.measurement = 0.2
    pid.step(0.01, True)
    pid.reset()
    assert pid.kp == 2.0
    assert pid.e_int == 0.0
    assert pid.u == 0.0
    assert pid.setpoint == 0.0
    assert math.isnan(pid.meas_filt)