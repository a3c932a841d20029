import pytest

from quadflight.timing import UINT32_MAX, LoopDivider, imu_to_motor_latency_us


def test_divider_of_one_always_fires():
    divider = LoopDivider(1)
    assert all(divider.expired() for _ in range(10))


def test_divider_fires_first_then_every_nth():
    divider = LoopDivider(4)
    pattern = [divider.expired() for _ in range(9)]
    assert pattern == [True, False, False, False, True, False, False, False, True]


@pytest.mark.parametrize("divisor", [2, 3, 7, 16])
def test_divider_fire_count(divisor):
    divider = LoopDivider(divisor)
    fired = sum(divider.expired() for _ in range(divisor * 5))
    assert fired == 5


@pytest.mark.parametrize("divisor", [0, -1])
def test_divider_rejects_non_positive(divisor):
    with pytest.raises(ValueError):
        LoopDivider(divisor)


@pytest.mark.parametrize(
    "imu_ns, motor_ns",
    [(0, 5_000), (5_000, 0), (0, 0), (5_000, 5_000), (6_000, 5_000)],
)
def test_latency_zero_when_unmeasurable(imu_ns, motor_ns):
    assert imu_to_motor_latency_us(imu_ns, motor_ns) == 0


def test_latency_in_microseconds():
    assert imu_to_motor_latency_us(1_000_000, 1_250_000) == 250


def test_latency_truncates_partial_microseconds():
    assert imu_to_motor_latency_us(1_000, 1_999) == 0
    assert imu_to_motor_latency_us(1_000, 3_999) == 2


def test_latency_saturates():
    start = 1_000
    assert imu_to_motor_latency_us(start, start + UINT32_MAX * 1000) == UINT32_MAX
    assert imu_to_motor_latency_us(start, start + UINT32_MAX * 5000) == UINT32_MAX


def test_latency_just_below_saturation():
    start = 1_000
    assert imu_to_motor_latency_us(start, start + UINT32_MAX * 1000 - 1) == UINT32_MAX - 1