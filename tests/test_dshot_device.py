import pytest

from quadflight.dshot_device import DShotChannel, DShotState, SimulatedDShot
from quadflight.dshot_protocol import decode_erpm_response, encode_packet, expand_data

_GCR_ENCODE = {
    0x0: 0x19, 0x1: 0x1B, 0x2: 0x12, 0x3: 0x13,
    0x4: 0x1D, 0x5: 0x15, 0x6: 0x16, 0x7: 0x17,
    0x8: 0x1A, 0x9: 0x09, 0xA: 0x0A, 0xB: 0x0B,
    0xC: 0x1E, 0xD: 0x0D, 0xE: 0x0E, 0xF: 0x0F,
}


def _encode_response(decoded16):
    gcr = 0
    for group in range(4):
        gcr |= _GCR_ENCODE[(decoded16 >> (4 * group)) & 0xF] << (5 * group)
    line = 0
    bit = 0
    for i in range(19, -1, -1):
        bit ^= (gcr >> i) & 1
        line |= bit << i
    return ~line & 0xFFFFF


@pytest.mark.parametrize("bidirectional", [False, True])
@pytest.mark.parametrize("throttle", [0, 48, 1000, 2047])
def test_set_throttle_splits_expanded_frame(throttle, bidirectional):
    channel = DShotChannel(bidirectional=bidirectional)
    packet = channel.set_throttle(throttle, False)
    assert packet == encode_packet(throttle, False, bidirectional)
    assert channel.data_seg1 < (1 << 24)
    assert channel.data_seg1 | (channel.irq_data << 24) == expand_data(packet)
    assert channel.state == DShotState.START


def test_set_throttle_resets_state():
    channel = DShotChannel(state=DShotState.TRANSMIT_COMPLETE)
    channel.set_throttle(100, True)
    assert channel.state == DShotState.START


def test_uninitialised_channel_ignores_throttle():
    channel = DShotChannel(init=False)
    assert channel.set_throttle(500, False) is None
    assert channel.data_seg1 == 0
    assert channel.irq_data == 0


def test_decode_idle_response_reads_zero():
    channel = DShotChannel(bidirectional=True, erpm=123, no_response_cnt=7)
    raw = _encode_response(0xFFF0)
    assert channel.decode_response(raw) == 0
    assert channel.erpm == 0
    assert channel.last_no_response_cnt == 7


def test_decode_speed_response_matches_protocol():
    channel = DShotChannel(bidirectional=True)
    raw = _encode_response(0x064D)
    erpm = channel.decode_response(raw)
    assert erpm == decode_erpm_response(raw)
    assert erpm == 6000
    assert channel.erpm == 6000
    assert channel.crc_error_cnt == 0
    assert channel.frame_error_cnt == 0


def test_decode_checksum_error_counts():
    channel = DShotChannel(bidirectional=True, erpm=42)
    assert channel.decode_response(_encode_response(0x064E)) is None
    assert channel.crc_error_cnt == 1
    assert channel.frame_error_cnt == 0
    assert channel.erpm == 42


def test_decode_frame_error_counts():
    channel = DShotChannel(bidirectional=True)
    assert channel.decode_response(0xFFFFF) is None
    assert channel.decode_response(0xFFFFF) is None
    assert channel.frame_error_cnt == 2
    assert channel.crc_error_cnt == 0


def test_simulated_device_channel_count_and_rpm():
    device = SimulatedDShot()
    assert device.channel_count() == 4
    assert device.rpm() == [0, 0, 0, 0]


def test_simulated_device_rejects_bad_channel_count():
    with pytest.raises(ValueError):
        SimulatedDShot(channel_count=0)


def test_trigger_records_clock_time():
    times = iter([1_000, 2_500])
    device = SimulatedDShot(clock=lambda: next(times))
    assert device.last_trigger_ns() == 0
    device.trigger()
    assert device.last_trigger_ns() == 1_000
    device.trigger()
    assert device.last_trigger_ns() == 2_500


def test_data_set_updates_channel():
    device = SimulatedDShot()
    device.data_set(2, 1048, False)
    expected = expand_data(encode_packet(1048, False, False))
    channel = device.channels[2]
    assert channel.data_seg1 | (channel.irq_data << 24) == expected
    assert device.channels[0].data_seg1 == 0


def test_data_set_ignores_unknown_channel():
    device = SimulatedDShot()
    device.data_set(4, 1048, False)
    device.data_set(-1, 1048, False)
    assert all(channel.data_seg1 == 0 for channel in device.channels)