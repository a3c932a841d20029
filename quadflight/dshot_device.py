"""DShot output channels and a simulated four-motor DShot device."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum

from quadflight.dshot_protocol import (
    DShotChecksumError,
    DShotFrameError,
    decode_erpm_response,
    encode_packet,
    expand_data,
)

_FIRST_SEGMENT_BITS = 24
_FIRST_SEGMENT_MASK = (1 << _FIRST_SEGMENT_BITS) - 1
_MAX_CHANNELS = 0xFF


class DShotState(IntEnum):
    """Transmission state of one channel within a frame."""

    START = 0
    FIFO_12BIT = 1
    TRANSFERRED_12BIT = 2
    TRANSMIT_COMPLETE = 3
    BDSHOT_RECEIVE = 4
    BDSHOT_RECEIVE_COMPLETE = 5


@dataclass
class DShotChannel:
    """One DShot output: the pending frame and its telemetry counters.

    The 48-bit expanded frame is split into a first 24-bit segment, loaded
    when the output is triggered, and the remaining bits sent afterwards.
    """

    pin_id: int = 0
    bidirectional: bool = False
    init: bool = True
    data_seg1: int = 0
    irq_data: int = 0
    state: DShotState = DShotState.START
    erpm: int = 0
    crc_error_cnt: int = 0
    frame_error_cnt: int = 0
    no_response_cnt: int = 0
    last_no_response_cnt: int = 0

    def set_throttle(self, throttle: int, telemetry: bool) -> int | None:
        """Prepare the frame for ``throttle``; return the 16-bit packet.

        An uninitialised channel is left untouched and ``None`` is returned.
        """
        if not self.init:
            return None
        packet = encode_packet(throttle, telemetry, self.bidirectional)
        expanded = expand_data(packet)
        self.data_seg1 = expanded & _FIRST_SEGMENT_MASK
        self.irq_data = expanded >> _FIRST_SEGMENT_BITS
        self.state = DShotState.START
        return packet

    def decode_response(self, raw_response: int) -> int | None:
        """Decode a telemetry response, updating eRPM and error counters.

        Returns the eRPM, or ``None`` when the response had a framing or
        checksum error (the matching counter is incremented).
        """
        try:
            erpm = decode_erpm_response(raw_response)
        except DShotChecksumError:
            self.crc_error_cnt += 1
            return None
        except DShotFrameError:
            self.frame_error_cnt += 1
            return None
        self.erpm = erpm
        self.last_no_response_cnt = self.no_response_cnt
        return erpm


class SimulatedDShot:
    """DShot device for simulation: accepts frames, records trigger times.

    Motor speed telemetry always reads zero.
    """

    def __init__(
        self,
        channel_count: int = 4,
        clock: Callable[[], int] = time.monotonic_ns,
    ) -> None:
        if not 0 < channel_count <= _MAX_CHANNELS:
            raise ValueError(f"channel_count must be 1..{_MAX_CHANNELS}, got {channel_count}")
        self._clock = clock
        self._last_trigger_ns = 0
        self.channels = [DShotChannel(pin_id=index) for index in range(channel_count)]

    def data_set(self, channel: int, throttle: int, telemetry: bool) -> None:
        """Set the throttle of one channel; unknown channels are ignored."""
        if not 0 <= channel < len(self.channels):
            return
        self.channels[channel].set_throttle(throttle, telemetry)

    def trigger(self) -> None:
        """Send the pending frames and record the trigger time."""
        self._last_trigger_ns = self._clock()

    def last_trigger_ns(self) -> int:
        """Time of the last trigger in nanoseconds, 0 before the first."""
        return self._last_trigger_ns

    def channel_count(self) -> int:
        return len(self.channels)

    def rpm(self) -> list[int]:
        """Per-channel motor speed telemetry."""
        return [0] * len(self.channels)