"""DShot frame encoding and bidirectional DShot eRPM telemetry decoding."""

from __future__ import annotations

THROTTLE_POSITION = 5
TELEMETRY_POSITION = 4
NIBBLE_BITS = 4
CHECKSUM_NIBBLES = 3

# Bits per DShot symbol once expanded: a 0 is sent as 0b001, a 1 as 0b011.
EXPANDED_BITS_PER_SYMBOL = 3

_RESPONSE_MASK = 0xFFFFF
_IDLE_PAYLOAD = 0xFFF
_ERPM_NUMERATOR = 1_000_000 * 60 // 100

_GCR_DECODE = (
    0x0, 0x0, 0x0, 0x0, 0x0, 0x0, 0x0, 0x0,
    0x0, 0x9, 0xA, 0xB, 0x0, 0xD, 0xE, 0xF,
    0x0, 0x0, 0x2, 0x3, 0x0, 0x5, 0x6, 0x7,
    0x0, 0x0, 0x8, 0x1, 0x0, 0x4, 0xC, 0x0,
)


class DShotError(ValueError):
    """A telemetry response could not be decoded."""


class DShotFrameError(DShotError):
    """The telemetry response is not a valid frame."""


class DShotChecksumError(DShotError):
    """The telemetry response failed its checksum."""


def _check_u16(name: str, value: int) -> None:
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"{name} must fit in 16 bits, got {value}")


def expand_data(packet: int) -> int:
    """Expand a 16-bit packet into 48 bits of line symbols.

    The most significant packet bit becomes the lowest 3-bit group; each
    zero bit becomes ``0b001`` and each one bit ``0b011``.
    """
    _check_u16("packet", packet)
    expanded = 0
    for index in range(16):
        bit = (packet >> (15 - index)) & 1
        symbol = 0x3 if bit else 0x1
        expanded |= symbol << (index * EXPANDED_BITS_PER_SYMBOL)
    return expanded


def encode_packet(throttle: int, telemetry: bool, bidirectional: bool) -> int:
    """Build a 16-bit DShot packet: 11 throttle bits, telemetry bit, checksum.

    Bidirectional DShot uses the inverted checksum. Throttle bits that do not
    fit in the packet are dropped, as on the wire.
    """
    _check_u16("throttle", throttle)
    packet = (throttle << THROTTLE_POSITION) & 0xFFFF
    packet |= (1 if telemetry else 0) << TELEMETRY_POSITION

    csum_data = (~packet & 0xFFFF) if bidirectional else packet
    csum_data >>= NIBBLE_BITS
    checksum = 0
    for _ in range(CHECKSUM_NIBBLES):
        checksum ^= csum_data & 0x0F
        csum_data >>= NIBBLE_BITS

    return packet | (checksum & 0x0F)


def decode_erpm_response(raw_response: int) -> int:
    """Decode a raw bidirectional DShot response into an eRPM value.

    Raises DShotFrameError on a framing error and DShotChecksumError on a
    checksum mismatch. An idle (stopped) motor reads as 0.
    """
    value = ~raw_response & _RESPONSE_MASK
    if not value & 0x1:
        raise DShotFrameError("framing error in telemetry response")

    value ^= value >> 1
    decoded = 0
    for group in range(4):
        decoded |= _GCR_DECODE[(value >> (5 * group)) & 0x1F] << (4 * group)

    csum = decoded ^ (decoded >> 8)
    csum ^= csum >> NIBBLE_BITS
    if csum & 0xF != 0xF:
        raise DShotChecksumError("checksum mismatch in telemetry response")

    payload = (decoded >> 4) & 0xFFF
    if payload == _IDLE_PAYLOAD:
        return 0

    exponent = (payload >> 9) & 0x7
    period = ((payload & 0x1FF) << exponent) & 0xFFFF
    if period == 0:
        raise DShotFrameError("telemetry response carries a zero period")
    return ((_ERPM_NUMERATOR + period // 2) // period) & 0xFFFF