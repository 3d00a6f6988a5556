"""Data types and word conversions shared by the sound processing unit."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional

_WORD_MASK = 0xFFFFFFFF
_SIGN_BIT = 0x80000000


class SPUPort(IntEnum):
    """Local port numbers of the SPU, relative to its first address."""

    COMMAND = 0
    GLOBAL_VOLUME = 1
    SELECTED_SOUND = 2
    SELECTED_CHANNEL = 3
    SOUND_LENGTH = 4
    SOUND_PLAY_WITH_LOOP = 5
    SOUND_LOOP_START = 6
    SOUND_LOOP_END = 7
    CHANNEL_STATE = 8
    CHANNEL_ASSIGNED_SOUND = 9
    CHANNEL_VOLUME = 10
    CHANNEL_SPEED = 11
    CHANNEL_LOOP_ENABLED = 12
    CHANNEL_POSITION = 13


LAST_PORT = SPUPort.CHANNEL_POSITION


class ChannelState(IntEnum):
    """Playback state of a sound channel, as seen through its state port."""

    STOPPED = 0x40
    PAUSED = 0x41
    PLAYING = 0x42


class SPUCommand(IntEnum):
    """Command codes accepted by the SPU command port."""

    PLAY_SELECTED_CHANNEL = 0x30
    PAUSE_SELECTED_CHANNEL = 0x31
    STOP_SELECTED_CHANNEL = 0x32
    PAUSE_ALL_CHANNELS = 0x33
    RESUME_ALL_CHANNELS = 0x34
    STOP_ALL_CHANNELS = 0x35


def to_int32(value: int) -> int:
    """Interpret the low 32 bits of ``value`` as a signed integer."""
    word = int(value) & _WORD_MASK
    return word - (1 << 32) if word & _SIGN_BIT else word


def word_to_float(word: int) -> float:
    """Reinterpret the bits of a 32-bit word as an IEEE single-precision float."""
    return struct.unpack("<f", struct.pack("<I", int(word) & _WORD_MASK))[0]


def float_to_word(value: float) -> int:
    """Return the bits of ``value`` as single-precision float, as a signed 32-bit word."""
    return struct.unpack("<i", struct.pack("<f", value))[0]


@dataclass(frozen=True)
class SPUSample:
    """One stereo sample: a 16-bit value for each side."""

    left: int = 0
    right: int = 0


@dataclass
class SPUSound:
    """A sound held by the SPU together with its loop configuration."""

    samples: List[SPUSample] = field(default_factory=list)
    play_with_loop: bool = False
    loop_start: int = 0
    loop_end: Optional[int] = None

    def __post_init__(self) -> None:
        if self.loop_end is None:
            self.loop_end = self.length - 1

    @property
    def length(self) -> int:
        """Number of samples in the sound."""
        return len(self.samples)


@dataclass(eq=False)
class SPUChannel:
    """A playback channel and the sound currently assigned to it."""

    state: ChannelState = ChannelState.STOPPED
    assigned_sound: int = -1
    volume: float = 0.5
    speed: float = 1.0
    loop_enabled: bool = False
    position: float = 0.0
    current_sound: SPUSound = field(default_factory=SPUSound)


@dataclass
class OutputBuffer:
    """Samples generated for one frame, tagged with a sequence number."""

    samples: List[SPUSample] = field(default_factory=list)
    sequence_number: int = 0