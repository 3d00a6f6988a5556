"""Handlers for writes to each SPU port.

Every handler receives the SPU and the written 32-bit word. Out-of-range or
invalid values are ignored or clamped as the hardware does; writes to
read-only ports raise :class:`ValueError`.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Dict

from vircon_core.spu_types import ChannelState, SPUCommand, to_int32, word_to_float

GLOBAL_VOLUME_LIMIT = 2.0
CHANNEL_VOLUME_LIMIT = 8.0
CHANNEL_SPEED_LIMIT = 128.0


def _clamp(value, low, high):
    return max(low, min(value, high))


def _valid_float(value: int):
    """Return the word as a float, or None when it is NaN or infinite."""
    number = word_to_float(value)
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _is_set(value: int) -> bool:
    return (int(value) & 0xFFFFFFFF) != 0


_COMMANDS: Dict[int, Callable[[Any], None]] = {
    SPUCommand.PLAY_SELECTED_CHANNEL: lambda spu: spu.play_channel(spu.pointed_channel),
    SPUCommand.PAUSE_SELECTED_CHANNEL: lambda spu: spu.pause_channel(spu.pointed_channel),
    SPUCommand.STOP_SELECTED_CHANNEL: lambda spu: spu.stop_channel(spu.pointed_channel),
    SPUCommand.PAUSE_ALL_CHANNELS: lambda spu: spu.pause_all_channels(),
    SPUCommand.RESUME_ALL_CHANNELS: lambda spu: spu.resume_all_channels(),
    SPUCommand.STOP_ALL_CHANNELS: lambda spu: spu.stop_all_channels(),
}


def write_command(spu, value: int) -> None:
    """Execute an SPU command; unknown codes are silently ignored."""
    action = _COMMANDS.get(to_int32(value))
    if action is not None:
        action(spu)


def write_global_volume(spu, value: int) -> None:
    """Set the global volume, clamped to [0, 2]; NaN and infinities are ignored."""
    number = _valid_float(value)
    if number is None:
        return
    spu.global_volume = _clamp(number, 0.0, GLOBAL_VOLUME_LIMIT)


def write_selected_sound(spu, value: int) -> None:
    """Select the sound addressed by the sound ports (-1 is the BIOS sound)."""
    index = to_int32(value)
    if index < -1 or index >= spu.loaded_cartridge_sounds:
        return
    spu.selected_sound = index
    spu.pointed_sound = spu.bios_sound if index == -1 else spu.cartridge_sounds[index]


def write_selected_channel(spu, value: int) -> None:
    """Select the channel addressed by the channel ports."""
    index = to_int32(value)
    if index < 0 or index >= len(spu.channels):
        return
    spu.selected_channel = index
    spu.pointed_channel = spu.channels[index]


def write_sound_length(spu, value: int) -> None:
    """Reject the write: the sound length port is read-only."""
    raise ValueError("SPU sound length port is read-only")


def write_sound_play_with_loop(spu, value: int) -> None:
    """Set whether the selected sound loops when played."""
    spu.pointed_sound.play_with_loop = _is_set(value)


def write_sound_loop_start(spu, value: int) -> None:
    """Set the loop start, clamped to the sound and never past the loop end."""
    sound = spu.pointed_sound
    start = _clamp(to_int32(value), 0, sound.length - 1)
    sound.loop_start = min(start, sound.loop_end)


def write_sound_loop_end(spu, value: int) -> None:
    """Set the loop end, clamped to the sound and never before the loop start."""
    sound = spu.pointed_sound
    end = _clamp(to_int32(value), 0, sound.length - 1)
    sound.loop_end = max(end, sound.loop_start)


def write_channel_state(spu, value: int) -> None:
    """Reject the write: the channel state port is read-only."""
    raise ValueError("SPU channel state port is read-only")


def write_channel_assigned_sound(spu, value: int) -> None:
    """Assign a sound to the selected channel, only while it is stopped."""
    index = to_int32(value)
    if index < -1 or index >= spu.loaded_cartridge_sounds:
        return
    channel = spu.pointed_channel
    if channel.state != ChannelState.STOPPED:
        return
    channel.assigned_sound = index
    channel.current_sound = spu.bios_sound if index == -1 else spu.cartridge_sounds[index]


def write_channel_volume(spu, value: int) -> None:
    """Set the selected channel's volume, clamped to [0, 8]."""
    number = _valid_float(value)
    if number is None:
        return
    spu.pointed_channel.volume = _clamp(number, 0.0, CHANNEL_VOLUME_LIMIT)


def write_channel_speed(spu, value: int) -> None:
    """Set the selected channel's playback speed, clamped to [0, 128]."""
    number = _valid_float(value)
    if number is None:
        return
    spu.pointed_channel.speed = _clamp(number, 0.0, CHANNEL_SPEED_LIMIT)


def write_channel_loop_enabled(spu, value: int) -> None:
    """Enable or disable looping on the selected channel."""
    spu.pointed_channel.loop_enabled = _is_set(value)


def write_channel_position(spu, value: int) -> None:
    """Move the selected channel to a whole sample position within its sound."""
    channel = spu.pointed_channel
    position = _clamp(to_int32(value), 0, channel.current_sound.length - 1)
    channel.position = float(position)