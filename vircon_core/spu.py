"""Sound processing unit: channels, sounds, port access and frame mixing."""

from __future__ import annotations

import math
from typing import Callable, Dict, Iterable, List, Tuple, Union

from vircon_core import spu_writers
from vircon_core.spu_types import (
    LAST_PORT,
    ChannelState,
    OutputBuffer,
    SPUChannel,
    SPUPort,
    SPUSample,
    SPUSound,
    float_to_word,
    to_int32,
)

DEFAULT_CHANNELS = 16
DEFAULT_SAMPLES_PER_FRAME = 735
DEFAULT_MAX_CARTRIDGE_SOUNDS = 1024

_SAMPLE_MIN = -32768
_SAMPLE_MAX = 32767

SampleLike = Union[SPUSample, Tuple[int, int]]

_PORT_WRITERS: Dict[SPUPort, Callable[["SPU", int], None]] = {
    SPUPort.COMMAND: spu_writers.write_command,
    SPUPort.GLOBAL_VOLUME: spu_writers.write_global_volume,
    SPUPort.SELECTED_SOUND: spu_writers.write_selected_sound,
    SPUPort.SELECTED_CHANNEL: spu_writers.write_selected_channel,
    SPUPort.SOUND_LENGTH: spu_writers.write_sound_length,
    SPUPort.SOUND_PLAY_WITH_LOOP: spu_writers.write_sound_play_with_loop,
    SPUPort.SOUND_LOOP_START: spu_writers.write_sound_loop_start,
    SPUPort.SOUND_LOOP_END: spu_writers.write_sound_loop_end,
    SPUPort.CHANNEL_STATE: spu_writers.write_channel_state,
    SPUPort.CHANNEL_ASSIGNED_SOUND: spu_writers.write_channel_assigned_sound,
    SPUPort.CHANNEL_VOLUME: spu_writers.write_channel_volume,
    SPUPort.CHANNEL_SPEED: spu_writers.write_channel_speed,
    SPUPort.CHANNEL_LOOP_ENABLED: spu_writers.write_channel_loop_enabled,
    SPUPort.CHANNEL_POSITION: spu_writers.write_channel_position,
}


def _as_sample(sample: SampleLike) -> SPUSample:
    if isinstance(sample, SPUSample):
        return sample
    left, right = sample
    return SPUSample(int(left), int(right))


def _mix(accumulated: int, volume: float, value: int) -> int:
    """Add a scaled sample, truncating to an integer and saturating to 16 bits."""
    mixed = int(accumulated + volume * value)
    return max(_SAMPLE_MIN, min(mixed, _SAMPLE_MAX))


def _port(local_port: int) -> SPUPort:
    if not 0 <= local_port <= LAST_PORT:
        raise ValueError(f"SPU has no port {local_port}")
    return SPUPort(local_port)


class SPU:
    """The console's sound chip, mixing its channels into one buffer per frame."""

    def __init__(
        self,
        channels: int = DEFAULT_CHANNELS,
        samples_per_frame: int = DEFAULT_SAMPLES_PER_FRAME,
        max_cartridge_sounds: int = DEFAULT_MAX_CARTRIDGE_SOUNDS,
    ) -> None:
        if channels < 1:
            raise ValueError("the SPU needs at least one channel")
        self.samples_per_frame = samples_per_frame
        self.bios_sound = SPUSound()
        self.cartridge_sounds: List[SPUSound] = [
            SPUSound() for _ in range(max_cartridge_sounds)
        ]
        self.loaded_cartridge_sounds = 0
        self.command = 0
        self.channels: List[SPUChannel] = [SPUChannel() for _ in range(channels)]
        self.output_buffer = OutputBuffer()
        self.reset()

    # audio resources

    def load_sound(self, target: SPUSound, samples: Iterable[SampleLike]) -> None:
        """Fill ``target`` with samples and give it its initial loop settings."""
        target.samples = [_as_sample(s) for s in samples]
        target.play_with_loop = False
        target.loop_start = 0
        target.loop_end = target.length - 1

    def unload_sound(self, target: SPUSound) -> None:
        """Release the samples held by ``target``."""
        target.samples = []

    # port access

    def read_port(self, local_port: int) -> int:
        """Return the 32-bit word at an SPU port; raise ValueError if it cannot be read."""
        port = _port(local_port)
        if port is SPUPort.COMMAND:
            raise ValueError("SPU command port is write-only")

        if port is SPUPort.GLOBAL_VOLUME:
            return float_to_word(self.global_volume)
        if port is SPUPort.SELECTED_SOUND:
            return self.selected_sound
        if port is SPUPort.SELECTED_CHANNEL:
            return self.selected_channel

        sound = self.pointed_sound
        if port is SPUPort.SOUND_LENGTH:
            return sound.length
        if port is SPUPort.SOUND_PLAY_WITH_LOOP:
            return int(sound.play_with_loop)
        if port is SPUPort.SOUND_LOOP_START:
            return sound.loop_start
        if port is SPUPort.SOUND_LOOP_END:
            return sound.loop_end

        channel = self.pointed_channel
        if port is SPUPort.CHANNEL_STATE:
            return int(channel.state)
        if port is SPUPort.CHANNEL_ASSIGNED_SOUND:
            return channel.assigned_sound
        if port is SPUPort.CHANNEL_VOLUME:
            return float_to_word(channel.volume)
        if port is SPUPort.CHANNEL_SPEED:
            return float_to_word(channel.speed)
        if port is SPUPort.CHANNEL_LOOP_ENABLED:
            return int(channel.loop_enabled)
        return to_int32(int(channel.position))

    def write_port(self, local_port: int, value: int) -> None:
        """Write a 32-bit word to an SPU port; raise ValueError if it cannot be written."""
        _PORT_WRITERS[_port(local_port)](self, value)

    # general operation

    def change_frame(self) -> None:
        """Generate the sound output for the next frame."""
        self.update_output_buffer()

    def reset(self) -> None:
        """Return registers, channels, buffers and loop settings to power-on state."""
        self.global_volume = 1.0
        self.selected_sound = -1
        self.selected_channel = 0
        self.pointed_sound = self.bios_sound
        self.pointed_channel = self.channels[0]

        for channel in self.channels:
            channel.state = ChannelState.STOPPED
            channel.assigned_sound = -1
            channel.volume = 0.5
            channel.speed = 1.0
            channel.loop_enabled = False
            channel.position = 0.0
            channel.current_sound = self.bios_sound

        self.output_buffer.samples = [SPUSample() for _ in range(self.samples_per_frame)]
        self.output_buffer.sequence_number = 0

        for sound in (self.bios_sound, *self.cartridge_sounds):
            sound.play_with_loop = False
            sound.loop_start = 0
            sound.loop_end = sound.length - 1

    # channel commands

    def play_channel(self, channel: SPUChannel) -> None:
        """Start a stopped channel, retrigger a playing one, or resume a paused one."""
        if channel.state in (ChannelState.STOPPED, ChannelState.PLAYING):
            channel.position = 0.0
            channel.loop_enabled = channel.current_sound.play_with_loop
        channel.state = ChannelState.PLAYING

    def pause_channel(self, channel: SPUChannel) -> None:
        """Pause a channel, keeping its position."""
        channel.state = ChannelState.PAUSED

    def stop_channel(self, channel: SPUChannel) -> None:
        """Stop a channel and rewind it, keeping its sound and configuration."""
        channel.state = ChannelState.STOPPED
        channel.position = 0.0

    def pause_all_channels(self) -> None:
        """Pause every playing channel."""
        for channel in self.channels:
            if channel.state == ChannelState.PLAYING:
                self.pause_channel(channel)

    def resume_all_channels(self) -> None:
        """Resume every paused channel."""
        for channel in self.channels:
            if channel.state == ChannelState.PAUSED:
                self.play_channel(channel)

    def stop_all_channels(self) -> None:
        """Stop every channel that is not already stopped."""
        for channel in self.channels:
            if channel.state != ChannelState.STOPPED:
                self.stop_channel(channel)

    # sound output

    def _advance(self, channel: SPUChannel) -> Tuple[int, int]:
        """Return the channel's current sample and move it forward one step."""
        sound = channel.current_sound
        if not sound.samples:
            self.stop_channel(channel)
            return 0, 0

        picked = sound.samples[int(channel.position)]
        previous = channel.position
        channel.position += channel.speed

        if channel.loop_enabled:
            loop_start, loop_end = sound.loop_start, sound.loop_end
            if loop_end > loop_start and previous <= loop_end < channel.position:
                # compensate any overshoot past the loop end at high speeds
                excess = math.fmod(channel.position - loop_start, loop_end - loop_start)
                channel.position = loop_start + excess

        if channel.position > sound.length - 1:
            self.stop_channel(channel)
        return picked.left, picked.right

    def update_output_buffer(self) -> None:
        """Mix all playing channels into a new frame of output samples."""
        self.output_buffer.sequence_number += 1
        frame: List[SPUSample] = []
        for _ in range(self.samples_per_frame):
            left = right = 0
            for channel in self.channels:
                if channel.state != ChannelState.PLAYING:
                    continue
                volume = self.global_volume * channel.volume
                sample_left, sample_right = self._advance(channel)
                left = _mix(left, volume, sample_left)
                right = _mix(right, volume, sample_right)
            frame.append(SPUSample(left, right))
        self.output_buffer.samples = frame