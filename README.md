# vircon_core

Building blocks for an emulator of the Vircon32 fantasy console, written in
plain Python with numpy.

## Modules

- `vircon_core.timer` – the console clock. `Timer(now=None)` takes its date
  and time from a `datetime` (the current local time by default) and exposes
  them on four read-only ports numbered by `TimerPort`: `CURRENT_DATE`
  (`(year << 16) | day_of_year`, days counted from 0), `CURRENT_TIME`
  (seconds into the day), `FRAME_COUNTER` and `CYCLE_COUNTER`.
  `run_next_cycle()` counts a cycle, `change_frame()` advances one frame (one
  second every 60 frames, rolling over days and years), `reset()` clears the
  counters. Reading an unknown port or writing any port raises `ValueError`.
- `vircon_core.spu_types` – `SPUPort` (local port numbers), `ChannelState`,
  `SPUCommand`, the records `SPUSample`, `SPUSound`, `SPUChannel` and
  `OutputBuffer`, and the word helpers `to_int32`, `word_to_float` and
  `float_to_word`.
- `vircon_core.spu_writers` – one handler per SPU port
  (`write_command`, `write_global_volume`, `write_selected_sound`, …,
  `write_channel_position`). Volumes and speeds ignore NaN and infinities and
  are clamped (global volume to [0, 2], channel volume to [0, 8], speed to
  [0, 128]); indices out of range are ignored; loop points are clamped to the
  sound and kept in order; sounds are only assigned to stopped channels.
  Writing the sound length or channel state port raises `ValueError`.
- `vircon_core.spu` – the sound processing unit, `SPU(channels=16,
  samples_per_frame=735, max_cartridge_sounds=1024)`. It loads and unloads
  sounds (`load_sound`, `unload_sound`), reads and writes its ports
  (`read_port`, `write_port`), plays, pauses and stops channels singly or all
  together, and on `change_frame()` mixes every playing channel into
  `output_buffer`, honouring speed, volume and loops and saturating samples
  to 16 bits. `reset()` returns it to its power-on state.
- `vircon_core.raster` – a small software rasterizer. `GPUColor` (RGBA, 0–255),
  `GPUQuad` (four positions and four texture coordinates in triangle-strip
  order), `Texture(pixels, size=1024)` with nearest-neighbour, edge-clamped
  `sample(u, v)`, and `Framebuffer(width=640, height=360)` whose
  `draw_quad(quad, texture, multiply_color, blending_mode)` draws a tinted
  textured quad with `BlendingMode.ALPHA`, `ADD` or `SUBTRACT`. It also has
  `to_screen_space` for mapping pixel coordinates to normalized device
  coordinates, and `GLError` with `gl_error_string` for naming error codes.

## Installation

```
pip install .
```

## Examples

```python
from vircon_core.spu import SPU
from vircon_core.spu_types import SPUPort, SPUCommand, SPUSample

spu = SPU(channels=16, samples_per_frame=735, max_cartridge_sounds=1024)
spu.load_sound(spu.bios_sound, [SPUSample(1000, -1000)] * 2000)
spu.reset()

spu.write_port(SPUPort.COMMAND, SPUCommand.PLAY_SELECTED_CHANNEL)
spu.change_frame()
print(spu.output_buffer.samples[0])   # SPUSample(left=500, right=-500)
```

```python
from vircon_core.raster import BlendingMode, Framebuffer, GPUColor, GPUQuad, Texture

framebuffer = Framebuffer(640, 360)
white = Texture(bytes([255] * 16), size=2)
quad = GPUQuad(
    vertex_positions=((0, 0), (640, 0), (0, 360), (640, 360)),
    vertex_tex_coords=((0, 0), (1, 0), (0, 1), (1, 1)),
)
framebuffer.draw_quad(quad, white, GPUColor(0, 0, 64, 255), BlendingMode.ALPHA)
print(framebuffer.pixels[0, 0])   # [ 0  0 64 255]
```

## What this package does not do

It holds no complete console: there is no CPU, GPU command handling,
cartridge or memory-card loading, and no command to run. Rendering goes only
into an in-memory `Framebuffer`; nothing is shown on screen, and there is no
layer that keeps track of BIOS and cartridge textures by id. Sound is only
mixed into `output_buffer`; nothing is played. There is no logging facility.

## Running the tests

```
pip install .[test]
pytest
```