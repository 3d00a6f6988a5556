"""Software rasterizer for the console's 2D drawing model.

The console draws textured quads into a fixed-size framebuffer, with a
multiply color and one of three blending modes. Texture lookups use nearest
neighbour filtering and clamp out-of-range coordinates to the texture edge.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Sequence, Tuple, Union

import numpy as np

SCREEN_WIDTH = 640
SCREEN_HEIGHT = 360
GPU_TEXTURE_SIZE = 1024

_EDGE_TOLERANCE = 1e-9

Point = Tuple[float, float]


class GLError(IntEnum):
    """Error codes reported by the rendering backend."""

    NO_ERROR = 0x0000
    INVALID_ENUM = 0x0500
    INVALID_VALUE = 0x0501
    INVALID_OPERATION = 0x0502
    STACK_OVERFLOW = 0x0503
    STACK_UNDERFLOW = 0x0504
    OUT_OF_MEMORY = 0x0505
    INVALID_FRAMEBUFFER_OPERATION = 0x0506
    TABLE_TOO_LARGE = 0x8031


def gl_error_string(code: int) -> str:
    """Return the symbolic name of an error code, or ``"Unknown error"``."""
    try:
        error = GLError(code)
    except ValueError:
        return "Unknown error"
    return f"GL_{error.name}"


class BlendingMode(IntEnum):
    """Ways a drawn color is combined with what the framebuffer holds."""

    ALPHA = 0x20
    ADD = 0x21
    SUBTRACT = 0x22


@dataclass(frozen=True)
class GPUColor:
    """An RGBA color with 8-bit components."""

    r: int = 255
    g: int = 255
    b: int = 255
    a: int = 255

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            value = getattr(self, name)
            if not 0 <= value <= 255:
                raise ValueError(f"color component {name}={value} is outside 0-255")

    @property
    def normalized(self) -> Tuple[float, float, float, float]:
        """The four components scaled to the range [0, 1]."""
        return (self.r / 255.0, self.g / 255.0, self.b / 255.0, self.a / 255.0)


WHITE = GPUColor(255, 255, 255, 255)


@dataclass(frozen=True)
class GPUQuad:
    """A quad given as a triangle strip: top-left, top-right, bottom-left, bottom-right.

    Positions are in screen pixels; texture coordinates are normalized to [0, 1].
    """

    vertex_positions: Tuple[Point, Point, Point, Point]
    vertex_tex_coords: Tuple[Point, Point, Point, Point]

    def __post_init__(self) -> None:
        for name in ("vertex_positions", "vertex_tex_coords"):
            points = tuple((float(x), float(y)) for x, y in getattr(self, name))
            if len(points) != 4:
                raise ValueError(f"a quad needs 4 {name}, got {len(points)}")
            object.__setattr__(self, name, points)


def to_screen_space(
    x: float,
    y: float,
    width: float = SCREEN_WIDTH,
    height: float = SCREEN_HEIGHT,
) -> Tuple[float, float]:
    """Map pixel coordinates to normalized device coordinates, with y pointing up."""
    return (x / (width / 2.0) - 1.0, 1.0 - y / (height / 2.0))


class Texture:
    """A square RGBA texture sampled with nearest neighbour and edge clamping."""

    def __init__(
        self,
        pixels: Union[bytes, bytearray, memoryview, Sequence[int], np.ndarray],
        size: int = GPU_TEXTURE_SIZE,
    ) -> None:
        if size < 1:
            raise ValueError("texture size must be positive")
        if isinstance(pixels, (bytes, bytearray, memoryview)):
            data = np.frombuffer(pixels, dtype=np.uint8)
        else:
            data = np.asarray(pixels, dtype=np.uint8)
        expected = size * size * 4
        if data.size != expected:
            raise ValueError(
                f"a {size}x{size} texture needs {expected} bytes, got {data.size}"
            )
        self.size = size
        self.pixels = data.reshape(size, size, 4).copy()

    def _texels(self, u: np.ndarray, v: np.ndarray) -> np.ndarray:
        columns = np.clip(np.floor(u * self.size), 0, self.size - 1).astype(np.intp)
        rows = np.clip(np.floor(v * self.size), 0, self.size - 1).astype(np.intp)
        return self.pixels[rows, columns]

    def sample(self, u: float, v: float) -> Tuple[int, int, int, int]:
        """Return the RGBA texel at normalized coordinates ``(u, v)``."""
        texel = self._texels(np.array([u], dtype=np.float64), np.array([v], dtype=np.float64))[0]
        return tuple(int(c) for c in texel)


def _edge(p: np.ndarray, q: np.ndarray, x: np.ndarray, y: np.ndarray) -> np.ndarray:
    return (q[0] - p[0]) * (y - p[1]) - (q[1] - p[1]) * (x - p[0])


def _barycentric(
    a: np.ndarray, b: np.ndarray, c: np.ndarray, x: np.ndarray, y: np.ndarray
) -> Optional[Tuple[np.ndarray, np.ndarray, np.ndarray]]:
    area = float(_edge(a, b, c[0], c[1]))
    if area == 0.0:
        return None
    return (_edge(b, c, x, y) / area, _edge(c, a, x, y) / area, _edge(a, b, x, y) / area)


class Framebuffer:
    """An RGBA 8-bit render target; row 0 is the top of the screen."""

    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT) -> None:
        if width < 1 or height < 1:
            raise ValueError("framebuffer dimensions must be positive")
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 4), dtype=np.uint8)

    def draw_quad(
        self,
        quad: GPUQuad,
        texture: Texture,
        multiply_color: GPUColor = WHITE,
        blending_mode: BlendingMode = BlendingMode.ALPHA,
    ) -> None:
        """Draw a textured quad, tinted by ``multiply_color`` and blended into the buffer."""
        mode = BlendingMode(blending_mode)
        positions = np.asarray(quad.vertex_positions, dtype=np.float64)
        tex_coords = np.asarray(quad.vertex_tex_coords, dtype=np.float64)

        x0 = max(0, math.floor(positions[:, 0].min()))
        x1 = min(self.width, math.ceil(positions[:, 0].max()))
        y0 = max(0, math.floor(positions[:, 1].min()))
        y1 = min(self.height, math.ceil(positions[:, 1].max()))
        if x0 >= x1 or y0 >= y1:
            return

        px, py = np.meshgrid(np.arange(x0, x1) + 0.5, np.arange(y0, y1) + 0.5)
        covered = np.zeros(px.shape, dtype=bool)
        u = np.zeros(px.shape, dtype=np.float64)
        v = np.zeros(px.shape, dtype=np.float64)

        # the strip's two triangles; pixels already drawn by the first are skipped
        for ia, ib, ic in ((0, 1, 2), (2, 1, 3)):
            weights = _barycentric(positions[ia], positions[ib], positions[ic], px, py)
            if weights is None:
                continue
            wa, wb, wc = weights
            inside = (
                (wa >= -_EDGE_TOLERANCE)
                & (wb >= -_EDGE_TOLERANCE)
                & (wc >= -_EDGE_TOLERANCE)
                & ~covered
            )
            if not inside.any():
                continue
            ta, tb, tc = tex_coords[ia], tex_coords[ib], tex_coords[ic]
            u[inside] = (wa * ta[0] + wb * tb[0] + wc * tc[0])[inside]
            v[inside] = (wa * ta[1] + wb * tb[1] + wc * tc[1])[inside]
            covered |= inside

        if not covered.any():
            return

        texels = texture._texels(u[covered], v[covered]).astype(np.float64) / 255.0
        source = texels * np.asarray(multiply_color.normalized, dtype=np.float64)
        region = self.pixels[y0:y1, x0:x1]
        destination = region[covered].astype(np.float64) / 255.0
        alpha = source[:, 3:4]

        if mode is BlendingMode.ALPHA:
            result = source * alpha + destination * (1.0 - alpha)
        elif mode is BlendingMode.ADD:
            result = source * alpha + destination
        else:
            result = destination - source * alpha

        region[covered] = np.rint(np.clip(result, 0.0, 1.0) * 255.0).astype(np.uint8)