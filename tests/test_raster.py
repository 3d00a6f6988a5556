import numpy as np
import pytest

from vircon_core.raster import (
    BlendingMode,
    Framebuffer,
    GLError,
    GPUColor,
    GPUQuad,
    Texture,
    gl_error_string,
    to_screen_space,
)

WHITE_TEXEL = bytes([255, 255, 255, 255])


def rect_quad(x0, y0, x1, y1, uv=((0, 0), (1, 0), (0, 1), (1, 1))):
    return GPUQuad(((x0, y0), (x1, y0), (x0, y1), (x1, y1)), uv)


def full_quad(fb):
    return rect_quad(0, 0, fb.width, fb.height)


@pytest.mark.parametrize(
    "code, name",
    [
        (GLError.NO_ERROR, "GL_NO_ERROR"),
        (GLError.INVALID_ENUM, "GL_INVALID_ENUM"),
        (GLError.INVALID_VALUE, "GL_INVALID_VALUE"),
        (GLError.INVALID_OPERATION, "GL_INVALID_OPERATION"),
        (0x0503, "GL_STACK_OVERFLOW"),
        (0x0504, "GL_STACK_UNDERFLOW"),
        (GLError.OUT_OF_MEMORY, "GL_OUT_OF_MEMORY"),
        (0x8031, "GL_TABLE_TOO_LARGE"),
        (GLError.INVALID_FRAMEBUFFER_OPERATION, "GL_INVALID_FRAMEBUFFER_OPERATION"),
    ],
)
def test_gl_error_string_names(code, name):
    assert gl_error_string(code) == name


def test_gl_error_string_unknown():
    assert gl_error_string(0x1234) == "Unknown error"


def test_to_screen_space_corners_and_center():
    assert to_screen_space(0, 0, 640, 360) == (-1.0, 1.0)
    assert to_screen_space(640, 360, 640, 360) == (1.0, -1.0)
    assert to_screen_space(320, 180, 640, 360) == (0.0, 0.0)


def test_gpu_color_rejects_out_of_range():
    with pytest.raises(ValueError):
        GPUColor(256, 0, 0, 0)


def test_gpu_quad_needs_four_vertices():
    with pytest.raises(ValueError):
        GPUQuad(((0, 0), (1, 0), (0, 1)), ((0, 0), (1, 0), (0, 1), (1, 1)))


def test_texture_rejects_wrong_size():
    with pytest.raises(ValueError):
        Texture(bytes(15), size=2)


def test_texture_sample_round_trip_and_clamping():
    data = bytes([1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15, 16])
    texture = Texture(data, size=2)
    assert texture.sample(0.25, 0.25) == (1, 2, 3, 4)
    assert texture.sample(0.75, 0.25) == (5, 6, 7, 8)
    assert texture.sample(0.25, 0.75) == (9, 10, 11, 12)
    assert texture.sample(-3.0, 5.0) == (9, 10, 11, 12)
    assert texture.sample(10.0, -1.0) == (5, 6, 7, 8)


def test_framebuffer_rejects_bad_dimensions():
    with pytest.raises(ValueError):
        Framebuffer(0, 4)


def test_opaque_fill_covers_every_pixel():
    fb = Framebuffer(8, 4)
    color = GPUColor(10, 20, 30, 255)
    fb.draw_quad(full_quad(fb), Texture(WHITE_TEXEL, 1), color, BlendingMode.ALPHA)
    expected = np.broadcast_to(np.array([10, 20, 30, 255], dtype=np.uint8), fb.pixels.shape)
    assert np.array_equal(fb.pixels, expected)


def test_transparent_draw_leaves_buffer_unchanged():
    fb = Framebuffer(8, 4)
    fb.draw_quad(full_quad(fb), Texture(WHITE_TEXEL, 1), GPUColor(50, 60, 70, 255))
    before = fb.pixels.copy()
    fb.draw_quad(full_quad(fb), Texture(WHITE_TEXEL, 1), GPUColor(200, 0, 0, 0))
    assert np.array_equal(fb.pixels, before)


def test_partial_quad_touches_only_its_pixels():
    fb = Framebuffer(8, 4)
    fb.draw_quad(rect_quad(2, 1, 4, 3), Texture(WHITE_TEXEL, 1), GPUColor(9, 9, 9, 255))
    drawn = np.argwhere(fb.pixels[:, :, 3] > 0)
    assert sorted(map(tuple, drawn)) == [(1, 2), (1, 3), (2, 2), (2, 3)]


def test_add_mode_accumulates_like_single_brighter_draw():
    white = Texture(WHITE_TEXEL, 1)
    added = Framebuffer(4, 4)
    for _ in range(2):
        added.draw_quad(full_quad(added), white, GPUColor(100, 40, 0, 255), BlendingMode.ADD)
    reference = Framebuffer(4, 4)
    reference.draw_quad(full_quad(reference), white, GPUColor(200, 80, 0, 255), BlendingMode.ALPHA)
    assert np.array_equal(added.pixels[:, :, :3], reference.pixels[:, :, :3])


def test_subtract_mode_removes_drawn_color():
    white = Texture(WHITE_TEXEL, 1)
    fb = Framebuffer(4, 4)
    color = GPUColor(200, 150, 100, 255)
    fb.draw_quad(full_quad(fb), white, color, BlendingMode.ALPHA)
    fb.draw_quad(full_quad(fb), white, color, BlendingMode.SUBTRACT)
    assert np.array_equal(fb.pixels, np.zeros_like(fb.pixels))


def test_texture_mapping_places_texels_in_quadrants():
    data = bytes(
        [255, 0, 0, 255, 0, 255, 0, 255, 0, 0, 255, 255, 255, 255, 255, 255]
    )
    texture = Texture(data, size=2)
    fb = Framebuffer(4, 4)
    fb.draw_quad(full_quad(fb), texture)
    assert tuple(fb.pixels[0, 0]) == texture.sample(0.0, 0.0)
    assert tuple(fb.pixels[0, 3]) == texture.sample(1.0, 0.0)
    assert tuple(fb.pixels[3, 0]) == texture.sample(0.0, 1.0)
    assert tuple(fb.pixels[3, 3]) == texture.sample(1.0, 1.0)


def test_quad_outside_buffer_draws_nothing():
    fb = Framebuffer(4, 4)
    fb.draw_quad(rect_quad(10, 10, 20, 20), Texture(WHITE_TEXEL, 1))
    assert not fb.pixels.any()


def test_invalid_blending_mode_is_rejected():
    fb = Framebuffer(4, 4)
    with pytest.raises(ValueError):
        fb.draw_quad(full_quad(fb), Texture(WHITE_TEXEL, 1), GPUColor(), 0x99)