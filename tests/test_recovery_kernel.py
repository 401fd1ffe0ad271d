import numpy as np
import pytest

from realpha.models.blend import Blend
from realpha.services.recovery_kernel import RecoveredPixel, recover, recover_block

from conftest import consistent_pair


def test_transparent_gray_pixel():
    assert recover((0,), (255,), 255) == RecoveredPixel(foreground=(0,), alpha=0)


def test_opaque_gray_pixel_keeps_its_value():
    assert recover((128,), (128,), 255) == RecoveredPixel(foreground=(128,), alpha=255)


def test_opaque_rgb_pixel_keeps_its_value():
    assert recover((10, 200, 77), (10, 200, 77), 255) == RecoveredPixel((10, 200, 77), 255)


def test_partial_alpha_divides_by_alpha():
    # a = 1 - 128/255, fg = 64 / 127 of full scale
    assert recover((64,), (192,), 255) == RecoveredPixel(foreground=(129,), alpha=127)


def test_alpha_is_max_of_channel_estimates():
    pixel = recover((0, 0, 0), (255, 128, 255), 255)
    assert pixel.alpha == 127
    assert pixel.foreground == (0, 0, 0)


def test_alpha_clamped_when_white_darker_than_black():
    assert recover((200,), (100,), 255) == RecoveredPixel(foreground=(200,), alpha=255)


def test_sixteen_bit_pixel():
    assert recover((32768,), (32768,), 65535) == RecoveredPixel((32768,), 65535)
    assert recover((0, 0, 0), (65535, 65535, 65535), 65535) == RecoveredPixel((0, 0, 0), 0)


def test_white_blend_uses_white_composite():
    pixel = recover((0, 0, 0), (255, 128, 255), 255, Blend.WHITE)
    assert pixel == RecoveredPixel(foreground=(255, 0, 255), alpha=127)


@pytest.mark.parametrize("black, white", [((64,), (192,)), ((30,), (200,)), ((100,), (100,)), ((0,), (255,))])
def test_blend_modes_agree_on_exact_composites(black, white):
    results = {recover(black, white, 255, blend) for blend in Blend}
    assert len(results) == 1


def test_block_matches_single_pixel_form():
    rng = np.random.default_rng(7)
    black = rng.integers(0, 256, size=(4, 5, 3), dtype=np.uint8)
    white = rng.integers(0, 256, size=(4, 5, 3), dtype=np.uint8)

    block = recover_block(black, white, 255)

    assert block.shape == (4, 5, 4)
    assert block.dtype == np.uint8
    for y in range(4):
        for x in range(5):
            pixel = recover(black[y, x], white[y, x], 255)
            assert tuple(block[y, x, :3]) == pixel.foreground
            assert block[y, x, 3] == pixel.alpha


@pytest.mark.parametrize("channels", [1, 3])
@pytest.mark.parametrize("max_value, dtype", [(255, np.uint8), (65535, np.uint16)])
def test_recomposite_reproduces_inputs(channels, max_value, dtype):
    rng = np.random.default_rng(channels * max_value)
    black, white = consistent_pair(rng, (16, 16, channels), max_value, dtype)

    out = recover_block(black, white, max_value).astype(np.float64) / max_value
    fg, alpha = out[..., :-1], out[..., -1:]

    black_again = np.rint(fg * alpha * max_value)
    white_again = np.rint((fg * alpha + 1.0 - alpha) * max_value)

    assert np.abs(black_again - black).max() <= 1
    assert np.abs(white_again - white).max() <= 1


def test_alpha_agrees_across_bit_depths():
    rng = np.random.default_rng(3)
    black8 = rng.integers(0, 256, size=(8, 8, 3), dtype=np.uint8)
    white8 = rng.integers(0, 256, size=(8, 8, 3), dtype=np.uint8)
    black16 = black8.astype(np.uint16) * 257
    white16 = white8.astype(np.uint16) * 257

    alpha8 = recover_block(black8, white8, 255)[..., -1] / 255.0
    alpha16 = recover_block(black16, white16, 65535)[..., -1] / 65535.0

    assert np.abs(alpha8 - alpha16).max() <= 1 / 255


def test_blend_accepts_plain_names():
    assert recover((0, 0, 0), (255, 128, 255), 255, "white").foreground == (255, 0, 255)


def test_unknown_blend_name():
    with pytest.raises(ValueError, match="Unknown blend mode"):
        Blend.parse("screen")
    assert Blend.parse(" Mix ") is Blend.MIX
