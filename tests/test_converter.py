import numpy as np
import pytest
from PIL import Image

from keyart.converter import brighten, image_to_keys
from tests.conftest import solid


def test_solid_white_maps_to_brightest_key(three_level_table):
    grid = image_to_keys(solid(30, 40, 255), three_level_table, downscale=1, brightness=0, block_width=10, block_height=20)
    assert str(grid) == "###\n###"


def test_solid_black_maps_to_blank(three_level_table):
    grid = image_to_keys(solid(30, 40, 0), three_level_table, downscale=1, brightness=0, block_width=10, block_height=20)
    assert str(grid) == "   \n   "


def test_default_table_used_when_none_given():
    grid = image_to_keys(solid(48, 96, 255), downscale=1, brightness=0)
    assert grid.rows == ["WWWWWWWW"] * 8


def test_downscale_shrinks_grid():
    grid = image_to_keys(solid(96, 192, 128), downscale=2, brightness=0)
    assert (grid.height, grid.width) == (8, 8)


def test_downscale_must_be_positive():
    with pytest.raises(ValueError, match="Downscale"):
        image_to_keys(solid(10, 10, 0), downscale=0)


def test_brightness_offset_applied(three_level_table):
    grid = image_to_keys(solid(4, 4, 110), three_level_table, downscale=1, brightness=-60, block_width=4, block_height=4)
    assert grid.rows == ["+"]


def test_brighten_clamps():
    img = solid(2, 2, 100)
    assert np.asarray(brighten(img, -60)).max() == 40
    assert np.asarray(brighten(img, 200)).min() == 255
    assert np.asarray(brighten(img, -200)).max() == 0


def test_brighten_zero_is_identity():
    img = solid(2, 2, 100)
    assert brighten(img, 0) is img


def test_accepts_file_path(tmp_path, three_level_table):
    path = tmp_path / "test.png"
    solid(20, 20, 255).save(path)
    grid = image_to_keys(path, three_level_table, downscale=1, brightness=0, block_width=10, block_height=10)
    assert grid.rows == ["##", "##"]


def test_gradient_produces_varying_keys(three_level_table):
    arr = np.zeros((20, 20), dtype=np.uint8)
    arr[:, 10:] = 255
    grid = image_to_keys(Image.fromarray(arr), three_level_table, downscale=1, brightness=0, block_width=10, block_height=20)
    assert str(grid) == " #"


def test_image_smaller_than_one_block(three_level_table):
    grid = image_to_keys(solid(5, 10, 128), three_level_table, downscale=1, block_width=10, block_height=20)
    assert str(grid) == ""
