import pytest

from viewport import Viewport


def test_identity_by_default():
    vp = Viewport()
    assert vp.to_screen((12.5, -3)) == (12.5, -3)
    assert vp.to_world((12.5, -3)) == (12.5, -3)


def test_screen_world_round_trip():
    vp = Viewport()
    vp.pan(30, -10)
    vp.zoom_at((100, 100), 1.5)
    sx, sy = vp.to_screen((42.0, 17.0))
    assert vp.to_world((sx, sy)) == pytest.approx((42.0, 17.0))


@pytest.mark.parametrize("point", [(0, 0), (123, 456), (-40, 800)])
@pytest.mark.parametrize("factor", [0.5, 0.9, 1.1, 1.9])
def test_zoom_keeps_anchor_point_fixed(point, factor):
    vp = Viewport()
    vp.pan(17, -23)
    before = vp.to_world(point)
    vp.zoom_at(point, factor)
    assert vp.to_world(point) == pytest.approx(before)


def test_zoom_is_clamped_and_still_anchored():
    vp = Viewport(min_scale=0.1, max_scale=2.0)
    anchor = (200, 150)
    before = vp.to_world(anchor)
    for _ in range(20):
        vp.zoom_at(anchor, 1.5)
    assert vp.scale == 2.0
    assert vp.to_world(anchor) == pytest.approx(before)
    for _ in range(40):
        vp.zoom_at(anchor, 0.5)
    assert vp.scale == 0.1
    assert vp.to_world(anchor) == pytest.approx(before)


def test_pan_is_unclamped_offset():
    vp = Viewport()
    vp.pan(1e6, -1e6)
    assert (vp.offset_x, vp.offset_y) == (1e6, -1e6)


def test_reset():
    vp = Viewport()
    vp.pan(5, 5)
    vp.zoom_at((0, 0), 0.5)
    vp.reset()
    assert (vp.offset_x, vp.offset_y, vp.scale) == (0.0, 0.0, 1.0)


def test_visible_world_bounds():
    vp = Viewport()
    vp.zoom_at((0, 0), 2.0)
    assert vp.visible_world_bounds(800, 600) == (0.0, 0.0, 400.0, 300.0)


def test_invalid_scale_bounds():
    with pytest.raises(ValueError):
        Viewport(min_scale=2.0, max_scale=1.0)
