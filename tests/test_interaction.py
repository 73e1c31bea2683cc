import pytest

from interaction import (
    Click, Dragging, Idle, Pan, PointerDown,
    pointer_down, pointer_move, pointer_up, wheel_steps,
)


def test_small_movement_is_still_a_click():
    state, action = pointer_down(Idle(), (10, 10))
    assert state == PointerDown(anchor=(10, 10)) and action is None
    state, action = pointer_move(state, (13, 11), threshold=5)
    assert isinstance(state, PointerDown) and action is None
    state, action = pointer_up(state, (13, 11))
    assert state == Idle()
    assert action == Click((13, 11))


def test_movement_beyond_threshold_pans_from_anchor():
    state, _ = pointer_down(Idle(), (10, 10))
    state, action = pointer_move(state, (30, 10), threshold=5)
    assert state == Dragging(last=(30, 10))
    assert action == Pan(20, 0)
    state, action = pointer_move(state, (35, 4), threshold=5)
    assert action == Pan(5, -6)
    state, action = pointer_up(state, (35, 4))
    assert state == Idle() and action is None


def test_dragging_back_inside_threshold_never_clicks():
    state, _ = pointer_down(Idle(), (0, 0))
    state, _ = pointer_move(state, (10, 0), threshold=5)
    state, _ = pointer_move(state, (0, 0), threshold=5)
    state, action = pointer_up(state, (0, 0))
    assert action is None


def test_move_while_idle_does_nothing():
    state, action = pointer_move(Idle(), (50, 50))
    assert state == Idle() and action is None


def test_release_without_press_is_ignored():
    assert pointer_up(Idle(), (1, 1)) == (Idle(), None)


@pytest.mark.parametrize("delta, steps", [
    (120, 1.0),
    (-120, -1.0),
    (240, 1.0),
    # macOS sends small raw deltas
    (1, 1.0),
    (-3, -1.0),
    (0, 0.0),
])
def test_wheel_delta_is_one_step_per_event(delta, steps):
    assert wheel_steps(delta) == steps
