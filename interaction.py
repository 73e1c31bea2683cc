"""
Pointer gesture state machine.

A press does not decide between click and pan. The gesture becomes a pan
once the pointer travels further than the drag threshold from where it was
pressed, and a release that never got that far is a click.

    Idle --down--> PointerDown --move beyond threshold--> Dragging
    PointerDown --up--> Idle   (click)
    Dragging    --up--> Idle   (pan only)
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple, Union

Point = Tuple[float, float]


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class PointerDown:
    anchor: Point


@dataclass(frozen=True)
class Dragging:
    last: Point


PointerState = Union[Idle, PointerDown, Dragging]


@dataclass(frozen=True)
class Pan:
    dx: float
    dy: float


@dataclass(frozen=True)
class Click:
    point: Point


Action = Union[Pan, Click]


def pointer_down(state: PointerState, point: Point) -> Tuple[PointerState, Optional[Action]]:
    return PointerDown(anchor=point), None


def pointer_move(state: PointerState, point: Point,
                 threshold: float = 5.0) -> Tuple[PointerState, Optional[Action]]:
    if isinstance(state, PointerDown):
        dx = point[0] - state.anchor[0]
        dy = point[1] - state.anchor[1]
        if math.hypot(dx, dy) > threshold:
            return Dragging(last=point), Pan(dx, dy)
        return state, None
    if isinstance(state, Dragging):
        dx = point[0] - state.last[0]
        dy = point[1] - state.last[1]
        return Dragging(last=point), Pan(dx, dy)
    # Idle: hover only
    return state, None


def pointer_up(state: PointerState, point: Point) -> Tuple[PointerState, Optional[Action]]:
    if isinstance(state, PointerDown):
        return Idle(), Click(point)
    return Idle(), None


def is_panning(state: PointerState) -> bool:
    return isinstance(state, Dragging)


def wheel_steps(delta: float) -> float:
    """
    Turn a <MouseWheel> delta into one zoom step per event.

    Windows reports multiples of 120 while macOS reports small raw deltas,
    so only the sign is kept.
    """
    if not delta:
        return 0.0
    return math.copysign(1.0, delta)
