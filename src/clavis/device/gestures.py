# swipes are classified by their dominant axis, the same way a d-pad would read them
import collections.abc
import logging
from contextlib import asynccontextmanager
from typing import cast

import trio

from ..commontypes import Code, MalformedEventError, Point
from .hwtypes import GestureCode, TouchEnd, TouchEvent, TouchStart
from .keystreams import CodeSource, pump_all

logger = logging.getLogger(__name__)


def classify_swipe(delta: Point) -> GestureCode:
    # Horizontal only wins outright; ties (including no movement at all) are vertical,
    # and zero vertical movement reads as UP.
    if abs(delta.x) > abs(delta.y):
        return GestureCode.RIGHT if delta.x > 0 else GestureCode.LEFT
    return GestureCode.DOWN if delta.y > 0 else GestureCode.UP


def classify_tap(active_count: int) -> GestureCode | None:
    match active_count:
        case 1:
            return GestureCode.ONE_FINGER_TAP
        case 2:
            return GestureCode.TWO_FINGER_TAP
        case _:
            return None


class GestureSource(CodeSource):
    """Turns touch-start/touch-end pairs into swipe and tap codes.

    Only one gesture is tracked at a time; a new touch-start replaces the origin.
    A touch-end is read twice, once for the swipe direction and once for the number
    of fingers, so it can produce two codes.
    """

    def __init__(self):
        self.origin = Point.zeroes()

    def codes_for(self, event: TouchEvent) -> list[Code]:
        codes = []
        match event:
            case TouchStart():
                try:
                    self.origin = self._first_point(event.touches)
                except MalformedEventError:
                    logger.debug("Skipping touch start without touch points")
            case TouchEnd():
                try:
                    end = self._first_point(event.changed_touches)
                except MalformedEventError:
                    logger.debug("Skipping swipe for touch end without changed touches")
                else:
                    codes.append(classify_swipe(end - self.origin))
                tap = classify_tap(event.active_count)
                if tap is not None:
                    codes.append(tap)
        return codes

    @staticmethod
    def _first_point(points: collections.abc.Sequence[Point]) -> Point:
        if not points:
            raise MalformedEventError("touch event has no touch points")
        return points[0]


@asynccontextmanager
async def make_gesturestream(touch_event_source: collections.abc.AsyncIterable):
    async with pump_all(touch_event_source, GestureSource()) as gesturestream:
        yield cast(trio.MemoryReceiveChannel[Code], gesturestream)
