from __future__ import annotations

import enum
import typing

import msgspec

from ..commontypes import Point


class KeyPress(enum.IntEnum):
    RELEASED = 0
    PRESSED = 1
    REPEATED = 2


class GestureCode(enum.IntEnum):
    # Same values as the browser key codes for the arrow keys, X and Z, so one
    # sequence can be entered from either a keyboard or a touchscreen.
    LEFT = 37
    UP = 38
    RIGHT = 39
    DOWN = 40
    ONE_FINGER_TAP = 88
    TWO_FINGER_TAP = 90


class KeyEvent(msgspec.Struct, frozen=True, tag=True):
    key_code: int
    press: KeyPress = KeyPress.PRESSED

    @classmethod
    def pressed(cls, key_code: int):
        return cls(key_code=key_code, press=KeyPress.PRESSED)

    @classmethod
    def released(cls, key_code: int):
        return cls(key_code=key_code, press=KeyPress.RELEASED)


class TouchStart(msgspec.Struct, frozen=True, tag=True):
    touches: typing.List[Point] = msgspec.field(default_factory=list)


class TouchEnd(msgspec.Struct, frozen=True, tag=True):
    # changed_touches are the points that were lifted; touches are the points still down.
    changed_touches: typing.List[Point] = msgspec.field(default_factory=list)
    touches: typing.List[Point] = msgspec.field(default_factory=list)

    @property
    def active_count(self):
        return len(self.touches)


TouchEvent = TouchStart | TouchEnd
InputEvent = KeyEvent | TouchStart | TouchEnd
