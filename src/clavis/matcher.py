# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import collections
import enum
import logging
import typing

import trio

from .commontypes import INVALID_CODE, Code, ConfigurationError

if typing.TYPE_CHECKING:
    from .switches import Switches

logger = logging.getLogger(__name__)

MIN_SEQUENCE_LENGTH = 1
MAX_SEQUENCE_LENGTH = 10


def parse_code(token: str) -> Code:
    try:
        return int(token.strip())
    except ValueError:
        return INVALID_CODE


class TargetSequence(tuple):
    @classmethod
    def parse(cls, text: str):
        "Parse a comma-separated list of key codes. Blank text is an empty sequence; unparseable tokens can never match."
        if not text.strip():
            return cls()
        return cls(parse_code(token) for token in text.split(","))

    def validate(self):
        if not MIN_SEQUENCE_LENGTH <= len(self) <= MAX_SEQUENCE_LENGTH:
            raise ConfigurationError(
                f"Button sequence must be between {MIN_SEQUENCE_LENGTH} and {MAX_SEQUENCE_LENGTH} keys, got {len(self)}"
            )
        return self

    def __str__(self):
        return ",".join(str(code) for code in self)


class MatcherState(enum.Enum):
    ARMED = enum.auto()
    FIRED = enum.auto()


class SequenceMatcher:
    """Watches a stream of codes for one target sequence.

    The window holds at most len(target) of the most recent codes. When it is full
    and equal to the target, the switch is turned on and the window is emptied, so
    the sequence can be entered again. A failed comparison leaves the window alone;
    the next code pushes out the oldest one and the comparison slides along.
    """

    def __init__(self, target: typing.Sequence[Code], switch_id: int, switches: Switches):
        self.target = TargetSequence(target).validate()
        if switch_id < 1:
            raise ConfigurationError(f"Switch ID must be a positive integer, got {switch_id}")
        self.switch_id = switch_id
        self.switches = switches
        self.window: collections.deque[Code] = collections.deque(maxlen=len(self.target))
        self.state = MatcherState.ARMED
        self.fire_count = 0

    def submit(self, code: Code) -> bool:
        # deque(maxlen=...) drops the oldest entry on overflow.
        self.window.append(code)
        if len(self.window) == len(self.target) and self._window_matches():
            self._fire()
            return True
        return False

    def _window_matches(self):
        # Compare with == element by element; tuple/list equality would treat the same NaN object as equal to itself.
        return all(entered == expected for entered, expected in zip(self.window, self.target))

    def _fire(self):
        self.state = MatcherState.FIRED
        self.switches.set_value(self.switch_id, True)
        self.fire_count += 1
        logger.info("Button sequence entered! Switch %d is now ON.", self.switch_id)
        self.window.clear()
        self.state = MatcherState.ARMED

    async def consume(self, codestream: trio.MemoryReceiveChannel[Code]):
        async with codestream:
            async for code in codestream:
                self.submit(code)
