# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import collections.abc
import contextlib
import pathlib
import typing

import msgspec
import trio

from .hwtypes import InputEvent, KeyEvent, TouchEnd, TouchStart


class RecordedEvent(msgspec.Struct, frozen=True):
    offset: float
    event: InputEvent


class Recorder:
    def __init__(self, wrapped: collections.abc.AsyncIterable[InputEvent]):
        self.wrapped = wrapped
        self.zero_time = None
        self.events: list[RecordedEvent] = []

    def save_events(self, path: pathlib.Path):
        path.write_bytes(msgspec.json.encode(self.events))

    async def eventstream(self) -> collections.abc.AsyncIterator[InputEvent]:
        event: InputEvent
        async for event in self.wrapped:
            now = trio.current_time()
            if self.zero_time is None:
                self.zero_time = now
            self.events.append(RecordedEvent(offset=now - self.zero_time, event=event))
            yield event


def load_events(path: pathlib.Path) -> list[RecordedEvent]:
    return msgspec.json.decode(path.read_bytes(), type=list[RecordedEvent])


async def replay(recorded: collections.abc.Iterable[RecordedEvent], delay: bool = True):
    start = trio.current_time()
    for item in recorded:
        if delay:
            await trio.sleep_until(start + item.offset)
        else:
            await trio.lowlevel.checkpoint()
        yield item.event


async def replay_into(
    recorded: collections.abc.Iterable[RecordedEvent],
    key_event_channel: trio.MemorySendChannel[KeyEvent],
    touch_event_channel: typing.Optional[trio.MemorySendChannel[TouchStart | TouchEnd]],
    delay: bool = True,
):
    "Split a recording back into key and touch streams, closing both once it runs out. Touch events are dropped if there is no touch channel."
    async with key_event_channel, touch_event_channel or contextlib.nullcontext():
        async with contextlib.aclosing(replay(recorded, delay=delay)) as events:
            async for event in events:
                match event:
                    case KeyEvent():
                        await key_event_channel.send(event)
                    case TouchStart() | TouchEnd() if touch_event_channel is not None:
                        await touch_event_channel.send(event)
