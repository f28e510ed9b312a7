# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import abc
import collections.abc
from contextlib import aclosing, asynccontextmanager
from typing import Any, AsyncIterable, cast

import trio

from ..commontypes import Code
from .hwtypes import KeyEvent, KeyPress


class Section(abc.ABC):
    @abc.abstractmethod
    async def pump(self, source: trio.MemoryReceiveChannel[Any], sink: trio.MemorySendChannel[Any]): ...


class CodeSource(Section):
    """A section that turns raw input events into codes.

    Subclasses only classify; codes_for is synchronous and yields zero or more codes
    per event, which are sent on in the order they are produced.
    """

    @abc.abstractmethod
    def codes_for(self, event: Any) -> collections.abc.Iterable[Code]: ...

    async def pump(self, source: trio.MemoryReceiveChannel[Any], sink: trio.MemorySendChannel[Code]):
        async with aclosing(source), aclosing(sink):
            async for event in source:
                for code in self.codes_for(event):
                    await sink.send(code)


# Every key press becomes its own key code; auto-repeat counts as a press.
class KeyboardSource(CodeSource):
    def codes_for(self, event: KeyEvent):
        if event.press is KeyPress.RELEASED:
            return ()
        return (event.key_code,)


@asynccontextmanager
async def pump_all(first_source: AsyncIterable[Any], *sections: Section):
    async with trio.open_nursery() as nursery:
        section_input = first_source
        for section in sections:
            section_send_channel, section_receive_channel = trio.open_memory_channel(0)
            nursery.start_soon(section.pump, section_input, section_send_channel)
            section_input = section_receive_channel
        yield section_input
        nursery.cancel_scope.cancel()


@asynccontextmanager
async def make_keystream(key_event_channel: trio.MemoryReceiveChannel[KeyEvent]):
    async with pump_all(key_event_channel, KeyboardSource()) as keystream:
        yield cast(trio.MemoryReceiveChannel[Code], keystream)
