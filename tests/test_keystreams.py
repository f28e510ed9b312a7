# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import collections.abc
import typing
from contextlib import aclosing

from clavis.device.hwtypes import KeyEvent, KeyPress
from clavis.device.keystreams import KeyboardSource, make_keystream, pump_all
from trio.lowlevel import checkpoint

T = typing.TypeVar("T")


async def make_async_source(
    items: collections.abc.Sequence[T],
):
    for item in items:
        await checkpoint()
        yield item


def test_key_codes_pass_through_unchanged():
    source = KeyboardSource()
    assert list(source.codes_for(KeyEvent.pressed(38))) == [38]
    assert list(source.codes_for(KeyEvent.pressed(123456))) == [123456]


def test_releases_are_not_presses():
    assert list(KeyboardSource().codes_for(KeyEvent.released(38))) == []


async def test_keyboard_source_pipeline():
    async with (
        aclosing(
            make_async_source(
                [
                    KeyEvent(key_code=38, press=KeyPress.PRESSED),
                    KeyEvent(key_code=38, press=KeyPress.RELEASED),
                    KeyEvent(key_code=40, press=KeyPress.PRESSED),
                    KeyEvent(key_code=40, press=KeyPress.REPEATED),
                    KeyEvent(key_code=40, press=KeyPress.REPEATED),
                    KeyEvent(key_code=40, press=KeyPress.RELEASED),
                    KeyEvent(key_code=88, press=KeyPress.PRESSED),
                ]
            )
        ) as keysource,
        pump_all(keysource, KeyboardSource()) as resultsource,
    ):
        results = [code async for code in resultsource]
        # auto-repeat is not suppressed
        assert results == [38, 40, 40, 40, 88]


async def test_make_keystream():
    async with (
        aclosing(make_async_source([KeyEvent.pressed(37), KeyEvent.released(37), KeyEvent.pressed(39)])) as keysource,
        make_keystream(keysource) as keystream,
    ):
        assert [code async for code in keystream] == [37, 39]
