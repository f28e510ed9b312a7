from __future__ import annotations

import collections

import trio_util


class Switches:
    """In-memory switch store, standing in for the host's persisted game switches.

    Each switch is a trio_util.AsyncBool, so observers can wait for a switch to turn on.
    """

    def __init__(self):
        self._switches: collections.defaultdict[int, trio_util.AsyncBool] = collections.defaultdict(trio_util.AsyncBool)

    def set_value(self, switch_id: int, value: bool):
        self._switches[switch_id].value = value

    def value(self, switch_id: int) -> bool:
        return self._switches[switch_id].value

    async def wait_until_on(self, switch_id: int):
        await self._switches[switch_id].wait_value(True)
