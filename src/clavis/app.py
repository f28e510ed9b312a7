from __future__ import annotations

import collections.abc
import logging
import typing
from typing import Optional

import trio

from .commontypes import Code, ConfigurationError, InputSourceUnavailable
from .device.gestures import GestureSource
from .device.hwtypes import KeyEvent, TouchEvent
from .device.keystreams import KeyboardSource
from .matcher import SequenceMatcher
from .settings import Settings

if typing.TYPE_CHECKING:
    from .switches import Switches

logger = logging.getLogger(__name__)


class Clavis:
    """Sequence detector for one host plugin registration.

    Key events, and touch events when the host reported touch capability, are turned
    into codes and merged into a single stream for the matcher.
    """

    matcher: SequenceMatcher
    key_event_channel: trio.MemoryReceiveChannel[KeyEvent]
    touch_event_channel: Optional[trio.MemoryReceiveChannel[TouchEvent]]

    def __init__(
        self,
        settings: Settings,
        switches: Switches,
        key_event_channel: Optional[trio.MemoryReceiveChannel[KeyEvent]],
        touch_event_channel: Optional[trio.MemoryReceiveChannel[TouchEvent]] = None,
        touch_capable: bool = False,
    ):
        if key_event_channel is None:
            raise InputSourceUnavailable("No key event source available")
        # touch capability is decided once, here
        if touch_capable and touch_event_channel is None:
            raise InputSourceUnavailable("Touch capability reported but no touch event source available")
        self.settings = settings
        self.matcher = SequenceMatcher(settings.button_sequence, settings.switch_id, switches)
        self.key_event_channel = key_event_channel
        self.touch_event_channel = touch_event_channel if touch_capable else None
        self.cancel_scope = trio.CancelScope()

    @property
    def touch_capable(self):
        return self.touch_event_channel is not None

    def _sources(self) -> collections.abc.Iterator[tuple[trio.MemoryReceiveChannel, KeyboardSource | GestureSource]]:
        yield self.key_event_channel, KeyboardSource()
        if self.touch_event_channel is not None:
            yield self.touch_event_channel, GestureSource()

    async def run(self, *, task_status=trio.TASK_STATUS_IGNORED):
        code_send_channel, code_receive_channel = trio.open_memory_channel[Code](0)
        with self.cancel_scope:
            async with trio.open_nursery() as nursery:
                nursery.start_soon(self.matcher.consume, code_receive_channel)
                async with code_send_channel:
                    for event_channel, source in self._sources():
                        nursery.start_soon(source.pump, event_channel, code_send_channel.clone())
                logger.debug("Listening for %s (touch: %s)", self.settings.button_sequence, self.touch_capable)
                task_status.started()
        logger.debug("goodbye")

    def unregister(self):
        self.cancel_scope.cancel()


def install(
    parameters: collections.abc.Mapping[str, typing.Any],
    switches: Switches,
    key_event_channel: Optional[trio.MemoryReceiveChannel[KeyEvent]],
    touch_event_channel: Optional[trio.MemoryReceiveChannel[TouchEvent]] = None,
    touch_capable: bool = False,
) -> Optional[Clavis]:
    """Set up sequence detection from the host's plugin parameters.

    A bad configuration only disables this plugin: the problem is logged and None is
    returned so the host can carry on without it.
    """
    try:
        settings = Settings.from_parameters(parameters)
        return Clavis(settings, switches, key_event_channel, touch_event_channel, touch_capable)
    except ConfigurationError as exc:
        logger.error("Sequence detection disabled: %s", exc)
        return None
