import argparse
import logging
import pathlib
import sys

import trio

from .app import Clavis
from .commontypes import ConfigurationError
from .device.hwtypes import KeyEvent, TouchEvent
from .device.recorded_input import load_events, replay_into
from .settings import Settings
from .switches import Switches

logger = logging.getLogger(__name__)


async def replay_recording(settings: Settings, recording: pathlib.Path, touch: bool, delay: bool) -> bool:
    switches = Switches()
    key_send_channel, key_receive_channel = trio.open_memory_channel[KeyEvent](0)
    touch_send_channel, touch_receive_channel = trio.open_memory_channel[TouchEvent](0)
    clavis = Clavis(settings, switches, key_receive_channel, touch_receive_channel, touch_capable=touch)
    events = load_events(recording)
    async with trio.open_nursery() as nursery:
        await nursery.start(clavis.run)
        await replay_into(events, key_send_channel, touch_send_channel if touch else None, delay=delay)
    return switches.value(settings.switch_id)


replay_parser = argparse.ArgumentParser(description="Replay recorded input events through a sequence detector.")
replay_parser.add_argument("settings", type=pathlib.Path)
replay_parser.add_argument("recording", type=pathlib.Path)
replay_parser.add_argument("--touch", action="store_true", help="treat the host as touch capable")
replay_parser.add_argument("--no-delay", dest="delay", action="store_false", help="replay as fast as possible")


def replay_cli():
    logging.basicConfig(level=logging.INFO)
    args = replay_parser.parse_args()
    try:
        settings = Settings.load(args.settings)
    except ConfigurationError as exc:
        logger.error("%s: %s", args.settings, exc)
        sys.exit(1)
    triggered = trio.run(replay_recording, settings, args.recording, args.touch, args.delay)
    print(f"Switch {settings.switch_id}: {'ON' if triggered else 'OFF'}")
    sys.exit(0 if triggered else 2)


check_settings_parser = argparse.ArgumentParser(description="Validate a sequence detector settings file.")
check_settings_parser.add_argument("settings", type=pathlib.Path)


def check_settings_cli():
    logging.basicConfig(level=logging.INFO)
    args = check_settings_parser.parse_args()
    try:
        settings = Settings.load(args.settings)
    except ConfigurationError as exc:
        logger.error("%s: %s", args.settings, exc)
        sys.exit(1)
    print(f"switch_id: {settings.switch_id}")
    print(f"button_sequence: {settings.button_sequence}")
