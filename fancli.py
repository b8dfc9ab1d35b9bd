# fancli.py – Modern Forms fan + light control over the local JSON API
"""
Command-line companion to the ``modern_forms_fan`` integration.

Every sub-command maps to one message of the fan's ``POST /mf`` endpoint.
Without ``--send`` the JSON body is only printed, so it can be pasted into
curl or another tool; with ``--send --host`` it is delivered and the fan's
reply (its full state) is printed.

Usage (CLI)
===========
::

    # Show the body for a speed change
    $ python fancli.py speed medium-high
    {"fanSpeed": 5}

    # Fetch the current state
    $ python fancli.py state --send --host 192.168.1.42

    # Dim the light to 40 %
    $ python fancli.py level 40 --send --host 192.168.1.42

    # Step to the next speed (reads the current one first)
    $ python fancli.py cycle --send --host 192.168.1.42

Library example
===============
```python
import asyncio
from fancli import send_command
from custom_components.modern_forms_fan.codec import SetLightOn

state = asyncio.run(send_command("192.168.1.42", SetLightOn(True)))
```
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import textwrap
from typing import Any, Optional, Sequence

import aiohttp

from custom_components.modern_forms_fan.api import ModernFormsApi
from custom_components.modern_forms_fan.codec import (
    SPEED_OFF,
    SPEED_ON,
    SUPPORTED_FAN_SPEEDS,
    ApplianceState,
    Command,
    QueryState,
    Reboot,
    SetFanDirection,
    SetFanOn,
    SetFanSpeed,
    SetLightBrightness,
    SetLightOn,
    build_request_body,
    fan_speed_from_code,
    fan_speed_to_code,
    next_speed_code,
)
from custom_components.modern_forms_fan.device import DriverConfig

# sub-commands that are relative to the fan's current state
NEEDS_STATE = {"cycle", "reverse"}


# ────────────────────────────── 1.  Command builder  ──────────────────────────

def build_command(args: argparse.Namespace,
                  current: Optional[ApplianceState] = None) -> Command:
    """Translate parsed arguments into one wire command."""
    cmd = args.cmd
    if cmd == "state":
        return QueryState()
    if cmd in ("on", "off"):
        return SetFanOn(cmd == "on")
    if cmd == "speed":
        if args.speed in (SPEED_ON, SPEED_OFF):
            return SetFanOn(args.speed == SPEED_ON)
        return SetFanSpeed(fan_speed_to_code(args.speed))
    if cmd == "direction":
        return SetFanDirection(args.direction)
    if cmd == "light":
        return SetLightOn(args.state == "on")
    if cmd == "level":
        return SetLightBrightness(args.level)
    if cmd == "reboot":
        return Reboot()

    if current is None:
        raise ValueError(f"{cmd} needs the fan's current state")
    if cmd == "cycle":
        code = next_speed_code(fan_speed_from_code(current.fan_speed))
        if code is None:
            raise ValueError(f"fan reports no known speed ({current.fan_speed!r})")
        return SetFanSpeed(code)
    if cmd == "reverse":
        if not current.fan_direction:
            raise ValueError("fan reports no direction")
        return SetFanDirection("reverse" if current.fan_direction == "forward" else "forward")
    raise ValueError(f"unknown command {cmd}")


# ────────────────────────────── 2.  Transport  ────────────────────────────────

async def send_command(host: str, command: Command, *,
                       verbose: bool = False) -> Optional[dict[str, Any]]:
    """Deliver *command* to the fan at *host*; None if it did not answer."""
    config = DriverConfig(ip_address=host, log_enable=verbose)
    async with aiohttp.ClientSession() as session:
        return await ModernFormsApi(session).async_send(config, command)


async def _run(args: argparse.Namespace) -> int:
    current = None
    if args.cmd in NEEDS_STATE:
        reply = await send_command(args.host, QueryState(), verbose=args.verbose)
        if reply is None:
            print("Could not read the fan's current state.", file=sys.stderr)
            return 1
        current = ApplianceState.from_json(reply)

    try:
        command = build_command(args, current)
    except ValueError as err:
        print(f"Cannot {args.cmd}: {err}", file=sys.stderr)
        return 1
    reply = await send_command(args.host, command, verbose=args.verbose)
    if reply is None:
        if isinstance(command, Reboot):
            print("Reboot sent.")
            return 0
        print("No reply from the fan.", file=sys.stderr)
        return 1
    print(json.dumps(reply, indent=2, sort_keys=True))
    return 0


# ────────────────────────────── 3.  CLI  ──────────────────────────────────────

def _add_common_cmd_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--host", help="Fan IP address")
    p.add_argument("--send", action="store_true", help="Actually send to the fan")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fancli",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """
            Modern Forms fan + light control utility.

            If --send is omitted the request body is printed instead.
            """
        ),
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    for name, help_ in (
        ("state", "Fetch the full fan/light state"),
        ("on", "Turn the fan on"),
        ("off", "Turn the fan off"),
        ("cycle", "Step to the next fan speed"),
        ("reverse", "Reverse the fan direction"),
        ("reboot", "Restart the fan controller (no reply expected)"),
    ):
        _add_common_cmd_args(sub.add_parser(name, help=help_))

    sp = sub.add_parser("speed", help="Set a named fan speed")
    sp.add_argument("speed", choices=SUPPORTED_FAN_SPEEDS)
    _add_common_cmd_args(sp)

    dr = sub.add_parser("direction", help="Set the fan direction")
    dr.add_argument("direction", choices=["forward", "reverse"])
    _add_common_cmd_args(dr)

    lt = sub.add_parser("light", help="Switch the light")
    lt.add_argument("state", choices=["on", "off"])
    _add_common_cmd_args(lt)

    lv = sub.add_parser("level", help="Set the light brightness")
    lv.add_argument("level", type=int, choices=range(0, 101), metavar="0-100")
    _add_common_cmd_args(lv)

    return parser


def cli(argv: Sequence[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = make_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if not args.send:
        if args.cmd in NEEDS_STATE:
            parser.error(f"{args.cmd} reads the current state and requires --send")
        print(json.dumps(build_request_body(build_command(args))))
        return 0

    if not args.host:
        parser.error("--send requires --host")
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(cli())
