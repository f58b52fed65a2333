"""Collector agent: samples the machine and sends snapshots to the store."""

import argparse
import itertools
import logging
import os
import time
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from .messages import MonitorInfo
from .monitors import (
    CpuLoadMonitor,
    CpuSoftIrqMonitor,
    CpuStatMonitor,
    MemMonitor,
    Monitor,
    NetMonitor,
)
from .rpc import DEFAULT_SERVER_ADDRESS, RpcClient, RpcFailure

DEFAULT_INTERVAL = 3.0

log = logging.getLogger(__name__)


def _monitors_under(root: Union[str, "os.PathLike[str]"]) -> list[Monitor]:
    base = Path(root)
    return [
        CpuSoftIrqMonitor(base / "softirqs"),
        CpuLoadMonitor(base / "loadavg"),
        CpuStatMonitor(base / "stat"),
        MemMonitor(base / "meminfo"),
        NetMonitor(base / "net" / "dev"),
    ]


def default_monitors() -> list[Monitor]:
    """The standard set of monitors reading the live /proc files."""
    return _monitors_under("/proc")


def collect_once(monitors: Iterable[Monitor], name: str) -> MonitorInfo:
    """Build one snapshot named ``name`` from every monitor in turn."""
    info = MonitorInfo(name=name)
    for monitor in monitors:
        monitor.update_once(info)
    return info


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Sample periodically and send each snapshot to the server."""
    parser = argparse.ArgumentParser(prog="sysmon-agent", description="Send machine snapshots to a server.")
    parser.add_argument("--server", default=DEFAULT_SERVER_ADDRESS, help="server address")
    parser.add_argument("--name", default=os.environ.get("USER", ""), help="name reported for this machine")
    parser.add_argument("--interval", type=float, default=DEFAULT_INTERVAL, help="seconds between snapshots")
    parser.add_argument("--count", type=int, default=None, help="stop after this many snapshots")
    parser.add_argument("--proc-root", default="/proc", help="directory holding the kernel statistics files")
    parser.add_argument("--timeout", type=float, default=5.0, help="call timeout in seconds")
    args = parser.parse_args(argv)
    if args.count is not None and args.count < 0:
        parser.error("--count must not be negative")

    monitors = _monitors_under(args.proc_root)
    rounds = range(args.count) if args.count is not None else itertools.count()
    try:
        with RpcClient(args.server, timeout=args.timeout) as client:
            for number in rounds:
                if number:
                    time.sleep(args.interval)
                info = collect_once(monitors, args.name)
                try:
                    client.set_monitor_info(info)
                except RpcFailure as exc:
                    log.warning("failed to send snapshot: %s", exc)
    finally:
        for monitor in monitors:
            monitor.stop()
    return 0