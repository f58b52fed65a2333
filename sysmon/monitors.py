"""Collectors that read kernel statistics into a MonitorInfo snapshot."""

import math
import os
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Union

from .messages import CpuLoad, CpuStat, MemInfo, MonitorInfo, NetInfo, SoftIrq
from .procfile import elapsed_seconds, read_fields

PathLike = Union[str, "os.PathLike[str]"]
Clock = Callable[[], float]

LOADAVG_PATH = "/proc/loadavg"
SOFTIRQS_PATH = "/proc/softirqs"
STAT_PATH = "/proc/stat"
MEMINFO_PATH = "/proc/meminfo"
NET_DEV_PATH = "/proc/net/dev"

KB_PER_GB = 1000 * 1000


def _ratio(numerator: float, denominator: float) -> float:
    """Divide with IEEE semantics: a zero denominator gives inf or nan."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


class Monitor(ABC):
    """A source of one part of a snapshot."""

    @abstractmethod
    def update_once(self, info: MonitorInfo) -> None:
        """Take one reading and add it to ``info``."""

    def stop(self) -> None:
        """Release resources; the built-in monitors hold none."""


class CpuLoadMonitor(Monitor):
    """Reports the load averages."""

    def __init__(self, path: PathLike = LOADAVG_PATH) -> None:
        self.path = path

    def update_once(self, info: MonitorInfo) -> None:
        rows = list(read_fields(self.path))
        if not rows or len(rows[0]) < 3:
            raise ValueError(f"{self.path}: expected three load averages")
        first = rows[0]
        info.cpu_load = CpuLoad(
            load_avg_1=float(first[0]),
            load_avg_3=float(first[1]),
            load_avg_15=float(first[2]),
        )


_SOFTIRQ_FIELDS = (
    "hi",
    "timer",
    "net_tx",
    "net_rx",
    "block",
    "irq_poll",
    "tasklet",
    "sched",
    "hrtimer",
    "rcu",
)


@dataclass(frozen=True)
class _Sample:
    values: tuple[float, ...]
    timepoint: float


class CpuSoftIrqMonitor(Monitor):
    """Reports soft interrupt rates per CPU from two consecutive readings."""

    def __init__(self, path: PathLike = SOFTIRQS_PATH, clock: Clock = time.monotonic) -> None:
        self.path = path
        self.clock = clock
        self._previous: dict[str, _Sample] = {}

    def update_once(self, info: MonitorInfo) -> None:
        rows = list(read_fields(self.path))
        if len(rows) <= len(_SOFTIRQ_FIELDS):
            raise ValueError(f"{self.path}: expected a header and {len(_SOFTIRQ_FIELDS)} counter rows")
        header, counter_rows = rows[0], rows[1 : 1 + len(_SOFTIRQ_FIELDS)]
        now = self.clock()
        # The header's last field is dropped: it is the empty field left by trailing spaces.
        for column, cpu in enumerate(header[:-1], start=1):
            try:
                counters = tuple(float(int(row[column])) for row in counter_rows)
            except (IndexError, ValueError) as exc:
                raise ValueError(f"{self.path}: bad counters for {cpu}") from exc
            sample = _Sample(counters, now)
            old = self._previous.get(cpu)
            if old is not None:
                period = elapsed_seconds(sample.timepoint, old.timepoint)
                rates = {
                    name: _ratio(new - prev, period)
                    for name, new, prev in zip(_SOFTIRQ_FIELDS, sample.values, old.values)
                }
                info.soft_irq.append(SoftIrq(cpu=cpu, **rates))
            self._previous[cpu] = sample


@dataclass(frozen=True)
class _CpuTimes:
    user: float
    nice: float
    system: float
    idle: float
    io_wait: float
    irq: float
    soft_irq: float
    steal: float
    guest: float
    guest_nice: float

    @property
    def total(self) -> float:
        return (
            self.user + self.system + self.idle + self.nice
            + self.io_wait + self.irq + self.soft_irq + self.steal
        )

    @property
    def busy(self) -> float:
        return self.user + self.system + self.nice + self.irq + self.soft_irq + self.steal


class CpuStatMonitor(Monitor):
    """Reports CPU time shares from two consecutive readings."""

    def __init__(self, path: PathLike = STAT_PATH) -> None:
        self.path = path
        self._previous: dict[str, _CpuTimes] = {}

    def update_once(self, info: MonitorInfo) -> None:
        for row in read_fields(self.path):
            name = row[0]
            if "cpu" not in name:
                continue
            try:
                times = _CpuTimes(*(float(value) for value in row[1:11]))
            except (TypeError, ValueError) as exc:
                raise ValueError(f"{self.path}: bad counters for {name}") from exc
            old = self._previous.get(name)
            if old is not None:
                span = times.total - old.total

                def share(new: float, prev: float) -> float:
                    return _ratio(new - prev, span) * 100.0

                info.cpu_stat.append(
                    CpuStat(
                        cpu_name=name,
                        cpu_percent=share(times.busy, old.busy),
                        usr_percent=share(times.user, old.user),
                        system_percent=share(times.system, old.system),
                        nice_percent=share(times.nice, old.nice),
                        idle_percent=share(times.idle, old.idle),
                        io_wait_percent=share(times.io_wait, old.io_wait),
                        irq_percent=share(times.irq, old.irq),
                        soft_irq_percent=share(times.soft_irq, old.soft_irq),
                    )
                )
            self._previous[name] = times


_MEMINFO_KEYS = {
    "MemTotal:": "total",
    "MemFree:": "free",
    "MemAvailable:": "avail",
    "Buffers:": "buffers",
    "Cached:": "cached",
    "SwapCached:": "swap_cached",
    "Active:": "active",
    "Inactive:": "inactive",
    "Active(anon):": "active_anon",
    "Inactive(anon):": "inactive_anon",
    "Active(file):": "active_file",
    "Inactive(file):": "inactive_file",
    "Dirty:": "dirty",
    "Writeback:": "writeback",
    "AnonPages:": "anon_pages",
    "Mapped:": "mapped",
    "KReclaimable:": "kreclaimable",
    "SReclaimable:": "sreclaimable",
    "SUnreclaim:": "sunreclaim",
}


class MemMonitor(Monitor):
    """Reports memory usage; sizes are converted from kilobytes to gigabytes."""

    def __init__(self, path: PathLike = MEMINFO_PATH) -> None:
        self.path = path

    def update_once(self, info: MonitorInfo) -> None:
        kilobytes = dict.fromkeys(_MEMINFO_KEYS.values(), 0)
        for row in read_fields(self.path):
            field_name = _MEMINFO_KEYS.get(row[0])
            if field_name is None:
                continue
            try:
                kilobytes[field_name] = int(row[1])
            except (IndexError, ValueError) as exc:
                raise ValueError(f"{self.path}: bad value for {row[0]}") from exc
        total, avail = kilobytes["total"], kilobytes["avail"]
        info.mem_info = MemInfo(
            used_percent=_ratio(float(total - avail), float(total)) * 100.0,
            **{name: value / KB_PER_GB for name, value in kilobytes.items()},
        )


@dataclass(frozen=True)
class _NetCounters:
    rcv_bytes: int
    rcv_packets: int
    err_in: int
    drop_in: int
    snd_bytes: int
    snd_packets: int
    err_out: int
    drop_out: int
    timepoint: float


class NetMonitor(Monitor):
    """Reports per-interface traffic rates from two consecutive readings."""

    def __init__(self, path: PathLike = NET_DEV_PATH, clock: Clock = time.monotonic) -> None:
        self.path = path
        self.clock = clock
        self._previous: dict[str, _NetCounters] = {}

    def update_once(self, info: MonitorInfo) -> None:
        for row in read_fields(self.path):
            label = row[0]
            if label.find(":") != len(label) - 1 or len(row) < 10:
                continue
            name = label[:-1]
            try:
                counters = _NetCounters(
                    rcv_bytes=int(row[1]),
                    rcv_packets=int(row[2]),
                    err_in=int(row[3]),
                    drop_in=int(row[4]),
                    snd_bytes=int(row[9]),
                    snd_packets=int(row[10]),
                    err_out=int(row[11]),
                    drop_out=int(row[12]),
                    timepoint=self.clock(),
                )
            except (IndexError, ValueError) as exc:
                raise ValueError(f"{self.path}: bad counters for {name}") from exc
            old = self._previous.get(name)
            if old is not None:
                period = elapsed_seconds(counters.timepoint, old.timepoint)
                info.net_info.append(
                    NetInfo(
                        name=name,
                        send_rate=_ratio((counters.snd_bytes - old.snd_bytes) / 1024.0, period),
                        rcv_rate=_ratio((counters.rcv_bytes - old.rcv_bytes) / 1024.0, period),
                        send_packets_rate=_ratio(float(counters.snd_packets - old.snd_packets), period),
                        rcv_packets_rate=_ratio(float(counters.rcv_packets - old.rcv_packets), period),
                    )
                )
            self._previous[name] = counters