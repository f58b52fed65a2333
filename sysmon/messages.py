"""Snapshot messages exchanged between the collector, the store and the viewer."""

import json
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Mapping, TypeVar

_T = TypeVar("_T")


@dataclass
class CpuLoad:
    """Load averages over 1, 3 and 15 minutes."""

    load_avg_1: float = 0.0
    load_avg_3: float = 0.0
    load_avg_15: float = 0.0


@dataclass
class CpuStat:
    """Per-CPU time shares, in percent, over one sampling period."""

    cpu_name: str = ""
    cpu_percent: float = 0.0
    usr_percent: float = 0.0
    system_percent: float = 0.0
    nice_percent: float = 0.0
    idle_percent: float = 0.0
    io_wait_percent: float = 0.0
    irq_percent: float = 0.0
    soft_irq_percent: float = 0.0


@dataclass
class SoftIrq:
    """Per-CPU soft interrupt rates, in events per second."""

    cpu: str = ""
    hi: float = 0.0
    timer: float = 0.0
    net_tx: float = 0.0
    net_rx: float = 0.0
    block: float = 0.0
    irq_poll: float = 0.0
    tasklet: float = 0.0
    sched: float = 0.0
    hrtimer: float = 0.0
    rcu: float = 0.0


@dataclass
class MemInfo:
    """Memory usage: a used percentage and sizes in gigabytes."""

    used_percent: float = 0.0
    total: float = 0.0
    free: float = 0.0
    avail: float = 0.0
    buffers: float = 0.0
    cached: float = 0.0
    swap_cached: float = 0.0
    active: float = 0.0
    inactive: float = 0.0
    active_anon: float = 0.0
    inactive_anon: float = 0.0
    active_file: float = 0.0
    inactive_file: float = 0.0
    dirty: float = 0.0
    writeback: float = 0.0
    anon_pages: float = 0.0
    mapped: float = 0.0
    kreclaimable: float = 0.0
    sreclaimable: float = 0.0
    sunreclaim: float = 0.0


@dataclass
class NetInfo:
    """Per-interface rates: kilobytes and packets per second."""

    name: str = ""
    send_rate: float = 0.0
    rcv_rate: float = 0.0
    send_packets_rate: float = 0.0
    rcv_packets_rate: float = 0.0


def _check_keys(cls: type, data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"{cls.__name__} expects a mapping, got {type(data).__name__}")
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"unknown {cls.__name__} fields: {', '.join(sorted(map(str, unknown)))}")
    return data


def _build(cls: type[_T], data: Any) -> _T:
    """Build a flat message, checking each value against its field's kind."""
    data = _check_keys(cls, data)
    values = {}
    for f in fields(cls):
        if f.name not in data:
            continue
        value = data[f.name]
        if isinstance(f.default, str):
            if not isinstance(value, str):
                raise ValueError(f"{cls.__name__}.{f.name} must be a string")
            values[f.name] = value
        else:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{cls.__name__}.{f.name} must be a number")
            values[f.name] = float(value)
    return cls(**values)


def _build_list(cls: type[_T], data: Any, name: str) -> list[_T]:
    if not isinstance(data, list):
        raise ValueError(f"MonitorInfo.{name} must be a list")
    return [_build(cls, item) for item in data]


@dataclass
class MonitorInfo:
    """One full snapshot of a machine's state."""

    name: str = ""
    soft_irq: list[SoftIrq] = field(default_factory=list)
    cpu_load: CpuLoad = field(default_factory=CpuLoad)
    cpu_stat: list[CpuStat] = field(default_factory=list)
    mem_info: MemInfo = field(default_factory=MemInfo)
    net_info: list[NetInfo] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the snapshot as plain dictionaries and lists."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any) -> "MonitorInfo":
        """Build a snapshot from a mapping; missing fields take defaults."""
        data = _check_keys(cls, data)
        name = data.get("name", "")
        if not isinstance(name, str):
            raise ValueError("MonitorInfo.name must be a string")
        return cls(
            name=name,
            soft_irq=_build_list(SoftIrq, data.get("soft_irq", []), "soft_irq"),
            cpu_load=_build(CpuLoad, data.get("cpu_load", {})),
            cpu_stat=_build_list(CpuStat, data.get("cpu_stat", []), "cpu_stat"),
            mem_info=_build(MemInfo, data.get("mem_info", {})),
            net_info=_build_list(NetInfo, data.get("net_info", []), "net_info"),
        )

    def encode(self) -> bytes:
        """Serialise the snapshot to compact UTF-8 JSON."""
        return json.dumps(self.to_dict(), separators=(",", ":"), sort_keys=True).encode("utf-8")

    @classmethod
    def decode(cls, payload: bytes) -> "MonitorInfo":
        """Parse a snapshot produced by encode(); raises ValueError on bad input."""
        try:
            data = json.loads(payload)
        except ValueError as exc:
            raise ValueError(f"malformed monitor payload: {exc}") from exc
        return cls.from_dict(data)