"""Table models that lay out snapshot sections as rows and columns for display."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional

from .messages import MonitorInfo


class Role(Enum):
    """What a caller asks a table model for."""

    DISPLAY = "display"
    FONT = "font"
    BACKGROUND = "background"
    TEXT_ALIGNMENT = "text_alignment"
    TEXT_COLOR = "text_color"


@dataclass(frozen=True)
class Font:
    """A font description for header cells."""

    family: str
    point_size: int
    bold: bool = False


HEADER_FONT = Font("Microsoft YaHei", 10, bold=True)
HEADER_BACKGROUND = "lightGray"


class TableModel(ABC):
    """A table built from one section of a MonitorInfo snapshot.

    ``headers`` names the header cells and ``columns`` the record attributes
    shown in each column, in order.
    """

    headers: tuple[str, ...] = ()
    columns: tuple[str, ...] = ()

    def __init__(self) -> None:
        self._rows: list[tuple[Any, ...]] = []

    def row_count(self) -> int:
        """Number of rows currently held."""
        return len(self._rows)

    def column_count(self) -> int:
        """Number of data columns."""
        return len(self.columns)

    def header_data(self, section: int, role: Role = Role.DISPLAY) -> Optional[Any]:
        """Header text, font or background for a column header.

        Raises IndexError when a display header is asked for a section with
        no header.
        """
        if role is Role.DISPLAY:
            if section < 0 or section >= len(self.headers):
                raise IndexError(f"no header for section {section}")
            return self.headers[section]
        if role is Role.FONT:
            return HEADER_FONT
        if role is Role.BACKGROUND:
            return HEADER_BACKGROUND
        return None

    def data(self, row: int, column: int, role: Role = Role.DISPLAY) -> Optional[Any]:
        """The value in a cell, or None outside the table or for other roles."""
        if column < 0 or column >= self.column_count():
            return None
        if role is Role.DISPLAY and 0 <= row < len(self._rows):
            return self._rows[row][column]
        return None

    def rows(self) -> list[tuple[Any, ...]]:
        """A copy of all rows."""
        return list(self._rows)

    def update_monitor_info(self, info: MonitorInfo) -> None:
        """Replace the table's contents with the matching part of ``info``."""
        self._rows = [
            tuple(getattr(record, name) for name in self.columns)
            for record in self._records(info)
        ]

    @abstractmethod
    def _records(self, info: MonitorInfo) -> Iterable[Any]:
        """The records of ``info`` that become rows."""


class CpuLoadModel(TableModel):
    """One row of load averages."""

    headers = ("load_1", "load_3", "load_15")
    columns = ("load_avg_1", "load_avg_3", "load_avg_15")

    def _records(self, info: MonitorInfo) -> Iterable[Any]:
        return [info.cpu_load]


class CpuStatModel(TableModel):
    """One row per CPU with its busy, user and system shares."""

    headers = ("name", "cpu_percent", "user", "system")
    columns = ("cpu_name", "cpu_percent", "usr_percent", "system_percent")

    def _records(self, info: MonitorInfo) -> Iterable[Any]:
        return info.cpu_stat


class SoftIrqModel(TableModel):
    """One row per CPU with its soft interrupt rates."""

    headers = (
        "cpu", "hi", "timer", "net_tx", "net_rx", "block",
        "irq_poll", "tasklet", "sched", "hrtimer", "rcu",
    )
    columns = (
        "cpu", "hi", "timer", "net_tx", "net_rx", "block",
        "irq_poll", "tasklet", "sched", "hrtimer", "rcu",
    )

    def _records(self, info: MonitorInfo) -> Iterable[Any]:
        return info.soft_irq


class MemModel(TableModel):
    """One row of memory figures.

    The header list also names active_file and inactive_file, which have no
    data column, so headers from section 11 on sit beside other columns' data.
    """

    headers = (
        "used_percent", "total", "free", "avail", "buffers", "cached",
        "swap_cached", "active", "in_active", "active_anon", "inactive_anon",
        "active_file", "inactive_file", "dirty", "writeback", "anon_pages",
        "mapped", "kReclaimable", "sReclaimable", "sUnreclaim",
    )
    columns = (
        "used_percent", "total", "free", "avail", "buffers", "cached",
        "swap_cached", "active", "inactive", "active_anon", "inactive_anon",
        "dirty", "writeback", "anon_pages", "mapped", "kreclaimable",
        "sreclaimable", "sunreclaim",
    )

    def _records(self, info: MonitorInfo) -> Iterable[Any]:
        return [info.mem_info]


class NetModel(TableModel):
    """One row per network interface with its traffic rates."""

    headers = ("name", "send_rate", "rcv_rate", "send_packets_rate", "rcv_packets_rate")
    columns = ("name", "send_rate", "rcv_rate", "send_packets_rate", "rcv_packets_rate")

    def _records(self, info: MonitorInfo) -> Iterable[Any]:
        return info.net_info