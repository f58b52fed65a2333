"""Terminal dashboard showing the latest snapshot from the store."""

import argparse
import itertools
import logging
import time
from enum import IntEnum
from typing import Any, Optional, Sequence, Union

from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.table import Table
from rich.text import Text

from .messages import MonitorInfo
from .rpc import DEFAULT_SERVER_ADDRESS, RpcClient, RpcFailure
from .tables import CpuLoadModel, CpuStatModel, MemModel, NetModel, SoftIrqModel, TableModel

DEFAULT_INTERVAL = 2.0

log = logging.getLogger(__name__)


class Page(IntEnum):
    """The dashboard's pages, in button order."""

    CPU = 0
    SOFT_IRQ = 1
    MEM = 2
    NET = 3


_PAGE_SUFFIX = {
    Page.CPU: "cpu",
    Page.SOFT_IRQ: "soft_irq",
    Page.MEM: "mem",
    Page.NET: "net",
}


def _format_cell(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.6g}"
    return str(value)


def _table(model: TableModel) -> Table:
    table = Table(header_style="bold", show_lines=False)
    for section in range(model.column_count()):
        table.add_column(str(model.header_data(section)))
    for row in model.rows():
        table.add_row(*(_format_cell(value) for value in row))
    return table


class MonitorDashboard:
    """Pages of tables for one machine, with a menu to switch between them."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.page = Page.CPU
        self.soft_irq_model = SoftIrqModel()
        self.cpu_load_model = CpuLoadModel()
        self.cpu_stat_model = CpuStatModel()
        self.mem_model = MemModel()
        self.net_model = NetModel()

    def button_labels(self) -> list[str]:
        """Menu labels, one per page."""
        return [f"{self.name}_{_PAGE_SUFFIX[page]}" for page in Page]

    def select(self, page: Union[Page, int]) -> None:
        """Show ``page``; raises ValueError for an unknown page."""
        self.page = Page(page)

    def update_data(self, info: MonitorInfo) -> None:
        """Refresh every table from ``info``."""
        for model in (self.soft_irq_model, self.cpu_load_model, self.cpu_stat_model,
                      self.mem_model, self.net_model):
            model.update_monitor_info(info)

    def _sections(self) -> list[tuple[str, TableModel]]:
        if self.page is Page.CPU:
            return [("Monitor CpuStat:", self.cpu_stat_model), ("Monitor CpuLoad:", self.cpu_load_model)]
        if self.page is Page.SOFT_IRQ:
            return [("Monitor softirq:", self.soft_irq_model)]
        if self.page is Page.MEM:
            return [("Monitor mem:", self.mem_model)]
        return [("Monitor net:", self.net_model)]

    def render(self) -> RenderableType:
        """The menu and the current page's tables."""
        menu = Text()
        for page, label in zip(Page, self.button_labels()):
            if page:
                menu.append("  ")
            menu.append(label, style="reverse bold" if page is self.page else "bold")
        parts: list[RenderableType] = [menu]
        for title, model in self._sections():
            parts.append(Text(title, style="bold"))
            parts.append(_table(model))
        return Group(*parts)


def _fetch(client: RpcClient) -> MonitorInfo:
    try:
        return client.get_monitor_info()
    except RpcFailure as exc:
        log.warning("failed to fetch snapshot: %s", exc)
        return MonitorInfo()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Show the server's snapshots, refreshing periodically."""
    parser = argparse.ArgumentParser(prog="sysmon-display", description="Show machine snapshots.")
    parser.add_argument("address", nargs="?", default=DEFAULT_SERVER_ADDRESS, help="server address")
    parser.add_argument("--interval", type=float, default=DEFAULT_INTERVAL, help="seconds between refreshes")
    parser.add_argument("--count", type=int, default=None, help="stop after this many refreshes")
    parser.add_argument("--page", choices=[_PAGE_SUFFIX[p] for p in Page], default="cpu", help="page to show")
    parser.add_argument("--timeout", type=float, default=5.0, help="call timeout in seconds")
    args = parser.parse_args(argv)
    if args.count is not None and args.count < 0:
        parser.error("--count must not be negative")

    console = Console()
    rounds = range(args.count) if args.count is not None else itertools.count()
    with RpcClient(args.address, timeout=args.timeout) as client:
        dashboard = MonitorDashboard(_fetch(client).name)
        dashboard.select(next(p for p, suffix in _PAGE_SUFFIX.items() if suffix == args.page))
        with Live(dashboard.render(), console=console, auto_refresh=False) as live:
            try:
                for number in rounds:
                    if number:
                        time.sleep(args.interval)
                    dashboard.update_data(_fetch(client))
                    live.update(dashboard.render(), refresh=True)
            except KeyboardInterrupt:
                pass
    return 0