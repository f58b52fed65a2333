import io

import pytest
from rich.console import Console

from sysmon.display import MonitorDashboard, Page, main
from sysmon.messages import CpuLoad, CpuStat, MemInfo, MonitorInfo, NetInfo, SoftIrq
from sysmon.rpc import MonitorStore, build_server


def _text(renderable):
    buffer = io.StringIO()
    Console(file=buffer, width=400, color_system=None).print(renderable)
    return buffer.getvalue()


def _sample():
    return MonitorInfo(
        name="host-a",
        soft_irq=[SoftIrq(cpu="CPU0", hi=2.0), SoftIrq(cpu="CPU1")],
        cpu_load=CpuLoad(0.25, 0.5, 0.75),
        cpu_stat=[CpuStat(cpu_name="cpu0", cpu_percent=12.5)],
        mem_info=MemInfo(used_percent=40.0, total=8.0),
        net_info=[NetInfo(name="eth0", send_rate=1.5)],
    )


@pytest.fixture
def running_server():
    store = MonitorStore()
    server, port = build_server("127.0.0.1:0", store)
    server.start()
    yield store, f"127.0.0.1:{port}"
    server.stop(None)


def test_button_labels_follow_name():
    dashboard = MonitorDashboard("host-a")
    assert dashboard.button_labels() == ["host-a_cpu", "host-a_soft_irq", "host-a_mem", "host-a_net"]


def test_starts_on_cpu_page():
    assert MonitorDashboard("x").page is Page.CPU


def test_select_accepts_page_and_int():
    dashboard = MonitorDashboard("x")
    dashboard.select(Page.MEM)
    assert dashboard.page is Page.MEM
    dashboard.select(3)
    assert dashboard.page is Page.NET


def test_select_rejects_unknown_page():
    with pytest.raises(ValueError):
        MonitorDashboard("x").select(7)


def test_update_data_fills_every_model():
    dashboard = MonitorDashboard("host-a")
    info = _sample()
    dashboard.update_data(info)
    assert dashboard.soft_irq_model.row_count() == len(info.soft_irq)
    assert dashboard.cpu_stat_model.row_count() == len(info.cpu_stat)
    assert dashboard.cpu_load_model.rows() == [(0.25, 0.5, 0.75)]
    assert dashboard.net_model.data(0, 0) == "eth0"
    assert dashboard.mem_model.data(0, 1) == 8.0


def test_update_data_replaces_rows():
    dashboard = MonitorDashboard("host-a")
    dashboard.update_data(_sample())
    dashboard.update_data(MonitorInfo())
    assert dashboard.net_model.row_count() == 0
    assert dashboard.cpu_stat_model.row_count() == 0


def test_render_cpu_page_shows_both_cpu_tables():
    dashboard = MonitorDashboard("host-a")
    dashboard.update_data(_sample())
    out = _text(dashboard.render())
    assert "host-a_cpu" in out and "host-a_net" in out
    assert "Monitor CpuStat:" in out and "Monitor CpuLoad:" in out
    assert out.index("Monitor CpuStat:") < out.index("Monitor CpuLoad:")
    assert "cpu0" in out and "load_15" in out
    assert "Monitor mem:" not in out


@pytest.mark.parametrize(
    "page, title, value",
    [(Page.SOFT_IRQ, "Monitor softirq:", "CPU1"), (Page.MEM, "Monitor mem:", "used_percent"),
     (Page.NET, "Monitor net:", "eth0")],
)
def test_render_other_pages(page, title, value):
    dashboard = MonitorDashboard("host-a")
    dashboard.update_data(_sample())
    dashboard.select(page)
    out = _text(dashboard.render())
    assert title in out and value in out
    assert "Monitor CpuLoad:" not in out


def test_main_shows_server_snapshot(running_server, capsys):
    store, address = running_server
    store.set_monitor_info(_sample())
    assert main([address, "--count", "1", "--interval", "0"]) == 0
    out = capsys.readouterr().out
    assert "host-a_cpu" in out
    assert "Monitor CpuLoad:" in out


def test_main_rejects_unknown_page():
    with pytest.raises(SystemExit):
        main(["--page", "disk"])