import pytest

from sysmon.messages import CpuLoad, CpuStat, MemInfo, MonitorInfo, NetInfo, SoftIrq
from sysmon.tables import (
    CpuLoadModel,
    CpuStatModel,
    MemModel,
    NetModel,
    Role,
    SoftIrqModel,
)


def _snapshot():
    return MonitorInfo(
        name="board",
        cpu_load=CpuLoad(load_avg_1=0.5, load_avg_3=0.25, load_avg_15=0.125),
        cpu_stat=[
            CpuStat(cpu_name="cpu", cpu_percent=40.0, usr_percent=30.0, system_percent=10.0),
            CpuStat(cpu_name="cpu0", cpu_percent=20.0, usr_percent=15.0, system_percent=5.0),
        ],
        soft_irq=[
            SoftIrq(cpu="CPU0", hi=1.0, timer=2.0, rcu=9.0),
            SoftIrq(cpu="CPU1", hi=3.0, timer=4.0, rcu=8.0),
        ],
        mem_info=MemInfo(used_percent=55.0, total=16.0, free=2.0, dirty=0.75, sunreclaim=0.5),
        net_info=[NetInfo(name="eth0", send_rate=1.5, rcv_rate=2.5,
                          send_packets_rate=10.0, rcv_packets_rate=20.0)],
    )


def test_empty_model_has_no_rows():
    model = CpuStatModel()
    assert model.row_count() == 0
    assert model.data(0, 0) is None
    assert model.rows() == []


def test_cpu_load_model_single_row():
    model = CpuLoadModel()
    model.update_monitor_info(_snapshot())
    assert model.row_count() == 1
    assert model.column_count() == 3
    assert model.rows() == [(0.5, 0.25, 0.125)]
    assert model.header_data(0) == "load_1"
    assert model.header_data(2, Role.DISPLAY) == "load_15"


def test_cpu_stat_model_rows_follow_input_order():
    model = CpuStatModel()
    model.update_monitor_info(_snapshot())
    assert model.row_count() == 2
    assert model.data(0, 0) == "cpu"
    assert model.data(1, 0) == "cpu0"
    assert model.data(1, 1) == 20.0
    assert model.data(1, 2) == 15.0
    assert model.data(1, 3) == 5.0
    assert [model.header_data(i) for i in range(model.column_count())] == [
        "name", "cpu_percent", "user", "system"]


def test_soft_irq_model_columns():
    model = SoftIrqModel()
    model.update_monitor_info(_snapshot())
    assert model.column_count() == 11
    assert model.rows()[0][0] == "CPU0"
    assert model.data(1, 1) == 3.0
    assert model.data(0, model.column_count() - 1) == 9.0
    assert model.header_data(10) == "rcu"


def test_mem_model_header_list_is_longer_than_columns():
    model = MemModel()
    model.update_monitor_info(_snapshot())
    assert model.column_count() == 18
    assert len(model.headers) > model.column_count()
    assert model.header_data(11) == "active_file"
    assert model.data(0, 11) == 0.75
    assert model.data(0, model.column_count() - 1) == 0.5
    assert model.data(0, 0) == 55.0
    assert model.data(0, 1) == 16.0


def test_net_model_rows():
    model = NetModel()
    model.update_monitor_info(_snapshot())
    assert model.rows() == [("eth0", 1.5, 2.5, 10.0, 20.0)]


def test_update_replaces_previous_rows():
    model = CpuStatModel()
    model.update_monitor_info(_snapshot())
    model.update_monitor_info(MonitorInfo(cpu_stat=[CpuStat(cpu_name="cpu7")]))
    assert model.row_count() == 1
    assert model.data(0, 0) == "cpu7"
    model.update_monitor_info(MonitorInfo())
    assert model.row_count() == 0


def test_data_outside_table_is_none():
    model = NetModel()
    model.update_monitor_info(_snapshot())
    assert model.data(0, -1) is None
    assert model.data(0, model.column_count()) is None
    assert model.data(5, 0) is None
    assert model.data(-1, 0) is None


@pytest.mark.parametrize("role", [Role.FONT, Role.BACKGROUND, Role.TEXT_ALIGNMENT, Role.TEXT_COLOR])
def test_data_for_non_display_roles_is_none(role):
    model = CpuLoadModel()
    model.update_monitor_info(_snapshot())
    assert model.data(0, 0, role) is None


def test_header_styling_roles():
    model = NetModel()
    font = model.header_data(0, Role.FONT)
    assert font.family == "Microsoft YaHei"
    assert font.bold is True
    assert model.header_data(0, Role.BACKGROUND) == "lightGray"
    assert model.header_data(0, Role.TEXT_COLOR) is None


def test_header_out_of_range_raises():
    model = CpuLoadModel()
    with pytest.raises(IndexError):
        model.header_data(len(model.headers), Role.DISPLAY)
    with pytest.raises(IndexError):
        model.header_data(-1)


def test_rows_returns_copy():
    model = CpuLoadModel()
    model.update_monitor_info(_snapshot())
    rows = model.rows()
    rows.clear()
    assert model.row_count() == 1