# sysmon

A small Linux monitoring system in three parts:

- **an agent** that reads `/proc/loadavg`, `/proc/stat`, `/proc/softirqs`,
  `/proc/meminfo` and `/proc/net/dev`, turns the raw counters into load
  averages, CPU percentages, soft-IRQ rates, memory figures (in gigabytes)
  and network rates, and sends a snapshot to the server every 3 seconds;
- **a server** that keeps the latest snapshot it has been given and hands
  it to anyone who asks;
- **a terminal dashboard** that fetches the snapshot every 2 seconds and
  shows it as tables.

The agent and the dashboard talk to the server over gRPC. Snapshots travel
as compact JSON (`MonitorInfo.encode` / `MonitorInfo.decode`), so the
service speaks only to these clients.

## Installing

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Running

Start the server first. It listens on `0.0.0.0:50051` unless told otherwise:

```
sysmon-server
sysmon-server --address 127.0.0.1:6000
```

On the machine to watch, start the agent:

```
sysmon-agent
```

Its options:

- `--server` — server address, default `localhost:50051`;
- `--name` — name reported for this machine, default the `USER`
  environment variable;
- `--interval` — seconds between snapshots, default 3;
- `--count` — stop after this many snapshots (runs forever without it);
- `--proc-root` — directory holding the statistics files, default `/proc`;
- `--timeout` — call timeout in seconds, default 5.

A snapshot the server does not accept is logged as a warning and the agent
carries on. Rates and percentages come from the difference between two
readings, so the CPU, soft-IRQ and network tables fill in from the second
round on.

Then open the dashboard. It connects to `localhost:50051` unless another
address is given:

```
sysmon-display
sysmon-display otherhost:50051 --page mem
```

Its options: `--interval` (seconds between refreshes, default 2), `--count`
(stop after this many refreshes), `--page` (`cpu`, `soft_irq`, `mem` or
`net`, default `cpu`) and `--timeout` (default 5). The menu line at the top
names the pages after the monitored host — `<name>_cpu`, `<name>_soft_irq`,
`<name>_mem`, `<name>_net` — with the page on show highlighted. When a fetch
fails the dashboard logs a warning and shows empty tables until the next one.
Press Ctrl-C to quit.

To check that the server answers without running the agent, send it a
hand-made snapshot with two soft-IRQ rows (`cpu1` and `cpu2`):

```
sysmon-demo-client
sysmon-demo-client otherhost:50051 --timeout 2
```

It exits with status 1 and a message on standard error if the call fails.

## Using it from Python

```python
from sysmon.messages import MonitorInfo
from sysmon.monitors import CpuLoadMonitor, MemMonitor
from sysmon.tables import CpuLoadModel

info = MonitorInfo()
CpuLoadMonitor().update_once(info)
MemMonitor().update_once(info)

model = CpuLoadModel()
model.update_monitor_info(info)
print(model.rows())
```

- `sysmon.messages` — the snapshot dataclasses: `MonitorInfo` with its
  `CpuLoad`, `CpuStat`, `SoftIrq`, `MemInfo` and `NetInfo` parts;
  `to_dict`/`from_dict` and `encode`/`decode` convert them.
- `sysmon.procfile` — `read_fields`, `stats_lines` and `elapsed_seconds`.
- `sysmon.monitors` — `CpuLoadMonitor`, `CpuStatMonitor`,
  `CpuSoftIrqMonitor`, `MemMonitor` and `NetMonitor`, each taking the path
  of the file to read (and, for the rate monitors, a clock function).
- `sysmon.tables` — `CpuLoadModel`, `CpuStatModel`, `SoftIrqModel`,
  `MemModel` and `NetModel`, which lay snapshot sections out as rows; ask
  them for cells with `data` and headers with `header_data` and a `Role`.
- `sysmon.agent` — `default_monitors()` and `collect_once(monitors, name)`.
- `sysmon.rpc` — `MonitorStore`, `build_server(address, store)` and
  `RpcClient`, whose calls raise `RpcFailure` when they fail.
- `sysmon.display` — `MonitorDashboard` with `select`, `update_data` and
  `render`, which returns a `rich` renderable.

## What it does not do

- The server keeps only the latest snapshot, in memory. There is no
  history, no storage and no separation between machines: every agent
  overwrites the same snapshot.
- The dashboard cannot switch pages while running; pick the page with
  `--page` when starting it.
- Only Linux is supported, as everything is read from `/proc`.