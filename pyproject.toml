[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sysmon"
version = "0.1.0"
description = "Collect CPU, soft-IRQ, memory and network figures from /proc, share them over gRPC and show them in the terminal"
requires-python = ">=3.10"
keywords = ["monitoring", "procfs", "cpu", "memory", "network", "softirq", "grpc", "dashboard"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]
dependencies = [
    "grpcio",
    "rich",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
sysmon-agent = "sysmon.agent:main"
sysmon-server = "sysmon.rpc:server_main"
sysmon-display = "sysmon.display:main"
sysmon-demo-client = "sysmon.rpc:demo_client_main"

[tool.hatch.build.targets.wheel]
packages = ["sysmon"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
