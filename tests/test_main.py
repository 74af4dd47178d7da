import asyncio
import os
import signal

import pytest
from conftest import python_server

from mcp_launcher import main as launcher
from mcp_launcher.loader import load_servers
from mcp_launcher.models import ServerDefinition
from mcp_launcher.selector import parse_filter, select


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(launcher, "setup_logging", lambda *args, **kwargs: None)


@pytest.fixture
def fake_run(monkeypatch):
    calls = []

    async def _run(definitions, output, **kwargs):
        calls.append((list(definitions), output))
        return 0

    monkeypatch.setattr(launcher, "run", _run)
    return calls


def test_missing_config_exits_non_zero(tmp_path, capsys, fake_run):
    code = launcher.main(["--config", str(tmp_path / "missing.json")])
    out, err = capsys.readouterr()

    assert code == 1
    assert "Config file not found" in err
    assert out == ""
    assert fake_run == []


def test_invalid_config_exits_non_zero(write_config, capsys, fake_run):
    code = launcher.main(["--config", str(write_config("not json"))])

    assert code == 1
    assert "Failed to parse" in capsys.readouterr().err
    assert fake_run == []


def test_empty_selection_exits_non_zero(write_config, capsys, fake_run):
    path = write_config({"mcpServers": {"a": {"command": "echo"}}})

    code = launcher.main(["--config", str(path), "--only", "b"])

    assert code == 1
    assert "No servers match the given filter." in capsys.readouterr().err
    assert fake_run == []


def test_selected_definitions_are_run(write_config, fake_run):
    path = write_config({"mcpServers": {"a": {"command": "echo"}, "b": {"command": "echo"}, "c": {"command": "echo"}}})

    code = launcher.main(["--config", str(path), "--exclude", "b", "--no-color"])

    assert code == 0
    [(definitions, output)] = fake_run
    assert [d.name for d in definitions] == ["a", "c"]
    assert not output.color


def test_usage_error_exits_with_argparse_code(capsys):
    with pytest.raises(SystemExit) as exc:
        launcher.main(["--bogus"])
    assert exc.value.code == 2


def test_echo_scenario_ends_with_zero_on_sigterm(console):
    async def scenario():
        loop = asyncio.get_running_loop()

        def started(coordinator):
            loop.call_later(0.5, os.kill, os.getpid(), signal.SIGTERM)

        return await launcher.run(
            [ServerDefinition(name="echoer", command="echo", args=["hi"])],
            console,
            status_delay=0.2,
            shutdown_grace=0.1,
            on_started=started,
        )

    code = asyncio.run(scenario())
    lines = console.lines()

    assert code == 0
    assert "[echoer] hi" in lines
    assert "[echoer] ✅ Exited successfully." in lines
    assert "  📋 MCP Server Status" in lines
    assert "✅ All servers stopped." in lines


def test_only_filter_spawns_just_the_named_server(write_config, console):
    path = write_config({"mcpServers": {"a": {"command": "echo", "args": ["from a"]}, "b": {"command": "echo", "args": ["from b"]}}})
    definitions = select(load_servers(path), parse_filter(launcher.build_parser().parse_args(["--only", "a"])))

    async def scenario():
        loop = asyncio.get_running_loop()

        def started(coordinator):
            loop.call_later(0.3, coordinator.request_shutdown)

        return await launcher.run(
            definitions,
            console,
            status_delay=10,
            shutdown_grace=0.05,
            install_signals=False,
            on_started=started,
        )

    assert asyncio.run(scenario()) == 0
    lines = console.lines()
    assert "[a] from a" in lines
    assert not any(line.startswith("[b]") for line in lines)
    assert "  📋 MCP Server Status" not in lines


def test_signal_during_spawn_pass_terminates_every_started_server(console):
    definitions = [python_server(f"s{i}", "import time; time.sleep(30)") for i in range(6)]
    records = []

    async def scenario():
        loop = asyncio.get_running_loop()
        # Delivered while the first spawn is still in flight
        loop.call_soon(os.kill, os.getpid(), signal.SIGTERM)
        return await launcher.run(
            definitions,
            console,
            status_delay=0.05,
            shutdown_grace=0.2,
            on_started=lambda coordinator: records.extend(coordinator.manager.processes),
        )

    code = asyncio.run(scenario())
    lines = console.lines()
    started = [r for r in records if r.process is not None]

    assert code == 0
    assert started
    assert [r.name for r in records if r.alive and not r.killed] == []
    assert all(r.killed for r in started)
    assert sum(line.endswith("] Process terminated.") for line in lines) == len(started)
    assert lines.index("⏳ Shutting down servers...") < lines.index("✅ All servers stopped.")
    assert "  📋 MCP Server Status" not in lines
