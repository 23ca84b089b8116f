import asyncio

import pytest

from shellpiper.ansi import CLEAR_LINE
from shellpiper.executor import CapturedCommand, StepExecutor
from shellpiper.render import ProgressRenderer
from shellpiper.types import Step


def make_step(command, index=1):
    return Step(description=f"step {index}", command=command, index=index)


@pytest.fixture
def executor(stream):
    return StepExecutor(ProgressRenderer(stream=stream), poll_interval=0.01)


# ===== CapturedCommand =====


@pytest.mark.asyncio
async def test_captured_command_merges_streams(sink_dir):
    async with CapturedCommand("echo out; echo err 1>&2; exit 7") as captured:
        assert captured.sink_path.parent == sink_dir
        exit_code = await captured.wait()
        assert captured.exited
        assert captured.read_lines() == ["out", "err"]
    assert exit_code == 7
    assert list(sink_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_latest_line_skips_blank_lines(sink_dir):
    async with CapturedCommand("printf 'first\\n\\nlast\\n  \\n\\n'") as captured:
        await captured.wait()
        assert captured.latest_line() == "last"
        assert captured.read_lines() == ["first", "", "last", "  ", ""]


@pytest.mark.asyncio
async def test_latest_line_before_output(sink_dir):
    async with CapturedCommand("sleep 0.2") as captured:
        assert captured.latest_line() is None
        assert not captured.exited
        await captured.wait()


def test_latest_line_longer_than_one_block(tmp_path):
    long_line = "é" * 5000
    sink = tmp_path / "sink.out"
    sink.write_bytes(("earlier\n" + long_line + "\n\n").encode("utf-8"))
    captured = CapturedCommand("unused")
    captured.sink_path = sink
    assert captured.latest_line() == long_line


@pytest.mark.asyncio
async def test_close_kills_running_command(sink_dir):
    captured = CapturedCommand("sleep 10")
    await captured.start()
    sink = captured.sink_path
    assert sink.exists()
    await captured.close()
    assert captured.exited
    assert not sink.exists()


# ===== StepExecutor =====


@pytest.mark.asyncio
async def test_execute_success(executor, stream, sink_dir):
    result = await executor.execute(make_step("echo hello"))
    assert result.exit_code == 0
    assert result.succeeded
    assert result.output == ["hello"]
    assert result.duration >= 0
    assert stream.getvalue().endswith(CLEAR_LINE)
    assert list(sink_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_execute_failure_cleans_up(executor, sink_dir):
    result = await executor.execute(make_step("echo broken; exit 3"))
    assert result.exit_code == 3
    assert not result.succeeded
    assert result.output == ["broken"]
    assert list(sink_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_execute_tails_latest_line(executor, stream, sink_dir):
    result = await executor.execute(
        make_step("printf '\\033[32mfirst\\033[0m\\n'; sleep 0.3; echo second; sleep 0.3")
    )
    shown = stream.getvalue()
    assert "Current: " in shown
    assert "first" in shown
    assert "second" in shown
    assert "\x1b[32m" not in shown
    # The capture keeps the original formatting.
    assert result.output == ["\x1b[32mfirst\x1b[0m", "second"]


@pytest.mark.asyncio
async def test_execute_does_not_repeat_unchanged_line(executor, stream, sink_dir):
    await executor.execute(make_step("echo steady; sleep 0.3"))
    assert stream.getvalue().count("steady") == 1


@pytest.mark.asyncio
async def test_execute_cancellation_removes_sink(executor, sink_dir):
    task = asyncio.create_task(executor.execute(make_step("echo started; sleep 10")))
    await asyncio.sleep(0.3)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert list(sink_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_execute_uses_configured_shell(stream, sink_dir):
    executor = StepExecutor(ProgressRenderer(stream=stream), poll_interval=0.01, shell="/bin/sh")
    result = await executor.execute(make_step("echo $0"))
    assert result.output == ["/bin/sh"]
