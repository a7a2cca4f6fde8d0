"""Tests for CancelSignal."""

import asyncio
import inspect

import pytest

from gemini_chat_core.core.cancellation import CancelSignal, OperationCancelled


@pytest.mark.asyncio
async def test_run_returns_result_when_not_cancelled():
    signal = CancelSignal()

    async def work():
        return 42

    assert await signal.run(work()) == 42


@pytest.mark.asyncio
async def test_run_propagates_work_errors():
    signal = CancelSignal()

    async def work():
        raise ValueError("boom")

    with pytest.raises(ValueError):
        await signal.run(work())


@pytest.mark.asyncio
async def test_set_cancels_pending_work():
    signal = CancelSignal()
    finished = []

    async def work():
        await asyncio.sleep(60)
        finished.append(True)

    task = asyncio.create_task(signal.run(work()))
    await asyncio.sleep(0)
    signal.set()

    with pytest.raises(OperationCancelled):
        await task
    assert finished == []


def test_raise_if_set():
    signal = CancelSignal()
    signal.raise_if_set()
    signal.set()
    assert signal.is_set()
    with pytest.raises(OperationCancelled):
        signal.raise_if_set()


@pytest.mark.asyncio
async def test_run_closes_unstarted_coroutine_when_already_set():
    signal = CancelSignal()
    signal.set()

    async def work():
        return 1

    coro = work()
    with pytest.raises(OperationCancelled):
        await signal.run(coro)
    assert inspect.getcoroutinestate(coro) == inspect.CORO_CLOSED
