"""Tests for FunctionDispatcher."""

import asyncio

import pytest
from pydantic import BaseModel

from gemini_chat_core.core.cancellation import CancelSignal, OperationCancelled
from gemini_chat_core.core.types import FunctionCall
from gemini_chat_core.tools.dispatcher import FunctionDispatcher, normalize_result
from gemini_chat_core.tools.registry import FunctionRegistry


class Reading(BaseModel):
    temp: int
    unit: str = "C"


class Sensors:
    def __init__(self):
        self.seen = []

    def weather(self, args):
        self.seen.append(args)
        return {"temp": 21}

    async def humidity(self, args):
        await asyncio.sleep(0)
        return 0.4

    def reading(self, args):
        return Reading(temp=18)

    def ping(self):
        return None

    def broken(self, args):
        raise RuntimeError("sensor offline")

    def photo(self, args):
        return {
            "result": {"taken": True},
            "content": [{"inlineData": {"mimeType": "image/jpeg", "data": "aGk="}}],
        }

    def plain(self, args):
        return {"taken": True}

    async def slow(self, args):
        await asyncio.sleep(60)
        return {}


@pytest.fixture
def sensors():
    return Sensors()


@pytest.fixture
def dispatcher(sensors):
    registry = FunctionRegistry()
    registry.register_group("sensor", sensors)
    return FunctionDispatcher(registry)


def response_of(content):
    return content.parts[0].function_response


@pytest.mark.asyncio
async def test_sync_handler(dispatcher, sensors):
    content = await dispatcher.dispatch(
        FunctionCall(name="sensor_weather", args={"city": "Oslo"})
    )
    assert content.role == "function"
    assert response_of(content).name == "sensor_weather"
    assert response_of(content).response == {"temp": 21}
    assert sensors.seen == [{"city": "Oslo"}]


@pytest.mark.asyncio
async def test_async_handler_scalar_is_wrapped(dispatcher):
    content = await dispatcher.dispatch(FunctionCall(name="sensor_humidity"))
    assert response_of(content).response == {"result": 0.4}


@pytest.mark.asyncio
async def test_pydantic_result_and_zero_arg_handler(dispatcher):
    content = await dispatcher.dispatch(FunctionCall(name="sensor_reading"))
    assert response_of(content).response == {"temp": 18, "unit": "C"}

    content = await dispatcher.dispatch(FunctionCall(name="sensor_ping"))
    assert response_of(content).response == {}


@pytest.mark.asyncio
async def test_unknown_function_becomes_error_payload(dispatcher):
    content = await dispatcher.dispatch(FunctionCall(name="sensor_radar"))
    assert response_of(content).response == {
        "error": "Function sensor_radar not found"
    }


@pytest.mark.asyncio
async def test_handler_exception_becomes_error_payload(dispatcher):
    content = await dispatcher.dispatch(FunctionCall(name="sensor_broken"))
    assert response_of(content).response == {"error": "sensor offline"}


@pytest.mark.asyncio
async def test_as_content_appends_parts(dispatcher):
    content = await dispatcher.dispatch(
        FunctionCall(name="sensor_photo", args={"as_content": True})
    )
    assert response_of(content).response == {"taken": True}
    assert len(content.parts) == 2
    assert content.parts[1].inline_data.data == "aGk="


@pytest.mark.asyncio
async def test_as_content_requires_content_and_result(dispatcher):
    content = await dispatcher.dispatch(
        FunctionCall(name="sensor_plain", args={"as_content": True})
    )
    assert "error" in response_of(content).response
    assert len(content.parts) == 1


@pytest.mark.asyncio
async def test_cancel_interrupts_async_handler(dispatcher):
    signal = CancelSignal()
    task = asyncio.create_task(
        dispatcher.dispatch(FunctionCall(name="sensor_slow"), signal)
    )
    await asyncio.sleep(0.01)
    signal.set()
    with pytest.raises(OperationCancelled):
        await asyncio.wait_for(task, timeout=5)


def test_normalize_result():
    assert normalize_result(None) == {}
    assert normalize_result("ok") == {"result": "ok"}
    assert normalize_result([1, 2]) == {"result": [1, 2]}
    assert normalize_result({"a": (1, 2)}) == {"a": [1, 2]}
