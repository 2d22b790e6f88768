from __future__ import annotations

import asyncio
import base64
from io import BytesIO

from PIL import Image

from imagegen_hub.core.transport import NativeRequest, NativeResponse


def make_png(width: int = 8, height: int = 6) -> bytes:
    output = BytesIO()
    Image.new("RGB", (width, height), (255, 0, 0)).save(output, format="PNG")
    return output.getvalue()


def make_png_b64(width: int = 8, height: int = 6) -> str:
    return base64.b64encode(make_png(width, height)).decode("ascii")


class FakeTransport:
    """按顺序返回预设响应的传输客户端，并记录所有请求。

    预设项可以是 NativeResponse、异常实例，或直接作为 200 响应体的 dict。
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: list[NativeRequest] = []
        self.closed = False

    def queue(self, response) -> FakeTransport:
        self.responses.append(response)
        return self

    async def call(self, request: NativeRequest) -> NativeResponse:
        self.calls.append(request)
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        if isinstance(response, NativeResponse):
            return response
        return NativeResponse(status=200, payload=response, text=str(response))

    async def close(self) -> None:
        self.closed = True


class BlockingTransport(FakeTransport):
    """第一次调用一直挂起直到被取消，之后按预设响应返回。"""

    def __init__(self, *responses):
        super().__init__(*responses)
        self.started = asyncio.Event()
        self.cancelled = False
        self._block = True

    async def call(self, request: NativeRequest) -> NativeResponse:
        if not self._block:
            return await super().call(request)
        self._block = False
        self.calls.append(request)
        self.started.set()
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        raise AssertionError("unreachable")
