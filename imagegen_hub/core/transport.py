"""
Transport clients
供应商适配器与网络之间的唯一出口。
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any, Protocol

import aiohttp

from .constants import DEFAULT_TIMEOUT, LOG_PREFIX
from .log import logger


@dataclass(frozen=True)
class NativeRequest:
    """供应商原生请求"""

    url: str
    payload: dict = field(default_factory=dict)
    headers: dict = field(default_factory=dict)
    method: str = "POST"


@dataclass(frozen=True)
class NativeResponse:
    """供应商原生响应，payload 为解析后的 JSON（无法解析时为 None）"""

    status: int
    payload: Any = None
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    async def call(self, request: NativeRequest) -> NativeResponse: ...

    async def close(self) -> None: ...


class AiohttpTransport:
    """基于 aiohttp 的传输客户端。

    网络异常（超时、连接失败等）原样向上抛出，由 classifier 归类。
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, proxy: str | None = None):
        self.timeout = timeout
        self.proxy = proxy
        self._session: aiohttp.ClientSession | None = None

    def _get_session(self) -> aiohttp.ClientSession:
        """获取或创建 HTTP 会话。"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        """关闭底层的 HTTP 会话。"""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def call(self, request: NativeRequest) -> NativeResponse:
        start_time = time.time()
        session = self._get_session()
        async with session.request(
            request.method,
            request.url,
            json=request.payload,
            headers=request.headers,
            proxy=self.proxy,
            timeout=aiohttp.ClientTimeout(total=self.timeout),
        ) as resp:
            text = await resp.text()
            duration = time.time() - start_time
            logger.debug(
                f"{LOG_PREFIX} [Transport] {request.method} {request.url} -> {resp.status} (耗时: {duration:.2f}s)"
            )

        try:
            payload = json.loads(text) if text else None
        except ValueError:
            payload = None
        return NativeResponse(status=resp.status, payload=payload, text=text)
