"""Symbol provider that talks to the Angelscript language server over stdio.

The language server owns the type database (fed by the Unreal Editor or its
own cache) and answers two custom requests:

    angelscript/getAPISearch   query string  -> list of {label, type, data}
    angelscript/getAPIDetails  data token    -> documentation string

Messages use LSP framing: a ``Content-Length`` header block, a blank line,
then a UTF-8 JSON-RPC 2.0 body.
"""

from __future__ import annotations

import asyncio
import itertools
import json
import os
from pathlib import Path
from typing import Any

from angelscript_mcp.core.logger import logger
from angelscript_mcp.providers.interface import ProviderError, SymbolProvider

SEARCH_METHOD = "angelscript/getAPISearch"
DETAILS_METHOD = "angelscript/getAPIDetails"

_SHUTDOWN_TIMEOUT = 5.0


class LanguageServerError(ProviderError):
    """JSON-RPC error response from the language server."""

    def __init__(self, code: int, message: str):
        super().__init__(f"[{code}] {message}")
        self.code = code
        self.message = message


def encode_message(payload: dict[str, Any]) -> bytes:
    body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
    return f"Content-Length: {len(body)}\r\n\r\n".encode("ascii") + body


async def read_message(reader: asyncio.StreamReader) -> dict[str, Any] | None:
    """Read one framed message; None on clean EOF."""
    length: int | None = None
    while True:
        line = await reader.readline()
        if not line:
            return None
        line = line.strip()
        if not line:
            break
        name, _, value = line.decode("ascii", errors="replace").partition(":")
        if name.strip().lower() == "content-length":
            length = int(value.strip())
    if length is None:
        raise ProviderError("Language server message without Content-Length")
    body = await reader.readexactly(length)
    return json.loads(body.decode("utf-8"))


class LanguageServerProvider(SymbolProvider):
    def __init__(self, command: str, args: list[str], root: Path | None = None):
        if not command:
            raise ValueError("Language server command cannot be empty")
        self._command = command
        self._args = args
        self._root = root or Path.cwd()
        self._process: asyncio.subprocess.Process | None = None
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._reader_task: asyncio.Task | None = None
        self._write_lock = asyncio.Lock()
        self._ids = itertools.count(1)
        self._pending: dict[int, asyncio.Future] = {}
        self._closed = False

    @classmethod
    def from_streams(
        cls, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> LanguageServerProvider:
        """Attach to an already-open connection (no subprocess)."""
        provider = cls("<streams>", [])
        provider._reader = reader
        provider._writer = writer
        return provider

    async def start(self) -> None:
        if self._reader is None:
            self._process = await asyncio.create_subprocess_exec(
                self._command,
                *self._args,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
            )
            self._reader = self._process.stdout
            self._writer = self._process.stdin
        self._reader_task = asyncio.create_task(self._read_loop())
        await self.request(
            "initialize",
            {
                "processId": os.getpid(),
                "rootUri": self._root.resolve().as_uri(),
                "capabilities": {},
                "clientInfo": {"name": "angelscript-mcp-server"},
            },
        )
        await self.notify("initialized", {})
        logger.info(f"Language server: connected  {self._command}  {' '.join(self._args)}")

    def has_data(self) -> bool:
        return not self._closed

    async def search(self, text: str) -> list[Any]:
        results = await self.request(SEARCH_METHOD, text)
        return list(results or [])

    async def fetch_detail(self, token: Any) -> str | None:
        details = await self.request(DETAILS_METHOD, token)
        return None if details is None else str(details)

    async def _send(self, payload: dict[str, Any]) -> None:
        if self._writer is None or self._closed:
            raise ProviderError("Language server is not connected")
        async with self._write_lock:
            self._writer.write(encode_message(payload))
            await self._writer.drain()

    async def notify(self, method: str, params: Any) -> None:
        await self._send({"jsonrpc": "2.0", "method": method, "params": params})

    async def request(self, method: str, params: Any) -> Any:
        request_id = next(self._ids)
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future
        try:
            await self._send(
                {"jsonrpc": "2.0", "id": request_id, "method": method, "params": params}
            )
            return await future
        finally:
            self._pending.pop(request_id, None)

    async def _read_loop(self) -> None:
        assert self._reader is not None
        error: BaseException = ProviderError("Language server connection closed")
        try:
            while True:
                message = await read_message(self._reader)
                if message is None:
                    break
                await self._dispatch(message)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("Language server: read loop failed", exception=e)
            error = ProviderError(f"Language server connection failed: {e}")
        finally:
            self._closed = True
            for future in self._pending.values():
                if not future.done():
                    future.set_exception(error)
            self._pending.clear()

    async def _dispatch(self, message: dict[str, Any]) -> None:
        if "method" in message:
            if "id" in message:
                # Server-to-client request (configuration, progress, registration).
                await self._send({"jsonrpc": "2.0", "id": message["id"], "result": None})
            else:
                logger.debug(f"Language server: notification {message['method']}")
            return
        future = self._pending.get(message.get("id"))
        if future is None or future.done():
            return
        if "error" in message and message["error"] is not None:
            err = message["error"]
            future.set_exception(
                LanguageServerError(int(err.get("code", 0)), str(err.get("message", "")))
            )
        else:
            future.set_result(message.get("result"))

    async def close(self) -> None:
        if not self._closed and self._writer is not None:
            try:
                await asyncio.wait_for(self.request("shutdown", None), _SHUTDOWN_TIMEOUT)
                await self.notify("exit", None)
            except (ProviderError, asyncio.TimeoutError, ConnectionError) as e:
                logger.warning(f"Language server: shutdown handshake failed  {e}")
        self._closed = True
        if self._reader_task is not None:
            self._reader_task.cancel()
            try:
                await self._reader_task
            except asyncio.CancelledError:
                pass
            self._reader_task = None
        if self._process is not None:
            if self._process.returncode is None:
                self._process.terminate()
                try:
                    await asyncio.wait_for(self._process.wait(), _SHUTDOWN_TIMEOUT)
                except asyncio.TimeoutError:
                    self._process.kill()
                    await self._process.wait()
            self._process = None
        elif self._writer is not None:
            self._writer.close()
        self._writer = None
        logger.info("Language server: disconnected")
