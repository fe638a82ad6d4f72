"""
Async HTTP client for the Sophia compiler service.

Implements the `Compiler` protocol consumed by `ContractInstance`:

    POST /compile        {"code", "options"}            -> {"bytecode": "cb_..."}
    POST /aci            {"code", "options"}            -> {"encoded_aci": ..., "interface": ...}
    POST /decode-data    {"sophia-type", "data"}        -> decoded node
    GET  /version                                       -> {"version": "..."}

Transient failures (timeouts, connection errors, HTTP 429/502/503/504) are
retried with exponential backoff. Every other failure is raised as
`CompilerError` straight away.

Example:
    from sophia_sdk.contracts.compiler import CompilerClient

    async with CompilerClient() as compiler:
        out = await compiler.compile(source)
        print(out["bytecode"])
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Dict, Mapping, Optional

import httpx

from ..config import CompilerConfig
from ..errors import CompilerError
from .backend import JsonDict

log = logging.getLogger(__name__)

__all__ = ["CompilerClient"]

# Only these option keys are understood by the compiler endpoints.
_COMPILER_OPTION_KEYS = ("file_system", "src_file", "backend")


def _is_retriable_http(status: int) -> bool:
    return status in (429, 502, 503, 504)


def _jitter_backoff(factor: float, attempt: int, jitter: float = 0.1) -> float:
    return factor * (2 ** max(attempt - 1, 0)) + random.random() * jitter


def _compiler_options(options: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    if not options:
        return {}
    return {k: options[k] for k in _COMPILER_OPTION_KEYS if options.get(k) is not None}


class _Transient(Exception):
    def __init__(self, reason: str, status: Optional[int] = None) -> None:
        super().__init__(reason)
        self.status = status


class CompilerClient:
    """
    Compiler collaborator over HTTP.

    Parameters
    ----------
    config : CompilerConfig (defaults to `CompilerConfig.from_env()`)
    client : optional pre-built httpx.AsyncClient (tests, shared pools);
             it is not closed by `aclose()` when supplied
    """

    def __init__(
        self,
        config: Optional[CompilerConfig] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config or CompilerConfig.from_env()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self.config.url,
            timeout=self.config.timeout,
            headers=self.config.http_headers(),
        )

    # --- context manager -------------------------------------------------

    async def __aenter__(self) -> "CompilerClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # --- Compiler protocol -----------------------------------------------

    async def compile(self, source: str, options: Optional[Mapping[str, Any]] = None) -> JsonDict:
        out = await self._request(
            "POST", "/compile", {"code": source, "options": _compiler_options(options)}
        )
        if not isinstance(out, dict) or "bytecode" not in out:
            raise CompilerError("response carries no bytecode", endpoint="/compile", reason=out)
        return out

    async def get_aci(self, source: str, options: Optional[Mapping[str, Any]] = None) -> JsonDict:
        out = await self._request(
            "POST", "/aci", {"code": source, "options": _compiler_options(options)}
        )
        if not isinstance(out, dict):
            raise CompilerError("unexpected ACI response", endpoint="/aci", reason=out)
        return out

    async def decode_data(self, type_hint: str, data: str) -> JsonDict:
        return await self._request("POST", "/decode-data", {"sophia-type": type_hint, "data": data})

    async def version(self) -> str:
        out = await self._request("GET", "/version")
        return out.get("version", "") if isinstance(out, dict) else str(out)

    # --- internals -------------------------------------------------------

    async def _request(self, method: str, path: str, body: Optional[JsonDict] = None) -> Any:
        attempt = 0
        while True:
            attempt += 1
            try:
                return await self._send_once(method, path, body)
            except _Transient as e:
                if attempt > self.config.max_retries:  # N retries -> N+1 attempts
                    raise CompilerError(
                        "compiler unavailable", endpoint=path, status=e.status, reason=str(e)
                    ) from e
                delay = _jitter_backoff(self.config.backoff_factor, attempt)
                log.debug("%s %s failed (%s); retry %d in %.2fs", method, path, e, attempt, delay)
                await asyncio.sleep(delay)

    async def _send_once(self, method: str, path: str, body: Optional[JsonDict]) -> Any:
        try:
            r = await self._client.request(method, path, json=body)
        except (httpx.TimeoutException, httpx.NetworkError) as e:
            raise _Transient(f"network error: {e}") from e
        if _is_retriable_http(r.status_code):
            raise _Transient(f"HTTP {r.status_code}", status=r.status_code)

        try:
            payload = r.json()
        except ValueError as e:
            raise CompilerError(
                "non-JSON response", endpoint=path, status=r.status_code, reason=r.text[:256]
            ) from e

        if r.is_error:
            reason = payload.get("reason", payload) if isinstance(payload, dict) else payload
            raise CompilerError("request rejected", endpoint=path, status=r.status_code, reason=reason)
        return payload
