"""Batched shipping of structured errors to an Elasticsearch bulk endpoint."""

from __future__ import annotations

import json
import threading
import urllib.error
import urllib.request
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Mapping

from lighthouse.sperror import SpError

Transport = Callable[[str, bytes, Mapping[str, str]], int]

_REQUEST_TIMEOUT = 5.0


@dataclass
class KibanaConfig:
    """Where and how errors are shipped; ``flush_period`` is in seconds."""

    url: str = ""
    index_prefix: str = ""
    batch_size: int = 0
    flush_period: float = 0.0
    api_key: str = ""
    environment: str = ""


class KibanaError(RuntimeError):
    """Raised when errors cannot be serialized or delivered."""


def _urllib_transport(url: str, body: bytes, headers: Mapping[str, str]) -> int:
    request = urllib.request.Request(url, data=body, headers=dict(headers), method="POST")
    try:
        with urllib.request.urlopen(request, timeout=_REQUEST_TIMEOUT) as response:
            return response.status
    except urllib.error.HTTPError as exc:
        return exc.code


class Client:
    """Buffers serialized errors and posts them in bulk.

    A batch is sent once ``batch_size`` errors are buffered, and, when
    ``flush_period`` is positive, periodically by a background thread.
    """

    def __init__(self, config: KibanaConfig, transport: Transport | None = None):
        self.config = config
        self._transport = transport or _urllib_transport
        self._buffer: list[str] = []
        self._lock = threading.RLock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        if config.flush_period > 0:
            self._thread = threading.Thread(target=self._flush_periodically, daemon=True)
            self._thread.start()

    def _flush_periodically(self) -> None:
        while not self._stop.wait(self.config.flush_period):
            try:
                self.flush()
            except KibanaError:
                pass

    def log_error(self, error: SpError) -> None:
        """Buffer ``error`` and send the batch if it is full."""
        with self._lock:
            try:
                record = error.to_json()
            except (TypeError, ValueError) as exc:
                raise KibanaError(f"marshaling error: {exc}") from exc
            self._buffer.append(record)
            if len(self._buffer) >= self.config.batch_size:
                self.flush()

    def flush(self) -> None:
        """Send every buffered error; the buffer is kept if sending fails."""
        with self._lock:
            if not self._buffer:
                return
            headers = {
                "Content-Type": "application/x-ndjson",
                "Authorization": f"ApiKey {self.config.api_key}",
            }
            try:
                status = self._transport(self.config.url + "/_bulk", self.bulk_payload(), headers)
            except ValueError as exc:
                raise KibanaError(f"creating request: {exc}") from exc
            except OSError as exc:
                raise KibanaError(f"sending request: {exc}") from exc
            if status >= 400:
                raise KibanaError(f"elasticsearch error: status {status}")
            self._buffer.clear()

    def bulk_payload(self) -> bytes:
        """The buffered errors as newline-delimited bulk index requests."""
        with self._lock:
            lines = []
            for record in self._buffer:
                index = f"{self.config.index_prefix}-{datetime.now():%Y.%m.%d}"
                lines.append(json.dumps({"index": {"_index": index}}, separators=(",", ":")))
                lines.append(record)
            return "".join(line + "\n" for line in lines).encode("utf-8")

    def close(self) -> None:
        """Stop periodic flushing and send whatever is still buffered."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        self.flush()


class Hook:
    """Forwards errors to a bulk client."""

    def __init__(self, config: KibanaConfig, transport: Transport | None = None):
        self.client = Client(config, transport)

    def fire(self, error: SpError) -> None:
        self.client.log_error(error)

    def close(self) -> None:
        self.client.close()


def log_to_kibana(hook: Hook, error: SpError) -> None:
    """Send ``error`` through ``hook``."""
    hook.fire(error)