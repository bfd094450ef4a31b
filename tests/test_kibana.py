import json
import threading
import time

import pytest

from lighthouse.kibana import Client, Hook, KibanaConfig, KibanaError, log_to_kibana
from lighthouse.sperror import ErrSpec, SpError


class FakeTransport:
    def __init__(self, status=200, exc=None):
        self.status = status
        self.exc = exc
        self.calls = []
        self.sent = threading.Event()

    def __call__(self, url, body, headers):
        if self.exc is not None:
            raise self.exc
        self.calls.append((url, body, dict(headers)))
        self.sent.set()
        return self.status


def make_error(desc="Failed to connect to database"):
    return SpError.from_spec(
        ErrSpec(messages={"en": "Db connection failed"}, desc=desc, hint="check connection string")
    )


def config(batch_size=2, flush_period=0.0):
    return KibanaConfig(
        url="http://localhost:9200",
        index_prefix="errors",
        batch_size=batch_size,
        flush_period=flush_period,
        api_key="placeholder",
    )


def test_below_batch_size_nothing_is_sent():
    transport = FakeTransport()
    client = Client(config(batch_size=3), transport)
    client.log_error(make_error())
    assert transport.calls == []
    assert client.bulk_payload().count(b"\n") == 2


def test_full_batch_is_posted():
    transport = FakeTransport()
    client = Client(config(batch_size=2), transport)
    first, second = make_error("one"), make_error("two")
    client.log_error(first)
    client.log_error(second)
    assert len(transport.calls) == 1
    url, body, headers = transport.calls[0]
    assert url == "http://localhost:9200/_bulk"
    assert headers["Content-Type"] == "application/x-ndjson"
    assert headers["Authorization"] == "ApiKey placeholder"
    lines = body.decode("utf-8").split("\n")
    assert lines[-1] == ""
    assert lines[1] == first.to_json()
    assert lines[3] == second.to_json()
    index = json.loads(lines[0])["index"]["_index"]
    assert index.startswith("errors-")
    assert json.loads(lines[2]) == json.loads(lines[0])
    assert client.bulk_payload() == b""


def test_error_status_keeps_buffer():
    transport = FakeTransport(status=500)
    client = Client(config(batch_size=5), transport)
    client.log_error(make_error())
    with pytest.raises(KibanaError, match="status 500"):
        client.flush()
    transport.status = 200
    client.flush()
    assert len(transport.calls) == 2
    assert transport.calls[0][1] == transport.calls[1][1]


def test_flush_with_empty_buffer_sends_nothing():
    transport = FakeTransport()
    client = Client(config(), transport)
    client.flush()
    assert transport.calls == []


def test_transport_failure_is_reported():
    transport = FakeTransport(exc=ConnectionRefusedError("refused"))
    client = Client(config(batch_size=1), transport)
    with pytest.raises(KibanaError, match="sending request"):
        client.log_error(make_error())


def test_periodic_flush_sends_buffer():
    transport = FakeTransport()
    client = Client(config(batch_size=100, flush_period=0.02), transport)
    try:
        client.log_error(make_error())
        assert transport.sent.wait(2.0)
        assert transport.calls[0][0].endswith("/_bulk")
    finally:
        client.close()


def test_close_flushes_pending():
    transport = FakeTransport()
    client = Client(config(batch_size=10), transport)
    client.log_error(make_error())
    client.close()
    assert len(transport.calls) == 1


def test_hook_and_log_to_kibana_deliver():
    transport = FakeTransport()
    hook = Hook(config(batch_size=1), transport)
    error = make_error()
    hook.fire(error)
    log_to_kibana(hook, error)
    assert len(transport.calls) == 2
    assert transport.calls[1][1].decode("utf-8").split("\n")[1] == error.to_json()
    hook.close()
    assert len(transport.calls) == 2


def test_periodic_flush_survives_errors():
    transport = FakeTransport(status=503)
    client = Client(config(batch_size=100, flush_period=0.01), transport)
    client.log_error(make_error())
    assert transport.sent.wait(2.0)
    time.sleep(0.05)
    transport.status = 200
    client.close()
    assert client.bulk_payload() == b""