import io

from lighthouse.app import Lighthouse, main
from lighthouse.bot import Bot
from lighthouse.kibana import Hook, KibanaConfig
from lighthouse.levels import Level
from lighthouse.logger import Logger, Stage
from lighthouse.sperror import ErrSpec, SpError


class FakeTransport:
    def __init__(self):
        self.calls = []

    def __call__(self, url, body, headers):
        self.calls.append((url, body))
        return 200


def make_lighthouse():
    out = io.StringIO()
    transport = FakeTransport()
    hook = Hook(KibanaConfig(url="http://localhost:9200", batch_size=1), transport)
    lighthouse = Lighthouse(Bot(), hook, Logger(Stage.LOCAL, "en", out))
    return lighthouse, out, transport


def make_error():
    return SpError.from_spec(ErrSpec(messages={"en": "test"}, desc="123", hint="456"))


def test_debug_writes_message_and_attrs():
    lighthouse, out, _ = make_lighthouse()
    lighthouse.debug("test", "key", "val")
    text = out.getvalue()
    assert "test" in text
    assert "key = val" in text
    assert "log_at" in text


def test_info_writes_message():
    lighthouse, out, _ = make_lighthouse()
    lighthouse.info("hi with args", "key", "val")
    assert "hi with args" in out.getvalue()
    assert "key = val" in out.getvalue()


def test_error_logs_structured_error():
    lighthouse, out, _ = make_lighthouse()
    lighthouse.error(make_error(), Level.ERROR)
    text = out.getvalue()
    assert "desc = 123" in text
    assert "hint = 456" in text


def test_fire_ships_error():
    lighthouse, _, transport = make_lighthouse()
    error = make_error()
    lighthouse.fire(error)
    assert len(transport.calls) == 1
    assert transport.calls[0][1].decode("utf-8").split("\n")[1] == error.to_json()


def test_components_are_kept():
    lighthouse, _, _ = make_lighthouse()
    assert lighthouse.bot == Bot()
    assert lighthouse.logger.stage == Stage.LOCAL


def test_main_emits_debug_record(capsys):
    assert main([]) == 0
    captured = capsys.readouterr().out
    assert "test" in captured
    assert "log_at" in captured