# lighthouse

Structured errors for applications that are built in layers.

An `SpError` (in `lighthouse.sperror`) carries localized messages, a
description, a resolution hint, an HTTP status, a severity `Level`, an
optional cause and free-form metadata. Errors wrap one another as they pass
up through an application. `spin(level)` unwinds the chain and returns the
error that suits a given audience, so one failure can read as a database
error to a developer and as "Internal server error" to a user.

## Installation

```
pip install .
```

Python 3.10 or later is needed. The package has no third-party dependencies.
The tests need pytest (`pip install .[test]`).

## Building errors

```python
from lighthouse.levels import Level
from lighthouse.sperror import ErrSpec, SpError, wrap

db = SpError.from_spec(ErrSpec(
    messages={"en": "Db connection failed"},
    desc="Failed to connect to database",
    hint="check connection string, credentials, etc.",
    level=Level.DEEP_DEBUG,
))

app = wrap(db, ErrSpec(
    messages={"en": "App err"},
    desc="Database error",
    hint="Check repo layer",
    level=Level.MEDIUM_DEBUG,
))

print(app.spin(Level.MEDIUM_DEBUG).msg("en"))   # App err
print(app.to_json())
```

`SpError.from_spec` and `wrap` return finalized errors. An error built
directly with `SpError(...)` must be finalized with `done()` (which returns
the hash id) or `must_done()` (which returns the error). Finalizing requires
a description and an English message and raises `ValidationError` when
either is missing. Both methods record the caller's file and line as the
error's `source`; `mark_source()` records it without finalizing.

`spin(level)` returns the deepest error of the chain whose level does not
exceed `level`. If the outermost error is already above `level`, a generic
internal server error is returned instead; `spin(Level.NOOP)` returns None.
`pop()` takes the head of a chain and advances to the next error.

Comparison:

- `matches(err)` checks the error's cause (an exception instance, or an
  exception class).
- `deep_matches(err)` checks the cause of every error along the chain.
- `same_as(other)` compares the content hashes of two finalized errors.

`to_dict()`, `to_json()` and `SpError.from_json()` serialize an error.
`cast(err)` returns `err` if it is an `SpError`, else None.
`lighthouse.langs` holds the language codes; `is_known(code)` checks one.

## Registry

`lighthouse.registry.Registry` stores finalized errors under their hash.
`register()` raises an `SpError` when given None or an error that cannot be
finalized. `get()` returns a copy of a stored error, so the caller may change
it without touching the registered one.

The shared `REGISTRY` comes with common HTTP errors, whose keys are
`INTERNAL`, `NOT_FOUND`, `BAD_REQUEST`, `UNAUTHORIZED`, `FORBIDDEN` and
`TIMEOUT`. `internal_error()` returns a copy of the internal server error.

## Export

`lighthouse.export` turns errors into JSON, CSV or XML with `to_json`,
`to_csv` and `to_xml`. `export(content_type, *errors)` chooses the format
from `XML`, `CSV` or `JSON`; any other content type exports the first error
as JSON.

## Logging

`lighthouse.logger.Logger(stage, lang, out)` writes errors and messages
(to standard output when `out` is None).

- On the `local` stage it prints readable lines, coloured when the output
  is a terminal.
- On `dev` and `prod` it writes JSON lines and keeps only errors.
- `Logger.noop()` returns a logger that discards everything.

`error(e, level)` logs a structured error by its message in the logger's
language, with the description, hint, source and time of the error chosen by
`spin(level)`. Other exceptions are logged by their text.

`lighthouse.hooks.zap_fields` and `slog_attrs` turn an error, spun to a
level, into key/value fields for other logging systems.

## Kibana

`lighthouse.kibana.Hook(KibanaConfig(...))` buffers errors and posts them
to the `_bulk` endpoint under `url`, authorised with `api_key`. A batch is
sent when `batch_size` errors are buffered and, when `flush_period` (in
seconds) is positive, also by a background thread at that interval. A
failed send raises `KibanaError` and keeps the buffer. Call `close()` to
stop the background flushing and send what is left. A custom `transport`
callable can replace the built-in HTTP sender.

## Command

```
lighthouse
```

This runs a short demonstration. It builds a `Lighthouse` (from
`lighthouse.app`) out of a bot, a Kibana hook and a local logger, then writes
one debug message.

## What it does not do

`lighthouse.bot.Bot` is an empty placeholder: the package sends no
messenger notifications.