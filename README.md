# jcontainers

Serializes trees of containers to JSON and reads them back. A tree is built
from lists, string-keyed dicts, form-keyed maps and integer-keyed maps. The
same container can appear more than once in a tree, and a tree may contain
cycles. Each container is written in full once. Every later occurrence becomes
a reference string such as `__reference|.key[0]`. When the JSON is read back,
those references become the shared object again.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Usage

```python
from jcontainers.containers import FormCodec, IntMap
from jcontainers.json_handling import dumps, loads

codec = FormCodec(["Skyrim.esm", "Dawnguard.esm"])

shared = {"name": "shared"}
root = {"first": shared, "second": shared, "numbers": IntMap({1: 2.5})}

text = dumps(root, codec)
restored = loads(text, codec)
assert restored["first"] is restored["second"]
```

## Containers and values (`jcontainers.containers`)

- `list` is written as a JSON array.
- `dict` with string keys is written as a JSON object. Any other key type
  raises `TypeError`.
- `FormMap` is a dict keyed by `FormId`. It is written with the meta entry
  `"__metaInfo": {"typeName": "JFormMap"}`, and its keys are written as form
  strings. Keys whose plugin is unknown to the codec are left out.
- `IntMap` is a dict keyed by signed 32-bit integers. It is written with
  `"__metaInfo": {"typeName": "JIntMap"}`.
- Values can be `None`, integers in the signed 32-bit range, floats, strings,
  `FormId` and containers. A `bool` is written as `0` or `1`.

A `FormId` is a 32-bit integer. Its high byte is the mod index and its low 24
bits are the local id. `FormCodec(plugins)` converts form ids to and from
strings of the form `__formData|<plugin>|0x<local id>`. The position of a
plugin in `plugins` is its mod index. An empty plugin name stands for mod
index `0xFF`. `to_string` returns `None` for an unknown plugin, and such a
value is written as `null`. `from_string` returns `None` for a string it
cannot resolve. When a form string that cannot be resolved is read as a
value, the result is `FORM_ZERO`.

## Reading and writing (`jcontainers.json_handling`)

- `dumps(root, codec=None)` returns JSON text indented by two spaces.
  `dump(root, path, codec=None)` writes that text to a UTF-8 file.
- `loads(data, codec=None)` and `load(path, codec=None)` parse JSON. Malformed
  text raises `ValueError`. A root that is not an array or an object gives
  `None`.
- `to_json_value(root, codec=None)` and `from_json_value(value, codec=None)`
  work on plain Python JSON values rather than text. `to_json_value` raises
  `TypeError` if the root is not a container. `from_json_value` leaves its
  input unchanged.

When JSON is read, an object with no meta entry becomes a `dict`. An object
whose legacy `__formData` entry is `null` becomes a `FormMap`. In an
`IntMap`, keys are read as decimal, `0x` hexadecimal or leading-zero octal
numbers, and keys that cannot be read are dropped. A reference that cannot be
resolved stays `None`. Without a codec, a codec with no plugins is used.

## Helpers

- `jcontainers.references` checks reference strings (`is_special_string`,
  `is_reference`, `extract_path`). It also builds paths (`path_to_string`),
  splits them (`parse_path`) and follows them through a tree
  (`resolve_path`).
- `jcontainers.rwlock.RWLock` is a readers–writer lock that is not reentrant.
  Its `read_lock()` and `write_lock()` are context managers. A waiting writer
  keeps new readers out.
- `jcontainers.meta.MetaRegistry` keeps registered entries in the order they
  were registered. `register` returns its argument, so it can be used as a
  decorator.
- `jcontainers.diagnostics` provides:
  - `ensure(condition, message, exc_type)`, which raises `AssertionFailed` by
    default;
  - `log_error`, which logs an `[Error]` line to the `jcontainers` logger;
  - `Counter`, an id source that wraps back to zero after it reaches its
    limit.

## What it does not do

The package is a library only. It has no command-line tool. It does not lock
containers while they are serialized; use `RWLock` around the calls if other
threads may change the tree at the same time.