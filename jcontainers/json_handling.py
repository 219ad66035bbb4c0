"""Reading and writing container trees as JSON.

Containers are plain lists, str-keyed dicts, ``FormMap`` and ``IntMap``.
Values are None, ints (signed 32-bit), floats, strings, ``FormId`` and
containers. A container that occurs more than once, including one that
contains itself, is written in full once; every later occurrence becomes a
``__reference|<path>`` string that gives its path from the root.
``FormMap`` and ``IntMap`` carry a ``__metaInfo`` entry naming their type.
"""

from __future__ import annotations

import json
import re
from collections import deque

from .containers import FORM_ZERO, FormCodec, FormId, FormMap, IntMap
from .references import extract_path, is_special_string, path_to_string, resolve_path

META_INFO = "__metaInfo"
META_INFO_LEGACY = "__formData"
TYPE_NAME = "typeName"

_META_KEYS = (META_INFO, META_INFO_LEGACY)
_TYPED_MAPS = {FormMap.TYPE_NAME: FormMap, IntMap.TYPE_NAME: IntMap}
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_INT_KEY = re.compile(
    r"[ \t\n\v\f\r]*([+-]?)(?:0[xX]([0-9a-fA-F]+)|(0[0-7]*)|([1-9][0-9]*))"
)


def _codec_or_default(codec):
    return FormCodec() if codec is None else codec


def _is_container(value):
    return isinstance(value, (list, dict))


def _wrap_int32(value):
    value &= 0xFFFFFFFF
    return value - 2**32 if value > _INT32_MAX else value


def _parse_int_key(text):
    """Read a leading integer the way C's base-0 conversion does; None if invalid."""
    match = _INT_KEY.match(text)
    if match is None:
        return None
    sign, hex_digits, octal_digits, decimal_digits = match.groups()
    if hex_digits is not None:
        number = int(hex_digits, 16)
    elif octal_digits is not None:
        number = int(octal_digits, 8)
    else:
        number = int(decimal_digits, 10)
    if sign == "-":
        number = -number
    if not _INT32_MIN <= number <= _INT32_MAX:
        return None
    return number


class _Serializer:
    def __init__(self, root, codec):
        self._root = root
        self._codec = codec
        self._serialized = set()
        self._to_fill = []
        self._key_info = {}

    def run(self):
        root_value = self._placeholder(self._root)
        while self._to_fill:
            batch, self._to_fill = self._to_fill, []
            for container, node in batch:
                self._fill(container, node)
        return root_value

    def _placeholder(self, container):
        node = [] if isinstance(container, list) else {}
        self._to_fill.append((container, node))
        self._serialized.add(id(container))
        return node

    def _note_key(self, value, parent, key):
        if _is_container(value):
            self._key_info.setdefault(id(value), (parent, key))

    def _fill(self, container, node):
        if isinstance(container, list):
            for index, value in enumerate(container):
                self._note_key(value, container, index)
                node.append(self._value(value))
        elif isinstance(container, FormMap):
            node[META_INFO] = {TYPE_NAME: FormMap.TYPE_NAME}
            for key in sorted(container):
                text = self._codec.to_string(key)
                if text is None:
                    continue
                value = container[key]
                self._note_key(value, container, key)
                node[text] = self._value(value)
        elif isinstance(container, IntMap):
            node[META_INFO] = {TYPE_NAME: IntMap.TYPE_NAME}
            for key in sorted(container):
                value = container[key]
                self._note_key(value, container, key)
                node[str(key)] = self._value(value)
        else:
            for key, value in container.items():
                if not isinstance(key, str):
                    raise TypeError(f"map keys must be strings, not {type(key).__name__}")
                self._note_key(value, container, key)
                node[key] = self._value(value)

    def _value(self, value):
        if value is None:
            return None
        if isinstance(value, FormId):
            return self._codec.to_string(value)
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, int):
            if not _INT32_MIN <= value <= _INT32_MAX:
                raise ValueError(f"integer out of 32-bit range: {value}")
            return int(value)
        if isinstance(value, (float, str)):
            return value
        if _is_container(value):
            if id(value) in self._serialized:
                return self._path_to(value)
            return self._placeholder(value)
        raise TypeError(f"unsupported value type: {type(value).__name__}")

    def _path_to(self, container):
        keys = deque()
        child = container
        while child is not self._root:
            info = self._key_info.get(id(child))
            if info is None:
                break
            child, key = info
            keys.appendleft(key)
        return path_to_string(keys, self._codec)


class _Deserializer:
    def __init__(self, codec):
        self._codec = codec
        self._to_fill = []
        self._to_resolve = {}

    def run(self, value):
        root = self._placeholder(value)
        if root is None:
            return None
        while self._to_fill:
            batch, self._to_fill = self._to_fill, []
            for container, entries in batch:
                self._fill(container, entries)
        self._resolve(root)
        return root

    def _placeholder(self, value):
        if isinstance(value, list):
            container, entries = [], value
        elif isinstance(value, dict):
            if META_INFO in value:
                meta_present, meta = True, value[META_INFO]
            elif META_INFO_LEGACY in value:
                meta_present, meta = True, value[META_INFO_LEGACY]
            else:
                meta_present, meta = False, None

            if not meta_present:
                container = {}
            elif meta is None:
                container = FormMap()
            elif isinstance(meta, dict):
                type_name = meta.get(TYPE_NAME)
                factory = _TYPED_MAPS.get(type_name) if isinstance(type_name, str) else None
                container = factory() if factory is not None else None
            else:
                container = {}

            entries = {
                key: item
                for key, item in value.items()
                if not (meta_present and key in _META_KEYS)
            }
        else:
            return None

        if container is None:
            return None
        self._to_fill.append((container, entries))
        return container

    def _fill(self, container, entries):
        if isinstance(container, list):
            for index, value in enumerate(entries):
                container.append(self._item(value, container, index))
        elif isinstance(container, FormMap):
            for text, value in entries.items():
                key = self._codec.from_string(text)
                if key is not None:
                    container[key] = self._item(value, container, key)
        elif isinstance(container, IntMap):
            for text, value in entries.items():
                key = _parse_int_key(text)
                if key is not None:
                    container[key] = self._item(value, container, key)
        else:
            for key, value in entries.items():
                container[key] = self._item(value, container, key)

    def _item(self, value, container, key):
        if _is_container(value):
            return self._placeholder(value)
        if isinstance(value, str):
            if not is_special_string(value):
                return value
            if self._codec.is_form_string(value):
                form = self._codec.from_string(value)
                return FORM_ZERO if form is None else form
            path = extract_path(value)
            if path is not None:
                self._to_resolve.setdefault(path, []).append((container, key))
                return None
            return value
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, int):
            return _wrap_int32(value)
        if isinstance(value, float):
            return value
        return None

    def _resolve(self, root):
        for path in sorted(self._to_resolve):
            try:
                target = resolve_path(root, path, self._codec)
            except ValueError:
                continue
            if not _is_container(target):
                continue
            for container, key in self._to_resolve[path]:
                container[key] = target


def to_json_value(root, codec=None):
    """Convert a container tree into plain JSON-ready lists and dicts."""
    if not _is_container(root):
        raise TypeError(f"root must be a container, not {type(root).__name__}")
    return _Serializer(root, _codec_or_default(codec)).run()


def dumps(root, codec=None):
    """Serialize a container tree to JSON text indented by two spaces."""
    return json.dumps(
        to_json_value(root, codec), indent=2, ensure_ascii=False, allow_nan=False
    )


def dump(root, path, codec=None):
    """Serialize a container tree into the file at ``path`` as UTF-8 JSON."""
    text = dumps(root, codec)
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(text)


def from_json_value(value, codec=None):
    """Build a container tree from parsed JSON; None if the root is no container.

    The input is left unchanged. References that cannot be resolved stay None.
    """
    return _Deserializer(_codec_or_default(codec)).run(value)


def _reject_constant(name):
    raise ValueError(f"invalid JSON constant: {name}")


def loads(data, codec=None):
    """Parse JSON text into a container tree.

    Malformed text raises ValueError; a root that is not an array or object
    yields None.
    """
    return from_json_value(json.loads(data, parse_constant=_reject_constant), codec)


def load(path, codec=None):
    """Parse the JSON file at ``path`` into a container tree."""
    with open(path, encoding="utf-8") as handle:
        return loads(handle.read(), codec)