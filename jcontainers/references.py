"""Reference strings that point at a container by its path from the root."""

from __future__ import annotations

import re

from .containers import FormId, FormMap, IntMap

SPECIAL_PREFIX = "__"
REFERENCE_PREFIX = "__reference|"

_DOT_KEY_END = re.compile(r"[.\[]")
_INTEGER = re.compile(r"-?\d+")
_MISSING = object()


def is_special_string(text):
    """Tell whether ``text`` starts with the reserved ``__`` prefix."""
    return isinstance(text, str) and text.startswith(SPECIAL_PREFIX)


def is_reference(text):
    """Tell whether ``text`` is a reference string."""
    return isinstance(text, str) and text.startswith(REFERENCE_PREFIX)


def extract_path(text):
    """Return the path part of a reference string, or None if it is not one."""
    return text[len(REFERENCE_PREFIX):] if is_reference(text) else None


def path_to_string(keys, codec=None):
    """Build a reference string from the keys leading from the root.

    String keys are written as ``.key``, integer keys as ``[n]`` and form ids
    as ``[<form string>]``.
    """
    parts = [REFERENCE_PREFIX]
    for key in keys:
        if isinstance(key, FormId):
            text = codec.to_string(key) if codec is not None else None
            if text is None:
                raise ValueError(f"form id {key!r} cannot be written as a string")
            parts.append(f"[{text}]")
        elif isinstance(key, bool):
            raise TypeError("path keys cannot be bools")
        elif isinstance(key, int):
            parts.append(f"[{key}]")
        elif isinstance(key, str):
            parts.append(f".{key}")
        else:
            raise TypeError(f"unsupported path key type: {type(key).__name__}")
    return "".join(parts)


def _bracket_key(token):
    if not token:
        raise ValueError("empty brackets in path")
    return int(token) if _INTEGER.fullmatch(token) else token


def parse_path(path):
    """Split a path into keys: ``.name`` gives a str, ``[n]`` an int.

    Bracketed text that is not an integer (such as a form string) is kept as a
    str. Raises ValueError for a malformed path.
    """
    keys = []
    pos = 0
    while pos < len(path):
        char = path[pos]
        if char == ".":
            match = _DOT_KEY_END.search(path, pos + 1)
            end = match.start() if match else len(path)
            keys.append(path[pos + 1:end])
            pos = end
        elif char == "[":
            end = path.find("]", pos + 1)
            if end < 0:
                raise ValueError(f"unclosed bracket in path: {path!r}")
            keys.append(_bracket_key(path[pos + 1:end]))
            pos = end + 1
        else:
            raise ValueError(f"unexpected character {char!r} in path: {path!r}")
    return keys


def _step(node, key, codec):
    if isinstance(node, list):
        if isinstance(key, int) and 0 <= key < len(node):
            return node[key]
        return _MISSING
    if isinstance(node, FormMap):
        if isinstance(key, str):
            form = codec.from_string(key) if codec is not None else None
        elif 0 <= key <= 0xFFFFFFFF:
            form = FormId(key)
        else:
            form = None
        return _MISSING if form is None else node.get(form, _MISSING)
    if isinstance(node, IntMap):
        return node.get(key, _MISSING) if isinstance(key, int) else _MISSING
    if isinstance(node, dict):
        return node.get(key, _MISSING) if isinstance(key, str) else _MISSING
    return _MISSING


def resolve_path(root, path, codec=None):
    """Follow ``path`` from ``root`` and return the value found, or None.

    An empty path yields the root itself. A malformed path raises ValueError.
    """
    node = root
    for key in parse_path(path):
        node = _step(node, key, codec)
        if node is _MISSING:
            return None
    return node