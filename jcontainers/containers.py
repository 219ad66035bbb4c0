"""Container types with typed keys and the text codec for form identifiers."""

from __future__ import annotations

FORM_PREFIX = "__formData"
FORM_SEPARATOR = "|"
DYNAMIC_MOD_INDEX = 0xFF
_MAX_FORM_ID = 0xFFFFFFFF
_LOCAL_ID_MASK = 0xFFFFFF
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


class FormId(int):
    """A 32-bit form identifier: mod index in the high byte, local id below."""

    __slots__ = ()

    def __new__(cls, value=0):
        if isinstance(value, bool):
            raise TypeError("a form id cannot be a bool")
        number = int(value)
        if not 0 <= number <= _MAX_FORM_ID:
            raise ValueError(f"form id out of range: {number}")
        return super().__new__(cls, number)

    @property
    def mod_index(self):
        return int(self) >> 24

    @property
    def local_id(self):
        return int(self) & _LOCAL_ID_MASK

    def __repr__(self):
        return f"FormId(0x{int(self):08X})"


FORM_ZERO = FormId(0)


class _TypedKeyMap(dict):
    """A dict that normalises and validates every key it stores."""

    TYPE_NAME = ""

    def __init__(self, *args, **kwargs):
        super().__init__()
        self.update(*args, **kwargs)

    @staticmethod
    def _normalize_key(key):
        return key

    def __setitem__(self, key, value):
        super().__setitem__(self._normalize_key(key), value)

    def update(self, *args, **kwargs):
        for key, value in dict(*args, **kwargs).items():
            self[key] = value

    def setdefault(self, key, default=None):
        key = self._normalize_key(key)
        if key not in self:
            super().__setitem__(key, default)
        return self[key]

    def __ior__(self, other):
        self.update(other)
        return self

    def __repr__(self):
        return f"{type(self).__name__}({dict.__repr__(self)})"


class FormMap(_TypedKeyMap):
    """A map keyed by form identifiers."""

    TYPE_NAME = "JFormMap"

    @staticmethod
    def _normalize_key(key):
        if isinstance(key, bool) or not isinstance(key, int):
            raise TypeError(f"form map keys must be form ids, not {type(key).__name__}")
        return key if isinstance(key, FormId) else FormId(key)


class IntMap(_TypedKeyMap):
    """A map keyed by signed 32-bit integers."""

    TYPE_NAME = "JIntMap"

    @staticmethod
    def _normalize_key(key):
        if isinstance(key, bool) or not isinstance(key, int):
            raise TypeError(f"int map keys must be integers, not {type(key).__name__}")
        if not _INT32_MIN <= key <= _INT32_MAX:
            raise ValueError(f"int map key out of 32-bit range: {key}")
        return int(key)


class FormCodec:
    """Converts form ids to and from ``__formData|<plugin>|0x<local id>`` strings.

    The position of a plugin in ``plugins`` is its mod index. An empty plugin
    name stands for dynamically created forms (mod index 0xFF).
    """

    def __init__(self, plugins=()):
        self._plugins = tuple(plugins)
        if len(self._plugins) > DYNAMIC_MOD_INDEX:
            raise ValueError(f"at most {DYNAMIC_MOD_INDEX} plugins are supported")
        self._indices = {}
        for index, name in enumerate(self._plugins):
            if not name or FORM_SEPARATOR in name:
                raise ValueError(f"invalid plugin name: {name!r}")
            if name in self._indices:
                raise ValueError(f"duplicate plugin name: {name!r}")
            self._indices[name] = index

    @property
    def plugins(self):
        return self._plugins

    def is_form_string(self, text):
        """Tell whether ``text`` has the shape of a form string."""
        return isinstance(text, str) and text.startswith(FORM_PREFIX + FORM_SEPARATOR)

    def from_string(self, text):
        """Decode a form string; return None if it cannot be resolved."""
        if not self.is_form_string(text):
            return None
        parts = text[len(FORM_PREFIX) + 1:].split(FORM_SEPARATOR)
        if len(parts) != 2:
            return None
        plugin, local = parts
        if plugin:
            index = self._indices.get(plugin)
            if index is None:
                return None
        else:
            index = DYNAMIC_MOD_INDEX
        try:
            local_id = int(local, 0)
        except ValueError:
            return None
        if not 0 <= local_id <= _LOCAL_ID_MASK:
            return None
        return FormId((index << 24) | local_id)

    def to_string(self, form_id):
        """Encode a form id; return None if its plugin is unknown."""
        form_id = FormId(form_id)
        index = form_id.mod_index
        if index == DYNAMIC_MOD_INDEX:
            plugin = ""
        elif index < len(self._plugins):
            plugin = self._plugins[index]
        else:
            return None
        return f"{FORM_PREFIX}{FORM_SEPARATOR}{plugin}{FORM_SEPARATOR}0x{form_id.local_id:x}"