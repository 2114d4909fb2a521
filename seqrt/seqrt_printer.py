"""
A pretty-printer for seqrt values.
"""
import collections.abc

from seqrt.seqrt_datatypes import Sequence, Absent, _EMPTY


class Printer:
    """Formats sequences and their elements into readable literal strings."""

    def __init__(self, indent_width=2, width=80):
        self._indent_char = " " * indent_width
        self._width = width
        self._active = set()
        self._handlers = self._create_handlers()

    def pformat(self, obj, level=0):
        """Public entry point to format an object."""
        handler = self._get_handler(obj)
        return handler(obj, level)

    def _get_handler(self, obj):
        """Dispatcher to find the correct formatting method."""
        # Fast path for singletons
        if obj is Absent: return self._pformat_absent
        if obj is _EMPTY: return self._pformat_empty

        obj_type = type(obj)
        if obj_type in self._handlers:
            return self._handlers[obj_type]
        if isinstance(obj, Sequence): return self._pformat_sequence
        if isinstance(obj, collections.abc.Mapping): return self._pformat_dict
        if isinstance(obj, (list, tuple)): return self._pformat_list
        # Default to Python's repr for unknown types
        return lambda o, l: repr(o)

    def _create_handlers(self):
        return {
            str: self._pformat_str,
            int: self._pformat_primitive,
            float: self._pformat_primitive,
            bool: self._pformat_bool,
            type(None): self._pformat_none,
            Sequence: self._pformat_sequence,
            dict: self._pformat_dict,
            list: self._pformat_list,
            tuple: self._pformat_list,
        }

    def _pformat_primitive(self, obj, level):
        return str(obj)

    def _pformat_str(self, obj, level):
        # Basic string formatting, does not handle complex escapes
        return f"'{obj}'"

    def _pformat_bool(self, obj, level):
        return 'true' if obj else 'false'

    def _pformat_none(self, obj, level):
        return 'none'

    def _pformat_absent(self, obj, level):
        return 'absent'

    def _pformat_empty(self, obj, level):
        return '<empty>'

    def _pformat_sequence(self, obj, level):
        # A sequence that contains itself prints the inner reference as [...]
        if id(obj) in self._active:
            return "[...]"
        self._active.add(id(obj))
        try:
            # Read raw slots so holes print as <empty> rather than absent
            return self._pformat_items(list(obj._slots), level)
        finally:
            self._active.discard(id(obj))

    def _pformat_list(self, obj, level):
        return self._pformat_items(list(obj), level)

    def _pformat_items(self, items, level):
        if not items:
            return "[]"
        parts = [self.pformat(item, level + 1) for item in items]
        flat = f"[{', '.join(parts)}]"
        if '\n' not in flat and len(flat) + len(self._indent_char) * level <= self._width:
            return flat
        indent = self._indent_char * (level + 1)
        closing = self._indent_char * level
        lines = [f"{indent}{p}" for p in parts]
        return "[\n" + ",\n".join(lines) + f"\n{closing}]"

    def _pformat_dict(self, obj, level):
        if not obj:
            return "{}"
        parts = [f"{k}: {self.pformat(v, level + 1)}" for k, v in obj.items()]
        return "{" + ", ".join(parts) + "}"
