"""The values.yaml model of a chart."""

from __future__ import annotations

import copy
import re
from collections.abc import Iterable, Mapping
from typing import Any

_NUMBER_SEQUENCE = re.compile(r"([a-zA-Z])([0-9]+)([a-zA-Z]?)")
_UPPERCASE_ACRONYMS = {"ID"}
_WORD_SEPARATORS = "_ -."


class ValuesError(ValueError):
    """Raised when a value cannot be stored in or merged into values."""


def to_lower_camel(text: str) -> str:
    """Convert snake, kebab, dotted or spaced text to lowerCamelCase."""
    if not text:
        return text
    if text in _UPPERCASE_ACRONYMS:
        text = text.lower()
    if "A" <= text[0] <= "Z":
        text = text[0].lower() + text[1:]
    text = _NUMBER_SEQUENCE.sub(r"\1 \2 \3", text).strip(" ")
    result: list[str] = []
    cap_next = False
    for char in text:
        if "A" <= char <= "Z" or "0" <= char <= "9":
            result.append(char)
        elif "a" <= char <= "z":
            result.append(char.upper() if cap_next else char)
        cap_next = char in _WORD_SEPARATORS
    return "".join(result)


def to_camel_case(names: Iterable[str]) -> list[str]:
    """Camel-case every path element; all-upper names are lowered first."""
    converted = []
    for name in names:
        if name == name.upper():
            converted.append(to_lower_camel(name.lower()))
        else:
            converted.append(to_lower_camel(name))
    return converted


def _is_empty(value: Any) -> bool:
    return value is None or (not isinstance(value, bool) and value in ("", 0)) or value is False or (
        isinstance(value, (list, dict)) and not value
    )


def _plain(value: Any) -> Any:
    """Deep copy with mappings turned into plain dicts."""
    if isinstance(value, Mapping):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return copy.deepcopy(value)


def _merge_into(target: dict, source: Mapping) -> None:
    for key, src in source.items():
        if key not in target or _is_empty(target[key]):
            target[key] = _plain(src)
            continue
        dst = target[key]
        if isinstance(dst, dict) and isinstance(src, Mapping):
            _merge_into(dst, src)
        elif isinstance(dst, list) and isinstance(src, list):
            dst.extend(_plain(src))


class Values(dict):
    """Nested mapping of chart values, as written to values.yaml."""

    def merge(self, other: Mapping) -> None:
        """Merge ``other`` in: existing values win, lists are appended."""
        if not isinstance(other, Mapping):
            raise ValuesError(f"unable to merge helm values: {type(other).__name__} is not a mapping")
        _merge_into(self, other)

    def _set_nested(self, value: Any, path: list[str]) -> None:
        node: dict = self
        for depth, key in enumerate(path[:-1]):
            child = node.get(key)
            if child is None and key not in node:
                child = {}
                node[key] = child
            elif not isinstance(child, dict):
                joined = ".".join(path[: depth + 1])
                raise ValuesError(
                    f"value cannot be set because {joined} is not a map: unable to set value: {path}"
                )
            node = child
        node[path[-1]] = copy.deepcopy(value)

    def add(self, value: Any, *args: str) -> str:
        """Store ``value`` under the given path and return its template reference."""
        name = to_camel_case(args)
        if not name:
            raise ValuesError("unable to set value: empty name")
        self._set_nested(value, name)
        path = ".".join(name)
        if isinstance(value, str):
            return "{{ .Values." + path + " | quote }}"
        if isinstance(value, list):
            return "{{ toYaml .Values." + path + f" | nindent {len(name) * 2} }}}}"
        return "{{ .Values." + path + " }}"

    def add_yaml(self, value: Any, indent: int, new_line: bool, *args: str) -> str:
        """Store ``value`` and return a reference rendered with toYaml."""
        name = to_camel_case(args)
        if not name:
            raise ValuesError("unable to set value: empty name")
        self._set_nested(value, name)
        path = ".".join(name)
        if indent > 0:
            function = "nindent" if new_line else "indent"
            return "{{ .Values." + path + f" | toYaml | {function} {indent} }}}}"
        return "{{ .Values." + path + " | toYaml }}"

    def add_secret(self, to_base64: bool, *args: str) -> str:
        """Store an empty required value and return its template reference."""
        name = to_camel_case(args)
        if not name:
            raise ValuesError("unable to set value: empty name")
        path = ".".join(name)
        self._set_nested("", name)
        result = f'{{{{ required "{path} is required" .Values.{path}'
        if to_base64:
            result += " | b64enc"
        return result + " | quote }}"