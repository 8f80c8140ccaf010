"""Application-wide metadata collected from all input objects."""

from __future__ import annotations

import logging
from typing import Any

from kubechart.config import Config
from kubechart.model import AppMetadata

logger = logging.getLogger(__name__)

_NAME_TEMPLATE = '{{{{ include "{chart}.fullname" . }}}}-{name}'
_NAME_TRIM_CHARS = "-./_ "

_NS_GVK = ("", "v1", "Namespace")
_CRD_GVK = ("apiextensions.k8s.io", "v1", "CustomResourceDefinition")


def _string_field(mapping: Any, key: str) -> str:
    if not isinstance(mapping, dict):
        return ""
    value = mapping.get(key)
    return value if isinstance(value, str) else ""


def group_version_kind(obj: dict[str, Any]) -> tuple[str, str, str]:
    """Return ``(group, version, kind)`` of an unstructured object."""
    kind = _string_field(obj, "kind")
    api_version = _string_field(obj, "apiVersion")
    parts = api_version.split("/") if api_version else []
    if len(parts) == 1:
        return "", parts[0], kind
    if len(parts) == 2:
        return parts[0], parts[1], kind
    return "", "", kind


def _name(obj: dict[str, Any]) -> str:
    return _string_field(obj.get("metadata"), "name")


def _namespace(obj: dict[str, Any]) -> str:
    return _string_field(obj.get("metadata"), "namespace")


def common_prefix(one: str, two: str) -> str:
    """Return the longest common prefix of two strings."""
    for index, (left, right) in enumerate(zip(one, two)):
        if left != right:
            return one[:index]
    return one[: min(len(one), len(two))]


def _extract_app_namespace(obj: dict[str, Any]) -> str:
    if group_version_kind(obj) == _NS_GVK:
        return _name(obj)
    return _namespace(obj)


def _detect_common_prefix(obj: dict[str, Any], previous: str) -> str:
    if group_version_kind(obj) in (_CRD_GVK, _NS_GVK):
        return previous
    if not previous:
        return _name(obj)
    return common_prefix(_name(obj), previous)


class MetadataService(AppMetadata):
    """Collects namespace and the common name prefix of the app's objects."""

    def __init__(self, config: Config) -> None:
        self._config = config
        self._common_prefix = ""
        self._namespace = ""
        self._names: set[str] = set()

    def config(self) -> Config:
        return self._config

    def trim_name(self, obj_name: str) -> str:
        """Trim the app's common prefix from a name; keep the name if nothing is left."""
        trimmed = obj_name
        if self._common_prefix and trimmed.startswith(self._common_prefix):
            trimmed = trimmed[len(self._common_prefix):]
        trimmed = trimmed.lstrip(_NAME_TRIM_CHARS)
        return trimmed or obj_name

    def load(self, obj: dict[str, Any]) -> None:
        """Register an object before processing to learn the app's metadata."""
        self._names.add(_name(obj))
        self._common_prefix = _detect_common_prefix(obj, self._common_prefix)
        obj_ns = _extract_app_namespace(obj)
        if not obj_ns:
            return
        if self._namespace and self._namespace != obj_ns:
            logger.warning(
                "Two different namespaces for app detected: %s and %s. "
                "Resulted char will have single namespace.",
                obj_ns,
                self._namespace,
            )
        self._namespace = obj_ns

    def namespace(self) -> str:
        return self._namespace

    def chart_name(self) -> str:
        return self._config.chart_name

    def templated_name(self, name: str) -> str:
        """Template the name of an app object; other names are returned unchanged."""
        if name not in self._names:
            return name
        return _NAME_TEMPLATE.format(chart=self._config.chart_name, name=self.trim_name(name))

    def templated_string(self, text: str) -> str:
        return _NAME_TEMPLATE.format(chart=self._config.chart_name, name=self.trim_name(text))