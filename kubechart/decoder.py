"""Decoding of streams of Kubernetes YAML or JSON manifests."""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterator
from typing import IO, Any, Optional, Union

import yaml

logger = logging.getLogger(__name__)

_SEPARATOR = "---"
_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _Loader(yaml.SafeLoader):
    """Safe loader that leaves timestamps as strings, as JSON would."""


_Loader.yaml_implicit_resolvers = {
    key: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for key, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _key_to_string(key: Any) -> str:
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    return str(key)


def _normalize(value: Any) -> Any:
    if isinstance(value, dict):
        return {_key_to_string(key): _normalize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_normalize(item) for item in value]
    return value


def _split_yaml(text: str) -> Iterator[str]:
    chunk: list[str] = []
    for line in text.splitlines(keepends=True):
        if line.startswith(_SEPARATOR):
            rest = line[len(_SEPARATOR):].strip()
            if rest and not rest.startswith("#"):
                logger.error("unable to decode yaml from input: invalid yaml document separator: %s", rest)
            if chunk:
                yield "".join(chunk)
                chunk = []
            continue
        chunk.append(line)
    if chunk:
        yield "".join(chunk)


def _parse_yaml(text: str) -> Iterator[Any]:
    for chunk in _split_yaml(text):
        if not chunk.strip():
            continue
        try:
            yield yaml.load(chunk, Loader=_Loader)
        except yaml.YAMLError as err:
            logger.error("unable to decode yaml from input: %s", err)


def _parse_json(text: str) -> Iterator[Any]:
    decoder = json.JSONDecoder()
    position = 0
    while True:
        while position < len(text) and text[position].isspace():
            position += 1
        if position >= len(text):
            return
        try:
            document, position = decoder.raw_decode(text, position)
        except json.JSONDecodeError as err:
            logger.error("unable to decode json from input: %s", err)
            return
        yield document


def _to_object(document: Any) -> Optional[dict[str, Any]]:
    if not isinstance(document, dict):
        logger.error("unable to decode yaml: document is not an object")
        return None
    obj = _normalize(document)
    kind = obj.get("kind")
    if not isinstance(kind, str) or not kind:
        logger.error("unable to decode yaml: Object 'Kind' is missing")
        return None
    api_version = obj.get("apiVersion")
    if api_version is not None and not isinstance(api_version, str):
        logger.error("unable to map yaml to k8s unstructured: apiVersion is not a string")
        return None
    return obj


def decode(
    reader: Union[IO[str], IO[bytes]], stop: Optional[threading.Event] = None
) -> Iterator[dict[str, Any]]:
    """Yield every valid Kubernetes object found in ``reader``.

    Documents that cannot be decoded are logged and skipped. Decoding ends
    early once ``stop`` is set.
    """
    data = reader.read()
    text = data.decode("utf-8-sig") if isinstance(data, bytes) else data
    logger.debug("Start processing...")
    documents = _parse_json(text) if text.lstrip().startswith("{") else _parse_yaml(text)
    for document in documents:
        if stop is not None and stop.is_set():
            logger.debug("Exiting: received stop signal")
            return
        obj = _to_object(document)
        if obj is None:
            continue
        metadata = obj.get("metadata")
        logger.debug(
            "decoded ApiVersion=%s Kind=%s Name=%s",
            obj.get("apiVersion", ""),
            obj.get("kind", ""),
            metadata.get("name", "") if isinstance(metadata, dict) else "",
        )
        yield obj
    logger.debug("EOF received. Finishing input objects decoding.")