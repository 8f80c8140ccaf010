"""Reading manifests from files and directories."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from typing import BinaryIO

logger = logging.getLogger(__name__)


def _walk_recursively(path: str) -> Iterator[tuple[str, BinaryIO]]:
    if os.path.isdir(path) and not os.path.islink(path) or path_is_root_dir(path):
        entries = sorted(os.scandir(path), key=lambda entry: entry.name)
        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                yield from _walk_recursively(entry.path)
                continue
            with open(entry.path, "rb") as file:
                yield entry.name, file


def path_is_root_dir(path: str) -> bool:
    return os.path.isdir(path)


def walk(paths: list[str], recursively: bool) -> Iterator[tuple[str, BinaryIO]]:
    """Yield ``(base name, open file)`` for every file found under ``paths``.

    Each file is closed when the next one is requested. Paths that cannot be
    read are logged and skipped.
    """
    for path in paths:
        if not os.path.exists(path):
            logger.warning("no such file or directory %r", path)
            continue
        if not os.path.isdir(path):
            try:
                file = open(path, "rb")
            except OSError as err:
                logger.warning("unable to open file %r: %s", path, err)
                continue
            with file:
                yield os.path.basename(os.path.normpath(path)), file
            continue
        if not recursively:
            try:
                entries = sorted(os.scandir(path), key=lambda entry: entry.name)
            except OSError as err:
                logger.warning("unable to read directory %r: %s", path, err)
                continue
            for entry in entries:
                if entry.is_dir(follow_symlinks=False):
                    continue
                try:
                    file = open(entry.path, "rb")
                except OSError as err:
                    logger.warning("unable to open file %r: %s", entry.path, err)
                    continue
                with file:
                    yield entry.name, file
            continue
        try:
            yield from _walk_recursively(path)
        except OSError as err:
            logger.warning("unable to open %r: %s", os.path.basename(path), err)