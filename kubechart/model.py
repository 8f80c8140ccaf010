"""Interfaces shared by processors, templates and chart output."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, TextIO

from kubechart.config import Config
from kubechart.values import Values


class Template(ABC):
    """A Helm template destined for the templates directory."""

    @abstractmethod
    def filename(self) -> str:
        """Return the template file name."""

    @abstractmethod
    def values(self) -> Values:
        """Return the values the template uses."""

    @abstractmethod
    def write(self, writer: TextIO) -> None:
        """Write the template text into ``writer``."""


class AppMetadata(ABC):
    """Information shared by all objects of the chart."""

    @abstractmethod
    def namespace(self) -> str:
        """Return the application namespace."""

    @abstractmethod
    def chart_name(self) -> str:
        """Return the chart name."""

    @abstractmethod
    def templated_name(self, obj_name: str) -> str:
        """Turn an object name into its templated Helm name."""

    @abstractmethod
    def templated_string(self, text: str) -> str:
        """Turn a string into a templated string with the chart name."""

    @abstractmethod
    def trim_name(self, obj_name: str) -> str:
        """Trim the common prefix from an object name."""

    @abstractmethod
    def config(self) -> Config:
        """Return the run configuration."""


class Processor(ABC):
    """Converts a Kubernetes object into a Helm template."""

    @abstractmethod
    def process(self, app_meta: AppMetadata, obj: dict[str, Any]) -> tuple[bool, Optional[Template]]:
        """Return (processed, template); processed is False for unsupported objects."""


class Output(ABC):
    """Writes templates to disk as a Helm chart."""

    @abstractmethod
    def create(
        self,
        chart_dir: str,
        chart_name: str,
        chart_version: str,
        crd: bool,
        cert_manager_as_subchart: bool,
        cert_manager_version: str,
        templates: list[Template],
        filenames: list[str],
    ) -> None:
        """Create the chart from the given templates."""