"""Processing context that turns collected objects into a chart."""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from kubechart.config import Config
from kubechart.metadata import MetadataService
from kubechart.model import Output, Processor, Template

logger = logging.getLogger(__name__)


def _describe(obj: dict[str, Any]) -> str:
    metadata = obj.get("metadata")
    name = metadata.get("name", "") if isinstance(metadata, dict) else ""
    return f"ApiVersion={obj.get('apiVersion', '')} Kind={obj.get('kind', '')} Name={name}"


class AppContext:
    """Holds processors and the objects to be turned into a chart."""

    def __init__(self, config: Config, output: Output) -> None:
        self.config = config
        self.output = output
        self.app_meta = MetadataService(config)
        self.processors: list[Processor] = []
        self.default_processor: Optional[Processor] = None
        self._objects: list[tuple[dict[str, Any], str]] = []

    def with_processors(self, *args: Processor) -> AppContext:
        """Register processors, tried in the given order."""
        self.processors.extend(args)
        return self

    def with_default_processor(self, processor: Processor) -> AppContext:
        """Set the processor used for objects no other processor handles."""
        self.default_processor = processor
        return self

    def add(self, obj: dict[str, Any], filename: str) -> None:
        """Add an object; all objects are added before processing starts."""
        self.app_meta.load(obj)
        self._objects.append((obj, filename))

    def create_helm(self, stop: Optional[threading.Event] = None) -> None:
        """Process the collected objects and write the chart."""
        logger.info(
            "creating a chart ChartName=%s Namespace=%s",
            self.app_meta.chart_name(),
            self.app_meta.namespace(),
        )
        templates: list[Template] = []
        filenames: list[str] = []
        for obj, source_name in self._objects:
            template = self._process(obj)
            if template is not None:
                templates.append(template)
                filenames.append(source_name or template.filename())
            if stop is not None and stop.is_set():
                return
        conf = self.config
        self.output.create(
            conf.chart_dir,
            conf.chart_name,
            conf.chart_version,
            conf.crd,
            conf.cert_manager_as_subchart,
            conf.cert_manager_version,
            templates,
            filenames,
        )

    def _process(self, obj: dict[str, Any]) -> Optional[Template]:
        for processor in self.processors:
            processed, result = processor.process(self.app_meta, obj)
            if processed:
                logger.debug("processed %s", _describe(obj))
                return result
        if self.default_processor is None:
            logger.warning("Skipping: no suitable processor for resource. %s", _describe(obj))
            return None
        _, result = self.default_processor.process(self.app_meta, obj)
        return result