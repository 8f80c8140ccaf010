"""Application configuration and its validation."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_CHART_NAME = "chart"

_DNS1123_SUBDOMAIN_MAX_LENGTH = 253
_DNS1123_LABEL = r"[a-z0-9]([-a-z0-9]*[a-z0-9])?"
_DNS1123_SUBDOMAIN = _DNS1123_LABEL + r"(\." + _DNS1123_LABEL + r")*"
_DNS1123_SUBDOMAIN_RE = re.compile(_DNS1123_SUBDOMAIN)


class ConfigError(ValueError):
    """Raised when the configuration is not valid."""


def is_dns1123_subdomain(value: str) -> list[str]:
    """Check ``value`` against RFC 1123 subdomain rules.

    Returns a list of problems; the list is empty when the value is valid.
    """
    errors: list[str] = []
    if len(value) > _DNS1123_SUBDOMAIN_MAX_LENGTH:
        errors.append(f"must be no more than {_DNS1123_SUBDOMAIN_MAX_LENGTH} characters")
    if not _DNS1123_SUBDOMAIN_RE.fullmatch(value):
        errors.append(
            "a lowercase RFC 1123 subdomain must consist of lower case alphanumeric "
            "characters, '-' or '.', and must start and end with an alphanumeric "
            "character (e.g. 'example.com', regex used for validation is "
            f"'{_DNS1123_SUBDOMAIN}')"
        )
    return errors


@dataclass
class Config:
    """Settings for a chart generation run."""

    chart_name: str = ""
    chart_dir: str = ""
    verbose: bool = False
    very_verbose: bool = False
    crd: bool = False
    image_pull_secrets: bool = False
    generate_defaults: bool = False
    cert_manager_as_subchart: bool = False
    cert_manager_version: str = ""
    files: list[str] = field(default_factory=list)
    files_recursively: bool = False
    chart_version: str = ""

    def validate(self) -> None:
        """Fill in the default chart name and check that the name is valid."""
        if not self.chart_name:
            logger.info("Chart name is not set. Using default name '%s'", DEFAULT_CHART_NAME)
            self.chart_name = DEFAULT_CHART_NAME
        errors = is_dns1123_subdomain(self.chart_name)
        if errors:
            for error in errors:
                logger.error("Invalid chart name %s", error)
            raise ConfigError(f"invalid chart name {self.chart_name}")