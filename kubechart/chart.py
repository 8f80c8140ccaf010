"""Writing templates and values to a filesystem as a Helm chart."""

from __future__ import annotations

import json
import logging
import os
import re
from collections.abc import Mapping
from typing import Any

import yaml

from kubechart.model import Output, Template
from kubechart.values import Values

logger = logging.getLogger(__name__)

DEFAULT_DOMAIN = "cluster.local"
DOMAIN_KEY = "kubernetesClusterDomain"
DOMAIN_ENV = "KUBERNETES_CLUSTER_DOMAIN"

MAX_CHART_NAME_LENGTH = 250
_CHART_NAME_PATTERN = "^[a-zA-Z0-9._-]+$"
_CHART_NAME_RE = re.compile(_CHART_NAME_PATTERN)

_HELMIGNORE_SECTIONS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "Skipped when packaging. Shell globs, relative paths and '!' negation work; one pattern per line.",
        (".DS_Store",),
    ),
    ("Version control", (".git/", ".gitignore", ".bzr/", ".bzrignore", ".hg/", ".hgignore", ".svn/")),
    ("Backups", ("*.swp", "*.bak", "*.tmp", "*.orig", "*~")),
    ("Editors and IDEs", (".project", ".idea/", "*.tmproj", ".vscode/")),
)

HELM_IGNORE = "".join(
    f"# {comment}\n" + "".join(f"{pattern}\n" for pattern in patterns)
    for comment, patterns in _HELMIGNORE_SECTIONS
)

_TRUNC = ' | trunc 63 | trimSuffix "-" }}'

_HELPER_DEFINITIONS: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    (
        "Chart name, overridable through nameOverride.",
        "name",
        ("{{- default .Chart.Name .Values.nameOverride" + _TRUNC,),
    ),
    (
        "Fully qualified app name, cut to 63 characters to fit Kubernetes name limits.\n"
        "The release name alone is used when it already holds the chart name.",
        "fullname",
        (
            "{{- if .Values.fullnameOverride }}",
            "{{- .Values.fullnameOverride" + _TRUNC,
            "{{- else }}",
            "{{- $name := default .Chart.Name .Values.nameOverride }}",
            "{{- if contains $name .Release.Name }}",
            "{{- .Release.Name" + _TRUNC,
            "{{- else }}",
            '{{- printf "%s-%s" .Release.Name $name' + _TRUNC,
            "{{- end }}",
            "{{- end }}",
        ),
    ),
    (
        "Chart name and version for the chart label.",
        "chart",
        ('{{- printf "%s-%s" .Chart.Name .Chart.Version | replace "+" "_"' + _TRUNC,),
    ),
    (
        "Labels shared by every resource.",
        "labels",
        (
            'helm.sh/chart: {{ include "<CHARTNAME>.chart" . }}',
            '{{ include "<CHARTNAME>.selectorLabels" . }}',
            "{{- if .Chart.AppVersion }}",
            "app.kubernetes.io/version: {{ .Chart.AppVersion | quote }}",
            "{{- end }}",
            "app.kubernetes.io/managed-by: {{ .Release.Service }}",
        ),
    ),
    (
        "Labels used in selectors.",
        "selectorLabels",
        (
            'app.kubernetes.io/name: {{ include "<CHARTNAME>.name" . }}',
            "app.kubernetes.io/instance: {{ .Release.Name }}",
        ),
    ),
    (
        "Service account name.",
        "serviceAccountName",
        (
            "{{- if .Values.serviceAccount.create }}",
            '{{- default (include "<CHARTNAME>.fullname" .) .Values.serviceAccount.name }}',
            "{{- else }}",
            '{{- default "default" .Values.serviceAccount.name }}',
            "{{- end }}",
        ),
    ),
)


def _define_block(comment: str, name: str, body: tuple[str, ...]) -> str:
    lines = [
        "{{/*",
        comment,
        "*/}}",
        '{{- define "<CHARTNAME>.' + name + '" -}}',
        *body,
        "{{- end }}",
    ]
    return "\n".join(lines) + "\n"


DEFAULT_HELPERS = "\n".join(_define_block(*definition) for definition in _HELPER_DEFINITIONS)

_CHART_FILE_LINES = (
    "apiVersion: v2",
    "name: {name}",
    "description: A Helm chart for Kubernetes",
    "# Chart type: 'application' charts can be installed, 'library' charts only share helpers.",
    "type: application",
    "# Chart version: bump it on every change to the chart; Semantic Versioning is expected.",
    "version: {version}",
    "# Version of the deployed application; keep it quoted.",
    'appVersion: "{version}"',
)

DEFAULT_CHART_FILE = "\n".join(_CHART_FILE_LINES) + "\n"

_CERT_MANAGER_LINES = (
    "",
    "dependencies:",
    "  - name: cert-manager",
    "    repository: https://charts.jetstack.io",
    "    condition: certmanager.enabled",
    "    alias: certmanager",
    "    version: {version}",
)

CERT_MANAGER_DEPENDENCIES = "\n".join(_CERT_MANAGER_LINES) + "\n"


class ChartError(OSError):
    """Raised when the chart cannot be written."""


def validate_chart_name(name: str) -> None:
    """Raise ChartError unless ``name`` is a usable chart directory name."""
    if not name or len(name) > MAX_CHART_NAME_LENGTH:
        raise ChartError(f"chart name must be between 1 and {MAX_CHART_NAME_LENGTH} characters")
    if not _CHART_NAME_RE.match(name):
        raise ChartError(f"chart name must match the regular expression {json.dumps(_CHART_NAME_PATTERN)}")


def chart_yaml(
    app_name: str, chart_version: str, cert_manager_as_subchart: bool, cert_manager_version: str
) -> str:
    """Return the Chart.yaml content."""
    content = DEFAULT_CHART_FILE.format(name=app_name, version=chart_version)
    if cert_manager_as_subchart:
        content += CERT_MANAGER_DEPENDENCIES.format(version=json.dumps(cert_manager_version))
    return content


def helpers_yaml(chart_name: str) -> str:
    """Return the _helpers.tpl content for the given chart."""
    return DEFAULT_HELPERS.replace("<CHARTNAME>", chart_name)


def _write_file(path: str, content: str) -> None:
    try:
        with open(path, "w", encoding="utf-8") as file:
            file.write(content)
    except OSError as err:
        raise ChartError(f"{err}: unable to write {path}") from err
    logger.info("created %s", path)


def _create_common_files(
    chart_dir: str,
    chart_name: str,
    chart_version: str,
    crd: bool,
    cert_manager_as_subchart: bool,
    cert_manager_version: str,
) -> None:
    c_dir = os.path.join(chart_dir, chart_name)
    try:
        os.makedirs(os.path.join(c_dir, "templates"), mode=0o750, exist_ok=True)
    except OSError as err:
        raise ChartError(f"{err}: unable create chart/templates dir") from err
    if crd:
        try:
            os.makedirs(os.path.join(c_dir, "crds"), mode=0o750, exist_ok=True)
        except OSError as err:
            raise ChartError(f"{err}: unable create crds dir") from err
    _write_file(
        os.path.join(c_dir, "Chart.yaml"),
        chart_yaml(chart_name, chart_version, cert_manager_as_subchart, cert_manager_version),
    )
    _write_file(os.path.join(c_dir, ".helmignore"), HELM_IGNORE)
    _write_file(os.path.join(c_dir, "templates", "_helpers.tpl"), helpers_yaml(chart_name))


def init_chart_dir(
    chart_dir: str,
    chart_name: str,
    chart_version: str,
    crd: bool,
    cert_manager_as_subchart: bool,
    cert_manager_version: str,
) -> None:
    """Create the chart skeleton unless Chart.yaml already exists."""
    validate_chart_name(chart_name)
    chart_file = os.path.join(chart_dir, chart_name, "Chart.yaml")
    if not os.path.exists(chart_file):
        _create_common_files(
            chart_dir, chart_name, chart_version, crd, cert_manager_as_subchart, cert_manager_version
        )
        return
    logger.info("Skip creating Chart skeleton: Chart.yaml already exists.")


def _plain(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


def _overwrite_template_file(filename: str, chart_dir: str, crd: bool, templates: list[Template]) -> None:
    if crd and "crd" in filename:
        subdir = "crds"
        try:
            os.makedirs(os.path.join(chart_dir, subdir), mode=0o750, exist_ok=True)
        except OSError as err:
            raise ChartError(f"{err}: unable create crds dir") from err
    else:
        subdir = "templates"
    path = os.path.join(chart_dir, subdir, filename)
    try:
        file = open(path, "w", encoding="utf-8")
    except OSError as err:
        raise ChartError(f"{err}: unable to open {path}") from err
    with file:
        for index, template in enumerate(templates):
            logger.debug("writing a template into %s", path)
            try:
                if index:
                    file.write("\n---\n")
                template.write(file)
            except OSError as err:
                raise ChartError(f"{err}: unable to write into {path}") from err
    logger.info("overwritten %s", path)


def _overwrite_values_file(chart_dir: str, values: Values, cert_manager_as_subchart: bool) -> None:
    if cert_manager_as_subchart:
        values.add(True, "certmanager", "installCRDs")
        values.add(True, "certmanager", "enabled")
    content = yaml.safe_dump(_plain(values), default_flow_style=False, sort_keys=True, allow_unicode=True)
    path = os.path.join(chart_dir, "values.yaml")
    try:
        with open(path, "w", encoding="utf-8") as file:
            file.write(content)
    except OSError as err:
        raise ChartError(f"{err}: unable to write values.yaml") from err
    logger.info("overwritten %s", path)


class ChartOutput(Output):
    """Writes templates into a chart directory.

    values.yaml and the template files are overwritten on every run; the
    chart skeleton is only created when Chart.yaml is missing.
    """

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
        init_chart_dir(chart_dir, chart_name, chart_version, crd, cert_manager_as_subchart, cert_manager_version)
        files: dict[str, list[Template]] = {}
        values = Values()
        values[DOMAIN_KEY] = DEFAULT_DOMAIN
        for template, filename in zip(templates, filenames):
            files.setdefault(filename, []).append(template)
            values.merge(template.values())
        c_dir = os.path.join(chart_dir, chart_name)
        for filename, group in files.items():
            _overwrite_template_file(filename, c_dir, crd, group)
        _overwrite_values_file(c_dir, values, cert_manager_as_subchart)