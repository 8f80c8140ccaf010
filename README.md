# kubechart

kubechart is a library that reads Kubernetes manifests (multi-document YAML
or JSON) and writes them out as a Helm chart: a `Chart.yaml`, a
`.helmignore`, a `templates/_helpers.tpl` with the usual name and label
helpers, one template file per resource and a `values.yaml` collecting the
values that processors lifted out of the manifests.

## What is in the package

- `kubechart.config` – `Config`, the settings of one run (chart name, chart
  directory, chart version, whether CRDs go to a `crds/` directory, the
  cert-manager subchart and its version, input files). `Config.validate()`
  falls back to the chart name `chart` and raises `ConfigError` when the name
  is not a DNS-1123 subdomain; `is_dns1123_subdomain(value)` returns the list
  of problems with a name.
- `kubechart.decoder` – `decode(reader, stop=None)` yields one dict per
  manifest document in a text or binary stream. Documents that are not
  objects or have no `kind` are logged and skipped. Setting the optional
  `threading.Event` `stop` ends decoding early.
- `kubechart.files` – `walk(paths, recursively)` goes through files and
  directories and yields `(file name, open binary file)` pairs; each file is
  closed when the next one is requested. Missing or unreadable paths are
  logged and skipped. Without `recursively`, subdirectories are ignored.
- `kubechart.metadata` – `MetadataService` learns the application's namespace
  and the common name prefix of its objects (`load`), trims that prefix
  (`trim_name`) and turns object names into templated names such as
  `{{ include "mychart.fullname" . }}-service` (`templated_name`,
  `templated_string`). `common_prefix` and `group_version_kind` are the
  helpers it uses.
- `kubechart.values` – `Values`, the contents of `values.yaml`, with `add`,
  `add_yaml` and `add_secret`, which store a value and return the Helm
  expression that reads it, and `merge`, where existing values win and lists
  are appended. Raises `ValuesError` when a path runs through a non-mapping.
- `kubechart.context` – `AppContext` gathers the decoded objects, runs each
  through the registered processors (the first one that reports it processed
  the object wins, otherwise the default processor, otherwise the object is
  skipped) and hands the templates to an output.
- `kubechart.chart` – `ChartOutput` writes the chart to disk and raises
  `ChartError` when it cannot; `init_chart_dir`, `validate_chart_name`,
  `chart_yaml` and `helpers_yaml` build its fixed parts.
- `kubechart.formatting` – `fix_unterminated_quotes` and
  `remove_trailing_whitespaces`, clean-ups for rendered templates.
- `kubechart.model` – the `Processor`, `Template`, `Output` and `AppMetadata`
  interfaces.

## Examples

Validating settings:

```python
from kubechart.config import Config, ConfigError

config = Config(chart_name="my-chart")
config.validate()

try:
    Config(chart_name="my_chart").validate()
except ConfigError as err:
    print(err)  # invalid chart name my_chart
```

Building values and the expressions that read them. Names are turned into
lower camel case, and strings get a `quote`:

```python
from kubechart.values import Values

values = Values()
values.add("abc", "a", "b")          # '{{ .Values.a.b | quote }}'
values.add(3, "my-app", "replicas")  # '{{ .Values.myApp.replicas }}'
values.add_secret(True, "a", "c")
# '{{ required "a.c is required" .Values.a.c | b64enc | quote }}'
```

Naming objects after the chart:

```python
from kubechart.metadata import common_prefix

common_prefix("testimony", "testicle")  # 'testi'
```

Tidying rendered text:

```python
from kubechart.formatting import remove_trailing_whitespaces

remove_trailing_whitespaces("abc   \nedf   ")  # 'abc\nedf'
```

Writing a chart with a processor of your own:

```python
import yaml

from kubechart.chart import ChartOutput
from kubechart.config import Config
from kubechart.context import AppContext
from kubechart.decoder import decode
from kubechart.files import walk
from kubechart.model import Processor, Template
from kubechart.values import Values


class RawTemplate(Template):
    def __init__(self, name, text):
        self._name = name
        self._text = text

    def filename(self):
        return self._name + ".yaml"

    def values(self):
        return Values()

    def write(self, writer):
        writer.write(self._text)


class RawProcessor(Processor):
    def process(self, app_meta, obj):
        name = app_meta.trim_name(obj["metadata"]["name"])
        return True, RawTemplate(name, yaml.safe_dump(obj))


config = Config(chart_name="mychart")
config.validate()
context = AppContext(config, ChartOutput()).with_default_processor(RawProcessor())
for name, file in walk(["manifests"], recursively=True):
    for obj in decode(file):
        context.add(obj, name)
context.create_helm()
```

An object added with an empty file name is written to the file its template
names; otherwise templates go to a file named after the manifest they came
from.

## Chart layout

`ChartOutput.create` creates the chart skeleton only when `Chart.yaml` does
not exist yet; `values.yaml` and the generated templates are overwritten on
every run. Templates that share a file name are written into the same file,
separated by `---`. With the CRD option set, templates whose file name
contains `crd` go to `crds/` instead of `templates/`. The value
`kubernetesClusterDomain: cluster.local` is always present in `values.yaml`.
With the cert-manager subchart enabled, `Chart.yaml` gets a `cert-manager`
dependency aliased `certmanager`, and `values.yaml` gets
`certmanager.installCRDs` and `certmanager.enabled` set to `true`.

## What the package does not do

- There is no command-line program; everything is done from Python code.
- No processors for particular resource kinds (Deployments, Services,
  ConfigMaps, Secrets and so on) are included. Objects are turned into
  templates only by the `Processor` implementations you register; with none
  registered and no default processor, every object is skipped.
- It does not run Helm or lint the chart it writes.