import threading

import pytest

from kubechart.config import Config
from kubechart.context import AppContext
from kubechart.model import Output, Processor, Template
from kubechart.values import Values


class FakeTemplate(Template):
    def __init__(self, name):
        self.name = name

    def filename(self):
        return self.name

    def values(self):
        return Values()

    def write(self, writer):
        writer.write(self.name)


class KindProcessor(Processor):
    def __init__(self, kind, label):
        self.kind = kind
        self.label = label
        self.seen_namespaces = []

    def process(self, app_meta, obj):
        if obj["kind"] != self.kind:
            return False, None
        self.seen_namespaces.append(app_meta.namespace())
        return True, FakeTemplate(self.label)


class FailingProcessor(Processor):
    def process(self, app_meta, obj):
        raise RuntimeError("boom")


class RecordingOutput(Output):
    def __init__(self):
        self.calls = []

    def create(self, chart_dir, chart_name, chart_version, crd, cert_manager_as_subchart,
               cert_manager_version, templates, filenames):
        self.calls.append(
            dict(chart_dir=chart_dir, chart_name=chart_name, chart_version=chart_version,
                 templates=templates, filenames=filenames)
        )


def obj(kind, name, ns="ns"):
    return {"apiVersion": "v1", "kind": kind, "metadata": {"name": name, "namespace": ns}}


def test_first_matching_processor_used_and_filenames():
    output = RecordingOutput()
    ctx = AppContext(Config(chart_name="app", chart_dir="out", chart_version="1.0"), output)
    ctx.with_processors(KindProcessor("Service", "svc.yaml"), KindProcessor("Service", "other.yaml"))
    ctx.add(obj("Service", "a"), "")
    ctx.add(obj("Service", "b"), "given.yaml")
    ctx.create_helm()
    call = output.calls[0]
    assert call["filenames"] == ["svc.yaml", "given.yaml"]
    assert [t.filename() for t in call["templates"]] == ["svc.yaml", "svc.yaml"]
    assert (call["chart_dir"], call["chart_name"], call["chart_version"]) == ("out", "app", "1.0")


def test_default_processor_used_for_unknown():
    output = RecordingOutput()
    ctx = AppContext(Config(chart_name="app"), output)
    ctx.with_processors(KindProcessor("Service", "svc.yaml"))
    ctx.with_default_processor(KindProcessor("Secret", "default.yaml"))
    ctx.add(obj("Secret", "s"), "")
    ctx.create_helm()
    assert output.calls[0]["filenames"] == ["default.yaml"]


def test_unknown_skipped_without_default():
    output = RecordingOutput()
    ctx = AppContext(Config(chart_name="app"), output)
    ctx.with_processors(KindProcessor("Service", "svc.yaml"))
    ctx.add(obj("Secret", "s"), "")
    ctx.create_helm()
    assert output.calls[0]["templates"] == []


def test_metadata_loaded_before_processing():
    output = RecordingOutput()
    processor = KindProcessor("Service", "svc.yaml")
    ctx = AppContext(Config(chart_name="app"), output).with_processors(processor)
    ctx.add(obj("Service", "a", ns="my-ns"), "")
    ctx.add(obj("Service", "b", ns="my-ns"), "")
    ctx.create_helm()
    assert processor.seen_namespaces == ["my-ns", "my-ns"]


def test_stop_prevents_output():
    output = RecordingOutput()
    ctx = AppContext(Config(chart_name="app"), output)
    ctx.with_processors(KindProcessor("Service", "svc.yaml"))
    ctx.add(obj("Service", "a"), "")
    stop = threading.Event()
    stop.set()
    ctx.create_helm(stop)
    assert output.calls == []


def test_processor_error_propagates():
    output = RecordingOutput()
    ctx = AppContext(Config(chart_name="app"), output).with_processors(FailingProcessor())
    ctx.add(obj("Service", "a"), "")
    with pytest.raises(RuntimeError, match="boom"):
        ctx.create_helm()
    assert output.calls == []