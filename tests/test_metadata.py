import pytest

from kubechart.config import Config
from kubechart.metadata import MetadataService, common_prefix, group_version_kind

NS_NAME = "test-ns"
TEST_NS = {"apiVersion": "v1", "kind": "Namespace", "metadata": {"name": NS_NAME}}


def create_res(name, ns):
    return {"apiVersion": "v1", "kind": "Secret", "metadata": {"name": name, "namespace": ns}}


@pytest.mark.parametrize(
    "left, right, want",
    [
        ("test", "testimony", "test"),
        ("testimony", "testicle", "testi"),
        ("testimony", "abc", ""),
        ("testimony", "", ""),
        ("", "abc", ""),
        ("", "", ""),
        ("багет", "багаж", "баг"),
    ],
)
def test_common_prefix(left, right, want):
    assert common_prefix(left, right) == want


def test_load_ns_from_object():
    svc = MetadataService(Config())
    svc.load(create_res("name", "ns"))
    assert svc.namespace() == "ns"
    svc.load(TEST_NS)
    assert svc.namespace() == NS_NAME


def test_chart_name():
    svc = MetadataService(Config(chart_name="name"))
    assert svc.chart_name() == "name"


def test_config_returned():
    conf = Config(chart_name="name")
    assert MetadataService(conf).config() is conf


def test_trim_common_prefix():
    svc = MetadataService(Config())
    for name in ("abc-name1", "abc-name2", "abc-service"):
        svc.load(create_res(name, "ns"))
    assert svc.trim_name("abc-name1") == "name1"
    assert svc.trim_name("abc-name2") == "name2"
    assert svc.trim_name("abc-service") == "service"


def test_trim_no_common_prefix():
    svc = MetadataService(Config())
    for name in ("name1", "abc", "service"):
        svc.load(create_res(name, "ns"))
    assert svc.trim_name("name1") == "name1"
    assert svc.trim_name("abc") == "abc"
    assert svc.trim_name("service") == "service"


def test_template_name():
    svc = MetadataService(Config(chart_name="chart-name"))
    svc.load(create_res("abc", "ns"))
    assert svc.templated_name("abc") == '{{ include "chart-name.fullname" . }}-abc'


def test_template_name_unknown_not_processed():
    svc = MetadataService(Config(chart_name="chart-name"))
    svc.load(create_res("abc", "ns"))
    assert svc.templated_name("qwe") == "qwe"
    assert svc.templated_name("abc") != "abc"


def test_templated_string_trims_prefix():
    svc = MetadataService(Config(chart_name="chart-name"))
    svc.load(create_res("abc-one", "ns"))
    svc.load(create_res("abc-two", "ns"))
    assert svc.templated_string("abc-other") == '{{ include "chart-name.fullname" . }}-other'


def test_namespace_does_not_affect_prefix():
    svc = MetadataService(Config())
    svc.load(TEST_NS)
    svc.load(create_res("app-a", NS_NAME))
    svc.load(create_res("app-b", NS_NAME))
    assert svc.trim_name("app-a") == "a"


def test_group_version_kind():
    assert group_version_kind(TEST_NS) == ("", "v1", "Namespace")
    assert group_version_kind({"apiVersion": "apps/v1", "kind": "Deployment"}) == (
        "apps",
        "v1",
        "Deployment",
    )