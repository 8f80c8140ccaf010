import pytest

from kubechart.config import DEFAULT_CHART_NAME, Config, ConfigError, is_dns1123_subdomain


@pytest.mark.parametrize("name", ["", "my.chart123", "my-chart123"])
def test_validate_valid_names(name):
    config = Config(chart_name=name)
    config.validate()
    assert config.chart_name == (name or DEFAULT_CHART_NAME)


@pytest.mark.parametrize("name", ["my_chart123", "my char123t"])
def test_validate_invalid_names(name):
    config = Config(chart_name=name)
    with pytest.raises(ConfigError, match="invalid chart name"):
        config.validate()


def test_chart_name_not_set_uses_default():
    config = Config()
    config.validate()
    assert config.chart_name == "chart"


def test_chart_name_set_is_kept():
    config = Config(chart_name="test")
    config.validate()
    assert config.chart_name == "test"


def test_dns1123_valid_returns_no_errors():
    assert is_dns1123_subdomain("example.com") == []


def test_dns1123_uppercase_rejected():
    assert len(is_dns1123_subdomain("Example")) == 1


def test_dns1123_too_long():
    errors = is_dns1123_subdomain("a" * 254)
    assert any("253" in e for e in errors)


@pytest.mark.parametrize("name", ["abc-", "abc.", "-abc", ".abc"])
def test_dns1123_must_start_and_end_alphanumeric(name):
    errors = is_dns1123_subdomain(name)
    assert len(errors) == 1
    assert isinstance(errors[0], str) and errors[0]


def test_config_defaults():
    config = Config()
    assert config.files == []
    assert config.crd is False
    assert config.cert_manager_version == ""