# tests/test_config.py
import importlib
from pathlib import Path

import pytest

from certgen import config
from certgen.crypto.errors import ConfigurationError
from certgen.crypto.templates import DEFAULT_TEMPLATE_DEFAULTS


def test_template_defaults_without_env(monkeypatch):
    for var in ("CERT_COUNTRY", "CERT_ORG", "CERT_OU", "CERT_PROVINCE", "CERT_LOCALITY",
                "CERT_CN", "CERT_VALIDITY_YEARS", "CERT_SERIAL_BITS"):
        monkeypatch.delenv(var, raising=False)
    assert config.load_template_defaults() == DEFAULT_TEMPLATE_DEFAULTS


def test_template_defaults_from_env(monkeypatch):
    monkeypatch.setenv("CERT_COUNTRY", "PK")
    monkeypatch.setenv("CERT_ORG", "Lab")
    monkeypatch.setenv("CERT_CN", "lab-root")
    monkeypatch.setenv("CERT_VALIDITY_YEARS", "5")
    d = config.load_template_defaults()
    assert (d.country, d.organization, d.common_name, d.validity_years) == ("PK", "Lab", "lab-root", 5)
    assert d.serial_bits == 63


def test_module_settings(monkeypatch):
    monkeypatch.setenv("CERT_DIR", "/tmp/pki")
    monkeypatch.setenv("KEY_STRENGTH", "4096")
    try:
        importlib.reload(config)
        assert config.CERT_DIR == Path("/tmp/pki")
        assert config.KEY_STRENGTH == 4096
    finally:
        monkeypatch.undo()
        importlib.reload(config)


@pytest.mark.parametrize("value", ["0", "160", "many"])
def test_bad_serial_bits_is_configuration_error(monkeypatch, value):
    monkeypatch.setenv("CERT_SERIAL_BITS", value)
    with pytest.raises(ConfigurationError):
        config.load_template_defaults()
