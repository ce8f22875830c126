# certgen/config.py
"""
Settings read from the environment (and an optional .env at the repo root).
"""
import os
from pathlib import Path

from dotenv import load_dotenv

from certgen.crypto.errors import ConfigurationError
from certgen.crypto.templates import TemplateDefaults, DEFAULT_TEMPLATE_DEFAULTS

ROOT = Path(__file__).resolve().parents[1]
load_dotenv(ROOT / ".env")

CERT_DIR = Path(os.getenv("CERT_DIR", "certs"))
KEY_STRENGTH = int(os.getenv("KEY_STRENGTH", "2048"))
OPENSSL_BIN = os.getenv("OPENSSL_BIN", "openssl")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def load_template_defaults() -> TemplateDefaults:
    """
    Template identity/policy with CERT_* environment overrides applied.
    Raises ConfigurationError for non-numeric or out-of-range values.
    """
    d = DEFAULT_TEMPLATE_DEFAULTS
    try:
        return _template_defaults_from_env(d)
    except ValueError as e:
        raise ConfigurationError(f"bad CERT_* setting: {e}") from e


def _template_defaults_from_env(d: TemplateDefaults) -> TemplateDefaults:
    return TemplateDefaults(
        country=os.getenv("CERT_COUNTRY", d.country),
        organization=os.getenv("CERT_ORG", d.organization),
        organizational_unit=os.getenv("CERT_OU", d.organizational_unit),
        province=os.getenv("CERT_PROVINCE", d.province),
        locality=os.getenv("CERT_LOCALITY", d.locality),
        common_name=os.getenv("CERT_CN") or d.common_name,
        validity_years=int(os.getenv("CERT_VALIDITY_YEARS", str(d.validity_years))),
        serial_bits=int(os.getenv("CERT_SERIAL_BITS", str(d.serial_bits))),
    )
