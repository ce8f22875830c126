# certgen/crypto/templates.py
"""
Certificate templates (unsigned descriptors) for the three archetypes:
CA root, server leaf and client leaf.

Provides:
 - TemplateDefaults: injectable identity / validity / serial policy
 - CertificateDescriptor: what a certificate will contain before signing
 - build_common_template(is_ca, defaults=None)
 - build_server_template(hosts, defaults=None)
 - build_client_template(defaults=None)
"""
import datetime
import ipaddress
import secrets
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set, Union

from cryptography import x509
from cryptography.x509.oid import NameOID, ExtendedKeyUsageOID

KEY_USAGE_FLAGS = (
    "digital_signature",
    "content_commitment",
    "key_encipherment",
    "data_encipherment",
    "key_agreement",
    "key_cert_sign",
    "crl_sign",
)

MAX_SERIAL_BITS = 159


@dataclass(frozen=True)
class TemplateDefaults:
    country: str = "CN"
    organization: str = "2SE"
    organizational_unit: str = "BOX"
    province: str = "Shanghai"
    locality: str = "Shanghai"
    common_name: Optional[str] = None
    validity_years: int = 100
    serial_bits: int = 63

    def __post_init__(self):
        # RFC 5280 caps serials at 20 octets, positive
        if not 1 <= self.serial_bits <= MAX_SERIAL_BITS:
            raise ValueError(f"serial_bits must be within 1..{MAX_SERIAL_BITS}, got {self.serial_bits}")
        if self.validity_years < 1:
            raise ValueError(f"validity_years must be positive, got {self.validity_years}")


DEFAULT_TEMPLATE_DEFAULTS = TemplateDefaults()


@dataclass
class CertificateDescriptor:
    serial_number: int
    not_before: datetime.datetime
    not_after: datetime.datetime
    country: Optional[str] = None
    organization: Optional[str] = None
    organizational_unit: Optional[str] = None
    province: Optional[str] = None
    locality: Optional[str] = None
    common_name: Optional[str] = None
    key_usage: Set[str] = field(default_factory=set)
    ext_key_usage: List[x509.ObjectIdentifier] = field(default_factory=list)
    is_ca: bool = False
    basic_constraints_valid: bool = False
    ip_addresses: List[Union[ipaddress.IPv4Address, ipaddress.IPv6Address]] = field(default_factory=list)
    dns_names: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.check()

    def check(self) -> None:
        """Raise ValueError if the descriptor cannot be signed as-is."""
        if self.is_ca and not self.basic_constraints_valid:
            raise ValueError("is_ca requires basic_constraints_valid")
        unknown = set(self.key_usage) - set(KEY_USAGE_FLAGS)
        if unknown:
            raise ValueError(f"unknown key usage flags: {sorted(unknown)}")

    @property
    def subject(self) -> x509.Name:
        attrs = []
        for oid, value in (
            (NameOID.COUNTRY_NAME, self.country),
            (NameOID.STATE_OR_PROVINCE_NAME, self.province),
            (NameOID.LOCALITY_NAME, self.locality),
            (NameOID.ORGANIZATION_NAME, self.organization),
            (NameOID.ORGANIZATIONAL_UNIT_NAME, self.organizational_unit),
            (NameOID.COMMON_NAME, self.common_name),
        ):
            if value:
                attrs.append(x509.NameAttribute(oid, value))
        return x509.Name(attrs)


def _random_serial(bits: int) -> int:
    # x509 serials must be positive
    return secrets.randbelow((1 << bits) - 1) + 1


def _add_years(when: datetime.datetime, years: int) -> datetime.datetime:
    try:
        return when.replace(year=when.year + years)
    except ValueError:
        # Feb 29 in a non-leap target year
        return when.replace(year=when.year + years, month=3, day=1)


def build_common_template(is_ca: bool, defaults: Optional[TemplateDefaults] = None) -> CertificateDescriptor:
    """
    Template shared by every archetype: random serial, default identity,
    validity from now for `validity_years`, client+server auth EKU,
    digital-signature + cert-sign key usage. CA templates also carry a valid
    basic-constraints CA flag.
    """
    d = defaults or DEFAULT_TEMPLATE_DEFAULTS
    now = datetime.datetime.now(datetime.timezone.utc)
    return CertificateDescriptor(
        serial_number=_random_serial(d.serial_bits),
        not_before=now,
        not_after=_add_years(now, d.validity_years),
        country=d.country,
        organization=d.organization,
        organizational_unit=d.organizational_unit,
        province=d.province,
        locality=d.locality,
        common_name=d.common_name,
        key_usage={"digital_signature", "key_cert_sign"},
        ext_key_usage=[ExtendedKeyUsageOID.CLIENT_AUTH, ExtendedKeyUsageOID.SERVER_AUTH],
        is_ca=is_ca,
        basic_constraints_valid=is_ca,
    )


def build_server_template(hosts: Sequence[str], defaults: Optional[TemplateDefaults] = None) -> CertificateDescriptor:
    """Leaf template; literal IPs become IP SANs, everything else a DNS SAN."""
    cert = build_common_template(False, defaults)
    for h in hosts:
        try:
            cert.ip_addresses.append(ipaddress.ip_address(h))
        except ValueError:
            cert.dns_names.append(h)
    return cert


def build_client_template(defaults: Optional[TemplateDefaults] = None) -> CertificateDescriptor:
    return build_common_template(False, defaults)
