# certgen/crypto/issuer.py
"""
Issue a certificate + private key from a descriptor.

A request is either self-signed (the new certificate is its own issuer and is
signed with its freshly generated key) or chain-signed by a parent
certificate/key pair. Both artifacts are handed to a store as DER; the new
private key is returned so it can parent later issuances.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from certgen.crypto.errors import (
    NoOptionsError, NoNameError, NoTemplateError, KeyGenerationError,
    SigningError, KeySerializationError, PersistenceError,
)
from certgen.crypto.templates import CertificateDescriptor, KEY_USAGE_FLAGS
from certgen.storage.pem_store import ArtifactKind, PemFileStore

log = logging.getLogger(__name__)

DEFAULT_KEY_STRENGTH = 2048

DescriptorFn = Callable[[], CertificateDescriptor]
ParentCert = Union[CertificateDescriptor, x509.Certificate]


@dataclass(frozen=True)
class SelfSigned:
    pass


@dataclass(frozen=True)
class ChainSigned:
    parent_cert: ParentCert
    parent_key: rsa.RSAPrivateKey

    def __post_init__(self):
        if self.parent_cert is None or self.parent_key is None:
            raise ValueError("chain signing needs both parent_cert and parent_key")


@dataclass
class IssuanceRequest:
    name: str
    descriptor: Optional[CertificateDescriptor] = None
    descriptor_fn: Optional[DescriptorFn] = None
    mode: Union[SelfSigned, ChainSigned] = field(default_factory=SelfSigned)
    key_strength: int = 0


def generate_rsa_key(bits: int) -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=bits)


def resolve_key_strength(key_strength: int) -> int:
    return key_strength if key_strength and key_strength > 0 else DEFAULT_KEY_STRENGTH


def _validate(request: Optional[IssuanceRequest]) -> None:
    if request is None:
        raise NoOptionsError("no options")
    if not request.name:
        raise NoNameError("no name")
    if (request.descriptor is None) == (request.descriptor_fn is None):
        raise NoTemplateError("exactly one of descriptor / descriptor_fn is required")


def _resolve_descriptor(request: IssuanceRequest) -> CertificateDescriptor:
    if request.descriptor is not None:
        return request.descriptor
    return request.descriptor_fn()


def build_certificate(descriptor: CertificateDescriptor, public_key, parent_cert: ParentCert,
                      parent_key: rsa.RSAPrivateKey, chained: bool) -> x509.Certificate:
    descriptor.check()
    builder = (
        x509.CertificateBuilder()
        .subject_name(descriptor.subject)
        .issuer_name(parent_cert.subject)
        .public_key(public_key)
        .serial_number(descriptor.serial_number)
        .not_valid_before(descriptor.not_before)
        .not_valid_after(descriptor.not_after)
    )
    if descriptor.key_usage:
        flags = dict.fromkeys(KEY_USAGE_FLAGS + ("encipher_only", "decipher_only"), False)
        flags.update(dict.fromkeys(descriptor.key_usage, True))
        builder = builder.add_extension(x509.KeyUsage(**flags), critical=True)
    if descriptor.ext_key_usage:
        builder = builder.add_extension(x509.ExtendedKeyUsage(descriptor.ext_key_usage), critical=False)
    if descriptor.basic_constraints_valid:
        builder = builder.add_extension(
            x509.BasicConstraints(ca=descriptor.is_ca, path_length=None), critical=True)
    sans = [x509.DNSName(n) for n in descriptor.dns_names] + \
           [x509.IPAddress(ip) for ip in descriptor.ip_addresses]
    if sans:
        builder = builder.add_extension(x509.SubjectAlternativeName(sans), critical=False)
    builder = builder.add_extension(x509.SubjectKeyIdentifier.from_public_key(public_key), critical=False)
    if chained:
        builder = builder.add_extension(
            x509.AuthorityKeyIdentifier.from_issuer_public_key(parent_key.public_key()), critical=False)
    return builder.sign(parent_key, hashes.SHA256())


def issue(request: Optional[IssuanceRequest], store=None,
          key_generator: Callable[[int], rsa.RSAPrivateKey] = generate_rsa_key) -> rsa.RSAPrivateKey:
    """
    Generate a key pair, sign the request's descriptor and persist both
    artifacts under request.name.

    `store` needs a save(name, ArtifactKind, der_bytes) method; defaults to a
    PemFileStore in the current directory.

    Raises:
      - NoOptionsError / NoNameError / NoTemplateError before any key is made
      - KeyGenerationError, SigningError, KeySerializationError, PersistenceError
    """
    _validate(request)
    descriptor = _resolve_descriptor(request)
    bits = resolve_key_strength(request.key_strength)

    try:
        cert_key = key_generator(bits)
    except Exception as e:
        raise KeyGenerationError(f"RSA-{bits} key generation failed: {e}") from e
    log.debug("generated RSA-%d key for %s", bits, request.name)

    if isinstance(request.mode, ChainSigned):
        parent_cert, parent_key, chained = request.mode.parent_cert, request.mode.parent_key, True
    else:
        parent_cert, parent_key, chained = descriptor, cert_key, False

    try:
        cert = build_certificate(descriptor, cert_key.public_key(), parent_cert, parent_key, chained)
        cert_der = cert.public_bytes(serialization.Encoding.DER)
    except Exception as e:
        raise SigningError(f"signing {request.name} failed: {e}") from e

    try:
        key_der = cert_key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    except Exception as e:
        raise KeySerializationError(f"PKCS#8 encoding of {request.name} key failed: {e}") from e

    if store is None:
        store = PemFileStore()
    try:
        store.save(request.name, ArtifactKind.CERTIFICATE, cert_der)
        store.save(request.name, ArtifactKind.PRIVATE_KEY, key_der)
    except Exception as e:
        raise PersistenceError(f"saving {request.name} failed: {e}") from e

    log.info("issued %s (%s, serial %x)", request.name,
             "chain-signed" if chained else "self-signed", descriptor.serial_number)
    return cert_key
