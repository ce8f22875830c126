# certgen/crypto/pki.py
"""
PKI helpers: load issued certs/keys and check that a certificate chains to a CA.
This verifies:
 - validity period (not_before / not_after)
 - certificate signature by the CA key
 - issuer matches the CA subject
"""
import datetime
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding


def load_cert(pem_bytes: bytes) -> x509.Certificate:
    return x509.load_pem_x509_certificate(pem_bytes)


def load_cert_file(path) -> x509.Certificate:
    return load_cert(Path(path).read_bytes())


def load_private_key_file(path):
    return serialization.load_pem_private_key(Path(path).read_bytes(), password=None)


def validate_cert_chain(cert: x509.Certificate, ca_cert: x509.Certificate):
    """
    Returns (True, "OK") on success, otherwise (False, reason).
    """
    now = datetime.datetime.now(datetime.timezone.utc)
    if now < cert.not_valid_before_utc or now > cert.not_valid_after_utc:
        return False, "Expired or not yet valid"

    try:
        ca_cert.public_key().verify(
            cert.signature,
            cert.tbs_certificate_bytes,
            padding.PKCS1v15(),
            cert.signature_hash_algorithm,
        )
    except Exception as e:
        return False, f"Signature verification failed: {e!r}"

    if cert.issuer != ca_cert.subject:
        return False, "Issuer mismatch"
    return True, "OK"


def san_entries(cert: x509.Certificate):
    """Return (ip_addresses, dns_names) from the SAN extension, or two empty lists."""
    try:
        san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
    except x509.ExtensionNotFound:
        return [], []
    return san.get_values_for_type(x509.IPAddress), san.get_values_for_type(x509.DNSName)
