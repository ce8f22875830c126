# certgen/crypto/errors.py
"""
Error types raised while issuing certificates.

Every failure is terminal for the issuance call that raised it; nothing is
retried. Wrapped library errors keep the original as __cause__.
"""


class CertgenError(Exception):
    """Base class for all certgen failures."""


class NoOptionsError(CertgenError):
    """Issuance request itself was absent."""


class NoNameError(CertgenError):
    """Issuance request has an empty artifact name."""


class NoTemplateError(CertgenError):
    """Neither (or both) of descriptor / descriptor_fn were supplied."""


class KeyGenerationError(CertgenError):
    pass


class SigningError(CertgenError):
    pass


class KeySerializationError(CertgenError):
    pass


class PersistenceError(CertgenError):
    pass


class ExternalToolError(CertgenError):
    """openssl is missing or exited non-zero."""


class ConfigurationError(CertgenError):
    """An environment setting is malformed or out of range."""
