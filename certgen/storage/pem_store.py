# certgen/storage/pem_store.py
"""
PEM persistence for issued artifacts.

Provides:
 - ArtifactKind: CERTIFICATE (<name>.pem) / PRIVATE_KEY (<name>.key)
 - to_pem(kind, der_bytes) -> bytes
 - PemFileStore(directory).save(name, kind, der_bytes) -> Path
"""
import enum
import logging
import os
from pathlib import Path
from typing import Union

from cryptography import x509
from cryptography.hazmat.primitives import serialization

log = logging.getLogger(__name__)

KEY_FILE_MODE = 0o600


class ArtifactKind(enum.Enum):
    CERTIFICATE = ("CERTIFICATE", "pem")
    PRIVATE_KEY = ("PRIVATE KEY", "key")

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def suffix(self) -> str:
        return self.value[1]


def to_pem(kind: ArtifactKind, der_bytes: bytes) -> bytes:
    """Re-encode a DER certificate / PKCS#8 key as PEM. Raises ValueError on bad DER."""
    if kind is ArtifactKind.CERTIFICATE:
        return x509.load_der_x509_certificate(der_bytes).public_bytes(serialization.Encoding.PEM)
    key = serialization.load_der_private_key(der_bytes, password=None)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def _private_opener(path, flags):
    return os.open(path, flags, KEY_FILE_MODE)


class PemFileStore:
    """Writes <directory>/<name>.pem and <directory>/<name>.key."""

    def __init__(self, directory: Union[str, Path] = "."):
        self.directory = Path(directory)

    def path_for(self, name: str, kind: ArtifactKind) -> Path:
        return self.directory / f"{name}.{kind.suffix}"

    def save(self, name: str, kind: ArtifactKind, der_bytes: bytes) -> Path:
        pem = to_pem(kind, der_bytes)
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(name, kind)
        if kind is ArtifactKind.PRIVATE_KEY:
            with open(path, "wb", opener=_private_opener) as f:
                # an existing file keeps its old mode through os.open
                os.fchmod(f.fileno(), KEY_FILE_MODE)
                f.write(pem)
        else:
            with open(path, "wb") as f:
                f.write(pem)
        log.debug("wrote %s", path)
        return path
