# certgen/openssl.py
"""
Post-issuance conversions done by the openssl binary:
 - find_openssl(binary=None) -> absolute path
 - convert_pem_to_der(openssl, pem_path, der_path)
 - export_pkcs12(openssl, cert_path, key_path, out_path)   # password-less bundle
"""
import logging
import shutil
import subprocess

from certgen.crypto.errors import ExternalToolError

log = logging.getLogger(__name__)


def find_openssl(binary: str = None) -> str:
    path = shutil.which(binary or "openssl")
    if path is None:
        raise ExternalToolError(f"{binary or 'openssl'} not found on PATH; install it first")
    return path


def _run(argv):
    log.debug("running %s", " ".join(argv))
    try:
        subprocess.run(argv, check=True, capture_output=True)
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or b"").decode(errors="replace").strip()
        raise ExternalToolError(f"{' '.join(argv[:2])} exited {e.returncode}: {stderr}") from e
    except OSError as e:
        raise ExternalToolError(f"could not run {argv[0]}: {e}") from e


def convert_pem_to_der(openssl: str, pem_path, der_path) -> None:
    _run([openssl, "x509", "-outform", "der", "-in", str(pem_path), "-out", str(der_path)])


def export_pkcs12(openssl: str, cert_path, key_path, out_path) -> None:
    _run([openssl, "pkcs12", "-export", "-clcerts", "-inkey", str(key_path),
          "-passin", "pass:", "-password", "pass:", "-in", str(cert_path), "-out", str(out_path)])
