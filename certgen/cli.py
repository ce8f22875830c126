#!/usr/bin/env python3
# certgen/cli.py
"""
Issue a private CA plus one server and one client certificate.

Produces in --out (default $CERT_DIR):
    ca.pem / ca.key / ca.der
    server.pem / server.key / server.der
    client.pem / client.key / client.p12
"""
import argparse
import logging
import sys
from functools import partial

from certgen import config
from certgen.crypto.errors import CertgenError
from certgen.crypto.issuer import IssuanceRequest, ChainSigned, issue
from certgen.crypto.templates import build_common_template, build_server_template, build_client_template
from certgen.openssl import find_openssl, convert_pem_to_der, export_pkcs12
from certgen.storage.pem_store import ArtifactKind, PemFileStore

DEFAULT_HOSTS = ["localhost", "127.0.0.1"]


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="certgen", description=__doc__.strip().splitlines()[0])
    p.add_argument("--host", action="append", default=[], help="Server certificate host (repeatable)")
    p.add_argument("--bits", type=int, default=config.KEY_STRENGTH, help="Key strength length")
    p.add_argument("--out", default=str(config.CERT_DIR), help="Output directory")
    p.add_argument("--openssl", default=config.OPENSSL_BIN, help="openssl binary")
    return p


def run(hosts, bits, store: PemFileStore, openssl: str) -> None:
    defaults = config.load_template_defaults()
    pem = partial(store.path_for, kind=ArtifactKind.CERTIFICATE)
    key = partial(store.path_for, kind=ArtifactKind.PRIVATE_KEY)

    ca_cert = build_common_template(True, defaults)
    ca_key = issue(IssuanceRequest(name="ca", descriptor=ca_cert, key_strength=bits), store)
    convert_pem_to_der(openssl, pem("ca"), store.directory / "ca.der")
    print("[+] CA written:", pem("ca"), key("ca"))

    parent = ChainSigned(ca_cert, ca_key)
    issue(IssuanceRequest(name="server", descriptor=build_server_template(hosts, defaults),
                          mode=parent, key_strength=bits), store)
    convert_pem_to_der(openssl, pem("server"), store.directory / "server.der")
    print("[+] Server certificate written for", ", ".join(hosts))

    issue(IssuanceRequest(name="client", descriptor_fn=partial(build_client_template, defaults),
                          mode=parent, key_strength=bits), store)
    export_pkcs12(openssl, pem("client"), key("client"), store.directory / "client.p12")
    print("[+] Client certificate written:", pem("client"), store.directory / "client.p12")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    hosts = args.host or list(DEFAULT_HOSTS)

    try:
        openssl = find_openssl(args.openssl)
    except CertgenError as e:
        print(f"[!] {e}")
        return 1

    try:
        run(hosts, args.bits, PemFileStore(args.out), openssl)
    except CertgenError as e:
        print(f"[!] {type(e).__name__}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
