#!/usr/bin/env python3
# scripts/gen_cert.py
# Issue one leaf signed by an existing CA (<out>/ca.pem + <out>/ca.key).
# With --host the leaf is a server certificate, otherwise a client one.
import argparse
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from certgen import config
from certgen.crypto.errors import CertgenError
from certgen.crypto.issuer import IssuanceRequest, ChainSigned, issue
from certgen.crypto.pki import load_cert_file, load_private_key_file
from certgen.crypto.templates import build_server_template, build_client_template
from certgen.storage.pem_store import ArtifactKind, PemFileStore


def main(name, hosts, bits, out_dir, ca_name="ca"):
    store = PemFileStore(out_dir)
    ca_cert_path = store.path_for(ca_name, ArtifactKind.CERTIFICATE)
    ca_key_path = store.path_for(ca_name, ArtifactKind.PRIVATE_KEY)
    if not ca_cert_path.exists() or not ca_key_path.exists():
        print("CA not found. Run scripts/gen_ca.py first.")
        return 1

    try:
        parent = ChainSigned(load_cert_file(ca_cert_path), load_private_key_file(ca_key_path))
    except ValueError as e:
        print(f"[!] Could not load CA {ca_name}: {e}")
        return 1
    try:
        defaults = config.load_template_defaults()
        if hosts:
            descriptor = build_server_template(hosts, defaults)
        else:
            descriptor = build_client_template(defaults)
        issue(IssuanceRequest(name=name, descriptor=descriptor, mode=parent, key_strength=bits), store)
    except CertgenError as e:
        print(f"[!] {type(e).__name__}: {e}")
        return 1
    print("Wrote:", store.path_for(name, ArtifactKind.CERTIFICATE), store.path_for(name, ArtifactKind.PRIVATE_KEY))
    return 0


if __name__ == "__main__":
    p = argparse.ArgumentParser()
    p.add_argument("--name", required=True)
    p.add_argument("--host", action="append", default=[])
    p.add_argument("--bits", type=int, default=config.KEY_STRENGTH)
    p.add_argument("--out", default=str(config.CERT_DIR))
    p.add_argument("--ca", default="ca")
    args = p.parse_args()
    sys.exit(main(args.name, args.host, args.bits, args.out, args.ca))
