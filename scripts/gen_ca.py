#!/usr/bin/env python3
# scripts/gen_ca.py
import argparse
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from certgen import config
from certgen.crypto.errors import CertgenError
from certgen.crypto.issuer import IssuanceRequest, issue
from certgen.crypto.templates import build_common_template
from certgen.storage.pem_store import PemFileStore


def main(name, bits, out_dir):
    store = PemFileStore(out_dir)
    try:
        issue(IssuanceRequest(name=name,
                              descriptor=build_common_template(True, config.load_template_defaults()),
                              key_strength=bits), store)
    except CertgenError as e:
        print(f"[!] {type(e).__name__}: {e}")
        return 1
    print(f"Wrote {name}.pem and {name}.key in {out_dir}/")
    return 0


if __name__ == "__main__":
    p = argparse.ArgumentParser()
    p.add_argument("--name", default="ca")
    p.add_argument("--bits", type=int, default=config.KEY_STRENGTH)
    p.add_argument("--out", default=str(config.CERT_DIR))
    args = p.parse_args()
    sys.exit(main(args.name, args.bits, args.out))
