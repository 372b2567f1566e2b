from __future__ import annotations

import argparse
import json
import logging
import os
import pathlib
import sys
from collections.abc import Sequence

from .constants import SEED_BYTES
from .envelope import sign_cachet
from .keys import PublicKey
from .signers import FileSigner
from .trustchain import RootKeyStore, TrustChain, parse_trusted
from .utils import b64u_decode, b64u_encode
from .verify import build_jwks_for_signers, verify_cachet

logger = logging.getLogger("cachet.cli")


def _cmd_keygen(args: argparse.Namespace) -> int:
    seed = b64u_encode(os.urandom(SEED_BYTES))
    signer = FileSigner(seed)
    print(json.dumps({"seed": seed, "jwk": signer.public_jwk()}, indent=2))
    return 0


def _cmd_jwks(args: argparse.Namespace) -> int:
    signers = [FileSigner(s) for s in args.seed]
    print(json.dumps(build_jwks_for_signers(signers), indent=2))
    return 0


def _cmd_issue_chain(args: argparse.Namespace) -> int:
    root = FileSigner(args.root_seed)
    issued: list[FileSigner | PublicKey] = [FileSigner(s) for s in args.seed or []]
    if args.leaf_key:
        issued.append(PublicKey(b64u_decode(args.leaf_key)))
    chain = TrustChain.issue(root, *issued)
    pathlib.Path(args.out).write_bytes(chain.to_bytes())
    logger.info("wrote %d-key chain rooted at %s", len(chain.keys()), root.kid)
    return 0


def _cmd_sign(args: argparse.Namespace) -> int:
    signer = FileSigner(args.seed)
    chain_bytes = pathlib.Path(args.chain).read_bytes()
    chain, consumed = parse_trusted(chain_bytes, RootKeyStore.load(args.roots))
    if consumed != len(chain_bytes):
        raise ValueError("chain file has trailing bytes")
    if chain.leaf_public_key() != signer.public_key:
        raise ValueError("seed does not match the chain's leaf key")
    data = pathlib.Path(args.data).read_bytes()
    cachet = sign_cachet(data, chain, signer)
    pathlib.Path(args.out).write_bytes(cachet.to_bytes())
    logger.info("signed %d bytes with %s", len(data), signer.kid)
    return 0


def _cmd_verify(args: argparse.Namespace) -> int:
    roots = RootKeyStore.load(args.roots)
    blob = pathlib.Path(args.cachet).read_bytes()
    cachet, reason = verify_cachet(blob, roots)
    if cachet is None:
        if args.json:
            print(json.dumps({"ok": False, "reason": reason}))
        else:
            print(f"REJECTED: {reason}", file=sys.stderr)
        return 1
    if args.data_out:
        pathlib.Path(args.data_out).write_bytes(cachet.data)
    if args.json:
        print(
            json.dumps(
                {
                    "ok": True,
                    "root_kid": cachet.trust_chain.root_key.kid,
                    "leaf_kid": cachet.trust_chain.leaf_public_key().kid,
                    "data_len": len(cachet.data),
                }
            )
        )
    else:
        print("OK")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="cachet", description="Sign and verify cachets")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("keygen", help="Generate a new Ed25519 seed")
    p.set_defaults(func=_cmd_keygen)

    p = sub.add_parser("jwks", help="Print a JWKS for the given seeds")
    p.add_argument("--seed", action="append", required=True)
    p.set_defaults(func=_cmd_jwks)

    p = sub.add_parser("issue-chain", help="Issue a trust chain from a root seed")
    p.add_argument("--root-seed", required=True)
    p.add_argument("--seed", action="append", help="Intermediate or leaf seed, in order")
    p.add_argument("--leaf-key", help="Leaf public key (base64url) when its seed is elsewhere")
    p.add_argument("--out", required=True)
    p.set_defaults(func=_cmd_issue_chain)

    p = sub.add_parser("sign", help="Sign a payload with a chain's leaf key")
    p.add_argument("--seed", required=True, help="Leaf seed (base64url)")
    p.add_argument("--chain", required=True)
    p.add_argument("--roots", required=True, help="JWKS file the chain must be rooted in")
    p.add_argument("--data", required=True)
    p.add_argument("--out", required=True)
    p.set_defaults(func=_cmd_sign)

    p = sub.add_parser("verify", help="Verify a cachet against trusted roots")
    p.add_argument("--cachet", required=True)
    p.add_argument("--roots", required=True, help="JWKS file of trusted root keys")
    p.add_argument("--data-out", help="Write the verified payload here")
    p.add_argument("--json", action="store_true")
    p.set_defaults(func=_cmd_verify)
    return ap


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
