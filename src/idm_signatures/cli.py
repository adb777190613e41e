from __future__ import annotations

import argparse
import asyncio
import json
import logging
import pathlib
import sys
from collections.abc import Sequence
from typing import Any

from .constants import DEFAULT_KEY_PATH
from .signers import create_signer
from .verify import create_verifier, static_resolver


def _load_json(path: str) -> Any:
    return json.loads(pathlib.Path(path).read_text("utf-8"))


def _load_data(path: str, *, as_json: bool) -> Any:
    raw = pathlib.Path(path).read_bytes()
    return json.loads(raw) if as_json else raw


def _load_key(path: str) -> str | bytes:
    raw = pathlib.Path(path).read_bytes()
    if raw.lstrip().startswith(b"xprv"):
        return raw.decode("ascii").strip()
    return raw


def _cmd_sign(args: argparse.Namespace) -> int:
    signer = create_signer(args.did_url, _load_key(args.key), args.key_path)
    data = _load_data(args.data, as_json=args.data_json)
    signature = asyncio.run(signer.sign(data))
    print(json.dumps(signature.to_dict(), indent=2))
    return 0


def _cmd_verify(args: argparse.Namespace) -> int:
    documents: dict[str, Any] = {}
    for path in args.did_document:
        doc = _load_json(path)
        if not isinstance(doc, dict) or not isinstance(doc.get("id"), str):
            print(f"error: DID document {path} has no string 'id'", file=sys.stderr)
            return 2
        documents[doc["id"]] = doc
    verifier = create_verifier(static_resolver(documents))
    data = _load_data(args.data, as_json=args.data_json)
    try:
        result = asyncio.run(verifier.verify(data, _load_json(args.signature)))
    except LookupError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    if args.json:
        out: dict[str, Any] = {"valid": result.valid}
        if result.error is not None:
            out["error"] = result.error.to_dict()
        print(json.dumps(out, default=str))
    else:
        print("OK" if result.valid else f"FAIL: {result.error.message if result.error else ''}")
    return 0 if result.valid else 1


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="idm-signatures")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_sign = sub.add_parser("sign", help="Sign a data file and print the signature envelope")
    p_sign.add_argument("--did-url", required=True, help="Signer DID URL including #fragment")
    p_sign.add_argument("--key", required=True, help="PEM/DER private key or xprv file")
    p_sign.add_argument("--key-path", default=DEFAULT_KEY_PATH)
    p_sign.add_argument("--data", required=True, help="File with the data to sign")
    p_sign.add_argument(
        "--data-json", action="store_true", help="Parse the data file as JSON and sign it as structured data"
    )
    p_sign.set_defaults(func=_cmd_sign)

    p_ver = sub.add_parser("verify", help="Verify a signature envelope against DID documents")
    p_ver.add_argument("--data", required=True)
    p_ver.add_argument("--data-json", action="store_true")
    p_ver.add_argument("--signature", required=True, help="Signature envelope JSON file")
    p_ver.add_argument(
        "--did-document", required=True, action="append", help="DID document JSON file (repeatable)"
    )
    p_ver.add_argument("--json", action="store_true", help="Emit the verdict as JSON")
    p_ver.set_defaults(func=_cmd_verify)
    return p


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
