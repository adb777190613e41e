"""DID URL parsing.

Follows the DID Core ABNF::

    did             = "did:" method-name ":" method-specific-id
    method-name     = 1*method-char          ; %x61-7A / DIGIT
    method-specific-id = *( *idchar ":" ) 1*idchar
    did-url         = did path-abempty [ "?" query ] [ "#" fragment ]

Path, query and fragment use the RFC 3986 character sets.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_PCT = r"%[0-9A-Fa-f]{2}"
_IDCHAR = rf"(?:[A-Za-z0-9._-]|{_PCT})"
_PCHAR = rf"(?:[A-Za-z0-9\-._~!$&'()*+,;=:@]|{_PCT})"

_DID = rf"did:(?P<method>[a-z0-9]+):(?P<method_id>(?:{_IDCHAR}*:)*{_IDCHAR}+)"

DID_URL_RE = re.compile(
    rf"^(?P<did>{_DID})"
    rf"(?P<path>(?:/{_PCHAR}*)*)"
    rf"(?:\?(?P<query>(?:{_PCHAR}|[/?])*))?"
    rf"(?:#(?P<fragment>(?:{_PCHAR}|[/?])*))?"
)


@dataclass(frozen=True)
class ParsedDidUrl:
    did_url: str
    did: str
    method: str
    method_id: str
    path: str = ""
    query: str | None = None
    fragment: str | None = None


def parse_did_url(did_url: str) -> ParsedDidUrl:
    """Parse ``did_url`` or raise ``ValueError`` describing what is wrong with it."""
    if not did_url.startswith("did:"):
        raise ValueError(f"DID URL must start with 'did:': {did_url!r}")
    m = DID_URL_RE.fullmatch(did_url)
    if not m:
        if not re.match(r"^did:[a-z0-9]+:", did_url):
            raise ValueError(f"invalid DID method name in {did_url!r}")
        raise ValueError(f"malformed DID URL: {did_url!r}")
    return ParsedDidUrl(
        did_url=did_url,
        did=m.group("did"),
        method=m.group("method"),
        method_id=m.group("method_id"),
        path=m.group("path"),
        query=m.group("query"),
        fragment=m.group("fragment"),
    )
