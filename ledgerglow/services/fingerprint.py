import hashlib
from typing import Any, Mapping


def token_fingerprint(issuer: str, currency: str) -> str:
    """Stable key for a token: hex MD5 of ``issuer_currency``.

    xrpl.to uses the same digest to address logos and rich lists, so it has
    to match theirs byte for byte.
    """
    return hashlib.md5(f"{issuer}_{currency}".encode("utf-8")).hexdigest()


def fingerprint_for(token: Mapping[str, Any]) -> str:
    """Prefer the ``md5`` the catalog already ships with a token.

    A missing issuer or currency hashes as an empty string, so a row without
    an issuer keys on ``"_USD"``. A JavaScript template string would
    hash ``"undefined_USD"`` instead; logo documents written that way do not
    match these keys.
    """
    md5 = token.get("md5")
    if isinstance(md5, str) and md5:
        return md5
    return token_fingerprint(str(token.get("issuer") or ""), str(token.get("currency") or ""))
