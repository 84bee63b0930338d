"""Charset sniffing and best-effort transcoding of legacy help pages.

Pages extracted from CHM containers declare a wide range of legacy
encodings (Shift_JIS, EUC-KR, windows-125x, ...). Detection is strictly
best effort:

  1. Scan the first ``SNIFF_LIMIT`` bytes for ``<meta ... charset=NAME``.
  2. No declaration, or a UTF-8 declaration → decode as UTF-8.
  3. Resolve NAME via the codec registry, then via the IANA alias table.
  4. Transcode the whole buffer, replacing bytes the codec rejects;
     a codec that fails outright → decode as UTF-8.

Nothing in this module raises to the caller. An unresolvable charset is
not a warning either: the page is simply read as UTF-8.
"""

from __future__ import annotations

import codecs
import re

SNIFF_LIMIT = 4096

_META_CHARSET_RE: re.Pattern[bytes] = re.compile(
    rb"""<meta\s+[^>]*charset\s*=\s*["']?([A-Za-z0-9_.:-]+)["']?""",
    re.IGNORECASE,
)

_UTF8_NAMES: frozenset[str] = frozenset(["utf-8", "utf8"])

# IANA-registered names and aliases that the codec registry does not know.
_IANA_ALIASES: dict[str, str] = {
    "windows-31j": "cp932",
    "cswindows31j": "cp932",
    "x-sjis": "shift_jis",
    "x-ms-cp932": "cp932",
    "x-euc-jp": "euc_jp",
    "cseucpkdfmtjapanese": "euc_jp",
    "csiso2022jp": "iso2022_jp",
    "x-mac-roman": "mac_roman",
    "csmacintosh": "mac_roman",
    "x-mac-cyrillic": "mac_cyrillic",
    "x-gbk": "gbk",
    "csgbk": "gbk",
    "csgb2312": "gb2312",
    "x-euc-cn": "gb2312",
    "x-x-big5": "big5",
    "big5-hkscs": "big5hkscs",
    "x-euc-kr": "euc_kr",
    "cseuckr": "euc_kr",
    "windows-874": "cp874",
    "x-cp1250": "cp1250",
    "x-cp1251": "cp1251",
    "x-cp1252": "cp1252",
    "cswindows1252": "cp1252",
    "cswindows1251": "cp1251",
    "cswindows1250": "cp1250",
    "csutf8": "utf-8",
    "unicode-1-1-utf-8": "utf-8",
}

# Declared names whose real-world pages use the vendor superset. Windows-31J
# adds NEC and IBM extensions (①, ㈱) that the strict JIS table rejects.
_SUPERSET_CODECS: dict[str, str] = {
    "shift_jis": "cp932",
}

# A declaration readable as ASCII bytes cannot belong to a UTF-16/32 page.
_WIDE_CODECS: frozenset[str] = frozenset(
    ["utf-16", "utf-16-le", "utf-16-be", "utf-32", "utf-32-le", "utf-32-be"]
)


def sniff_charset(raw: bytes) -> str | None:
    """Return the charset declared in the leading bytes of *raw*, or None."""
    match = _META_CHARSET_RE.search(raw[:SNIFF_LIMIT])
    if match is None:
        return None
    return match.group(1).decode("ascii")


def _text_codec(name: str) -> str | None:
    """Return the canonical codec name if *name* is a text encoding."""
    try:
        info = codecs.lookup(name)
        # Raises LookupError for bytes-to-bytes codecs such as hex or base64.
        b"".decode(info.name)
    except LookupError:
        return None
    return info.name


def resolve_encoding(name: str) -> str | None:
    """Resolve a declared charset to a Python codec name.

    Stage one asks the codec registry (registered names and MIME names);
    stage two consults the IANA alias table. Returns None when neither
    knows the name. Shift_JIS resolves to its Windows-31J superset.
    """
    key = name.strip().lower()
    if not key:
        return None
    codec = _text_codec(key)
    if codec is None and key in _IANA_ALIASES:
        codec = _text_codec(_IANA_ALIASES[key])
    if codec is None:
        return None
    return _SUPERSET_CODECS.get(codec, codec)


def _as_canonical(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def decode_document(raw: bytes, *, final: bool = True) -> str:
    """Decode *raw* using its declared charset, falling back to UTF-8.

    Args:
        raw: Leading bytes of an HTML document.
        final: False when *raw* was cut at a read limit; an incomplete
            multibyte sequence at the very end is then dropped instead of
            becoming a replacement character.

    Returns:
        Decoded text. Never raises.
    """
    declared = sniff_charset(raw)
    if declared is None or declared.lower() in _UTF8_NAMES:
        return _as_canonical(raw)

    codec = resolve_encoding(declared)
    if codec is None or codec in _WIDE_CODECS:
        return _as_canonical(raw)

    # Bytes outside the codec table become U+FFFD; the rest of the page
    # keeps its declared charset.
    decoder = codecs.getincrementaldecoder(codec)(errors="replace")
    try:
        return decoder.decode(raw, final=final)
    except ValueError:
        return _as_canonical(raw)
