from __future__ import annotations

import re
import secrets
import string
import unicodedata

SUFFIX_ALPHABET = string.digits + string.ascii_lowercase
SUFFIX_LENGTH = 4

_STRIP_RE = re.compile(r"[^a-z0-9\s_-]")
_SEPARATOR_RE = re.compile(r"[\s_-]+")


def slugify(name: str) -> str:
    ascii_name = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    base = _STRIP_RE.sub("", ascii_name.lower().strip())
    base = _SEPARATOR_RE.sub("-", base)
    return base.strip("-")


def random_suffix(length: int = SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(length))


def generate_slug(name: str) -> str:
    base = slugify(name) or "campaign"
    return f"{base}-{random_suffix()}"
