"""Built-in formatters available to every setup.

Formatters receive their arguments as text and return a value whose text
form is spliced into the configuration string.
"""

import os
import posixpath
import secrets
import uuid
from datetime import datetime, timezone


def _now(fmt: str = "%Y-%m-%dT%H:%M:%SZ") -> str:
    return datetime.now(timezone.utc).strftime(fmt)


def _today(fmt: str = "%Y-%m-%d") -> str:
    return datetime.now(timezone.utc).strftime(fmt)


def _env(name: str, default: str = "") -> str:
    return os.environ.get(name, default)


def _random_hex(nbytes: str = "8") -> str:
    return secrets.token_hex(int(nbytes))


FORMATTERS = {
    "str": {
        "upper": lambda s: s.upper(),
        "lower": lambda s: s.lower(),
        "strip": lambda s: s.strip(),
        "replace": lambda s, old, new: s.replace(old, new),
        "join": lambda sep, *parts: sep.join(parts),
    },
    "date": {
        "now": _now,
        "today": _today,
    },
    "env": {
        "get": _env,
    },
    "uuid": {
        "v4": lambda: str(uuid.uuid4()),
    },
    "random": {
        "hex": _random_hex,
    },
    "path": {
        "join": lambda *parts: posixpath.join(*parts),
        "basename": posixpath.basename,
        "dirname": posixpath.dirname,
    },
}
