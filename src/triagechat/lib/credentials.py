"""Credential lookup for backend clients.

A secret source maps a host name (``ai.google.dev``, ``api.anthropic.com``)
to an API key. Sources are consulted once at startup, before the session
loop begins; a missing key is a startup failure.

Examples:
    Environment first, then ~/.netrc::

        >>> source = ChainSecrets(
        ...     EnvSecrets({"ai.google.dev": os.environ.get("GEMINI_API_KEY")}),
        ...     NetrcSecrets(),
        ... )
        >>> require_secret(source, "ai.google.dev")
        'AIza...'

    A netrc entry looks like::

        machine ai.google.dev login apikey password AIza...
"""

import logging
import netrc
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from triagechat.errors import ConfigurationError, MissingSecretError

logger = logging.getLogger(__name__)


class SecretSource(Protocol):
    """Anything that can look up a secret by name."""

    def get(self, name: str) -> str | None: ...


class EnvSecrets:
    """Secrets taken from already-loaded settings values.

    Empty strings count as missing.
    """

    def __init__(self, values: Mapping[str, str | None]) -> None:
        self._values = dict(values)

    def get(self, name: str) -> str | None:
        return self._values.get(name) or None


class NetrcSecrets:
    """Secrets read from the password field of a netrc file.

    The file is parsed on first lookup. A missing file holds no secrets;
    a malformed one is a configuration error.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path).expanduser() if path is not None else None
        self._parsed: netrc.netrc | None = None
        self._loaded = False

    def _load(self) -> netrc.netrc | None:
        if self._loaded:
            return self._parsed
        self._loaded = True
        try:
            self._parsed = netrc.netrc(str(self.path) if self.path else None)
        except FileNotFoundError:
            logger.debug("No netrc file at %s", self.path or "~/.netrc")
        except netrc.NetrcParseError as e:
            raise ConfigurationError(f"Malformed netrc file: {e}") from e
        return self._parsed

    def get(self, name: str) -> str | None:
        parsed = self._load()
        if parsed is None:
            return None
        entry = parsed.authenticators(name)
        if entry is None:
            return None
        _login, _account, password = entry
        return password or None


class ChainSecrets:
    """Consult several sources in order; the first hit wins."""

    def __init__(self, *sources: SecretSource) -> None:
        self.sources = sources

    def get(self, name: str) -> str | None:
        for source in self.sources:
            value = source.get(name)
            if value:
                return value
        return None


def require_secret(source: SecretSource, name: str) -> str:
    """Look up a secret or fail.

    Raises:
        MissingSecretError: If no source knows ``name``.
    """
    value = source.get(name)
    if not value:
        raise MissingSecretError(
            f"No credential for {name}: set the API key in the environment "
            f"or add 'machine {name} password <key>' to your netrc file"
        )
    return value
