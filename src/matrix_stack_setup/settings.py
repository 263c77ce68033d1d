"""User settings for Matrix Stack Setup, read from a .env file."""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple

from dotenv import dotenv_values

from .config import (
    DEFAULT_DOMAIN,
    DEFAULT_FEDERATION_WHITELIST,
    DEFAULT_MAX_UPLOAD_SIZE,
    SETTINGS_FILE,
)

_HOSTNAME_RE = re.compile(
    r"^(?=.{1,253}\Z)[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)*\Z"
)
_PORT_RE = re.compile(r"^\d{1,5}\Z")
_UPLOAD_SIZE_RE = re.compile(r"^\d+[KM]?\Z")


class SettingsError(ValueError):
    """Raised when a user-supplied setting cannot be used safely."""


@dataclass(frozen=True)
class Settings:
    """Resolved settings shared by every generated artifact."""
    domain: str = DEFAULT_DOMAIN
    federation_whitelist: Tuple[str, ...] = (DEFAULT_FEDERATION_WHITELIST,)
    max_upload_size: str = DEFAULT_MAX_UPLOAD_SIZE

    def __post_init__(self):
        if not is_valid_hostname(self.domain):
            raise SettingsError(f"DOMAIN_NAME is not a valid hostname: {self.domain!r}")
        for entry in self.federation_whitelist:
            if not is_valid_server_name(entry):
                raise SettingsError(
                    f"FEDERATION_DOMAIN_WHITELIST contains an invalid server name: {entry!r}"
                )
        if not _UPLOAD_SIZE_RE.match(self.max_upload_size):
            raise SettingsError(
                f"MAX_UPLOAD_SIZE must be a number with optional K or M suffix: "
                f"{self.max_upload_size!r}"
            )


def is_valid_hostname(value: str) -> bool:
    return bool(_HOSTNAME_RE.match(value))


def is_valid_server_name(value: str) -> bool:
    """Hostname with an optional ``:port`` suffix."""
    host, sep, port = value.partition(":")
    if sep and not (_PORT_RE.match(port) and 0 < int(port) < 65536):
        return False
    return is_valid_hostname(host)


def parse_whitelist(raw: str) -> Tuple[str, ...]:
    """Split a comma-separated whitelist, dropping blank entries.

    >>> parse_whitelist("a.org, b.org,  , c.org")
    ('a.org', 'b.org', 'c.org')
    """
    return tuple(token.strip() for token in raw.split(",") if token.strip())


def read_settings_file(path: Path) -> Dict[str, str]:
    """Load key=value pairs from the settings file, or {} if it is absent."""
    if not path.is_file():
        return {}
    return {key: value for key, value in dotenv_values(path).items() if value is not None}


def resolve_settings(values: Mapping[str, Optional[str]]) -> Settings:
    """Build Settings from raw values, falling back to defaults for empty keys."""
    def value_or_default(key: str, default: str) -> str:
        value = (values.get(key) or "").strip()
        return value or default

    whitelist = parse_whitelist(
        value_or_default("FEDERATION_DOMAIN_WHITELIST", DEFAULT_FEDERATION_WHITELIST)
    )
    return Settings(
        domain=value_or_default("DOMAIN_NAME", DEFAULT_DOMAIN),
        # A whitelist of only commas and blanks falls back as well
        federation_whitelist=whitelist or (DEFAULT_FEDERATION_WHITELIST,),
        max_upload_size=value_or_default("MAX_UPLOAD_SIZE", DEFAULT_MAX_UPLOAD_SIZE),
    )


def load_settings(base_dir: Path) -> Settings:
    """Resolve settings from the .env file in base_dir."""
    return resolve_settings(read_settings_file(base_dir / SETTINGS_FILE))
