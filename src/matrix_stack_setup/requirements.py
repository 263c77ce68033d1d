"""Host prerequisite checks run before generating the stack."""

import shutil
from pathlib import Path
from typing import Callable, List, Optional

from .config import DEFAULT_DOMAIN, LETSENCRYPT_LIVE_DIR
from .ssl import certificate_paths, missing_certificate_files

REQUIRED_COMMANDS = ("docker", "docker-compose", "sudo")


def check_commands(which: Callable[[str], Optional[str]] = shutil.which) -> List[str]:
    """Return one warning per required command missing from PATH."""
    return [
        f"'{cmd}' is not installed. Please install it."
        for cmd in REQUIRED_COMMANDS
        if not which(cmd)
    ]


def check_certificates(domain: str, letsencrypt_dir: Path = LETSENCRYPT_LIVE_DIR) -> List[str]:
    """Return warnings for the TLS pair of ``domain``.

    The placeholder domain is a misconfiguration in itself, so no certificate
    lookup is done for it.
    """
    if domain.lower() == DEFAULT_DOMAIN:
        return [
            f"DOMAIN_NAME is set to the default '{DEFAULT_DOMAIN}'. "
            "Please change it in your .env file to your actual domain name."
        ]

    fullchain, privkey = certificate_paths(domain, letsencrypt_dir)
    warnings = []
    for path in missing_certificate_files(domain, letsencrypt_dir):
        if path == fullchain:
            warnings.append(f"SSL certificate not found at {path}")
        elif path == privkey:
            warnings.append(f"SSL private key not found at {path}")
    return warnings


def check_requirements(
    domain: str,
    which: Callable[[str], Optional[str]] = shutil.which,
    letsencrypt_dir: Path = LETSENCRYPT_LIVE_DIR,
) -> List[str]:
    """Check host prerequisites.

    Returns:
        Warning lines, empty when nothing is missing
    """
    return check_commands(which) + check_certificates(domain, letsencrypt_dir)
