"""Let's Encrypt certificate lookup for Matrix Stack Setup."""

from pathlib import Path
from typing import List, Tuple

from .config import LETSENCRYPT_LIVE_DIR


def certificate_paths(domain: str, letsencrypt_dir: Path = LETSENCRYPT_LIVE_DIR) -> Tuple[Path, Path]:
    """Return (fullchain, privkey) paths for the domain."""
    live_dir = letsencrypt_dir / domain
    return live_dir / "fullchain.pem", live_dir / "privkey.pem"


def missing_certificate_files(domain: str, letsencrypt_dir: Path = LETSENCRYPT_LIVE_DIR) -> List[Path]:
    """List the certificate files that do not exist for the domain."""
    return [path for path in certificate_paths(domain, letsencrypt_dir) if not path.is_file()]
