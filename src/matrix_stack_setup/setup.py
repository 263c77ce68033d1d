"""Programmatic setup API for Matrix Stack Setup.

Renders every artifact of the stack into a target directory. The interactive
checks (requirements, overwrite confirmation) live in the CLI; everything here
runs without prompting.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .config import (
    COMPOSE_FILE,
    DATA_DIRS,
    ELEMENT_CONFIG_FILE,
    HOMESERVER_CONFIG_FILE,
    LIVEKIT_CONFIG_FILE,
    NGINX_CONFIG_FILE,
    SYNAPSE_GID,
    SYNAPSE_UID,
    generate_element_config,
    generate_homeserver_config,
    generate_livekit_config,
    generate_nginx_config,
)
from .credentials import Secrets
from .services import generate_docker_compose
from .settings import Settings

logger = logging.getLogger(__name__)

# Relative output path -> renderer
RENDERERS = {
    COMPOSE_FILE: generate_docker_compose,
    LIVEKIT_CONFIG_FILE: generate_livekit_config,
    ELEMENT_CONFIG_FILE: generate_element_config,
    NGINX_CONFIG_FILE: generate_nginx_config,
    HOMESERVER_CONFIG_FILE: generate_homeserver_config,
}


def find_existing_state(base_dir: Path) -> List[Path]:
    """Return previous output that a new run would invalidate."""
    found = []
    compose = base_dir / COMPOSE_FILE
    if compose.is_file():
        found.append(compose)
    data_dir = base_dir / "data"
    if data_dir.is_dir():
        found.append(data_dir)
    return found


def render_artifacts(settings: Settings, secrets: Secrets) -> Dict[str, str]:
    """Render all artifacts to text, keyed by relative path."""
    return {path: render(settings, secrets) for path, render in RENDERERS.items()}


def write_artifacts(base_dir: Path, rendered: Dict[str, str]) -> List[Path]:
    """Write rendered artifacts, replacing any previous copies."""
    for directory in DATA_DIRS:
        (base_dir / directory).mkdir(parents=True, exist_ok=True)

    written = []
    for relative, content in rendered.items():
        target = base_dir / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
        written.append(target)
    return written


def _walk(path: Path):
    yield path
    for root, dirs, files in os.walk(path):
        root_path = Path(root)
        for name in dirs + files:
            yield root_path / name


def finalize_permissions(base_dir: Path) -> bool:
    """Hand data/synapse to the Synapse uid and open up data/postgres.

    Best effort: failures are logged and the run carries on.

    Returns:
        True if every change was applied
    """
    ok = True

    try:
        for path in _walk(base_dir / "data" / "synapse"):
            os.chown(path, SYNAPSE_UID, SYNAPSE_GID)
    except OSError as e:
        logger.warning(f"Could not chown data/synapse to {SYNAPSE_UID}:{SYNAPSE_GID}: {e}")
        ok = False

    try:
        for path in _walk(base_dir / "data" / "postgres"):
            os.chmod(path, 0o777)
    except OSError as e:
        logger.warning(f"Could not relax permissions on data/postgres: {e}")
        ok = False

    return ok


def generate_configuration(
    base_dir: Path,
    settings: Settings,
    secrets: Optional[Secrets] = None,
    callback: Optional[Callable[[str], None]] = None,
) -> Secrets:
    """Generate secrets, write all artifacts and fix permissions.

    This is the main entry point for programmatic setup.

    Args:
        base_dir: Directory to write the stack into
        settings: Resolved user settings
        secrets: Credentials to use; fresh ones are generated when omitted
        callback: Optional function(message: str) for progress updates

    Returns:
        The secrets baked into the artifacts
    """
    def log(msg: str):
        if callback:
            callback(msg)

    log("Generating automatic parameters...")
    if secrets is None:
        secrets = Secrets.generate()

    log("Recreating folder structure and configuration files...")
    written = write_artifacts(base_dir, render_artifacts(settings, secrets))
    for path in written:
        logger.debug(f"Wrote {path}")

    log("Finalizing permissions...")
    if not finalize_permissions(base_dir):
        log("Some permissions could not be changed (try running as root)")

    return secrets
