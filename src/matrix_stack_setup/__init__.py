"""Matrix Stack Setup - Bootstrap a self-hosted Synapse, Element and LiveKit stack."""

__version__ = "1.0.0"

# Export programmatic setup API
from .setup import (
    generate_configuration,
    render_artifacts,
    write_artifacts,
    find_existing_state,
    finalize_permissions,
)

from .settings import Settings, SettingsError, load_settings, resolve_settings
from .credentials import Secrets, generate_random_string
from .requirements import check_requirements

__all__ = [
    "generate_configuration",
    "render_artifacts",
    "write_artifacts",
    "find_existing_state",
    "finalize_permissions",
    "Settings",
    "SettingsError",
    "load_settings",
    "resolve_settings",
    "Secrets",
    "generate_random_string",
    "check_requirements",
]
