"""
Client configuration.

Loads packaged defaults (defaults.yaml) with OmegaConf and applies environment
overrides. Environment variables are read from .env when present.

Environment overrides:
    RESUME_TAILOR_BACKEND_URL     backend.url (empty string when unset)
    RESUME_TAILOR_TIMEOUT         backend.timeout in seconds
    RESUME_TAILOR_STATE_DIR       paths.state_dir
    RESUME_TAILOR_LOGS_PATH       paths.logs_dir
    RESUME_TAILOR_DOWNLOADS_PATH  paths.downloads_dir

Examples:
    >>> config = load_config()
    >>> config.backend_url
    ''
    >>> config.resolve_url("/profiles")
    'http://localhost:8000/profiles'
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"

ENV_OVERRIDES = {
    "RESUME_TAILOR_BACKEND_URL": "backend.url",
    "RESUME_TAILOR_TIMEOUT": "backend.timeout",
    "RESUME_TAILOR_STATE_DIR": "paths.state_dir",
    "RESUME_TAILOR_LOGS_PATH": "paths.logs_dir",
    "RESUME_TAILOR_DOWNLOADS_PATH": "paths.downloads_dir",
}


@dataclass
class ClientConfig:
    """
    Resolved client configuration.

    Attributes:
        backend_url: Backend base URL ("" means same origin)
        origin: Origin requests resolve against when backend_url is empty
        timeout: Request timeout in seconds (None for no timeout)
        state_dir: Directory holding local storage and the settings database
        logs_dir: Directory for log files and the event history
        downloads_dir: Destination of classic downloads
        token_key: Local storage key of the bearer token
        database_name: Name of the settings database (without extension)
        settings_table: Table holding per-profile settings
        directory_key_prefix: Key prefix for per-profile directory handles
        local_storage_file: File name of the local storage JSON document
        events_file: File name of the event history (JSON Lines)
    """

    backend_url: str
    origin: str
    timeout: Optional[float]
    state_dir: Path
    logs_dir: Path
    downloads_dir: Path
    token_key: str = "jwt_token"
    database_name: str = "resume-tailor"
    settings_table: str = "settings"
    directory_key_prefix: str = "directory-"
    local_storage_file: str = "local_storage.json"
    events_file: str = "submission_events.log"

    @property
    def local_storage_path(self) -> Path:
        return self.state_dir / self.local_storage_file

    @property
    def database_path(self) -> Path:
        return self.state_dir / f"{self.database_name}.db"

    @property
    def events_path(self) -> Path:
        return self.logs_dir / self.events_file

    def resolve_url(self, endpoint: str) -> str:
        """Join an endpoint path onto the backend URL (or the origin when unset)."""
        base = self.backend_url or self.origin
        return f"{base.rstrip('/')}/{endpoint.lstrip('/')}"


def _env_overrides() -> Dict[str, Any]:
    """Collect dotted-key overrides from environment variables that are set."""
    overrides = {}
    for env_name, dotted_key in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value is None:
            continue
        if dotted_key == "backend.timeout":
            value = float(value) if value.strip() else None
        overrides[dotted_key] = value
    return overrides


def load_config(config_path: Optional[Path] = None, **overrides: Any) -> ClientConfig:
    """
    Load configuration from YAML defaults, environment, then keyword overrides.

    Args:
        config_path: Optional YAML file (defaults to packaged defaults.yaml)
        **overrides: Dotted-key overrides using underscores for dots
                     (e.g., backend_url="http://api", paths_state_dir="/tmp/x")

    Returns:
        Resolved ClientConfig
    """
    conf = OmegaConf.load(config_path or DEFAULTS_PATH)

    for dotted_key, value in _env_overrides().items():
        OmegaConf.update(conf, dotted_key, value)

    for key, value in overrides.items():
        section, _, name = key.partition("_")
        OmegaConf.update(conf, f"{section}.{name}", value)

    data = OmegaConf.to_container(conf, resolve=True)
    backend = data["backend"]
    paths = data["paths"]
    storage = data["storage"]

    return ClientConfig(
        backend_url=backend.get("url") or "",
        origin=backend["origin"],
        timeout=backend.get("timeout"),
        state_dir=Path(paths["state_dir"]).expanduser(),
        logs_dir=Path(paths["logs_dir"]).expanduser(),
        downloads_dir=Path(paths["downloads_dir"]).expanduser(),
        token_key=storage["token_key"],
        database_name=storage["database_name"],
        settings_table=storage["settings_table"],
        directory_key_prefix=storage["directory_key_prefix"],
        local_storage_file=storage["local_storage_file"],
        events_file=data["events"]["file"],
    )
