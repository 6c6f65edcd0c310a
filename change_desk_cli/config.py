"""
Change Desk CLI Configuration

Settings, paths, and project detection.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from change_desk.backends import (
    ChangeRequestBackend,
    HttpChangeRequestBackend,
    InMemoryChangeRequestBackend,
)
from change_desk.errors import ConfigError

# Default paths
DEFAULT_GLOBAL_DIR = Path.home() / ".changedesk"
DEFAULT_PROJECT_DIR = ".changedesk"
DEFAULT_CONFIG_FILE = "config.json"
DEFAULT_LOG_FILE = "changedesk.log"

DEFAULT_SERVICE_URL = "http://localhost:8040"
BACKENDS = ("http", "memory")


@dataclass
class ServiceSettings:
    """Where the change request controller lives."""

    backend: str = "http"
    service_url: str = DEFAULT_SERVICE_URL
    timeout: float = 10.0
    api_token: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (the token is never written out)."""
        return {
            "backend": self.backend,
            "service_url": self.service_url,
            "timeout": self.timeout,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServiceSettings":
        """Create from dictionary."""
        return cls(
            backend=data.get("backend", "http"),
            service_url=data.get("service_url", DEFAULT_SERVICE_URL),
            timeout=float(data.get("timeout", 10.0)),
            api_token=data.get("api_token"),
        )


@dataclass
class Config:
    """Complete CLI configuration."""

    # Paths
    global_dir: Path = field(default_factory=lambda: DEFAULT_GLOBAL_DIR)
    project_dir: Optional[Path] = None

    # Controller
    service: ServiceSettings = field(default_factory=ServiceSettings)

    # Identity of the person using the desk
    user_id: Optional[str] = None

    # In-memory backend seed (JSON)
    seed_file: Optional[Path] = None

    # Review settings
    guard_in_flight: bool = False

    # Logging (None keeps logging off in the TUI)
    log_level: Optional[str] = None

    def __post_init__(self):
        """Ensure paths are Path objects."""
        if isinstance(self.global_dir, str):
            self.global_dir = Path(self.global_dir)
        if isinstance(self.project_dir, str):
            self.project_dir = Path(self.project_dir)
        if isinstance(self.seed_file, str):
            self.seed_file = Path(self.seed_file)

    @property
    def config_file(self) -> Path:
        """Get config.json file path."""
        if self.project_dir:
            return self.project_dir / DEFAULT_CONFIG_FILE
        return self.global_dir / DEFAULT_CONFIG_FILE

    @property
    def log_file(self) -> Path:
        """Get log file path."""
        return (self.project_dir or self.global_dir) / DEFAULT_LOG_FILE

    def ensure_dirs(self) -> None:
        """Create the directory holding the config file."""
        if self.project_dir:
            self.project_dir.mkdir(parents=True, exist_ok=True)
        else:
            self.global_dir.mkdir(parents=True, exist_ok=True)

    def apply_env(self, environ: Optional[Dict[str, str]] = None) -> None:
        """Override settings from CHANGEDESK_* environment variables."""
        env = os.environ if environ is None else environ
        if env.get("CHANGEDESK_BACKEND"):
            self.service.backend = env["CHANGEDESK_BACKEND"]
        if env.get("CHANGEDESK_SERVICE_URL"):
            self.service.service_url = env["CHANGEDESK_SERVICE_URL"]
        if env.get("CHANGEDESK_API_TOKEN"):
            self.service.api_token = env["CHANGEDESK_API_TOKEN"]
        if env.get("CHANGEDESK_USER_ID"):
            self.user_id = env["CHANGEDESK_USER_ID"]
        if env.get("CHANGEDESK_SEED_FILE"):
            self.seed_file = Path(env["CHANGEDESK_SEED_FILE"])

    def create_backend(self) -> ChangeRequestBackend:
        """Build the configured controller backend."""
        if self.service.backend == "memory":
            backend = InMemoryChangeRequestBackend()
            if self.seed_file:
                try:
                    backend.load_seed(self.seed_file)
                except (OSError, ValueError) as e:
                    raise ConfigError(f"Cannot load seed file {self.seed_file}: {e}") from e
            return backend
        if self.service.backend == "http":
            return HttpChangeRequestBackend(
                self.service.service_url,
                api_token=self.service.api_token,
                timeout=self.service.timeout,
            )
        raise ConfigError(
            f"Unknown backend '{self.service.backend}' (expected one of {', '.join(BACKENDS)})"
        )

    def save(self) -> None:
        """Save configuration to file."""
        self.ensure_dirs()
        data = {
            "service": self.service.to_dict(),
            "user_id": self.user_id,
            "seed_file": str(self.seed_file) if self.seed_file else None,
            "guard_in_flight": self.guard_in_flight,
            "log_level": self.log_level,
        }
        with open(self.config_file, "w") as f:
            json.dump(data, f, indent=2)

    @classmethod
    def load(cls, config_file: Path) -> "Config":
        """Load configuration from file."""
        config = cls()

        if config_file.exists():
            try:
                with open(config_file) as f:
                    data = json.load(f)
            except (json.JSONDecodeError, IOError) as e:
                raise ConfigError(f"Cannot read {config_file}: {e}") from e

            if "service" in data:
                config.service = ServiceSettings.from_dict(data["service"])
            config.user_id = data.get("user_id")
            if data.get("seed_file"):
                config.seed_file = Path(data["seed_file"])
            config.guard_in_flight = data.get("guard_in_flight", False)
            config.log_level = data.get("log_level")

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "global_dir": str(self.global_dir),
            "project_dir": str(self.project_dir) if self.project_dir else None,
            "service": self.service.to_dict(),
            "user_id": self.user_id,
            "seed_file": str(self.seed_file) if self.seed_file else None,
            "guard_in_flight": self.guard_in_flight,
            "log_level": self.log_level,
        }


def detect_project_dir(start_path: Optional[Path] = None) -> Optional[Path]:
    """
    Detect project-specific .changedesk directory.

    Walks up from start_path looking for a .changedesk directory.

    Args:
        start_path: Starting directory (defaults to cwd)

    Returns:
        Path to .changedesk directory if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()

    while current != current.parent:
        project_dir = current / DEFAULT_PROJECT_DIR
        if project_dir.is_dir():
            return project_dir
        current = current.parent

    return None


def get_config(
    project_dir: Optional[Path] = None,
    global_dir: Optional[Path] = None,
    environ: Optional[Dict[str, str]] = None,
) -> Config:
    """
    Get configuration with project detection and environment overrides.

    Args:
        project_dir: Explicit project directory
        global_dir: Explicit global directory
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Configured Config instance
    """
    if global_dir is None:
        global_dir = DEFAULT_GLOBAL_DIR

    if project_dir is None:
        project_dir = detect_project_dir()

    config = Config(global_dir=global_dir, project_dir=project_dir)

    if config.config_file.exists():
        config = Config.load(config.config_file)
        config.global_dir = global_dir
        config.project_dir = project_dir

    config.apply_env(environ)
    return config


def init_project(path: Optional[Path] = None) -> Path:
    """
    Initialize a new project with a .changedesk directory.

    Args:
        path: Directory to initialize (defaults to cwd)

    Returns:
        Path to created .changedesk directory
    """
    if path is None:
        path = Path.cwd()

    project_dir = path / DEFAULT_PROJECT_DIR
    project_dir.mkdir(parents=True, exist_ok=True)

    config = Config(project_dir=project_dir)
    if not config.config_file.exists():
        config.save()

    return project_dir
