"""Configuration helpers shared by the CLI, the dashboard, and services."""
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path("data")


def get_config_value(key: str, default: str = "") -> str:
    """Get configuration value from Streamlit secrets or environment variables.

    Checks Streamlit secrets first (for hosted dashboards), then falls back
    to environment variables (for local use and the CLI).
    """
    try:
        import streamlit as st
        if hasattr(st, "secrets") and key in st.secrets:
            return str(st.secrets[key])
    except (ImportError, FileNotFoundError, KeyError):
        pass

    return os.getenv(key, default)


def load_env_file(path: Path) -> None:
    """Load ``KEY=VALUE`` lines from a file into the environment if it exists.

    Variables already present in the environment are left untouched.
    """
    if not path.exists():
        return

    try:
        with path.open(encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                if not key or key in os.environ:
                    continue
                os.environ[key] = value.strip().strip('"').strip("'")
    except OSError as exc:
        logger.debug("Could not load env file %s: %s", path, exc)


def resolve_data_dir(explicit: Path | None = None) -> Path:
    """Return the directory holding the persisted collections."""
    if explicit is not None:
        return explicit
    configured = get_config_value("INSPECTION_DATA_DIR")
    return Path(configured).expanduser() if configured else DEFAULT_DATA_DIR
