"""Service credential management for botstream.

Handles loading and saving the Supabase project URL and publishable key.
Values are loaded with this priority:
  1. Environment variables (highest, already set in shell)
  2. ~/.botstream/keys.env (saved by `botstream setup`)
  3. .env in current directory (project-level)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import BaseModel

from botstream.errors import ConfigError

logger = logging.getLogger(__name__)

# Directory for user-level botstream configuration
BOTSTREAM_HOME = Path.home() / ".botstream"
KEYS_FILE = BOTSTREAM_HOME / "keys.env"

URL_ENV = "SUPABASE_URL"
KEY_ENV = "SUPABASE_PUBLISHABLE_KEY"

# (env_var, display_name, description)
SETTINGS = [
    (URL_ENV, "Supabase URL", "Project URL, e.g. https://abc123.supabase.co"),
    (KEY_ENV, "Publishable key", "Public anon key used as the bearer credential"),
]


class ServiceSettings(BaseModel):
    """Resolved connection settings for the hosted backend."""

    supabase_url: str
    supabase_publishable_key: str


_SETTING_VARS = tuple(env_var for env_var, _, _ in SETTINGS)


def read_env_file(path: Path) -> dict[str, str]:
    """Parse KEY=VALUE lines from ``path``.

    Blank lines and ``#`` comments are skipped, an ``export`` prefix is
    accepted, and one pair of matching surrounding quotes is removed.
    An unreadable file yields an empty mapping.
    """
    values: dict[str, str] = {}
    try:
        text = path.read_text(encoding="utf-8")
    except OSError:
        logger.debug("Could not read %s", path)
        return values

    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        key, sep, value = line.partition("=")
        key, value = key.strip(), value.strip()
        if not sep or not key:
            continue
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        values[key] = value
    return values


def load_keys_env() -> None:
    """Fill unset service settings from ~/.botstream/keys.env, then ./.env.

    Only the variables named in SETTINGS are taken from the files, and a
    variable already set in the environment always wins.
    """
    for env_file in (KEYS_FILE, Path.cwd() / ".env"):
        if not env_file.is_file():
            continue
        values = read_env_file(env_file)
        for env_var in _SETTING_VARS:
            if values.get(env_var) and not os.environ.get(env_var):
                os.environ[env_var] = values[env_var]
                logger.debug("Loaded %s from %s", env_var, env_file)


def get_settings() -> ServiceSettings:
    """Return the service settings from the environment.

    Raises:
        ConfigError: If the URL or the publishable key is not set, or the
            URL is not an http(s) URL.
    """
    load_keys_env()
    url = os.environ.get(URL_ENV, "").strip()
    key = os.environ.get(KEY_ENV, "").strip()
    missing = [name for name, value in ((URL_ENV, url), (KEY_ENV, key)) if not value]
    if missing:
        raise ConfigError(
            f"Missing {', '.join(missing)}. Run `botstream setup` or set them in .env."
        )
    if not url.startswith(("https://", "http://")):
        raise ConfigError(f"{URL_ENV} must start with http:// or https://, got {url!r}")
    return ServiceSettings(supabase_url=url.rstrip("/"), supabase_publishable_key=key)


def save_keys(values: dict[str, str]) -> Path:
    """Write service settings to ~/.botstream/keys.env.

    Settings missing from ``values`` (or blank) keep whatever the file
    already held. The file is made readable by the owner only.

    Raises:
        ValueError: If ``values`` names a variable that is not a setting.

    Returns:
        Path to the saved file.
    """
    unknown = sorted(set(values) - set(_SETTING_VARS))
    if unknown:
        raise ValueError(f"Unknown settings: {', '.join(unknown)}")

    merged = read_env_file(KEYS_FILE) if KEYS_FILE.is_file() else {}
    merged.update({name: value.strip() for name, value in values.items() if value.strip()})

    lines = ["# Supabase connection for botstream, written by `botstream setup`"]
    lines += [f"{env_var}={merged[env_var]}" for env_var in _SETTING_VARS if merged.get(env_var)]

    BOTSTREAM_HOME.mkdir(parents=True, exist_ok=True)
    KEYS_FILE.write_text("\n".join(lines) + "\n", encoding="utf-8")
    try:
        KEYS_FILE.chmod(0o600)
    except OSError:
        logger.warning("Could not restrict permissions on %s", KEYS_FILE)
    return KEYS_FILE


def clear_keys() -> bool:
    """Delete the saved settings file.

    Returns:
        True if a file was removed, False if there was none.
    """
    try:
        KEYS_FILE.unlink()
    except FileNotFoundError:
        return False
    return True
