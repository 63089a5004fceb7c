"""
Credential resolution and process settings.

Credentials are resolved once at startup from, in order:

1. Environment variables (native ``OCI_*`` names or ``OCI_CLI_*`` aliases).
   A partial set counts as absent and resolution falls through.
2. The default profile of the OCI config file (``~/.oci/config``).
3. A session placeholder whose secret fields are sentinels, leaving the
   actual signing to a session-token signer built from the config file.

The result, together with the read-only flag, is frozen into a ``Settings``
instance that is passed explicitly to everything downstream.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from ocimcp.errors import ConfigurationError

logger = logging.getLogger("oci-mcp.config")


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_CONFIG_PATH = Path.home() / ".oci" / "config"
DEFAULT_REGION = "us-ashburn-1"
DEFAULT_PROFILE = "DEFAULT"
SESSION_SENTINEL = "session"

READ_ONLY_ENV = "OCI_MCP_READ_ONLY"
LOG_LEVEL_ENV = "OCI_MCP_LOG_LEVEL"

# field -> (native name, CLI alias)
_ENV_NAMES: dict[str, tuple[str, str]] = {
    "tenancy": ("OCI_TENANCY", "OCI_CLI_TENANCY"),
    "user": ("OCI_USER", "OCI_CLI_USER"),
    "fingerprint": ("OCI_FINGERPRINT", "OCI_CLI_FINGERPRINT"),
    "private_key": ("OCI_PRIVATE_KEY", "OCI_CLI_KEY_CONTENT"),
    "region": ("OCI_REGION", "OCI_CLI_REGION"),
    "compartment_id": ("OCI_COMPARTMENT_ID", "OCI_CLI_COMPARTMENT_ID"),
}

_REQUIRED_FIELDS = ("tenancy", "user", "fingerprint", "private_key", "region")

_REGION_RE = re.compile(r"^[a-z]{2,}(-[a-z]+)+-\d+$")


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CredentialSet:
    tenancy: str
    user: str
    fingerprint: str
    private_key: str
    region: str
    compartment_id: Optional[str] = None
    source: str = "explicit"  # "environment" | "config_file" | "session" | "explicit"

    @property
    def is_placeholder(self) -> bool:
        return self.source == "session"

    @property
    def is_complete(self) -> bool:
        """True when the set can sign requests on its own."""
        if self.is_placeholder:
            return False
        return all(getattr(self, name) for name in _REQUIRED_FIELDS)

    def __repr__(self) -> str:
        # Keep key material out of logs and tracebacks.
        return (
            f"CredentialSet(tenancy={self.tenancy!r}, user={self.user!r}, "
            f"region={self.region!r}, compartment_id={self.compartment_id!r}, "
            f"source={self.source!r})"
        )


@dataclass(frozen=True)
class CompartmentScope:
    """Default compartment for calls that omit ``compartmentId``."""

    tenancy_id: str
    compartment_id: Optional[str] = None

    def resolve(self, explicit: Optional[str] = None) -> str:
        """Return the explicit id, else the configured compartment, else the tenancy root."""
        if explicit:
            return explicit
        if self.compartment_id:
            return self.compartment_id
        return self.tenancy_id


@dataclass(frozen=True)
class Settings:
    credentials: CredentialSet
    read_only: bool = False
    config_path: Path = DEFAULT_CONFIG_PATH
    log_level: str = "WARNING"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_credentials(fields: Mapping[str, Optional[str]], source: str) -> CredentialSet:
    """Check a raw field mapping against the credential schema.

    Raises ConfigurationError naming every offending field.
    """
    problems: list[str] = []
    for name in _REQUIRED_FIELDS:
        value = fields.get(name)
        if not isinstance(value, str) or not value.strip():
            problems.append(f"{name} is required")

    region = fields.get("region")
    if isinstance(region, str) and region.strip() and not _REGION_RE.match(region.strip()):
        problems.append(f"region {region!r} is not a valid region identifier")

    compartment_id = fields.get("compartment_id")
    if compartment_id is not None and (not isinstance(compartment_id, str) or not compartment_id.strip()):
        problems.append("compartment_id must be a non-empty string when set")

    if problems:
        raise ConfigurationError(f"Invalid OCI configuration ({source}): " + "; ".join(problems))

    return CredentialSet(
        tenancy=fields["tenancy"].strip(),
        user=fields["user"].strip(),
        fingerprint=fields["fingerprint"].strip(),
        private_key=fields["private_key"],
        region=fields["region"].strip(),
        compartment_id=compartment_id.strip() if compartment_id else None,
        source=source,
    )


# ---------------------------------------------------------------------------
# Source 1: environment
# ---------------------------------------------------------------------------

def _env_fields(environ: Mapping[str, str]) -> dict[str, Optional[str]]:
    fields: dict[str, Optional[str]] = {}
    for name, (native, alias) in _ENV_NAMES.items():
        fields[name] = environ.get(native) or environ.get(alias) or None
    return fields


def credentials_from_environment(environ: Mapping[str, str]) -> Optional[CredentialSet]:
    """Return credentials from the environment, or None if any required field is absent."""
    fields = _env_fields(environ)
    missing = [name for name in _REQUIRED_FIELDS if not fields.get(name)]
    if missing:
        logger.debug("Environment credentials incomplete (missing %s)", ", ".join(missing))
        return None
    return validate_credentials(fields, source="environment")


# ---------------------------------------------------------------------------
# Source 2: config file
# ---------------------------------------------------------------------------

def parse_profile_file(content: str, profile: str = DEFAULT_PROFILE) -> dict[str, str]:
    """Parse an OCI config file body and return the keys of *profile*.

    Keys that appear before any ``[section]`` header belong to the default
    profile.  Raises ConfigurationError for a body line without ``=`` or when
    the requested profile is not present.
    """
    sections: dict[str, dict[str, str]] = {}
    current = ""

    for lineno, raw in enumerate(content.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith(("#", ";")):
            continue
        if line.startswith("[") and line.endswith("]"):
            current = line[1:-1].strip()
            sections.setdefault(current, {})
            continue
        if "=" not in line:
            raise ConfigurationError(f"Malformed config line {lineno}: expected key=value")
        key, value = line.split("=", 1)
        sections.setdefault(current, {})[key.strip()] = value.strip()

    if profile in sections:
        return sections[profile]
    if profile == DEFAULT_PROFILE and "" in sections:
        return sections[""]
    raise ConfigurationError(f"Profile [{profile}] not found in config file")


def _read_key_file(key_file: str) -> str:
    path = Path(key_file).expanduser()
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read key_file {path}: {exc}") from exc


def credentials_from_file(path: Path) -> CredentialSet:
    """Load credentials from the default profile of the config file at *path*."""
    if not path.exists():
        raise ConfigurationError(
            f"OCI config file not found at {path}. "
            "Create it or provide credentials via environment variables."
        )
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read OCI config file {path}: {exc}") from exc

    profile = parse_profile_file(content)
    key_file = profile.get("key_file")
    fields = {
        "tenancy": profile.get("tenancy"),
        "user": profile.get("user"),
        "fingerprint": profile.get("fingerprint"),
        "private_key": _read_key_file(key_file) if key_file else None,
        "region": profile.get("region"),
        "compartment_id": profile.get("compartment_id"),
    }
    return validate_credentials(fields, source="config_file")


# ---------------------------------------------------------------------------
# Source 3: session placeholder
# ---------------------------------------------------------------------------

def session_placeholder(environ: Mapping[str, str]) -> CredentialSet:
    region = environ.get("OCI_REGION") or environ.get("OCI_CLI_REGION") or DEFAULT_REGION
    return CredentialSet(
        tenancy=SESSION_SENTINEL,
        user=SESSION_SENTINEL,
        fingerprint=SESSION_SENTINEL,
        private_key=SESSION_SENTINEL,
        region=region,
        source="session",
    )


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

def resolve_credentials(
    environ: Optional[Mapping[str, str]] = None,
    config_path: Optional[Path] = None,
    explicit: Optional[Mapping[str, Optional[str]]] = None,
) -> CredentialSet:
    """Resolve one CredentialSet, first success wins.

    An *explicit* mapping bypasses the search entirely and must validate.
    """
    if explicit is not None:
        return validate_credentials(explicit, source="explicit")

    env = os.environ if environ is None else environ
    path = config_path or DEFAULT_CONFIG_PATH

    try:
        creds = credentials_from_environment(env)
    except ConfigurationError as exc:
        logger.warning("Ignoring environment credentials: %s", exc)
        creds = None
    if creds is not None:
        logger.info("Using OCI credentials from environment variables")
        return creds

    try:
        creds = credentials_from_file(path)
    except ConfigurationError as exc:
        logger.info("Config file credentials unavailable (%s); falling back to session auth", exc)
        return session_placeholder(env)

    logger.info("Using OCI credentials from %s", path)
    return creds


def is_read_only(environ: Mapping[str, str]) -> bool:
    return environ.get(READ_ONLY_ENV) in ("true", "1")


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    config_path: Optional[Path] = None,
) -> Settings:
    """Build the process-wide Settings from the environment, read exactly once."""
    env = os.environ if environ is None else environ
    path = config_path or DEFAULT_CONFIG_PATH
    return Settings(
        credentials=resolve_credentials(env, path),
        read_only=is_read_only(env),
        config_path=path,
        log_level=env.get(LOG_LEVEL_ENV, "WARNING").upper(),
    )
