"""
Authentication provider selection.

Builds the single AuthHandle shared by every resource adapter.  Candidate
providers are tried as an explicit ordered list of attempts; the first one
that succeeds wins:

1. The OCI config file (supports session-token profiles).
2. A signer built directly from a complete CredentialSet.

The handle is built once at startup and never rebuilt; rotating credentials
requires a process restart.
"""

from __future__ import annotations

import configparser
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

import oci

from ocimcp.config import CredentialSet, Settings
from ocimcp.errors import AuthenticationError

logger = logging.getLogger("oci-mcp.auth")


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AuthHandle:
    """Opaque signing material shared read-only by all SDK clients."""

    config: dict = field(repr=False)
    signer: Any = field(default=None, repr=False)
    source: str = "config_file"

    @property
    def tenancy_id(self) -> Optional[str]:
        return self.config.get("tenancy")

    @property
    def region(self) -> Optional[str]:
        return self.config.get("region")

    def client(self, client_cls: Callable[..., Any]) -> Any:
        """Construct an SDK client bound to this handle."""
        if self.signer is None:
            return client_cls(self.config)
        return client_cls(self.config, signer=self.signer)


@dataclass(frozen=True)
class AuthAttempt:
    source: str
    handle: Optional[AuthHandle] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.handle is not None


# ---------------------------------------------------------------------------
# Attempts
# ---------------------------------------------------------------------------

def config_file_attempt(path: Path) -> AuthAttempt:
    """Authenticate from the default profile of the OCI config file."""
    try:
        config = oci.config.from_file(file_location=str(path))
        token_file = config.get("security_token_file")
        if token_file:
            # Session authentication (``oci session authenticate``).
            key_file = config.get("key_file")
            if not key_file:
                return AuthAttempt(
                    source="config_file",
                    error=AuthenticationError("session profile has no key_file"),
                )
            token = Path(token_file).expanduser().read_text(encoding="utf-8").strip()
            private_key = oci.signer.load_private_key_from_file(
                key_file, config.get("pass_phrase")
            )
            signer = oci.auth.signers.SecurityTokenSigner(token, private_key)
            return AuthAttempt(source="config_file", handle=AuthHandle(config, signer, "config_file"))
        oci.config.validate_config(config)
    except (oci.exceptions.ClientError, configparser.Error, OSError, ValueError) as exc:
        # configparser errors cover a malformed file body.
        return AuthAttempt(source="config_file", error=exc)
    return AuthAttempt(source="config_file", handle=AuthHandle(config, None, "config_file"))


def credentials_attempt(credentials: CredentialSet) -> AuthAttempt:
    """Authenticate strictly from resolved credential fields."""
    if not credentials.is_complete:
        return AuthAttempt(
            source="credentials",
            error=AuthenticationError("resolved credentials are incomplete"),
        )
    config = {
        "tenancy": credentials.tenancy,
        "user": credentials.user,
        "fingerprint": credentials.fingerprint,
        "key_content": credentials.private_key,
        "region": credentials.region,
    }
    try:
        oci.config.validate_config(config)
        signer = oci.signer.Signer(
            tenancy=credentials.tenancy,
            user=credentials.user,
            fingerprint=credentials.fingerprint,
            private_key_file_location=None,
            private_key_content=credentials.private_key,
        )
    except (oci.exceptions.ClientError, ValueError) as exc:
        return AuthAttempt(source="credentials", error=exc)
    return AuthAttempt(source="credentials", handle=AuthHandle(config, signer, "credentials"))


def first_success(attempts: Sequence[Callable[[], AuthAttempt]]) -> tuple[Optional[AuthHandle], list[AuthAttempt]]:
    """Run attempt builders in order, stopping at the first that yields a handle.

    Returns the handle (or None) and every attempt that was made.
    """
    made: list[AuthAttempt] = []
    for build in attempts:
        attempt = build()
        made.append(attempt)
        if attempt.ok:
            return attempt.handle, made
        logger.debug("Auth attempt %s failed: %s", attempt.source, attempt.error)
    return None, made


def select_auth(settings: Settings) -> AuthHandle:
    """Return the process-wide AuthHandle or raise AuthenticationError."""
    handle, made = first_success([
        lambda: config_file_attempt(settings.config_path),
        lambda: credentials_attempt(settings.credentials),
    ])
    if handle is not None:
        logger.info("Authenticated via %s", handle.source)
        return handle

    file_error = made[0].error
    raise AuthenticationError(
        "Failed to initialize OCI authentication. "
        f"Config file error: {file_error}. "
        f"Ensure {settings.config_path} exists or set the OCI_* environment variables."
    ) from file_error
