"""
Tests for ocimcp.auth — ordered auth attempts and handle construction.

No real key material is used: signers are patched, and so is the SDK's
config loader except where a real file on disk is the point of the test.
"""

import configparser
import os
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import oci
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from ocimcp.auth import (
    AuthAttempt,
    AuthHandle,
    config_file_attempt,
    credentials_attempt,
    first_success,
    select_auth,
)
from ocimcp.config import CredentialSet, Settings, session_placeholder
from ocimcp.errors import AuthenticationError


FILE_CONFIG = {
    "tenancy": "ocid1.tenancy.oc1..file",
    "user": "ocid1.user.oc1..file",
    "fingerprint": "11:22",
    "key_file": "/tmp/key.pem",
    "region": "us-ashburn-1",
}


def _complete_creds():
    return CredentialSet(
        tenancy="t1", user="u1", fingerprint="f1", private_key="k1",
        region="us-ashburn-1", source="environment",
    )


# =========================================================================
# Tests: config file attempt
# =========================================================================

class TestConfigFileAttempt:

    def test_success(self):
        with patch("oci.config.from_file", return_value=dict(FILE_CONFIG)) as from_file, \
             patch("oci.config.validate_config") as validate:
            attempt = config_file_attempt(Path("/tmp/oci/config"))

        assert attempt.ok
        assert attempt.handle.source == "config_file"
        assert attempt.handle.signer is None
        assert attempt.handle.tenancy_id == "ocid1.tenancy.oc1..file"
        from_file.assert_called_once_with(file_location="/tmp/oci/config")
        validate.assert_called_once()

    def test_session_token_profile(self, tmp_path):
        token_file = tmp_path / "token"
        token_file.write_text("session-token\n")
        config = {**FILE_CONFIG, "security_token_file": str(token_file)}

        with patch("oci.config.from_file", return_value=config), \
             patch("oci.config.validate_config") as validate, \
             patch("oci.signer.load_private_key_from_file", return_value="PK") as load_key, \
             patch("oci.auth.signers.SecurityTokenSigner") as token_signer:
            attempt = config_file_attempt(tmp_path / "config")

        assert attempt.ok
        token_signer.assert_called_once_with("session-token", "PK")
        load_key.assert_called_once_with("/tmp/key.pem", None)
        assert attempt.handle.signer is token_signer.return_value
        validate.assert_not_called()

    def test_missing_file_is_failure(self):
        error = oci.exceptions.ConfigFileNotFound("Could not find config file")
        with patch("oci.config.from_file", side_effect=error):
            attempt = config_file_attempt(Path("/nope"))
        assert not attempt.ok
        assert attempt.error is error


class TestConfigFileOnDisk:
    """Real files under tmp_path; only signer construction is patched."""

    def test_sectionless_file(self, tmp_path):
        cfg = tmp_path / "config"
        cfg.write_text("tenancy=ocid1.tenancy.oc1..x\nregion=us-ashburn-1\n")
        attempt = config_file_attempt(cfg)
        assert not attempt.ok
        assert isinstance(attempt.error, configparser.MissingSectionHeaderError)

    def test_line_without_equals(self, tmp_path):
        cfg = tmp_path / "config"
        cfg.write_text("[DEFAULT]\ntenancy=ocid1.tenancy.oc1..x\nthis line is broken\n")
        attempt = config_file_attempt(cfg)
        assert not attempt.ok
        assert isinstance(attempt.error, configparser.Error)

    def test_session_profile_without_key_file(self, tmp_path):
        token = tmp_path / "token"
        token.write_text("session-token")
        cfg = tmp_path / "config"
        cfg.write_text(
            "[DEFAULT]\n"
            "tenancy=ocid1.tenancy.oc1..x\n"
            "region=us-ashburn-1\n"
            f"security_token_file={token}\n"
        )
        with patch("oci.signer.load_private_key_from_file") as load_key:
            attempt = config_file_attempt(cfg)
        assert not attempt.ok
        assert isinstance(attempt.error, AuthenticationError)
        assert "key_file" in str(attempt.error)
        load_key.assert_not_called()

    def test_malformed_file_falls_back_to_credentials(self, tmp_path):
        cfg = tmp_path / "config"
        cfg.write_text("[DEFAULT]\nthis line is broken\n")
        settings = Settings(credentials=_complete_creds(), config_path=cfg)
        with patch("oci.config.validate_config"), patch("oci.signer.Signer"):
            handle = select_auth(settings)
        assert handle.source == "credentials"

    def test_malformed_file_without_credentials_raises(self, tmp_path):
        cfg = tmp_path / "config"
        cfg.write_text("no section header here\n")
        settings = Settings(credentials=session_placeholder({}), config_path=cfg)
        with pytest.raises(AuthenticationError, match="Config file error") as excinfo:
            select_auth(settings)
        assert isinstance(excinfo.value.__cause__, configparser.Error)


# =========================================================================
# Tests: direct credentials attempt
# =========================================================================

class TestCredentialsAttempt:

    def test_builds_signer_from_fields(self):
        with patch("oci.config.validate_config"), patch("oci.signer.Signer") as signer:
            attempt = credentials_attempt(_complete_creds())

        assert attempt.ok
        assert attempt.handle.source == "credentials"
        assert attempt.handle.config["key_content"] == "k1"
        assert attempt.handle.config["region"] == "us-ashburn-1"
        _, kwargs = signer.call_args
        assert kwargs["private_key_content"] == "k1"
        assert kwargs["tenancy"] == "t1"

    def test_placeholder_is_rejected(self):
        attempt = credentials_attempt(session_placeholder({}))
        assert not attempt.ok
        assert isinstance(attempt.error, AuthenticationError)

    def test_invalid_key_is_failure(self):
        with patch("oci.config.validate_config"), \
             patch("oci.signer.Signer", side_effect=ValueError("bad key")):
            attempt = credentials_attempt(_complete_creds())
        assert not attempt.ok


# =========================================================================
# Tests: combinator and selection
# =========================================================================

class TestSelection:

    def test_first_success_stops_early(self):
        handle = AuthHandle(config={}, source="config_file")
        first = MagicMock(return_value=AuthAttempt("config_file", handle=handle))
        second = MagicMock()

        got, made = first_success([first, second])

        assert got is handle
        assert len(made) == 1
        second.assert_not_called()

    def test_first_success_all_fail(self):
        got, made = first_success([
            lambda: AuthAttempt("a", error=ValueError("a")),
            lambda: AuthAttempt("b", error=ValueError("b")),
        ])
        assert got is None
        assert [a.source for a in made] == ["a", "b"]

    def test_falls_back_to_credentials(self, tmp_path):
        settings = Settings(credentials=_complete_creds(), config_path=tmp_path / "config")
        with patch("oci.config.from_file", side_effect=oci.exceptions.ConfigFileNotFound("missing")), \
             patch("oci.config.validate_config"), \
             patch("oci.signer.Signer"):
            handle = select_auth(settings)
        assert handle.source == "credentials"

    def test_prefers_config_file(self, tmp_path):
        settings = Settings(credentials=_complete_creds(), config_path=tmp_path / "config")
        with patch("oci.config.from_file", return_value=dict(FILE_CONFIG)), \
             patch("oci.config.validate_config"), \
             patch("oci.signer.Signer") as signer:
            handle = select_auth(settings)
        assert handle.source == "config_file"
        signer.assert_not_called()

    def test_raises_with_file_root_cause(self, tmp_path):
        file_error = oci.exceptions.ConfigFileNotFound("missing config")
        settings = Settings(credentials=session_placeholder({}), config_path=tmp_path / "config")
        with patch("oci.config.from_file", side_effect=file_error):
            with pytest.raises(AuthenticationError, match="missing config") as excinfo:
                select_auth(settings)
        assert excinfo.value.__cause__ is file_error


# =========================================================================
# Tests: handle
# =========================================================================

class TestAuthHandle:

    def test_client_without_signer(self):
        handle = AuthHandle(config={"region": "us-ashburn-1"})
        client_cls = MagicMock()
        handle.client(client_cls)
        client_cls.assert_called_once_with({"region": "us-ashburn-1"})

    def test_client_with_signer(self):
        signer = object()
        handle = AuthHandle(config={"region": "us-ashburn-1"}, signer=signer, source="credentials")
        client_cls = MagicMock()
        handle.client(client_cls)
        client_cls.assert_called_once_with({"region": "us-ashburn-1"}, signer=signer)

    def test_repr_hides_config(self):
        handle = AuthHandle(config={"key_content": "SECRET"}, source="credentials")
        assert "SECRET" not in repr(handle)
