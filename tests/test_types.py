"""Tests for core types — regions, credentials, envelope models."""

import pytest
from pydantic import ValidationError

from hunyuan_sdk.exceptions import ConfigError, InvalidCredentialError
from hunyuan_sdk.types import (
    ActionResponse,
    CanonicalRequest,
    Credential,
    CredentialScope,
    ErrorContent,
    Region,
    ResponseEnvelope,
    region_name,
)


# ---------------------------------------------------------------------------
# Region
# ---------------------------------------------------------------------------


class TestRegion:
    def test_known_regions(self):
        assert region_name(Region.AP_BEIJING) == "ap-beijing"
        assert region_name(Region.AP_GUANGZHOU) == "ap-guangzhou"

    def test_custom_region(self):
        assert region_name("custom-region") == "custom-region"

    def test_custom_region_trimmed(self):
        assert region_name(" us-west-1 ") == "us-west-1"

    @pytest.mark.parametrize("bad", ["", "   ", None, 5])
    def test_invalid_region(self, bad):
        with pytest.raises(ConfigError):
            region_name(bad)


# ---------------------------------------------------------------------------
# Credential
# ---------------------------------------------------------------------------


class TestCredential:
    def test_creation(self):
        cred = Credential(secret_id="test_id", secret_key="test_key")
        assert cred.secret_id == "test_id"
        assert cred.secret_key.get_secret_value() == "test_key"
        assert cred.token is None

    def test_with_token(self):
        cred = Credential(secret_id="test_id", secret_key="test_key", token="test_token")
        assert cred.token.get_secret_value() == "test_token"

    def test_secrets_hidden_in_repr_and_dump(self):
        cred = Credential(secret_id="test_id", secret_key="test_key", token="test_token")
        assert "test_key" not in repr(cred)
        assert "test_token" not in repr(cred)
        assert "test_key" not in str(cred.model_dump())
        assert "test_key" not in cred.model_dump_json()

    def test_immutable(self):
        cred = Credential(secret_id="test_id", secret_key="test_key")
        with pytest.raises(ValidationError):
            cred.secret_id = "other"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("TENCENTCLOUD_SECRET_ID", "AKIDenv")
        monkeypatch.setenv("TENCENTCLOUD_SECRET_KEY", "env-key")
        monkeypatch.delenv("TENCENTCLOUD_SESSION_TOKEN", raising=False)
        cred = Credential.from_env()
        assert cred.secret_id == "AKIDenv"
        assert cred.secret_key.get_secret_value() == "env-key"
        assert cred.token is None

    def test_from_env_with_token(self, monkeypatch):
        monkeypatch.setenv("TENCENTCLOUD_SECRET_ID", "AKIDenv")
        monkeypatch.setenv("TENCENTCLOUD_SECRET_KEY", "env-key")
        monkeypatch.setenv("TENCENTCLOUD_SESSION_TOKEN", "env-token")
        assert Credential.from_env().token.get_secret_value() == "env-token"

    def test_from_env_empty_token_ignored(self, monkeypatch):
        monkeypatch.setenv("TENCENTCLOUD_SECRET_ID", "AKIDenv")
        monkeypatch.setenv("TENCENTCLOUD_SECRET_KEY", "env-key")
        monkeypatch.setenv("TENCENTCLOUD_SESSION_TOKEN", "")
        assert Credential.from_env().token is None

    def test_from_env_missing_key(self, monkeypatch):
        monkeypatch.setenv("TENCENTCLOUD_SECRET_ID", "AKIDenv")
        monkeypatch.delenv("TENCENTCLOUD_SECRET_KEY", raising=False)
        with pytest.raises(InvalidCredentialError, match="TENCENTCLOUD_SECRET_KEY"):
            Credential.from_env()

    def test_from_env_custom_names(self, monkeypatch):
        monkeypatch.setenv("A_ID", "AKIDcustom")
        monkeypatch.setenv("A_KEY", "custom-key")
        cred = Credential.from_env(secret_id_env="A_ID", secret_key_env="A_KEY", token_env="A_TOKEN")
        assert cred.secret_id == "AKIDcustom"


# ---------------------------------------------------------------------------
# Signing values
# ---------------------------------------------------------------------------


class TestSigningValues:
    def test_scope_str(self):
        assert str(CredentialScope(date="2024-01-01", service="hunyuan")) == (
            "2024-01-01/hunyuan/tc3_request"
        )

    def test_canonical_render_empty_headers(self):
        canonical = CanonicalRequest(
            method="POST",
            uri="/",
            query_string="",
            canonical_headers=(("host", "h"),),
            signed_headers=("host",),
            hashed_payload="abc",
        )
        assert canonical.render() == "POST\n/\n\nhost:h\n\nhost\nabc"


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------


class TestEnvelope:
    def test_success_envelope(self):
        env = ResponseEnvelope[ActionResponse].model_validate(
            {"Response": {"RequestId": "req-1", "Foo": 1}}
        )
        assert env.response.request_id == "req-1"
        assert env.response.error is None
        assert env.response.model_extra == {"Foo": 1}

    def test_error_envelope(self):
        env = ResponseEnvelope[ActionResponse].model_validate(
            {
                "Response": {
                    "RequestId": "req-2",
                    "Error": {"Code": "AuthFailure.SignatureFailure", "Message": "bad sig"},
                }
            }
        )
        assert env.response.error == ErrorContent(
            code="AuthFailure.SignatureFailure", message="bad sig"
        )

    def test_missing_request_id(self):
        with pytest.raises(ValidationError):
            ResponseEnvelope[ActionResponse].model_validate({"Response": {}})

    def test_missing_response(self):
        with pytest.raises(ValidationError):
            ResponseEnvelope[ActionResponse].model_validate({"RequestId": "x"})

    def test_typed_subclass(self):
        class Echo(ActionResponse):
            value: int

        env = ResponseEnvelope[Echo].model_validate(
            {"Response": {"RequestId": "r", "value": 7}}
        )
        assert env.response.value == 7
