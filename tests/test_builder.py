"""
Test suite for the RFC 5849 SignatureBuilder

This module tests header assembly, parameter filtering, signing key
construction and required field validation.
"""

import base64
import hashlib
import hmac
import logging
from urllib.parse import quote

import pytest

from oauth_rfc5849.exceptions import ConfigurationError, EncodingError
from oauth_rfc5849.signing import (
    SignatureBuilder,
    SignatureMethod,
    filter_empty_params,
    parse_authorization_header,
)
from oauth_rfc5849.signing.types import SigningErrorCodes

PHOTOS_URL = "https://photos.example.net/photos?size=original&file=vacation.jpg"
PHOTOS_BASE_STRING = (
    "GET&https%3A%2F%2Fphotos.example.net%2Fphotos&"
    "file%3Dvacation.jpg%26oauth_consumer_key%3Dck%26oauth_nonce%3Dabc123"
    "%26oauth_signature_method%3DHMAC-SHA1%26oauth_timestamp%3D1300000000"
    "%26oauth_version%3D1.0%26size%3Doriginal"
)


def _expected_signature(key, base_string, algorithm=hashlib.sha1):
    raw = hmac.new(key.encode('utf-8'), base_string.encode('utf-8'), algorithm).digest()
    return quote(base64.b64encode(raw).decode('ascii'), safe='')


class TestSignatureBuilder:
    """Test header generation"""

    def setup_method(self):
        """Set up a builder with a fixed clock"""
        self.builder = (SignatureBuilder()
                        .with_consumer_key("ck")
                        .with_consumer_secret("cs")
                        .with_nonce("abc123")
                        .with_method("GET")
                        .with_url(PHOTOS_URL)
                        .with_timestamp_generator(lambda: 1300000000))

    def test_hmac_sha1_header(self):
        """Header carries the protocol parameters, signature and realm in order"""
        result = self.builder.with_token_secret("ts").build_result()

        assert result.base_string == PHOTOS_BASE_STRING
        signature = _expected_signature("cs&ts", PHOTOS_BASE_STRING)
        assert result.signature == signature
        assert result.header == (
            'OAuth oauth_consumer_key="ck", oauth_signature_method="HMAC-SHA1", '
            'oauth_timestamp="1300000000", oauth_version="1.0", oauth_nonce="abc123", '
            f'oauth_signature="{signature}", realm=""'
        )
        assert result.timestamp == "1300000000"
        assert result.nonce == "abc123"

    def test_build_returns_header(self):
        assert self.builder.build() == self.builder.build_result().header

    def test_signing_key_without_token_secret(self):
        """The signing key keeps its '&' when the token secret is empty"""
        result = self.builder.with_token_secret(None).build_result()
        assert result.signature == _expected_signature("cs&", result.base_string)

    def test_plain_text(self):
        """PLAINTEXT signs with the encoded key"""
        result = (self.builder
                  .with_token_secret("ts")
                  .with_signature_method(SignatureMethod.PLAIN_TEXT)
                  .build_result())
        expected = quote(base64.b64encode(b"cs&ts").decode('ascii'), safe='')
        assert result.signature == expected
        assert 'oauth_signature_method="PLAINTEXT"' in result.header

    @pytest.mark.parametrize("method,algorithm", [
        (SignatureMethod.HMAC_SHA256, hashlib.sha256),
        (SignatureMethod.HMAC_SHA512, hashlib.sha512),
    ])
    def test_other_hmac_methods(self, method, algorithm):
        result = self.builder.with_signature_method(method).build_result()
        assert result.signature == _expected_signature("cs&", result.base_string, algorithm)

    def test_signature_method_by_name(self):
        builder = self.builder.with_signature_method("hmac-sha256")
        assert 'oauth_signature_method="HMAC-SHA256"' in builder.build()

    def test_token_and_verifier_included_when_set(self):
        header = (self.builder
                  .with_access_token("tok")
                  .with_verifier("ver")
                  .with_realm("1234567")
                  .build())
        params = parse_authorization_header(header)
        assert list(params) == [
            "oauth_consumer_key", "oauth_signature_method", "oauth_timestamp",
            "oauth_version", "oauth_nonce", "oauth_token", "oauth_verifier",
            "oauth_signature", "realm",
        ]
        assert params["oauth_token"] == "tok"
        assert params["realm"] == "1234567"

    def test_empty_token_and_verifier_omitted(self):
        """Blank token and verifier are dropped by default"""
        header = self.builder.with_access_token("").with_verifier(None).build()
        assert "oauth_token" not in header
        assert "oauth_verifier" not in header
        assert header.endswith('realm=""')

    def test_include_empty_params(self):
        """Blank token and verifier are kept as empty values when asked"""
        result = (self.builder
                  .with_url("http://localhost/path?a=1&b=2")
                  .with_include_empty_params(True)
                  .build_result())
        assert 'oauth_token=""' in result.header
        assert 'oauth_verifier=""' in result.header
        assert "a%3D1" in result.base_string
        assert "b%3D2" in result.base_string
        assert "oauth_token%3D%26" in result.base_string

    def test_blank_version_defaults(self):
        assert 'oauth_version="1.0"' in self.builder.with_version(" ").build()

    def test_query_override_not_reflected_in_header(self):
        """A query parameter can change the signed value but not the header value"""
        result = self.builder.with_url("http://localhost/path?oauth_version=2.0").build_result()
        assert "oauth_version%3D2.0" in result.base_string
        assert 'oauth_version="1.0"' in result.header

    def test_additional_data_signed(self):
        result = self.builder.with_additional_data({"name": "a%20b"}).build_result()
        assert "name%3Da%2520b" in result.base_string
        assert "name" not in parse_authorization_header(result.header)

    def test_timestamp_read_per_build(self):
        ticks = iter([100, 200])
        builder = self.builder.with_timestamp_generator(lambda: next(ticks))
        assert 'oauth_timestamp="100"' in builder.build()
        assert 'oauth_timestamp="200"' in builder.build()

    def test_default_timestamp_is_current(self):
        result = self.builder.with_timestamp_generator(None).build_result()
        assert int(result.timestamp) > 1300000000

    def test_invalid_url(self):
        with pytest.raises(EncodingError):
            self.builder.with_url("localhost").build()

    def test_header_round_trip(self):
        """Parsing the header gives back the signed parameters"""
        result = self.builder.with_access_token("tok").build_result()
        assert parse_authorization_header(result.header) == result.parameters

    def test_base_string_logged(self, caplog):
        """The base string is logged at debug level"""
        with caplog.at_level(logging.DEBUG, logger="oauth_rfc5849.signing.builder"):
            self.builder.build()
        assert any("Signing string [GET&" in record.getMessage() for record in caplog.records)


class TestLocalhostScenarios:
    """Test signing against a bare localhost URL with the real clock"""

    def setup_method(self):
        self.builder = (SignatureBuilder()
                        .with_consumer_key("consumerKey")
                        .with_consumer_secret("consumerSecret")
                        .with_token_secret("tokenSecret")
                        .with_nonce("nonce")
                        .with_method("POST")
                        .with_url("http://localhost"))

    def test_with_access_token(self):
        header = self.builder.with_access_token("accessToken").build()
        assert header.startswith("OAuth")
        assert 'oauth_token="accessToken"' in header
        assert 'oauth_consumer_key="consumerKey"' in header
        assert 'oauth_version="1.0"' in header
        assert parse_authorization_header(header)["oauth_timestamp"]

    def test_without_access_token(self):
        header = self.builder.build()
        assert "oauth_token" not in parse_authorization_header(header)

    def test_base_uri_without_path(self):
        result = self.builder.build_result()
        assert result.base_string.startswith("POST&http%3A%2F%2Flocalhost&")


class TestSignatureBuilderValidation:
    """Test required field validation"""

    @pytest.mark.parametrize("setter,field_name", [
        ("with_consumer_key", "consumerKey"),
        ("with_consumer_secret", "consumerSecret"),
        ("with_nonce", "nonce"),
        ("with_method", "method"),
    ])
    def test_blank_required_field_rejected(self, setter, field_name):
        for value in (None, "", "  "):
            with pytest.raises(ConfigurationError) as exc_info:
                getattr(SignatureBuilder(), setter)(value)
            assert exc_info.value.error_code == SigningErrorCodes.MISSING_REQUIRED_FIELD
            assert exc_info.value.details["field"] == field_name

    def test_none_url_rejected(self):
        with pytest.raises(ConfigurationError):
            SignatureBuilder().with_url(None)

    def test_none_signature_method_rejected(self):
        with pytest.raises(ConfigurationError):
            SignatureBuilder().with_signature_method(None)

    def test_build_without_required_fields(self):
        builder = SignatureBuilder().with_consumer_key("ck").with_consumer_secret("cs")
        with pytest.raises(ConfigurationError) as exc_info:
            builder.with_method("GET").with_url("http://localhost/").build()
        assert exc_info.value.details["field"] == "nonce"

    def test_optional_fields_accept_none(self):
        builder = (SignatureBuilder()
                   .with_access_token(None)
                   .with_token_secret(None)
                   .with_realm(None)
                   .with_verifier(None)
                   .with_version(None))
        assert isinstance(builder, SignatureBuilder)


class TestFilterEmptyParams:
    """Test empty parameter filtering"""

    def test_filter(self):
        params = {"a": "1", "b": "", "c": None, "d": " "}
        assert dict(filter_empty_params(params)) == {"a": "1"}

    def test_include_empty_keeps_everything(self):
        params = {"a": "1", "b": ""}
        assert dict(filter_empty_params(params, include_empty=True)) == params

    def test_idempotent(self):
        params = {"a": "1", "b": "", "c": "3"}
        once = filter_empty_params(params)
        assert filter_empty_params(once) == once
        assert list(once) == ["a", "c"]
