"""
Test suite for offline header generation

This module tests GenerateRfc5849Header and the metadata filter used to
select signed form fields.
"""

import pytest

from oauth_rfc5849.exceptions import ConfigurationError
from oauth_rfc5849.signing import (
    AuthorizationSpec,
    GenerateRfc5849Header,
    MessageContext,
    MetadataFilter,
    SignatureBuilder,
    parse_authorization_header,
)


class TestMetadataFilter:
    """Test metadata selection"""

    def test_full_match(self):
        metadata_filter = MetadataFilter([r"form_.*", "exact"])
        metadata = {"form_a": "1", "form_b": "2", "exact": "3", "exactly": "4", "xform_c": "5"}
        assert metadata_filter.filter(metadata) == {"form_a": "1", "form_b": "2", "exact": "3"}

    def test_no_patterns(self):
        assert MetadataFilter().filter({"a": "1"}) == {}


class TestGenerateRfc5849Header:
    """Test header generation into message metadata"""

    def setup_method(self):
        self.spec = AuthorizationSpec(consumer_key="ck", consumer_secret="cs", nonce="n1")
        self.service = GenerateRfc5849Header(
            url="http://localhost/%message{path}",
            authorization_spec=self.spec,
        )
        self.context = MessageContext("id-1", {"path": "orders"})

    def test_header_stored_in_default_key(self):
        header = self.service.do_service(self.context)
        assert self.context.get_metadata("Authorization") == header
        assert header.startswith('OAuth oauth_consumer_key="ck"')

    def test_custom_target_key(self):
        self.service.target_metadata_key = "oauthHeader"
        header = self.service.do_service(self.context)
        assert self.context.get_metadata("oauthHeader") == header
        assert "Authorization" not in self.context.metadata

    def test_resolved_target_metadata_key(self):
        assert self.service.resolved_target_metadata_key() == "Authorization"
        self.service.target_metadata_key = " "
        assert self.service.resolved_target_metadata_key() == "Authorization"

    def test_selected_metadata_signed(self, monkeypatch):
        """Selected metadata values are percent-encoded and signed as form fields"""
        monkeypatch.setattr("oauth_rfc5849.signing.builder.generate_timestamp", lambda: 1300000000)
        self.service.additional_data = MetadataFilter(["field_.*"])
        self.context.add_metadata("field_name", "a b")
        self.context.add_metadata("other", "x")

        header = self.service.do_service(self.context)

        expected = (SignatureBuilder()
                    .with_consumer_key("ck")
                    .with_consumer_secret("cs")
                    .with_nonce("n1")
                    .with_method("POST")
                    .with_url("http://localhost/orders")
                    .with_additional_data({"field_name": "a%20b"})
                    .with_timestamp_generator(lambda: 1300000000)
                    .build())
        assert header == expected

    def test_http_method_resolved(self, monkeypatch):
        monkeypatch.setattr("oauth_rfc5849.signing.builder.generate_timestamp", lambda: 1300000000)
        self.service.http_method = "%message{verb}"
        self.context.add_metadata("verb", "GET")
        header = self.service.do_service(self.context)

        self.service.http_method = "POST"
        post_header = self.service.do_service(MessageContext("id-1", {"path": "orders"}))
        assert (parse_authorization_header(header)["oauth_signature"]
                != parse_authorization_header(post_header)["oauth_signature"])

    @pytest.mark.parametrize("attribute,value", [
        ("url", ""),
        ("authorization_spec", None),
        ("http_method", " "),
    ])
    def test_init_validation(self, attribute, value):
        setattr(self.service, attribute, value)
        with pytest.raises(ConfigurationError):
            self.service.init()
