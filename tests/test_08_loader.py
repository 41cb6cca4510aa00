import base64
import hashlib
import os

import pytest

from fedidp.builder import IdentityProviderBuilder
from fedidp.exception import ConfigurationSyntaxError
from fedidp.loader import load_identity_provider
from fedidp.loader import load_identity_providers
from fedidp.loader import parse_json
from fedidp.loader import parse_xml
from tests.utils import BASE_PATH
from tests.utils import full_path


def test_load_xml():
    _idp = load_identity_provider(full_path("idps", "01_saml_idp.xml"))
    assert _idp.identity_provider_name == "saml-idp"
    assert _idp.identity_provider_description == "SAML identity provider at example.org"
    assert _idp.alias == "https://idp.example.org/saml"
    assert _idp.display_name == "Example SAML IdP"
    assert _idp.home_realm_id == "example"
    assert _idp.provisioning_role == "provisioning"
    assert _idp.primary is False
    assert _idp.enable is True
    assert _idp.federation_hub is True

    assert [c["name"] for c in _idp.federated_authenticator_configs] == [
        "SAMLSSOAuthenticator", "OpenIDConnectAuthenticator"]
    _default = _idp.default_authenticator_config
    assert _default["name"] == "SAMLSSOAuthenticator"
    assert _default["enabled"] is True
    assert [p["name"] for p in _default["properties"]] == ["IdPEntityId", "SSOUrl"]
    assert _idp.federated_authenticator_configs[1]["enabled"] is False

    _connector = _idp.default_provisioning_connector_config
    assert _connector["name"] == "scim"
    assert _connector["blocking"] is False
    assert _connector["provisioning_properties"][1] == {
        "name": "scim-password", "value": "secret", "confidential": True}

    assert _idp.claim_config["role_claim_uri"] == "http://wso2.org/claims/role"
    assert _idp.claim_config["idp_claims"] == ["email", "groups"]
    assert _idp.claim_config["claim_mappings"][0]["requested"] is True
    assert _idp.permission_and_role_config["idp_roles"] == ["admin", "staff"]
    assert _idp.permission_and_role_config["role_mappings"][0]["user_store_id"] == "PRIMARY"
    assert _idp.just_in_time_provisioning_config["provisioning_enabled"] is True
    assert _idp.just_in_time_provisioning_config["prompt_consent"] is False
    assert [(p["name"], p["value"]) for p in _idp.idp_properties] == [
        ("sessionIdleTimeout", "15")]

    # DER in base64, kept as it is
    _certs = _idp.get_certificate_info_array()
    assert len(_certs) == 1
    assert _certs[0].cert_value == _idp.certificate
    _encoded = base64.b64encode(_idp.certificate.encode("utf-8"))
    assert _certs[0].thumb_print == hashlib.sha256(_encoded).hexdigest()
    assert _idp.certificate_decode_result.degraded is True


def test_load_json():
    _idp = load_identity_provider(full_path("idps", "02_oidc_idp.json"))
    assert _idp.identity_provider_name == "oidc-idp"
    assert _idp.enable is True
    assert _idp.default_authenticator_config["name"] == "OpenIDConnectAuthenticator"
    assert _idp.default_authenticator_config["properties"][1]["confidential"] is True
    assert _idp.provisioning_connector_configs == []
    assert _idp.certificate is None


def test_load_broken():
    assert load_identity_provider(full_path("idps", "04_broken.xml")) is None


def test_load_unknown_default():
    assert load_identity_provider(full_path("idps", "05_unknown_default.xml")) is None


def test_load_missing_file():
    assert load_identity_provider(full_path("idps", "no_such_file.xml")) is None


def test_load_directory():
    _idps = load_identity_providers(full_path("idps"))
    assert list(_idps.keys()) == ["saml-idp", "oidc-idp"]
    # The first one read is kept
    assert _idps["saml-idp"].display_name == "Example SAML IdP"


def test_load_directory_from_configuration():
    _builder = IdentityProviderBuilder({"idp_directory": full_path("idps")})
    assert set(load_identity_providers(builder=_builder).keys()) == {"saml-idp", "oidc-idp"}


def test_load_missing_directory():
    assert load_identity_providers(os.path.join(BASE_PATH, "no_such_dir")) == {}
    assert load_identity_providers() == {}


def test_parse_errors():
    with pytest.raises(ConfigurationSyntaxError):
        parse_xml("<IdentityProvider>")
    with pytest.raises(ConfigurationSyntaxError):
        parse_json("{")
    with pytest.raises(ConfigurationSyntaxError):
        parse_json("[]")


def test_parse_xml_entities_refused():
    _xml = """<?xml version="1.0"?>
<!DOCTYPE IdentityProvider [<!ENTITY name "expanded">]>
<IdentityProvider><IdentityProviderName>&name;</IdentityProviderName></IdentityProvider>"""
    with pytest.raises(ConfigurationSyntaxError):
        parse_xml(_xml)
