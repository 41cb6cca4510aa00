import pytest

from fedidp.element import ClaimConfigBuilder
from fedidp.element import FederatedAuthenticatorConfigBuilder
from fedidp.element import IdentityProviderPropertyBuilder
from fedidp.element import JustInTimeProvisioningConfigBuilder
from fedidp.element import parse_boolean
from fedidp.element import PermissionsAndRoleConfigBuilder
from fedidp.element import ProvisioningConnectorConfigBuilder
from fedidp.exception import ElementBuildError
from fedidp.loader import parse_xml
from fedidp.message import FederatedAuthenticatorConfig
from fedidp.node import MappingNode


@pytest.mark.parametrize("text, expected", [
    (None, None),
    ("", None),
    ("  ", None),
    ("true", True),
    ("TRUE", True),
    (" True ", True),
    ("false", False),
    ("yes", False),
])
def test_parse_boolean(text, expected):
    assert parse_boolean(text) is expected


AUTHENTICATOR = """<SAML2SSOAuthenticator>
    <Name>SAMLSSOAuthenticator</Name>
    <DisplayName>samlsso</DisplayName>
    <IsEnabled>true</IsEnabled>
    <Properties>
        <Property><Name>IdPEntityId</Name><Value>https://idp.example.org</Value></Property>
        <Property><Value>no name</Value></Property>
        <Property>
            <Name>Secret</Name><Value>s3cr3t</Value><IsConfidential>true</IsConfidential>
        </Property>
    </Properties>
</SAML2SSOAuthenticator>"""


def test_federated_authenticator():
    _config = FederatedAuthenticatorConfigBuilder().build(parse_xml(AUTHENTICATOR))
    assert isinstance(_config, FederatedAuthenticatorConfig)
    assert _config["name"] == "SAMLSSOAuthenticator"
    assert _config["display_name"] == "samlsso"
    assert _config["enabled"] is True
    assert _config["properties"] == [
        {"name": "IdPEntityId", "value": "https://idp.example.org"},
        {"name": "Secret", "value": "s3cr3t", "confidential": True}
    ]


def test_federated_authenticator_without_name():
    _node = MappingNode("Authenticator", {"DisplayName": "nameless"})
    assert FederatedAuthenticatorConfigBuilder()(_node) is None


def test_provisioning_connector():
    _node = MappingNode("ProvisioningConnectorConfig", {
        "Name": "scim",
        "IsEnabled": "true",
        "IsBlocking": False,
        "ProvisioningProperties": [{"Name": "scim-user-ep", "Value": "https://example.org"}]
    })
    _config = ProvisioningConnectorConfigBuilder().build(_node)
    assert _config["name"] == "scim"
    assert _config["enabled"] is True
    assert _config["blocking"] is False
    assert "rules_enabled" not in _config
    assert _config["provisioning_properties"] == [
        {"name": "scim-user-ep", "value": "https://example.org"}]


def test_provisioning_connector_without_name():
    _node = MappingNode("ProvisioningConnectorConfig", {"IsEnabled": "true"})
    with pytest.raises(ElementBuildError):
        ProvisioningConnectorConfigBuilder().build(_node)


def test_provisioning_connector_property_without_name():
    _node = MappingNode("ProvisioningConnectorConfig", {
        "Name": "scim",
        "ProvisioningProperties": [{"Value": "https://example.org"}]
    })
    with pytest.raises(ElementBuildError):
        ProvisioningConnectorConfigBuilder().build(_node)


CLAIM_CONFIG = """<ClaimConfig>
    <UserClaimURI>http://wso2.org/claims/emailaddress</UserClaimURI>
    <LocalClaimDialect>true</LocalClaimDialect>
    <IdpClaims>
        <Claim><ClaimUri>email</ClaimUri></Claim>
        <Claim><ClaimUri/></Claim>
    </IdpClaims>
    <ClaimMappings>
        <ClaimMapping>
            <LocalClaim><ClaimUri>http://wso2.org/claims/emailaddress</ClaimUri></LocalClaim>
            <RemoteClaim><ClaimUri>email</ClaimUri></RemoteClaim>
            <DefaultValue>nobody@example.org</DefaultValue>
            <RequestClaim>true</RequestClaim>
        </ClaimMapping>
        <ClaimMapping>
            <LocalClaim><ClaimUri>http://wso2.org/claims/role</ClaimUri></LocalClaim>
        </ClaimMapping>
    </ClaimMappings>
</ClaimConfig>"""


def test_claim_config():
    _config = ClaimConfigBuilder().build(parse_xml(CLAIM_CONFIG))
    assert _config["user_claim_uri"] == "http://wso2.org/claims/emailaddress"
    assert "role_claim_uri" not in _config
    assert _config["local_claim_dialect"] is True
    assert _config["idp_claims"] == ["email"]
    assert _config["claim_mappings"] == [{
        "local_claim": "http://wso2.org/claims/emailaddress",
        "remote_claim": "email",
        "default_value": "nobody@example.org",
        "requested": True
    }]


PERMISSION_AND_ROLE = """<PermissionAndRoleConfig>
    <Permissions>
        <ApplicationPermission><value>/permission/admin/login</value></ApplicationPermission>
    </Permissions>
    <IdpRoles><IdpRole>admin</IdpRole><IdpRole/></IdpRoles>
    <RoleMappings>
        <RoleMapping>
            <LocalRole><LocalRoleName>admin</LocalRoleName><UserStoreId>PRIMARY</UserStoreId></LocalRole>
            <RemoteRole>administrators</RemoteRole>
        </RoleMapping>
        <RoleMapping>
            <RemoteRole>orphan</RemoteRole>
        </RoleMapping>
    </RoleMappings>
</PermissionAndRoleConfig>"""


def test_permissions_and_roles():
    _config = PermissionsAndRoleConfigBuilder().build(parse_xml(PERMISSION_AND_ROLE))
    assert _config["permissions"] == ["/permission/admin/login"]
    assert _config["idp_roles"] == ["admin"]
    assert _config["role_mappings"] == [
        {"local_role": "admin", "user_store_id": "PRIMARY", "remote_role": "administrators"}]


def test_just_in_time_provisioning():
    _node = MappingNode("JustInTimeProvisioningConfig", {
        "IsProvisioningEnabled": True,
        "ProvisioningUserStore": "PRIMARY",
        "PromptConsent": "",
        "Unknown": "ignored"
    })
    _config = JustInTimeProvisioningConfigBuilder().build(_node)
    assert _config.to_dict() == {"provisioning_enabled": True,
                                 "provisioning_user_store": "PRIMARY"}


def test_idp_property():
    _builder = IdentityProviderPropertyBuilder()
    _prop = _builder(MappingNode("IdpProperty", {"Name": "sessionIdleTimeout", "Value": "15"}))
    assert _prop["name"] == "sessionIdleTimeout"
    assert _prop["value"] == "15"
    assert _builder(MappingNode("IdpProperty", {"Value": "15"})) is None


def test_federated_authenticator_one_level_too_deep(caplog):
    _node = MappingNode("FederatedAuthenticatorConfig", [{"Name": "saml"}, {"Name": "oidc"}])
    assert FederatedAuthenticatorConfigBuilder().build(_node) is None
    assert "direct children" in caplog.text
