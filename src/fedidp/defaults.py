PEM_BEGIN_CERTIFICATE = "-----BEGIN CERTIFICATE-----"
PEM_END_CERTIFICATE = "-----END CERTIFICATE-----"

EMPTY_JSON_ARRAY = "[]"
JSON_ARRAY_IDENTIFIER = "["

DEFAULT_HASH_ALG = "SHA256"

# Element names used in identity provider configuration files
IDENTITY_PROVIDER = "IdentityProvider"
IDENTITY_PROVIDER_NAME = "IdentityProviderName"
IDENTITY_PROVIDER_DESCRIPTION = "IdentityProviderDescription"
ALIAS = "Alias"
DISPLAY_NAME = "DisplayName"
IS_PRIMARY = "IsPrimary"
IS_ENABLED = "IsEnabled"
IS_FEDERATION_HUB = "IsFederationHub"
HOME_REALM_ID = "HomeRealmId"
PROVISIONING_ROLE = "ProvisioningRole"
FEDERATED_AUTHENTICATOR_CONFIGS = "FederatedAuthenticatorConfigs"
DEFAULT_AUTHENTICATOR_CONFIG = "DefaultAuthenticatorConfig"
PROVISIONING_CONNECTOR_CONFIGS = "ProvisioningConnectorConfigs"
DEFAULT_PROVISIONING_CONNECTOR_CONFIG = "DefaultProvisioningConnectorConfig"
CLAIM_CONFIG = "ClaimConfig"
CERTIFICATE = "Certificate"
PERMISSION_AND_ROLE_CONFIG = "PermissionAndRoleConfig"
JUST_IN_TIME_PROVISIONING_CONFIG = "JustInTimeProvisioningConfig"
IDP_PROPERTIES = "IdpProperties"

DEFAULT_ELEMENT_BUILDERS = {
    "federated_authenticator": {
        "class": "fedidp.element.FederatedAuthenticatorConfigBuilder",
        "kwargs": {}
    },
    "provisioning_connector": {
        "class": "fedidp.element.ProvisioningConnectorConfigBuilder",
        "kwargs": {}
    },
    "claim": {
        "class": "fedidp.element.ClaimConfigBuilder",
        "kwargs": {}
    },
    "permission_and_role": {
        "class": "fedidp.element.PermissionsAndRoleConfigBuilder",
        "kwargs": {}
    },
    "just_in_time_provisioning": {
        "class": "fedidp.element.JustInTimeProvisioningConfigBuilder",
        "kwargs": {}
    },
    "idp_property": {
        "class": "fedidp.element.IdentityProviderPropertyBuilder",
        "kwargs": {}
    }
}

IDP_FILE_EXTENSIONS = [".xml", ".json"]
