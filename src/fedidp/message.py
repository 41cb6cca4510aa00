""" Classes used to describe the parts of an identity provider configuration."""
import logging

from idpyoidc.message import Message
from idpyoidc.message import OPTIONAL_LIST_OF_STRINGS
from idpyoidc.message import SINGLE_OPTIONAL_STRING
from idpyoidc.message import SINGLE_REQUIRED_STRING
from idpyoidc.message.oidc import SINGLE_OPTIONAL_BOOLEAN

LOGGER = logging.getLogger(__name__)

OPTIONAL_LIST_OF_DICTS = ([dict], False, None, None, False)


class CertificateInfo(Message):
    """A single certificate together with its thumbprint."""
    c_param = {
        "thumbPrint": SINGLE_REQUIRED_STRING,
        "certValue": SINGLE_REQUIRED_STRING
    }

    @property
    def thumb_print(self):
        return self.get("thumbPrint", "")

    @property
    def cert_value(self):
        return self.get("certValue", "")


class Property(Message):
    c_param = {
        "name": SINGLE_REQUIRED_STRING,
        "value": SINGLE_OPTIONAL_STRING,
        "display_name": SINGLE_OPTIONAL_STRING,
        "confidential": SINGLE_OPTIONAL_BOOLEAN
    }


class IdentityProviderProperty(Message):
    c_param = {
        "name": SINGLE_REQUIRED_STRING,
        "value": SINGLE_OPTIONAL_STRING,
        "display_name": SINGLE_OPTIONAL_STRING
    }


class FederatedAuthenticatorConfig(Message):
    """Configuration of one federated authenticator (SAML, OIDC, ...)."""
    c_param = {
        "name": SINGLE_REQUIRED_STRING,
        "display_name": SINGLE_OPTIONAL_STRING,
        "enabled": SINGLE_OPTIONAL_BOOLEAN,
        "properties": OPTIONAL_LIST_OF_DICTS
    }


class ProvisioningConnectorConfig(Message):
    """Configuration of one outbound provisioning connector."""
    c_param = {
        "name": SINGLE_REQUIRED_STRING,
        "enabled": SINGLE_OPTIONAL_BOOLEAN,
        "blocking": SINGLE_OPTIONAL_BOOLEAN,
        "rules_enabled": SINGLE_OPTIONAL_BOOLEAN,
        "provisioning_properties": OPTIONAL_LIST_OF_DICTS
    }


class ClaimConfig(Message):
    c_param = {
        "role_claim_uri": SINGLE_OPTIONAL_STRING,
        "user_claim_uri": SINGLE_OPTIONAL_STRING,
        "local_claim_dialect": SINGLE_OPTIONAL_BOOLEAN,
        "always_send_mapped_local_subject_id": SINGLE_OPTIONAL_BOOLEAN,
        "idp_claims": OPTIONAL_LIST_OF_STRINGS,
        # list of {local_claim, remote_claim, default_value, requested}
        "claim_mappings": OPTIONAL_LIST_OF_DICTS
    }


class PermissionsAndRoleConfig(Message):
    c_param = {
        "permissions": OPTIONAL_LIST_OF_STRINGS,
        "idp_roles": OPTIONAL_LIST_OF_STRINGS,
        # list of {local_role, user_store_id, remote_role}
        "role_mappings": OPTIONAL_LIST_OF_DICTS
    }


class JustInTimeProvisioningConfig(Message):
    c_param = {
        "provisioning_enabled": SINGLE_OPTIONAL_BOOLEAN,
        "password_provisioning_enabled": SINGLE_OPTIONAL_BOOLEAN,
        "modify_user_name_allowed": SINGLE_OPTIONAL_BOOLEAN,
        "prompt_consent": SINGLE_OPTIONAL_BOOLEAN,
        "provisioning_user_store": SINGLE_OPTIONAL_STRING,
        "user_store_claim_uri": SINGLE_OPTIONAL_STRING
    }
