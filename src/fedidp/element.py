"""Builders for the nested parts of an identity provider configuration."""
import logging
from typing import List
from typing import Optional

from fedidp.exception import ElementBuildError
from fedidp.message import ClaimConfig
from fedidp.message import FederatedAuthenticatorConfig
from fedidp.message import IdentityProviderProperty
from fedidp.message import JustInTimeProvisioningConfig
from fedidp.message import PermissionsAndRoleConfig
from fedidp.message import Property
from fedidp.message import ProvisioningConnectorConfig
from fedidp.node import Node
from fedidp.reference import is_blank

logger = logging.getLogger(__name__)


def parse_boolean(text: Optional[str]) -> Optional[bool]:
    """None for a missing or blank value, otherwise True only for 'true' in any case."""
    if is_blank(text):
        return None
    return text.strip().lower() == "true"


def collect(node: Node, mapping: dict) -> dict:
    """
    Picks up the text of the children of node that are named in mapping.

    :param node: The parent node
    :param mapping: Element name to (attribute name, converter) tuples.
    :return: Dictionary with the converted values that were present
    """
    res = {}
    for child in node.children():
        try:
            attr, converter = mapping[child.local_name]
        except KeyError:
            continue

        _val = child.text
        if converter:
            _val = converter(_val)
        if _val is not None:
            res[attr] = _val
    return res


PROPERTY_ELEMENTS = {
    "Name": ("name", None),
    "Value": ("value", None),
    "DisplayName": ("display_name", None),
    "IsConfidential": ("confidential", parse_boolean)
}


def build_properties(node: Node, owner: str, strict: Optional[bool] = False) -> List[dict]:
    res = []
    for child in node.children():
        _args = collect(child, PROPERTY_ELEMENTS)
        if is_blank(_args.get("name")):
            if strict:
                raise ElementBuildError(f"Property without a name in {owner}")
            logger.warning(f"Ignoring property without a name in {owner}")
            continue
        res.append(Property(**_args).to_dict())
    return res


class ElementBuilder(object):
    """Base class for builders. A builder returns None if there is nothing to build."""

    def __init__(self, **kwargs):
        self.kwargs = kwargs

    def build(self, node: Node):
        raise NotImplementedError()

    def __call__(self, node: Node):
        return self.build(node)


class FederatedAuthenticatorConfigBuilder(ElementBuilder):
    elements = {
        "Name": ("name", None),
        "DisplayName": ("display_name", None),
        "IsEnabled": ("enabled", parse_boolean)
    }

    def build(self, node: Node) -> Optional[FederatedAuthenticatorConfig]:
        _args = collect(node, self.elements)
        if is_blank(_args.get("name")):
            if any(c.child("Name") is not None for c in node.children()):
                logger.warning(f"Federated authenticator config in {node.local_name} has no name "
                               f"but its children have. Authenticators must be direct children "
                               f"of FederatedAuthenticatorConfigs.")
                return None
            logger.warning(f"Federated authenticator config in {node.local_name} has no name")
            return None

        _props = node.child("Properties")
        if _props is not None:
            _properties = build_properties(_props, _args["name"])
            if _properties:
                _args["properties"] = _properties

        return FederatedAuthenticatorConfig(**_args)


class ProvisioningConnectorConfigBuilder(ElementBuilder):
    elements = {
        "Name": ("name", None),
        "IsEnabled": ("enabled", parse_boolean),
        "IsBlocking": ("blocking", parse_boolean),
        "IsRulesEnabled": ("rules_enabled", parse_boolean)
    }

    def build(self, node: Node) -> Optional[ProvisioningConnectorConfig]:
        _args = collect(node, self.elements)
        if is_blank(_args.get("name")):
            raise ElementBuildError("No configured name found for ProvisioningConnectorConfig")

        _props = node.child("ProvisioningProperties")
        if _props is not None:
            _properties = build_properties(_props, _args["name"], strict=True)
            if _properties:
                _args["provisioning_properties"] = _properties

        return ProvisioningConnectorConfig(**_args)


def _claim_uri(node: Optional[Node]) -> Optional[str]:
    if node is None:
        return None
    _uri = node.child_text("ClaimUri")
    if _uri is None:
        _uri = node.text
    if is_blank(_uri):
        return None
    return _uri.strip()


class ClaimConfigBuilder(ElementBuilder):
    elements = {
        "RoleClaimURI": ("role_claim_uri", None),
        "UserClaimURI": ("user_claim_uri", None),
        "LocalClaimDialect": ("local_claim_dialect", parse_boolean),
        "AlwaysSendMappedLocalSubjectId": ("always_send_mapped_local_subject_id",
                                           parse_boolean)
    }

    def build(self, node: Node) -> ClaimConfig:
        _args = collect(node, self.elements)

        _idp_claims = node.child("IdpClaims")
        if _idp_claims is not None:
            _uris = [_claim_uri(c) for c in _idp_claims.children()]
            _uris = [u for u in _uris if u]
            if _uris:
                _args["idp_claims"] = _uris

        _claim_mappings = node.child("ClaimMappings")
        if _claim_mappings is not None:
            _mappings = []
            for _mapping in _claim_mappings.children():
                _local = _claim_uri(_mapping.child("LocalClaim"))
                _remote = _claim_uri(_mapping.child("RemoteClaim"))
                if not _local or not _remote:
                    logger.warning("Ignoring claim mapping without a local or remote claim")
                    continue
                _mappings.append({
                    "local_claim": _local,
                    "remote_claim": _remote,
                    "default_value": _mapping.child_text("DefaultValue"),
                    "requested": bool(parse_boolean(_mapping.child_text("RequestClaim")))
                })
            if _mappings:
                _args["claim_mappings"] = _mappings

        return ClaimConfig(**_args)


class PermissionsAndRoleConfigBuilder(ElementBuilder):

    def build(self, node: Node) -> PermissionsAndRoleConfig:
        _args = {}

        _permissions = node.child("Permissions")
        if _permissions is not None:
            _values = []
            for _perm in _permissions.children():
                _val = _perm.child_text("value")
                if _val is None:
                    _val = _perm.text
                if not is_blank(_val):
                    _values.append(_val.strip())
            if _values:
                _args["permissions"] = _values

        _idp_roles = node.child("IdpRoles")
        if _idp_roles is not None:
            _roles = [r.text.strip() for r in _idp_roles.children() if not is_blank(r.text)]
            if _roles:
                _args["idp_roles"] = _roles

        _role_mappings = node.child("RoleMappings")
        if _role_mappings is not None:
            _mappings = []
            for _mapping in _role_mappings.children():
                _local = _mapping.child("LocalRole")
                _remote = _mapping.child_text("RemoteRole")
                if _local is None or is_blank(_remote):
                    logger.warning("Ignoring role mapping without a local or remote role")
                    continue
                _local_name = _local.child_text("LocalRoleName")
                if _local_name is None:
                    _local_name = _local.text
                if is_blank(_local_name):
                    logger.warning("Ignoring role mapping without a local role name")
                    continue
                _mappings.append({
                    "local_role": _local_name.strip(),
                    "user_store_id": _local.child_text("UserStoreId"),
                    "remote_role": _remote.strip()
                })
            if _mappings:
                _args["role_mappings"] = _mappings

        return PermissionsAndRoleConfig(**_args)


class JustInTimeProvisioningConfigBuilder(ElementBuilder):
    elements = {
        "IsProvisioningEnabled": ("provisioning_enabled", parse_boolean),
        "IsPasswordProvisioningEnabled": ("password_provisioning_enabled", parse_boolean),
        "AllowModifyUserName": ("modify_user_name_allowed", parse_boolean),
        "PromptConsent": ("prompt_consent", parse_boolean),
        "ProvisioningUserStore": ("provisioning_user_store", None),
        "UserStoreClaimUri": ("user_store_claim_uri", None)
    }

    def build(self, node: Node) -> JustInTimeProvisioningConfig:
        return JustInTimeProvisioningConfig(**collect(node, self.elements))


class IdentityProviderPropertyBuilder(ElementBuilder):
    elements = {
        "Name": ("name", None),
        "Value": ("value", None),
        "DisplayName": ("display_name", None)
    }

    def build(self, node: Node) -> Optional[IdentityProviderProperty]:
        _args = collect(node, self.elements)
        if is_blank(_args.get("name")):
            logger.warning("Ignoring identity provider property without a name")
            return None
        return IdentityProviderProperty(**_args)
