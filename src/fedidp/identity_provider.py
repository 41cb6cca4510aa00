import logging
from typing import Callable
from typing import List
from typing import Optional

from fedidp.certificate import CertificateCodec
from fedidp.certificate import DecodeResult
from fedidp.certificate import get_certificate
from fedidp.message import CertificateInfo
from fedidp.message import FederatedAuthenticatorConfig
from fedidp.message import IdentityProviderProperty
from fedidp.message import ProvisioningConnectorConfig
from fedidp.reference import name_of

logger = logging.getLogger(__name__)


def unique(items: Optional[list], key: Optional[Callable] = None) -> list:
    """
    Removes duplicates while keeping the order in which items were first seen.

    :param items: The items
    :param key: Function returning the value two items are compared on. If not given
        the items themselves are compared.
    :return: A new list
    """
    res = []
    _keys = []
    for item in items or []:
        _key = key(item) if key else item
        if _key in _keys:
            logger.debug(f"Dropping duplicate: {_key}")
            continue
        _keys.append(_key)
        res.append(item)
    return res


def _find(items: list, name: Optional[str]):
    if name is None:
        return None
    for item in items:
        if name_of(item) == name:
            return item
    return None


def _name_or_none(config) -> Optional[str]:
    if config is None:
        return None
    return name_of(config)


class IdentityProvider(object):
    """
    An identity provider configuration.

    Two identity providers are regarded as equal if they have the same name.
    """

    def __init__(self,
                 identity_provider_name: Optional[str] = None,
                 codec: Optional[CertificateCodec] = None):
        self.id = None
        self.identity_provider_name = identity_provider_name
        self.identity_provider_description = None
        self.alias = None
        self.display_name = None
        self.primary = False
        self.enable = False
        self.federation_hub = False
        self.home_realm_id = None
        self.provisioning_role = None
        self.claim_config = None
        self.permission_and_role_config = None
        self.just_in_time_provisioning_config = None

        self.codec = codec or CertificateCodec()
        self._federated_authenticator_configs = []
        self._provisioning_connector_configs = []
        self._idp_properties = []
        self._default_authenticator_name = None
        self._default_provisioning_connector_name = None
        self._certificate = None
        self.certificate_info_array = []
        self.certificate_decode_result = DecodeResult("empty")

    # Collections

    @property
    def federated_authenticator_configs(self) -> List[FederatedAuthenticatorConfig]:
        return self._federated_authenticator_configs

    @federated_authenticator_configs.setter
    def federated_authenticator_configs(self, configs: Optional[List]):
        if configs is None:
            return
        self._federated_authenticator_configs = unique(configs, key=name_of)

    @property
    def provisioning_connector_configs(self) -> List[ProvisioningConnectorConfig]:
        return self._provisioning_connector_configs

    @provisioning_connector_configs.setter
    def provisioning_connector_configs(self, configs: Optional[List]):
        if configs is None:
            return
        self._provisioning_connector_configs = unique(configs, key=name_of)

    @property
    def idp_properties(self) -> List[IdentityProviderProperty]:
        return self._idp_properties

    @idp_properties.setter
    def idp_properties(self, properties: Optional[List]):
        if properties is None:
            return
        self._idp_properties = unique(properties)

    # Defaults, kept as names and resolved when read

    @property
    def default_authenticator_config(self) -> Optional[FederatedAuthenticatorConfig]:
        return _find(self._federated_authenticator_configs, self._default_authenticator_name)

    @default_authenticator_config.setter
    def default_authenticator_config(self, config: Optional[FederatedAuthenticatorConfig]):
        self._default_authenticator_name = self._member_name(
            config, self._federated_authenticator_configs, "federated authenticator")

    @property
    def default_provisioning_connector_config(self) -> Optional[ProvisioningConnectorConfig]:
        return _find(self._provisioning_connector_configs,
                     self._default_provisioning_connector_name)

    @default_provisioning_connector_config.setter
    def default_provisioning_connector_config(self,
                                              config: Optional[ProvisioningConnectorConfig]):
        self._default_provisioning_connector_name = self._member_name(
            config, self._provisioning_connector_configs, "provisioning connector")

    @staticmethod
    def _member_name(config, configs: list, what: str) -> Optional[str]:
        if config is None:
            return None
        _name = name_of(config)
        if _find(configs, _name) is None:
            raise ValueError(f"No {what} config named '{_name}'")
        return _name

    # Certificate

    @property
    def certificate(self) -> Optional[str]:
        return self._certificate

    @certificate.setter
    def certificate(self, value: Optional[str]):
        self.set_certificate(value)

    def set_certificate(self, value: Optional[str]):
        _result = self.codec.inspect(value)
        if _result.degraded:
            logger.warning(f"Certificate of identity provider {self.identity_provider_name} "
                           f"decoded as {_result.encoding} with degraded result: {_result}")
        self.certificate_decode_result = _result
        self.certificate_info_array = _result.certificates
        self._certificate = value

    def get_certificate(self) -> Optional[str]:
        """
        The certificate in the legacy single certificate format.
        If more than one certificate is configured only the first one is returned.
        """
        return get_certificate(self._certificate)

    def get_certificate_info_array(self) -> List[CertificateInfo]:
        return self.certificate_info_array

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, IdentityProvider):
            return False
        return self.identity_provider_name == other.identity_provider_name

    def __hash__(self):
        return hash(self.identity_provider_name)

    def __repr__(self):
        return f"<IdentityProvider {self.identity_provider_name}>"

    def to_dict(self) -> dict:
        """Plain dictionary representation, suitable for a persistence layer."""

        def _export(item):
            if item is None:
                return None
            return item.to_dict()

        return {
            "id": self.id,
            "identity_provider_name": self.identity_provider_name,
            "identity_provider_description": self.identity_provider_description,
            "alias": self.alias,
            "display_name": self.display_name,
            "primary": self.primary,
            "enable": self.enable,
            "federation_hub": self.federation_hub,
            "home_realm_id": self.home_realm_id,
            "provisioning_role": self.provisioning_role,
            "federated_authenticator_configs": [
                c.to_dict() for c in self._federated_authenticator_configs],
            "default_authenticator_config": _name_or_none(self.default_authenticator_config),
            "provisioning_connector_configs": [
                c.to_dict() for c in self._provisioning_connector_configs],
            "default_provisioning_connector_config": _name_or_none(
                self.default_provisioning_connector_config),
            "claim_config": _export(self.claim_config),
            "permission_and_role_config": _export(self.permission_and_role_config),
            "just_in_time_provisioning_config": _export(self.just_in_time_provisioning_config),
            "idp_properties": [p.to_dict() for p in self._idp_properties],
            "certificate": self._certificate,
            "certificate_info": [c.to_dict() for c in self.certificate_info_array]
        }
