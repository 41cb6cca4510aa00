"""Builds an IdentityProvider from a configuration tree."""
import enum
import logging
from typing import Optional
from typing import Union

from idpyoidc.util import instantiate

from fedidp import defaults
from fedidp.certificate import CertificateCodec
from fedidp.configure import LoaderConfiguration
from fedidp.element import parse_boolean
from fedidp.exception import ConfigurationInvalid
from fedidp.exception import ElementBuildError
from fedidp.identity_provider import IdentityProvider
from fedidp.node import Node
from fedidp.reference import is_blank
from fedidp.reference import resolve_default
from fedidp.thumbprint import ThumbprintGenerator

logger = logging.getLogger(__name__)

TEXT_ATTRIBUTES = {
    defaults.IDENTITY_PROVIDER_DESCRIPTION: "identity_provider_description",
    defaults.ALIAS: "alias",
    defaults.DISPLAY_NAME: "display_name",
    defaults.HOME_REALM_ID: "home_realm_id",
    defaults.PROVISIONING_ROLE: "provisioning_role"
}

FLAG_ATTRIBUTES = {
    defaults.IS_PRIMARY: "primary",
    defaults.IS_ENABLED: "enable",
    defaults.IS_FEDERATION_HUB: "federation_hub"
}

SINGLE_CONFIGS = {
    defaults.CLAIM_CONFIG: ("claim", "claim_config"),
    defaults.PERMISSION_AND_ROLE_CONFIG: ("permission_and_role", "permission_and_role_config"),
    defaults.JUST_IN_TIME_PROVISIONING_CONFIG: ("just_in_time_provisioning",
                                                "just_in_time_provisioning_config")
}


class BuildState(enum.Enum):
    SCANNING = "scanning"
    RESOLVING_DEFAULTS = "resolving_defaults"
    DONE = "done"
    ABORTED = "aborted"


class BuildOutcome(object):
    """
    Result of one build.

    :param state: BuildState.DONE or BuildState.ABORTED
    :param identity_provider: The assembled IdentityProvider if the build was done
    :param reason: Why the build was aborted
    :param aborted_in: The state the builder was in when it gave up
    """

    def __init__(self,
                 state: BuildState,
                 identity_provider: Optional[IdentityProvider] = None,
                 reason: Optional[str] = "",
                 aborted_in: Optional[BuildState] = None):
        self.state = state
        self.identity_provider = identity_provider
        self.reason = reason
        self.aborted_in = aborted_in

    @property
    def ok(self):
        return self.state == BuildState.DONE

    def __repr__(self):
        return f"<BuildOutcome {self.state.value} {self.reason}>"


class IdentityProviderBuilder(object):
    """
    Walks an identity provider configuration tree once and assembles an IdentityProvider.

    :param conf: A LoaderConfiguration or a dictionary that can be turned into one.
    :param builders: Element builders that replace the configured ones. Keyword is the
        builder name as used in the configuration.
    """

    def __init__(self,
                 conf: Optional[Union[dict, LoaderConfiguration]] = None,
                 **builders):
        if not isinstance(conf, LoaderConfiguration):
            conf = LoaderConfiguration(conf)
        self.conf = conf

        self.builder = {}
        for key, spec in conf.builders.items():
            self.builder[key] = instantiate(spec["class"], **spec["kwargs"])
        for key, item in builders.items():
            if key not in self.builder:
                raise ValueError(f"Unknown element builder: {key}")
            self.builder[key] = item

        self.codec = CertificateCodec(ThumbprintGenerator(conf.hash_alg))

    def build(self, node: Node) -> Optional[IdentityProvider]:
        """
        :param node: The root node of an identity provider configuration
        :return: An IdentityProvider instance or None if the configuration is unusable
        """
        return self.run(node).identity_provider

    def run(self, node: Node) -> BuildOutcome:
        state = BuildState.SCANNING
        try:
            idp, default_authenticator, default_provisioning = self._scan(node)
            state = BuildState.RESOLVING_DEFAULTS
            self._resolve_defaults(idp, default_authenticator, default_provisioning)
        except ConfigurationInvalid as err:
            return BuildOutcome(BuildState.ABORTED, reason=str(err), aborted_in=state)

        return BuildOutcome(BuildState.DONE, idp)

    def _scan(self, node: Node):
        idp = IdentityProvider(codec=self.codec)
        default_authenticator = None
        default_provisioning = None
        authenticators = []
        connectors = []
        properties = []

        for element in node.children():
            _name = element.local_name
            if _name == defaults.IDENTITY_PROVIDER_NAME:
                if element.text is None:
                    logger.error("Identity provider not loaded. Identity provider name must "
                                 "not be null.")
                    raise ConfigurationInvalid("Identity provider name is null")
                idp.identity_provider_name = element.text
            elif _name in TEXT_ATTRIBUTES:
                setattr(idp, TEXT_ATTRIBUTES[_name], element.text)
            elif _name in FLAG_ATTRIBUTES:
                _flag = parse_boolean(element.text)
                if _flag is not None:
                    setattr(idp, FLAG_ATTRIBUTES[_name], _flag)
            elif _name == defaults.FEDERATED_AUTHENTICATOR_CONFIGS:
                authenticators.extend(self._authenticators(element))
            elif _name == defaults.DEFAULT_AUTHENTICATOR_CONFIG:
                default_authenticator = element.text
            elif _name == defaults.PROVISIONING_CONNECTOR_CONFIGS:
                connectors.extend(self._connectors(element, idp.identity_provider_name))
            elif _name == defaults.DEFAULT_PROVISIONING_CONNECTOR_CONFIG:
                default_provisioning = element.text
            elif _name in SINGLE_CONFIGS:
                _builder, _attr = SINGLE_CONFIGS[_name]
                setattr(idp, _attr, self.builder[_builder](element))
            elif _name == defaults.CERTIFICATE:
                idp.set_certificate(element.text)
            elif _name == defaults.IDP_PROPERTIES:
                for child in element.children():
                    _prop = self.builder["idp_property"](child)
                    if _prop is not None:
                        properties.append(_prop)
            else:
                logger.debug(f"Ignoring unknown element: {_name}")

        if is_blank(idp.identity_provider_name):
            logger.error("Identity provider not loaded. Identity provider name is missing.")
            raise ConfigurationInvalid("Identity provider name is missing")

        idp.federated_authenticator_configs = authenticators
        idp.provisioning_connector_configs = connectors
        idp.idp_properties = properties
        return idp, default_authenticator, default_provisioning

    def _authenticators(self, node: Node) -> list:
        res = []
        for child in node.children():
            try:
                _config = self.builder["federated_authenticator"](child)
            except ElementBuildError as err:
                logger.error(f"Identity provider not loaded. Could not build federated "
                             f"authenticator config: {err}")
                raise ConfigurationInvalid(f"Unusable federated authenticator config: {err}")
            if _config is not None:
                res.append(_config)
        return res

    def _connectors(self, node: Node, idp_name: Optional[str]) -> list:
        res = []
        for child in node.children():
            try:
                _config = self.builder["provisioning_connector"](child)
            except ElementBuildError as err:
                logger.error(f"Error while building provisioning connector config for IdP "
                             f"{idp_name}. Cause: {err}. Building rest of the IdP config")
                continue
            if _config is not None:
                res.append(_config)
        return res

    def _resolve_defaults(self, idp: IdentityProvider, default_authenticator: Optional[str],
                          default_provisioning: Optional[str]):
        _selected, _ok = resolve_default(idp.federated_authenticator_configs,
                                         default_authenticator)
        if not _ok:
            logger.warning(f"No matching federated authentication config found with default "
                           f"authentication config name: {default_authenticator} in identity "
                           f"provider: {idp.identity_provider_name}")
            raise ConfigurationInvalid(f"Unknown default authenticator: {default_authenticator}")
        idp.default_authenticator_config = _selected

        _selected, _ok = resolve_default(idp.provisioning_connector_configs,
                                         default_provisioning)
        if not _ok:
            logger.warning(f"No matching provisioning config found with default provisioning "
                           f"config name: {default_provisioning} in identity provider: "
                           f"{idp.identity_provider_name}")
            raise ConfigurationInvalid(
                f"Unknown default provisioning connector: {default_provisioning}")
        idp.default_provisioning_connector_config = _selected


def build_identity_provider(node: Node,
                            conf: Optional[Union[dict, LoaderConfiguration]] = None
                            ) -> Optional[IdentityProvider]:
    return IdentityProviderBuilder(conf).build(node)
