"""Loading identity provider configurations from XML and JSON sources."""
import json
import logging
import os
from typing import Dict
from typing import Optional
from typing import Union
from xml.etree.ElementTree import ParseError

from defusedxml import DefusedXmlException
from defusedxml import ElementTree

from fedidp.builder import IdentityProviderBuilder
from fedidp.defaults import IDENTITY_PROVIDER
from fedidp.defaults import IDP_FILE_EXTENSIONS
from fedidp.exception import ConfigurationSyntaxError
from fedidp.identity_provider import IdentityProvider
from fedidp.node import ElementNode
from fedidp.node import MappingNode
from fedidp.node import Node

logger = logging.getLogger(__name__)


def parse_xml(data: Union[str, bytes]) -> ElementNode:
    try:
        return ElementNode(ElementTree.fromstring(data))
    except (ParseError, DefusedXmlException) as err:
        raise ConfigurationSyntaxError(f"Could not parse XML: {err}")


def parse_json(data: Union[str, bytes]) -> MappingNode:
    """
    Parses a JSON identity provider configuration.

    Lists take the place of repeated XML elements, so the entries of a collection are the
    items of a list directly under the collection name:
    ``{"FederatedAuthenticatorConfigs": [{"Name": "saml"}, {"Name": "oidc"}]}``.
    ``{"FederatedAuthenticatorConfigs": {"FederatedAuthenticatorConfig": [...]}}`` adds a
    level and the entries are not found.

    :param data: The JSON document
    :return: The root node, named IdentityProvider
    """
    try:
        _info = json.loads(data)
    except ValueError as err:
        raise ConfigurationSyntaxError(f"Could not parse JSON: {err}")

    if not isinstance(_info, dict):
        raise ConfigurationSyntaxError("Identity provider configuration must be a JSON object")

    if list(_info.keys()) == [IDENTITY_PROVIDER]:
        _info = _info[IDENTITY_PROVIDER]
    return MappingNode(IDENTITY_PROVIDER, _info)


def parse_file(filename: str) -> Node:
    with open(filename, "rb") as fp:
        _data = fp.read()

    if os.path.splitext(filename)[1].lower() == ".json":
        return parse_json(_data)
    return parse_xml(_data)


def load_identity_provider(filename: str,
                           builder: Optional[IdentityProviderBuilder] = None
                           ) -> Optional[IdentityProvider]:
    """
    Loads one identity provider from a file.

    :param filename: Name of a XML or JSON (.json) file
    :param builder: The builder to use, a default builder is used if not given
    :return: An IdentityProvider instance or None
    """
    try:
        _node = parse_file(filename)
    except (ConfigurationSyntaxError, OSError) as err:
        logger.error(f"Could not read identity provider from {filename}: {err}")
        return None

    if builder is None:
        builder = IdentityProviderBuilder()

    return builder.build(_node)


def load_identity_providers(directory: Optional[str] = "",
                            builder: Optional[IdentityProviderBuilder] = None
                            ) -> Dict[str, IdentityProvider]:
    """
    Loads all identity providers found in a directory.
    Files are read in name order. If two files describe identity providers with the same
    name only the first one is used.

    :param directory: Directory path. If not given the directory in the builder configuration
        is used.
    :param builder: The builder to use, a default builder is used if not given
    :return: Dictionary with identity provider names as keys and IdentityProvider instances
        as values
    """
    if builder is None:
        builder = IdentityProviderBuilder()

    if not directory:
        directory = builder.conf.idp_directory
    if not directory or not os.path.isdir(directory):
        logger.warning(f"No identity provider directory: {directory}")
        return {}

    res = {}
    for fname in sorted(os.listdir(directory)):
        if os.path.splitext(fname)[1].lower() not in IDP_FILE_EXTENSIONS:
            continue

        _idp = load_identity_provider(os.path.join(directory, fname), builder)
        if _idp is None:
            logger.error(f"Identity provider in {fname} not loaded")
            continue

        if _idp.identity_provider_name in res:
            logger.warning(f"Identity provider {_idp.identity_provider_name} in {fname} already "
                           f"loaded, ignoring it")
            continue

        logger.debug(f"Loaded identity provider {_idp.identity_provider_name} from {fname}")
        res[_idp.identity_provider_name] = _idp
    return res
