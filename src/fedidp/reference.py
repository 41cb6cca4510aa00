import logging
from typing import Any
from typing import NamedTuple
from typing import Optional
from typing import Sequence

logger = logging.getLogger(__name__)


class Resolution(NamedTuple):
    selected: Optional[Any]
    ok: bool


def name_of(item) -> Optional[str]:
    """Name of a config, regardless of whether it's a Message or has a name attribute."""
    try:
        return item["name"]
    except (KeyError, TypeError):
        return getattr(item, "name", None)


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def resolve_default(candidates: Sequence, default_name: Optional[str] = None) -> Resolution:
    """
    Find the default among a collection of named configs.

    :param candidates: The configs to choose among
    :param default_name: Name of the default, may be missing
    :return: A Resolution. ok is False if a default was asked for but could not be found.
    """
    if is_blank(default_name):
        return Resolution(None, True)

    for item in candidates:
        if name_of(item) == default_name:
            return Resolution(item, True)

    logger.debug(f"No config named '{default_name}' among {len(candidates)} candidates")
    return Resolution(None, False)
