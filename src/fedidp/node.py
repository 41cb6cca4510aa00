"""
A minimal view of a configuration tree: ordered named nodes with optional text.

The builders only need the local name of a node, its text and its children, so any tree
shaped source can be used as long as it's wrapped in one of these adapters.
"""
from typing import Any
from typing import Iterator
from typing import Optional


class Node(object):
    """Base class for configuration tree nodes."""

    @property
    def local_name(self) -> str:
        raise NotImplementedError()

    @property
    def text(self) -> Optional[str]:
        raise NotImplementedError()

    def children(self) -> Iterator["Node"]:
        raise NotImplementedError()

    def child(self, name: str) -> Optional["Node"]:
        for _child in self.children():
            if _child.local_name == name:
                return _child
        return None

    def child_text(self, name: str) -> Optional[str]:
        _child = self.child(name)
        if _child is None:
            return None
        return _child.text

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.local_name}>"


def strip_namespace(tag: str) -> str:
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


class ElementNode(Node):
    """Wraps an ElementTree compatible element (xml.etree, defusedxml or lxml)."""

    def __init__(self, element):
        self.element = element

    @property
    def local_name(self) -> str:
        return strip_namespace(self.element.tag)

    @property
    def text(self) -> Optional[str]:
        return self.element.text

    def children(self) -> Iterator["ElementNode"]:
        for _elem in self.element:
            # Skip comments and processing instructions
            if not isinstance(_elem.tag, str):
                continue
            yield ElementNode(_elem)


def _as_text(value) -> Optional[str]:
    if value is None:
        return None
    elif isinstance(value, bool):
        return "true" if value else "false"
    elif isinstance(value, (dict, list)):
        return None
    return str(value)


class MappingNode(Node):
    """
    Wraps a tree of dictionaries, lists and scalars, typically the result of JSON parsing.

    Dictionary keys are child names. The items of a list become children named after the
    key the list belongs to. Scalars are rendered as text.
    """

    def __init__(self, name: str, value: Any):
        self.name = name
        self.value = value

    @property
    def local_name(self) -> str:
        return self.name

    @property
    def text(self) -> Optional[str]:
        return _as_text(self.value)

    def children(self) -> Iterator["MappingNode"]:
        if isinstance(self.value, dict):
            for key, val in self.value.items():
                yield MappingNode(key, val)
        elif isinstance(self.value, list):
            for val in self.value:
                yield MappingNode(self.name, val)
