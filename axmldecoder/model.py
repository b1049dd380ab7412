"""
The decoded document.

All nodes store string pool indices only. Text is owned by the
`StringPool` of the `Document`, resolve indices with `Document.string`.
Everything here is frozen once the decoder hands it out.
"""
from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple, Union

from .stringpool import StringPool
from .values import NullValue, TypedValue


@dataclass(frozen=True)
class NamespaceBinding:
    prefix: Optional[int]
    uri: int
    line_number: int = 0

    def same_binding(self, prefix: Optional[int], uri: int) -> bool:
        return self.prefix == prefix and self.uri == uri


@dataclass(frozen=True)
class Attribute:
    namespace: Optional[int]
    name: int
    raw_value: Optional[int]
    typed_value: TypedValue


@dataclass(frozen=True)
class Text:
    value: int
    typed_value: TypedValue = field(default_factory=NullValue)
    line_number: int = 0


@dataclass(frozen=True)
class Element:
    namespace: Optional[int]
    name: int
    attributes: Tuple[Attribute, ...] = ()
    children: Tuple["Node", ...] = ()
    line_number: int = 0
    comment: Optional[int] = None
    # xmlns declarations which open right before this element
    namespace_bindings: Tuple[NamespaceBinding, ...] = ()
    # 1-based positions into `attributes`, 0 if not set
    id_index: int = 0
    class_index: int = 0
    style_index: int = 0

    def get_attribute(self, namespace: Optional[int], name: int) -> Optional[Attribute]:
        """
        Find an attribute by its namespace and name string indices.

        :return: the first matching attribute or `None`
        """
        for attr in self.attributes:
            if attr.namespace == namespace and attr.name == name:
                return attr
        return None

    def _positional(self, index: int) -> Optional[Attribute]:
        if 0 < index <= len(self.attributes):
            return self.attributes[index - 1]
        return None

    @property
    def id_attribute(self) -> Optional[Attribute]:
        return self._positional(self.id_index)

    @property
    def class_attribute(self) -> Optional[Attribute]:
        return self._positional(self.class_index)

    @property
    def style_attribute(self) -> Optional[Attribute]:
        return self._positional(self.style_index)

    @property
    def elements(self) -> Tuple["Element", ...]:
        """Child elements, without text nodes"""
        return tuple(child for child in self.children if isinstance(child, Element))


Node = Union[Element, Text]


@dataclass(frozen=True)
class Document:
    root: Element
    string_pool: StringPool
    # every namespace binding in the order it was declared
    namespaces: Tuple[NamespaceBinding, ...] = ()
    # raw content of the resource map chunk, never resolved
    resource_ids: Tuple[int, ...] = ()

    def string(self, index: Optional[int]) -> Optional[str]:
        return self.string_pool.get(index)

    def iter(self) -> Iterator[Node]:
        """
        Depth-first walk over all nodes, children in document order.
        """
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            if isinstance(node, Element):
                stack.extend(reversed(node.children))

    def iter_elements(self, name: Optional[str] = None) -> Iterator[Element]:
        for node in self.iter():
            if isinstance(node, Element) and (name is None or self.string(node.name) == name):
                yield node

    def element_name(self, element: Element) -> str:
        return self.string(element.name)

    def element_namespace(self, element: Element) -> Optional[str]:
        return self.string(element.namespace)

    def text(self, node: Text) -> str:
        return self.string(node.value)

    def find_attribute(
        self, element: Element, name: str, namespace_uri: Optional[str] = None
    ) -> Optional[Attribute]:
        """
        Find an attribute of `element` by its name and namespace URI as text.
        """
        for attr in element.attributes:
            if self.string(attr.name) == name and self.string(attr.namespace) == namespace_uri:
                return attr
        return None

    def format_value(self, attr: Attribute) -> str:
        """
        :return: the attribute value as text, with string values resolved
        """
        return attr.typed_value.format(self.string_pool)

    def attribute_value(
        self, element: Element, name: str, namespace_uri: Optional[str] = None
    ) -> Optional[str]:
        attr = self.find_attribute(element, name, namespace_uri)
        if attr is None:
            return None
        return self.format_value(attr)

    def prefix_for(self, uri: str) -> Optional[str]:
        """
        :return: the prefix last bound to `uri` anywhere in the document
        """
        prefix = None
        for binding in self.namespaces:
            if self.string(binding.uri) == uri:
                prefix = self.string(binding.prefix)
        return prefix
