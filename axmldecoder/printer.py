import re
from typing import Dict, Optional

from loguru import logger
from lxml import etree

from .model import Document, Element, Text

_NAME_START = re.compile(r"^[A-Za-z_]")
_INVALID_NAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")
_INVALID_VALUE_CHARS = re.compile(
    '[^\u0020-\uD7FF\u0009\u000A\u000D\uE000-\uFFFD\U00010000-\U0010FFFF]'
)


class DocumentPrinter:
    """
    Converter for a decoded `Document` into a lxml ElementTree, which can easily be
    converted into XML.

    Names are resolved through the string pool of the document, namespaces become
    Clark names (`{uri}name`) and attribute values are printed the way aapt prints them.

    A Reference Implementation can be found at http://androidxref.com/9.0.0_r3/xref/frameworks/base/tools/aapt/XMLNode.cpp
    """

    def __init__(self, document: Document) -> None:
        self.document = document
        self.packerwarning = False
        # raw URI -> URI usable with lxml, None if it has to be dropped
        self._uris: Dict[str, Optional[str]] = {}
        self.root = self._convert(document.root)

    def _convert(self, root: Element) -> etree._Element:
        result = self._make_element(root, None)
        # explicit stack of (source element, lxml element), no recursion
        stack = [(root, result)]
        while stack:
            element, elem = stack.pop()
            last = None
            for child in element.children:
                if isinstance(child, Text):
                    self._append_text(elem, last, self.document.text(child))
                else:
                    last = self._make_element(child, elem)
                    stack.append((child, last))
        return result

    def _make_element(self, element: Element, parent: Optional[etree._Element]) -> etree._Element:
        doc = self.document
        tag = self._qualified(doc.element_namespace(element), doc.element_name(element))
        nsmap = self._nsmap(element)
        logger.debug("START_TAG: {} (line={})", tag, element.line_number)

        if parent is None:
            if element.comment is not None:
                logger.warning(
                    "Can not attach comment with content '{}' without root!",
                    doc.string(element.comment),
                )
        elif element.comment is not None:
            comment = self._fix_value(doc.string(element.comment))
            # lxml refuses "--" inside and "-" at the end of a comment
            comment = comment.replace("--", "- -")
            if comment.endswith("-"):
                comment += " "
            parent.append(etree.Comment(comment))

        try:
            elem = self._new_element(parent, tag, nsmap)
        except ValueError as e:
            logger.error(str(e))
            # declarations lxml does not accept are dropped, the names stay qualified
            self.packerwarning = True
            elem = self._new_element(parent, tag, None)

        for attr in element.attributes:
            name = self._qualified(doc.string(attr.namespace), doc.string(attr.name))
            value = self._fix_value(doc.format_value(attr))
            if name in elem.attrib:
                logger.warning("Duplicate attribute '{}'! Will overwrite!", name)
            elem.set(name, value)
        return elem

    @staticmethod
    def _new_element(
        parent: Optional[etree._Element], tag: str, nsmap: Optional[Dict[Optional[str], str]]
    ) -> etree._Element:
        if parent is None:
            return etree.Element(tag, nsmap=nsmap)
        return etree.SubElement(parent, tag, nsmap=nsmap)

    def _append_text(self, elem: etree._Element, last: Optional[etree._Element], text: str) -> None:
        text = self._fix_value(text)
        if last is None:
            elem.text = (elem.text or "") + text
        else:
            last.tail = (last.tail or "") + text

    def _nsmap(self, element: Element) -> Dict[Optional[str], str]:
        nsmap = {}
        for binding in element.namespace_bindings:
            prefix = self.document.string(binding.prefix) or None
            raw_uri = self.document.string(binding.uri)
            if raw_uri.strip() == "":
                logger.error(
                    "Namespace prefix '{}' resolves to empty URI. This might be a packer.", prefix
                )
                self.packerwarning = True
                continue
            uri = self._clean_uri(raw_uri)
            if uri is None:
                continue
            if prefix is not None and (
                not _NAME_START.match(prefix) or _INVALID_NAME_CHARS.search(prefix)
            ):
                logger.warning("Invalid namespace prefix '{}', dropping it.", prefix)
                self.packerwarning = True
                continue
            nsmap[prefix] = uri
        return nsmap

    def _clean_uri(self, uri: Optional[str]) -> Optional[str]:
        """
        Strip a namespace URI and check that lxml accepts it.

        :return: the URI to use, or `None` if the namespace has to be dropped
        """
        if uri is None:
            return None
        if uri in self._uris:
            return self._uris[uri]

        cleaned = uri.strip() or None
        if cleaned is not None:
            try:
                etree.Element("{{{}}}ns".format(cleaned))
            except ValueError as e:
                logger.error("Dropping namespace URI {!r}: {}", uri, e)
                self.packerwarning = True
                cleaned = None
        self._uris[uri] = cleaned
        return cleaned

    def _qualified(self, uri: Optional[str], name: str) -> str:
        name = self._fix_name(name)
        uri = self._clean_uri(uri)
        if uri:
            return "{{{}}}{}".format(uri, name)
        return name

    def _fix_name(self, name: str) -> str:
        """
        Apply some fixes to element named and attribute names.
        Try to get conform to:
        > Like element names, attribute names are case-sensitive and must start with a letter or underscore.
        > The rest of the name can contain letters, digits, hyphens, underscores, and periods.
        """
        if not _NAME_START.match(name):
            logger.warning("Invalid start for name '{}'. XML name must start with a letter.", name)
            self.packerwarning = True
            name = "_{}".format(name)
        if _INVALID_NAME_CHARS.search(name):
            logger.warning("Name '{}' contains invalid characters!", name)
            self.packerwarning = True
            name = _INVALID_NAME_CHARS.sub("_", name)
        return name

    def _fix_value(self, value: str) -> str:
        """
        Return a cleaned version of a value
        according to the XML character ranges:
        > Char	   ::=   	#x9 | #xA | #xD | [#x20-#xD7FF] | [#xE000-#xFFFD] | [#x10000-#x10FFFF]

        See <https://www.w3.org/TR/xml/#charsets>
        """
        # Reading string until \x00. This is the same as aapt does.
        if "\x00" in value:
            self.packerwarning = True
            logger.warning("Null byte found in value at position {}", value.find("\x00"))
            value = value[: value.find("\x00")]

        if _INVALID_VALUE_CHARS.search(value):
            logger.warning("Invalid character in value found. Replacing with '_'.")
            self.packerwarning = True
            value = _INVALID_VALUE_CHARS.sub('_', value)
        return value

    def get_xml(self, pretty: bool = True) -> bytes:
        """
        Get the XML as an UTF-8 string

        :returns: bytes encoded as UTF-8
        """
        return etree.tostring(self.root, encoding="utf-8", pretty_print=pretty)

    def get_xml_obj(self) -> etree._Element:
        return self.root

    def is_packed(self) -> bool:
        """
        Returns True if names or values had to be repaired while printing.
        """
        return self.packerwarning


def to_element(document: Document) -> etree._Element:
    return DocumentPrinter(document).get_xml_obj()


def to_xml(document: Document, pretty: bool = True) -> bytes:
    return DocumentPrinter(document).get_xml(pretty=pretty)
