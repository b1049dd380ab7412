from dataclasses import dataclass, field
from typing import List, Optional

from loguru import logger

from .constants import ANDROID_NAMESPACE
from .model import Attribute, Document, Element
from .values import IntDecimal, IntHex, StringValue

COMPONENT_TAGS = {
    "activity": "activities",
    "activity-alias": "activities",
    "service": "services",
    "receiver": "receivers",
    "provider": "providers",
}


class ManifestError(ValueError):
    pass


@dataclass
class ManifestInfo:
    """
    The usual metadata of a decoded `AndroidManifest.xml`.
    """

    package: Optional[str] = None
    version_code: Optional[int] = None
    version_name: Optional[str] = None
    min_sdk_version: Optional[int] = None
    target_sdk_version: Optional[int] = None
    permissions: List[str] = field(default_factory=list)
    activities: List[str] = field(default_factory=list)
    services: List[str] = field(default_factory=list)
    receivers: List[str] = field(default_factory=list)
    providers: List[str] = field(default_factory=list)

    @classmethod
    def from_document(cls, document: Document) -> "ManifestInfo":
        """
        :raises ManifestError: if the root element is not `<manifest>`
        """
        root = document.root
        if document.element_name(root) != "manifest":
            raise ManifestError(
                "No manifest tag at root level found, got '{}'".format(document.element_name(root))
            )

        info = cls()
        info.package = _string(document, root, "package")
        info.version_code = _integer(document, root, "versionCode")
        info.version_name = _string(document, root, "versionName")

        for child in root.elements:
            tag = document.element_name(child)
            if tag == "uses-sdk":
                info.min_sdk_version = _integer(document, child, "minSdkVersion")
                info.target_sdk_version = _integer(document, child, "targetSdkVersion")
            elif tag in ("uses-permission", "uses-permission-sdk-23"):
                name = _string(document, child, "name")
                if name is not None:
                    info.permissions.append(name)
            elif tag == "application":
                for component in child.elements:
                    kind = COMPONENT_TAGS.get(document.element_name(component))
                    if kind is None:
                        continue
                    name = _string(document, component, "name")
                    if name is None:
                        logger.warning(
                            "<{}> at line {} has no name",
                            document.element_name(component), component.line_number,
                        )
                        continue
                    getattr(info, kind).append(_qualify(info.package, name))
        return info


def _find(document: Document, element: Element, name: str) -> Optional[Attribute]:
    # aapt writes these in the android namespace, some tools drop it
    attr = document.find_attribute(element, name, ANDROID_NAMESPACE)
    if attr is None:
        attr = document.find_attribute(element, name)
    return attr


def _string(document: Document, element: Element, name: str) -> Optional[str]:
    attr = _find(document, element, name)
    if attr is None:
        return None
    return document.format_value(attr)


def _integer(document: Document, element: Element, name: str) -> Optional[int]:
    attr = _find(document, element, name)
    if attr is None:
        return None
    value = attr.typed_value
    if isinstance(value, (IntDecimal, IntHex)):
        return value.value
    if isinstance(value, StringValue):
        try:
            return int(document.string(value.index))
        except ValueError:
            return None
    logger.debug("'{}' is not an integer: {}", name, value)
    return None


def _qualify(package: Optional[str], name: str) -> str:
    """Expand the short `.Name` class form against the package"""
    if package and name.startswith("."):
        return package + name
    return name
