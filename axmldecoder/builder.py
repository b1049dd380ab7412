from enum import Enum
from typing import List, Optional, Union

from loguru import logger

from .chunk import ChunkHeader
from .constants import (
    ATTRIBUTE_SIZE,
    XML_NODE_HEADER_SIZE,
    XML_NODE_TYPES,
    ChunkType,
    chunk_type_name,
)
from .cursor import ByteCursor
from .exceptions import (
    CDataOutsideElementError,
    DecodeError,
    InvalidChunkError,
    MismatchedEndElementError,
    MultipleRootsError,
    UnbalancedNamespaceError,
    UnclosedElementError,
    UnexpectedChunkError,
    UnexpectedEofError,
)
from .model import Attribute, Document, Element, NamespaceBinding, Text
from .stringpool import StringPool
from .values import read_typed_value


class BuilderState(Enum):
    BEFORE_STRING_POOL = "before-string-pool"
    IN_DOCUMENT = "in-document"
    DONE = "done"
    FAILED = "failed"


class _OpenElement:
    """An element between its start and end chunk. Sealed into an `Element` when it closes."""

    __slots__ = (
        "namespace", "name", "attributes", "children", "line_number",
        "comment", "namespace_bindings", "id_index", "class_index", "style_index",
    )

    def __init__(self, namespace, name, line_number=0, comment=None):
        self.namespace = namespace
        self.name = name
        self.attributes = []
        self.children = []
        self.line_number = line_number
        self.comment = comment
        self.namespace_bindings = ()
        self.id_index = 0
        self.class_index = 0
        self.style_index = 0

    def seal(self) -> Element:
        return Element(
            namespace=self.namespace,
            name=self.name,
            attributes=tuple(self.attributes),
            children=tuple(self.children),
            line_number=self.line_number,
            comment=self.comment,
            namespace_bindings=self.namespace_bindings,
            id_index=self.id_index,
            class_index=self.class_index,
            style_index=self.style_index,
        )


class DocumentBuilder:
    """
    `DocumentBuilder` reads through all chunks of an AXML buffer
    and implements a state machine which assembles the `Document`.

    An AXML file is a file which contains multiple chunks of data, defined
    by the `ResChunk_header`.
    There is no real file magic but as the size of the first header is fixed
    and the `type` of the `ResChunk_header` is set to `RES_XML_TYPE`, a file
    will usually start with `0x03000800`.

    The flat chunk stream is turned into a tree with two explicit stacks, one
    for open elements and one for namespace bindings. The first error ends
    the decoding, there is no partial document.

    See http://androidxref.com/9.0.0_r3/xref/frameworks/base/libs/androidfw/include/androidfw/ResourceTypes.h#563
    """

    def __init__(self, raw_buff: Union[bytes, bytearray, memoryview]) -> None:
        self._buff = ByteCursor(raw_buff)
        self.state = BuilderState.BEFORE_STRING_POOL
        self.string_pool: Optional[StringPool] = None
        self.root: Optional[Element] = None
        self.resource_ids: List[int] = []
        # every binding ever declared, in order
        self.namespaces: List[NamespaceBinding] = []
        self._namespace_stack: List[NamespaceBinding] = []
        self._pending_bindings: List[NamespaceBinding] = []
        self._element_stack: List[_OpenElement] = []

    @property
    def depth(self) -> int:
        return len(self._element_stack)

    @property
    def namespace_depth(self) -> int:
        return len(self._namespace_stack)

    def build(self) -> Document:
        """
        :raises DecodeError: on the first structural error
        :returns: the decoded document
        """
        if self.state is not BuilderState.BEFORE_STRING_POOL:
            raise RuntimeError("DocumentBuilder can only build once")
        try:
            axml_header = self._read_document_header()
            chunks = self._buff.slice(axml_header.payload_start, axml_header.end)
            while chunks.remaining():
                header = ChunkHeader.read(chunks)
                try:
                    self.process_chunk(chunks, header)
                except DecodeError as e:
                    # reads inside the chunk do not know which chunk they belong to
                    if e.chunk_type is None:
                        e.chunk_type = header.chunk_type
                    raise
                # continue behind the chunk, whatever its decoder consumed
                chunks.seek(header.end)
            return self._finish()
        except DecodeError as e:
            logger.debug("decoding failed: {}", e)
            self.state = BuilderState.FAILED
            raise

    def _read_document_header(self) -> ChunkHeader:
        axml_header = ChunkHeader.read(self._buff)
        logger.debug("FIRST HEADER {}", axml_header)

        if axml_header.chunk_type != ChunkType.XML:
            raise UnexpectedChunkError(
                "This does not look like an AXML file, the first chunk is not an XML chunk",
                offset=axml_header.start,
                chunk_type=axml_header.chunk_type,
            )

        if axml_header.end < self._buff.end:
            # The file can still be parsed up to the point where the chunk should end.
            logger.warning(
                "Declared filesize ({}) is smaller than total file size ({}). "
                "Was something appended to the file? Ignoring the rest.",
                axml_header.chunk_size, self._buff.end,
            )
        return axml_header

    def process_chunk(self, cursor: ByteCursor, header: ChunkHeader) -> None:
        """
        Apply one chunk to the builder state.

        :param cursor: cursor which covers the whole chunk
        :param header: the validated header of the chunk
        """
        chunk_type = header.chunk_type
        logger.debug("process_chunk: {}", chunk_type_name(chunk_type))

        if chunk_type == ChunkType.STRING_POOL:
            if self.state is not BuilderState.BEFORE_STRING_POOL:
                raise UnexpectedChunkError(
                    "A document can only have one string pool",
                    offset=header.start,
                    chunk_type=chunk_type,
                )
            self.string_pool = StringPool.read(cursor, header)
            logger.debug("STRING_POOL {!r}", self.string_pool)
            self.state = BuilderState.IN_DOCUMENT
            return

        if chunk_type != ChunkType.XML_RESOURCE_MAP and chunk_type not in XML_NODE_TYPES:
            # unknown chunk types might cause problems, but we can skip them!
            logger.warning(
                "Unknown chunk: 0x{:04x}, skipping {} bytes.",
                chunk_type, header.chunk_size,
            )
            return

        if self.state is not BuilderState.IN_DOCUMENT:
            raise UnexpectedChunkError(
                "Chunk found before the string pool",
                offset=header.start,
                chunk_type=chunk_type,
            )

        if chunk_type == ChunkType.XML_RESOURCE_MAP:
            self._read_resource_map(cursor, header)
            return

        # Check that we read a correct header
        if header.header_size < XML_NODE_HEADER_SIZE:
            raise InvalidChunkError(
                "XML node header size {} is smaller than {}".format(
                    header.header_size, XML_NODE_HEADER_SIZE
                ),
                offset=header.start,
                chunk_type=chunk_type,
            )

        body = header.body(cursor)
        # Line Number of the source file, only used as meta information
        line_number = body.read_u32()
        # Comment_Index (usually 0xFFFFFFFF)
        comment = self.string_pool.optional_index(
            body.read_u32(), offset=header.start, chunk_type=chunk_type
        )
        payload = header.payload(cursor)

        if chunk_type == ChunkType.XML_START_NAMESPACE:
            self._start_namespace(payload, header, line_number)
        elif chunk_type == ChunkType.XML_END_NAMESPACE:
            self._end_namespace(payload, header)
        elif chunk_type == ChunkType.XML_START_ELEMENT:
            self._start_element(payload, header, line_number, comment)
        elif chunk_type == ChunkType.XML_END_ELEMENT:
            self._end_element(payload, header)
        elif chunk_type == ChunkType.XML_CDATA:
            self._cdata(payload, header, line_number)

    def _read_resource_map(self, cursor: ByteCursor, header: ChunkHeader) -> None:
        if header.payload_size % 4 != 0:
            logger.warning("Resource map size is not aligned by four bytes.")
        payload = header.payload(cursor)
        ids = [payload.read_u32() for _ in range(header.payload_size // 4)]
        logger.debug("AXML contains a RESOURCE MAP with {} ids", len(ids))
        self.resource_ids.extend(ids)

    def _read_namespace(self, payload: ByteCursor, header: ChunkHeader):
        prefix = self.string_pool.optional_index(
            payload.read_u32(), offset=header.start, chunk_type=header.chunk_type
        )
        uri = self.string_pool.required_index(
            payload.read_u32(), offset=header.start, chunk_type=header.chunk_type
        )
        return prefix, uri

    def _start_namespace(self, payload: ByteCursor, header: ChunkHeader, line_number: int) -> None:
        prefix, uri = self._read_namespace(payload, header)
        logger.debug(
            "Start of Namespace mapping: prefix {}: '{}' --> uri {}: '{}'",
            prefix, self.string_pool.get(prefix), uri, self.string_pool[uri],
        )
        if any(b.same_binding(prefix, uri) for b in self._namespace_stack):
            logger.debug(
                "Namespace mapping ({}, {}) already seen! "
                "This is usually not a problem but could indicate packers or broken AXML compilers.",
                prefix, uri,
            )
        binding = NamespaceBinding(prefix, uri, line_number)
        self._namespace_stack.append(binding)
        self._pending_bindings.append(binding)
        self.namespaces.append(binding)

    def _end_namespace(self, payload: ByteCursor, header: ChunkHeader) -> None:
        prefix, uri = self._read_namespace(payload, header)
        if not self._namespace_stack:
            raise UnbalancedNamespaceError(
                "End of namespace mapping without an open mapping",
                offset=header.start,
                chunk_type=header.chunk_type,
            )
        top = self._namespace_stack[-1]
        if not top.same_binding(prefix, uri):
            raise UnbalancedNamespaceError(
                "End of namespace mapping ({}, {}) does not match the open mapping ({}, {})".format(
                    prefix, uri, top.prefix, top.uri
                ),
                offset=header.start,
                chunk_type=header.chunk_type,
            )
        self._namespace_stack.pop()
        # a mapping closed before any element used it
        if self._pending_bindings and self._pending_bindings[-1] is top:
            self._pending_bindings.pop()

    def _start_element(
        self, payload: ByteCursor, header: ChunkHeader, line_number: int, comment: Optional[int]
    ) -> None:
        # The TAG consists of some fields:
        # * namespace_uri, name (String IDs)
        # * attribute_start, attribute_size
        # * attribute_count, id_index, class_index, style_index
        # The attributes follow at attribute_start, attribute_size bytes each
        pool = self.string_pool
        namespace = pool.optional_index(payload.read_u32(), offset=header.start, chunk_type=header.chunk_type)
        name = pool.required_index(payload.read_u32(), offset=header.start, chunk_type=header.chunk_type)
        attribute_start = payload.read_u16()
        attribute_size = payload.read_u16()
        attribute_count = payload.read_u16()

        element = _OpenElement(namespace, name, line_number, comment)
        element.id_index = payload.read_u16()
        element.class_index = payload.read_u16()
        element.style_index = payload.read_u16()
        logger.debug(
            "START_TAG: {} (line={}) attributes={} at {} size {}",
            pool[name], line_number, attribute_count, attribute_start, attribute_size,
        )

        if attribute_count and attribute_size < ATTRIBUTE_SIZE:
            raise InvalidChunkError(
                "Attribute size {} is smaller than {}".format(attribute_size, ATTRIBUTE_SIZE),
                offset=header.start,
                chunk_type=header.chunk_type,
            )

        for i in range(attribute_count):
            payload.seek(payload.start + attribute_start + i * attribute_size)
            offset = payload.tell()
            # Each Attribute contains:
            # * Namespace URI (String ID)
            # * Name (String ID)
            # * Raw value (String ID)
            # * Typed value
            attr_ns = pool.optional_index(payload.read_u32(), offset=offset, chunk_type=header.chunk_type)
            attr_name = pool.required_index(payload.read_u32(), offset=offset, chunk_type=header.chunk_type)
            raw_value = pool.optional_index(payload.read_u32(), offset=offset, chunk_type=header.chunk_type)
            typed_value = read_typed_value(payload, pool, chunk_type=header.chunk_type)
            logger.debug("found an attribute: {}='{}'", pool[attr_name], typed_value)
            element.attributes.append(Attribute(attr_ns, attr_name, raw_value, typed_value))

        element.namespace_bindings = tuple(self._pending_bindings)
        self._pending_bindings = []
        self._element_stack.append(element)

    def _end_element(self, payload: ByteCursor, header: ChunkHeader) -> None:
        pool = self.string_pool
        namespace = pool.optional_index(payload.read_u32(), offset=header.start, chunk_type=header.chunk_type)
        name = pool.required_index(payload.read_u32(), offset=header.start, chunk_type=header.chunk_type)

        if not self._element_stack:
            raise MismatchedEndElementError(
                "Closing tag '{}' without an open element".format(pool[name]),
                offset=header.start,
                chunk_type=header.chunk_type,
            )
        current = self._element_stack[-1]
        if current.namespace != namespace or current.name != name:
            raise MismatchedEndElementError(
                "Closing tag '{}' does not match the open element '{}'".format(
                    pool[name], pool[current.name]
                ),
                offset=header.start,
                chunk_type=header.chunk_type,
            )

        element = self._element_stack.pop().seal()
        if self._element_stack:
            self._element_stack[-1].children.append(element)
        elif self.root is not None:
            raise MultipleRootsError(
                "Element '{}' is a second root element".format(pool[name]),
                offset=header.start,
                chunk_type=header.chunk_type,
            )
        else:
            self.root = element

    def _cdata(self, payload: ByteCursor, header: ChunkHeader, line_number: int) -> None:
        # The CDATA field is like an attribute.
        # It contains an index into the String pool
        # as well as a typed value, usually set to UNDEFINED
        data = self.string_pool.required_index(
            payload.read_u32(), offset=header.start, chunk_type=header.chunk_type
        )
        typed_value = read_typed_value(payload, self.string_pool, chunk_type=header.chunk_type)
        if not self._element_stack:
            raise CDataOutsideElementError(
                "Text outside of any element",
                offset=header.start,
                chunk_type=header.chunk_type,
            )
        self._element_stack[-1].children.append(Text(data, typed_value, line_number))

    def _finish(self) -> Document:
        end = self._buff.end
        if self.string_pool is None:
            raise UnexpectedEofError("Document has no string pool", offset=end)
        if self._element_stack:
            raise UnclosedElementError(
                "Element '{}' is not closed".format(
                    self.string_pool[self._element_stack[-1].name]
                ),
                offset=end,
            )
        if self._namespace_stack:
            raise UnbalancedNamespaceError(
                "{} namespace mappings were not closed".format(len(self._namespace_stack)),
                offset=end,
            )
        if self.root is None:
            raise UnexpectedEofError("Document has no root element", offset=end)

        self.state = BuilderState.DONE
        return Document(
            root=self.root,
            string_pool=self.string_pool,
            namespaces=tuple(self.namespaces),
            resource_ids=tuple(self.resource_ids),
        )


def decode(buffer: Union[bytes, bytearray, memoryview]) -> Document:
    """
    Decode an Android binary XML buffer.

    :param buffer: the complete file content
    :raises DecodeError: if the buffer is not a supported, valid binary XML document
    :returns: the decoded `Document`
    """
    return DocumentBuilder(buffer).build()
