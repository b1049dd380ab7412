from typing import Union

from .constants import chunk_type_name


class DecodeError(Exception):
    """Exception for the decoder"""

    def __init__(
        self,
        message: str,
        offset: Union[int, None] = None,
        chunk_type: Union[int, None] = None,
    ) -> None:
        self.message = message
        self.offset = offset
        self.chunk_type = chunk_type
        super().__init__(str(self))

    def __str__(self):
        context = []
        if self.chunk_type is not None:
            context.append("chunk={}".format(chunk_type_name(self.chunk_type)))
        if self.offset is not None:
            context.append("offset=0x{:08x}".format(self.offset))
        if not context:
            return self.message
        return "{} ({})".format(self.message, ", ".join(context))


class UnexpectedEofError(DecodeError):
    """The buffer ends before a structurally required field."""


class InvalidChunkError(DecodeError):
    """A chunk header declares inconsistent sizes."""


class TruncatedChunkError(InvalidChunkError, UnexpectedEofError):
    """A chunk declares more bytes than the buffer holds."""


class UnexpectedChunkError(DecodeError):
    """A chunk appears where the document grammar does not allow it."""


class UnsupportedEncodingError(DecodeError):
    """The string pool uses an encoding this decoder does not implement."""


class UnsupportedLengthError(DecodeError):
    """A string uses the extended two-unit length prefix."""


class InvalidStringError(DecodeError):
    """A string pool entry is not valid UTF-16."""


class InvalidReferenceError(DecodeError):
    """A string pool index is out of range."""


class UnbalancedNamespaceError(DecodeError):
    """An end of namespace mapping does not match the innermost open mapping, or mappings stay open."""


class MismatchedEndElementError(DecodeError):
    """An end tag does not close the innermost open element."""


class MultipleRootsError(DecodeError):
    """A second element closes at the top level."""


class CDataOutsideElementError(DecodeError):
    """Character data appears while no element is open."""


class UnclosedElementError(DecodeError):
    """The document ends while elements are still open."""
