"""Error taxonomy for document generation.

Generation either returns a complete document or raises one of these.
"""


class DocgenError(Exception):
    """Base class for all generation failures."""


class CollaboratorUnavailable(DocgenError):
    """A host collaborator (content store, route registry) failed or returned malformed data."""


class EncodingFailure(DocgenError):
    """The assembled document could not be serialized."""
