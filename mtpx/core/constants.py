"""Protocol-level constants shared by the engine and store implementations."""

ROOT_HANDLE = 0xFFFFFFFF
"""Handle value standing for the storage root; it has no object info."""

SIZE_OVERFLOW = 0xFFFFFFFF
"""Compact size value meaning "query OBJECT_SIZE for the real size"."""


class ObjectFormat:
    """Object format codes."""

    UNDEFINED = 0x3000
    ASSOCIATION = 0x3001


class ObjectProperty:
    """Object property codes used by the engine."""

    OBJECT_SIZE = 0xDC04
    OBJECT_FILE_NAME = 0xDC07


class HandleScope:
    """Format filters accepted by get_object_handles."""

    ALL_ASSOCIATIONS = 0x0
