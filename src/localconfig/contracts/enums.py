"""Enumerations shared across subsystem boundaries."""

from enum import StrEnum


class ValueShape(StrEnum):
    """Declared shape of a configuration variable's value.

    Every schema variable declares exactly one shape. The settings file
    loader rejects stored values whose shape disagrees with the declaration.
    """

    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


class ConfigSource(StrEnum):
    """Where a loaded configuration came from."""

    FILE = "file"
    ENV = "env"
