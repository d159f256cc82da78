"""Controlled vocabularies for search and accessibility metadata.

The vocabularies are read from the bundled JSON data and registered once,
when this package is first imported. Each class below looks up the entry
registered under its own name.
"""

from pubvalues.models.enumeration import EnumType
from pubvalues.vocab.loader import (
    SchemaValidationError,
    load_enumerations,
    load_schema,
    register_enumerations,
    validate_enumerations,
)

register_enumerations()


class EmmaRepository(EnumType):
    """Member repository of the federated search."""


class FormatFeature(EnumType):
    """Remediation feature of a file format."""


class Rights(EnumType):
    """Usage rights."""


class Provenance(EnumType):
    """Origin of a remediated file."""


class DublinCoreFormat(EnumType):
    """File format."""


class DcmiType(EnumType):
    """DCMI resource type."""


class A11yFeature(EnumType):
    """schema.org accessibilityFeature."""


class A11yControl(EnumType):
    """schema.org accessibilityControl."""


class A11yHazard(EnumType):
    """schema.org accessibilityHazard."""


class A11yAPI(EnumType):
    """schema.org accessibilityAPI."""


class A11yAccessMode(EnumType):
    """schema.org accessMode."""


class A11ySufficient(EnumType):
    """schema.org accessModeSufficient."""


class SearchSort(EnumType):
    """Sort order of search results."""


VOCABULARIES: dict[str, type[EnumType]] = {
    cls.__name__: cls
    for cls in (
        EmmaRepository,
        FormatFeature,
        Rights,
        Provenance,
        DublinCoreFormat,
        DcmiType,
        A11yFeature,
        A11yControl,
        A11yHazard,
        A11yAPI,
        A11yAccessMode,
        A11ySufficient,
        SearchSort,
    )
}

__all__ = [
    "VOCABULARIES",
    "A11yAPI",
    "A11yAccessMode",
    "A11yControl",
    "A11yFeature",
    "A11yHazard",
    "A11ySufficient",
    "DcmiType",
    "DublinCoreFormat",
    "EmmaRepository",
    "FormatFeature",
    "Provenance",
    "Rights",
    "SchemaValidationError",
    "SearchSort",
    "load_enumerations",
    "load_schema",
    "register_enumerations",
    "validate_enumerations",
]
