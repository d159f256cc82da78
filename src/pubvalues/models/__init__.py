"""Base value types shared by every pubvalues type.

- Scalars → pubvalues.models.scalar
- Controlled vocabularies → pubvalues.models.enumeration
"""

from pubvalues.models.enumeration import (
    ENUMERATIONS,
    EnumerationError,
    Enumeration,
    EnumRegistry,
    EnumRules,
    EnumType,
    camelize,
    comparable,
    comparable_map,
)
from pubvalues.models.scalar import ScalarRules, ScalarType

__all__ = [
    "ENUMERATIONS",
    "EnumRegistry",
    "EnumRules",
    "EnumType",
    "Enumeration",
    "EnumerationError",
    "ScalarRules",
    "ScalarType",
    "camelize",
    "comparable",
    "comparable_map",
]
