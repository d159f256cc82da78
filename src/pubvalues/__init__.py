"""Self-validating, self-normalizing values for bibliographic metadata.

This package provides:
- Base value types (pubvalues.models): scalars and controlled vocabularies
- Identifiers (pubvalues.identifiers): DOI, ISBN, ISSN, UPC, OCLC, LCCN
- Dates (pubvalues.dates): ISO-8601 dates, days, years and durations
- Vocabularies (pubvalues.vocab): search and accessibility enumerations
- Serialization (pubvalues.serialize): embedding values in JSON records
- Configuration (pubvalues.config): process-wide settings and logging
- CLI (pubvalues.cli): command-line interface
"""

__version__ = "0.1.0"
__license__ = "MIT"

from pubvalues.config import EMPTY_VALUE, ValueConfig, configure, configure_logging, get_config
from pubvalues.dates import Duration, IsoDate, IsoDay, IsoDuration, IsoYear
from pubvalues.identifiers import Doi, Isbn, Issn, Lccn, Oclc, PublicationIdentifier, Upc
from pubvalues.models import EnumerationError, EnumType, ScalarType
from pubvalues.serialize import ValueEncoder, deserialize, record_to_dict, serialize

__all__ = [
    "__version__",
    "__license__",
    "EMPTY_VALUE",
    "ValueConfig",
    "configure",
    "configure_logging",
    "get_config",
    "ScalarType",
    "EnumType",
    "EnumerationError",
    "PublicationIdentifier",
    "Doi",
    "Isbn",
    "Issn",
    "Lccn",
    "Oclc",
    "Upc",
    "IsoDate",
    "IsoDay",
    "IsoYear",
    "IsoDuration",
    "Duration",
    "ValueEncoder",
    "serialize",
    "deserialize",
    "record_to_dict",
]
