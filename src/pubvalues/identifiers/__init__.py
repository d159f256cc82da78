"""Publication identifier schemes.

Importing this package registers every scheme with
``PublicationIdentifier`` in inference order: DOI, ISBN, ISSN, UPC, OCLC,
LCCN.
"""

from pubvalues.identifiers.base import IdentifierRules, PublicationIdentifier, prefer_year_lccn
from pubvalues.identifiers.doi import Doi
from pubvalues.identifiers.isbn import Isbn
from pubvalues.identifiers.issn import Issn
from pubvalues.identifiers.lccn import Lccn
from pubvalues.identifiers.oclc import Oclc
from pubvalues.identifiers.upc import Upc

__all__ = [
    "Doi",
    "IdentifierRules",
    "Isbn",
    "Issn",
    "Lccn",
    "Oclc",
    "PublicationIdentifier",
    "Upc",
    "prefer_year_lccn",
]
