"""Tests for publication identifiers.

Covers the scheme-specific algorithms (checksums, zero-fill, LC
normalization, DOI prefix forms) and the dispatcher that infers a scheme
from unprefixed input.
"""

import logging

import pytest

from pubvalues.identifiers import (
    Doi,
    Isbn,
    Issn,
    Lccn,
    Oclc,
    PublicationIdentifier,
    Upc,
    prefer_year_lccn,
)
from pubvalues.identifiers.isbn import isbn10_checksum, isbn13_checksum
from pubvalues.identifiers.issn import issn_checksum
from pubvalues.identifiers.upc import upc_checksum

# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_identifier_classes_in_priority_order() -> None:
    """Test the inference order of the registered schemes."""
    assert PublicationIdentifier.identifier_classes() == [Doi, Isbn, Issn, Upc, Oclc, Lccn]
    assert PublicationIdentifier.identifier_types() == ["doi", "isbn", "issn", "upc", "oclc", "lccn"]


@pytest.mark.unit
def test_subclass_lookup() -> None:
    """Test schemes are found by name or class."""
    assert PublicationIdentifier.subclass_map()["issn"] is Issn
    assert PublicationIdentifier.subclass("ISBN") is Isbn
    assert PublicationIdentifier.subclass(Oclc) is Oclc
    assert PublicationIdentifier.subclass("ark") is None
    assert PublicationIdentifier.subclass(PublicationIdentifier) is None


@pytest.mark.unit
def test_parts() -> None:
    """Test splitting a value into prefix and number."""
    rules = PublicationIdentifier.rules

    assert rules.parts("isbn:9780306406157") == ("isbn", "9780306406157")
    assert rules.parts("ISBN 0-306-40615-2") == ("ISBN", "0-306-40615-2")
    assert rules.parts(" 2001012345 ") == ("", "2001012345")


# ---------------------------------------------------------------------------
# ISBN
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("digits", "expected"),
    [
        ("030640615", "2"),
        ("080442957", "X"),
        ("999999999", "9"),
    ],
)
def test_isbn10_checksum(digits: str, expected: str) -> None:
    """Test ISBN-10 check digits (weights 1..9, mod 11)."""
    assert isbn10_checksum(digits) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    ("digits", "expected"),
    [
        ("978030640615", "7"),
        ("978186197271", "2"),
        ("979000000000", "1"),
    ],
)
def test_isbn13_checksum(digits: str, expected: str) -> None:
    """Test ISBN-13 check digits (weights 1/3, mod 10)."""
    assert isbn13_checksum(digits) == expected


@pytest.mark.unit
def test_isbn10_valid_and_mutated() -> None:
    """Test a valid ISBN-10 and the same number with a wrong check digit."""
    assert Isbn.rules.valid("0306406152")
    assert Isbn("0306406152").is_isbn10()
    assert not Isbn.rules.valid("0306406153")


@pytest.mark.unit
def test_isbn10_with_x_check_digit() -> None:
    """Test a lowercase "x" check digit is accepted and uppercased."""
    isbn = Isbn("0-8044-2957-x")

    assert isbn.value == "080442957X"
    assert isbn.is_valid()


@pytest.mark.unit
def test_isbn13_round_trip() -> None:
    """Test a valid ISBN-13 casts to its prefixed form."""
    isbn = Isbn.cast("9780306406157")

    assert str(isbn) == "isbn:9780306406157"
    assert isbn.is_valid()
    assert isbn.is_isbn13()
    assert not isbn.is_isbn10()


@pytest.mark.unit
def test_isbn_conversions() -> None:
    """Test ISBN-10 and ISBN-13 conversions."""
    rules = Isbn.rules

    assert rules.to_isbn13("0306406152") == "9780306406157"
    assert rules.to_isbn10("9780306406157") == "0306406152"
    assert rules.to_isbn("0-306-40615-2") == "9780306406157"
    assert rules.to_isbn13("9780306406157") == "9780306406157"


@pytest.mark.unit
def test_isbn10_conversion_requires_978(caplog: pytest.LogCaptureFixture) -> None:
    """Test a 979 ISBN-13 has no ISBN-10 form."""
    isbn = "979" + "100000000"
    isbn += isbn13_checksum(isbn)

    with caplog.at_level(logging.INFO, logger="pubvalues"):
        assert Isbn.rules.to_isbn10(isbn) is None

    assert "cannot convert" in caplog.text


@pytest.mark.unit
def test_isbn_checksum_validate_raises() -> None:
    """Test checksum(validate=True) raises for a wrong check digit."""
    with pytest.raises(ValueError, match="check digit should be 2"):
        Isbn.rules.checksum("0306406153", validate=True)


@pytest.mark.unit
def test_isbn_candidate() -> None:
    """Test candidate detection with and without the prefix."""
    rules = Isbn.rules

    assert rules.candidate("ISBN: anything")
    assert rules.candidate("0-306-40615-3")
    assert not rules.candidate("12345")


# ---------------------------------------------------------------------------
# ISSN
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("digits", "expected"),
    [
        ("0378595", "5"),
        ("0317847", "1"),
        ("2434561", "X"),
    ],
)
def test_issn_checksum(digits: str, expected: str) -> None:
    """Test ISSN check digits (weights 8..2, 11 - mod 11)."""
    assert issn_checksum(digits) == expected


@pytest.mark.unit
def test_issn_valid_with_separator() -> None:
    """Test a hyphenated ISSN normalizes to eight characters."""
    issn = Issn("ISSN 0378-5955")

    assert issn.value == "03785955"
    assert issn.is_valid()
    assert str(issn) == "issn:03785955"


@pytest.mark.unit
def test_issn_to_issn() -> None:
    """Test to_issn() recalculates or validates the check digit."""
    rules = Issn.rules

    assert rules.to_issn("0378-5954") == "03785955"
    assert rules.to_issn("0378-5954", validate=True) is None
    assert not rules.valid("0378-5954")


# ---------------------------------------------------------------------------
# UPC
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_upc_checksum() -> None:
    """Test UPC check digit (weights 3/1 over 11 digits)."""
    assert upc_checksum("03600029145") == "2"


@pytest.mark.unit
def test_upc_valid_and_supplement() -> None:
    """Test a UPC with and without a supplemental code."""
    assert Upc("036000291452").is_valid()
    assert Upc.rules.to_upc("036000291452-12") == "03600029145212"
    assert not Upc("036000291453").is_valid()


# ---------------------------------------------------------------------------
# OCLC
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_oclc_bare_eight_digits() -> None:
    """Test eight bare digits form a valid OCN."""
    assert Oclc("12345678").is_valid()


@pytest.mark.unit
def test_oclc_zero_fill() -> None:
    """Test a short bare number is zero-filled to eight digits."""
    oclc = Oclc("1234567")

    assert oclc.value == "01234567"
    assert oclc.is_valid()


@pytest.mark.unit
@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("ocm12345678", "012345678"),
        ("ocn12345678", "12345678"),
        ("on1234567890", "1234567890"),
        ("(OCoLC)123456", "00123456"),
        ("OCLC: 12345678", "12345678"),
    ],
)
def test_oclc_prefix_widths(raw: str, expected: str) -> None:
    """Test each prefix determines the zero-fill width."""
    assert Oclc.rules.to_oclc(raw) == expected


@pytest.mark.unit
def test_oclc_out_of_range() -> None:
    """Test digit counts outside the prefix range are invalid."""
    assert Oclc.rules.to_oclc("ocn123456789", log=False) is None
    assert not Oclc.rules.valid("12345678901")


# ---------------------------------------------------------------------------
# LCCN
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("n79-1234", "n79001234"),
        ("2001-12345", "2001012345"),
        ("  85-2 ", "85000002"),
        ("sh 85026371", "sh85026371"),
        ("LCCN: 2001012345/AC/r932", "2001012345"),
        ("https://lccn.loc.gov/2001012345", "2001012345"),
    ],
)
def test_lccn_normalization(raw: str, expected: str) -> None:
    """Test Library of Congress normalization."""
    lccn = Lccn(raw)

    assert lccn.value == expected
    assert lccn.is_valid()


@pytest.mark.unit
def test_lccn_invalid_digit_count() -> None:
    """Test too few digits make an invalid LCCN."""
    assert not Lccn("1234567").is_valid()


@pytest.mark.unit
def test_lccn_url() -> None:
    """Test the permalink of an LCCN."""
    assert Lccn("n79-1234").url == "https://lccn.loc.gov/n79001234"


# ---------------------------------------------------------------------------
# DOI
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw",
    [
        "doi:10.1000/182",
        "DOI 10.1000/182",
        "https://doi.org/10.1000/182",
        "http://dx.doi.org/10.1000/182",
        "doi.org/10.1000/182",
        "10.1000/182.",
    ],
)
def test_doi_prefix_forms(raw: str) -> None:
    """Test every prefix form yields the same DOI."""
    doi = Doi(raw)

    assert doi.value == "10.1000/182"
    assert doi.is_valid()
    assert str(doi) == "doi:10.1000/182"


@pytest.mark.unit
def test_doi_percent_decoding_and_url() -> None:
    """Test percent-encoded DOIs are decoded and the resolver link built."""
    doi = Doi("https://doi.org/10.1002%2F0470841559.ch1")

    assert doi.value == "10.1002/0470841559.ch1"
    assert doi.url == "https://doi.org/10.1002/0470841559.ch1"


@pytest.mark.unit
def test_doi_invalid() -> None:
    """Test a DOI without a suffix is invalid."""
    assert not Doi("10.1000").is_valid()
    assert not Doi("10.12/abc").is_valid()


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_create_end_to_end_isbn() -> None:
    """Test a labelled, hyphenated ISBN is recognized and normalized."""
    identifier = PublicationIdentifier.create("ISBN 978-0-306-40615-7")

    assert isinstance(identifier, Isbn)
    assert identifier.number == "9780306406157"
    assert identifier.is_valid()
    assert str(identifier) == "isbn:9780306406157"


@pytest.mark.unit
@pytest.mark.parametrize(
    ("raw", "expected_type", "expected"),
    [
        ("0306406152", Isbn, "isbn:0306406152"),
        ("0378-5955", Issn, "issn:03785955"),
        ("036000291452", Upc, "upc:036000291452"),
        ("ocm12345678", Oclc, "oclc:012345678"),
        ("10.1000/182", Doi, "doi:10.1000/182"),
        ("n79-1234", Lccn, "lccn:n79001234"),
        ("issn:0378-5955", Issn, "issn:03785955"),
    ],
)
def test_create_infers_scheme(raw: str, expected_type: type, expected: str) -> None:
    """Test scheme inference for unprefixed and prefixed input."""
    identifier = PublicationIdentifier.create(raw)

    assert type(identifier) is expected_type
    assert str(identifier) == expected


@pytest.mark.unit
def test_ambiguous_year_number_resolves_to_lccn() -> None:
    """Test a 10-digit number starting with a year is taken as an LCCN."""
    identifier = PublicationIdentifier.create("2001012345")

    assert isinstance(identifier, Lccn)
    assert identifier.is_valid()


@pytest.mark.unit
def test_ambiguous_number_without_year_resolves_to_oclc() -> None:
    """Test other bare numbers that are valid OCNs stay OCLC."""
    identifier = PublicationIdentifier.create("12345678")

    assert isinstance(identifier, Oclc)


@pytest.mark.unit
def test_prefixed_oclc_is_not_reinterpreted() -> None:
    """Test an explicit prefix disables the LCCN heuristic."""
    identifier = PublicationIdentifier.create("oclc:2001012345")

    assert isinstance(identifier, Oclc)
    assert identifier.number == "2001012345"


@pytest.mark.unit
def test_prefer_year_lccn_rule() -> None:
    """Test the tie-break function in isolation."""
    oclc, lccn = Oclc("2001012345"), Lccn("2001012345")

    assert prefer_year_lccn([oclc, lccn], prefixed=False) is lccn
    assert prefer_year_lccn([oclc, lccn], prefixed=True) is None
    assert prefer_year_lccn([oclc], prefixed=False) is None
    assert prefer_year_lccn([Oclc("85000002"), Lccn("85000002")], prefixed=False) is None


@pytest.mark.unit
def test_create_invalid_candidate_is_returned() -> None:
    """Test the first candidate is echoed when none is valid."""
    identifier = PublicationIdentifier.create("0-306-40615-3")

    assert isinstance(identifier, Isbn)
    assert not identifier.is_valid()
    assert PublicationIdentifier.cast("0-306-40615-3") is None
    assert PublicationIdentifier.cast("0-306-40615-3", invalid=True) == identifier


@pytest.mark.unit
def test_create_with_explicit_type() -> None:
    """Test an explicit type bypasses inference."""
    identifier = PublicationIdentifier.create("12345678", type_="lccn")

    assert isinstance(identifier, Lccn)
    assert PublicationIdentifier.create("12345678", type_="ark") is None


@pytest.mark.unit
def test_create_rejects_non_identifiers() -> None:
    """Test text with no identifier shape yields None."""
    assert PublicationIdentifier.create("hello world") is None
    assert PublicationIdentifier.create("") is None
    assert PublicationIdentifier.create(None) is None


@pytest.mark.unit
def test_foreign_prefix_yields_blank_value() -> None:
    """Test an identifier of another scheme does not fill an ISBN."""
    isbn = Isbn("issn:0378-5955")

    assert isbn.is_blank()
    assert not isbn.is_valid()
    assert str(isbn) == ""


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw",
    ["ISBN 978-0-306-40615-7", "2001012345", "ocm12345678", "doi:10.1000/182", "0-306-40615-3"],
)
def test_cast_idempotent(raw: str) -> None:
    """Test casting a cast identifier (or its string form) changes nothing."""
    first = PublicationIdentifier.cast(raw, invalid=True)

    assert PublicationIdentifier.cast(first, invalid=True) is first
    again = PublicationIdentifier.cast(str(first), invalid=True)
    assert type(again) is type(first)
    assert again == first


@pytest.mark.unit
def test_split_objects_and_map() -> None:
    """Test splitting delimited identifier lists."""
    value = "isbn:9780306406157; issn:0378-5955 | bogus"

    assert PublicationIdentifier.split(value) == ["isbn:9780306406157", "issn:0378-5955", "bogus"]

    objects = PublicationIdentifier.objects(value)
    assert [str(o) if o else None for o in objects] == ["isbn:9780306406157", "issn:03785955", None]

    valid_only = PublicationIdentifier.object_map(value, invalid=False)
    assert list(valid_only) == ["isbn:9780306406157", "issn:0378-5955"]


@pytest.mark.unit
def test_identifier_serialization_keeps_scheme() -> None:
    """Test the serialized form restores the same scheme."""
    lccn = PublicationIdentifier.create("2001012345")

    assert lccn.serialize() == "lccn:2001012345"
    assert PublicationIdentifier.deserialize(lccn.serialize()) == lccn
