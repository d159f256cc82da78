"""Command-line interface for pubvalues.

Provides commands to identify, normalize and validate bibliographic values.
"""

import importlib.metadata
import sys

import click

from pubvalues.config import configure_logging

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("pubvalues")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"  # Fallback for development

_PRECISIONS = ("date", "day", "year")


def _setup_logging(verbose: bool) -> None:
    configure_logging("DEBUG" if verbose else None)


def _report(ok: bool, text: str) -> None:
    click.secho(text, fg="green" if ok else "red")


@click.group()
@click.version_option(version=__version__, prog_name="pubvalues")
def cli() -> None:
    """Normalize and validate bibliographic metadata values.

    Use 'pubvalues COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("values", nargs=-1, required=True)
@click.option(
    "--type",
    "-t",
    "type_",
    type=str,
    default=None,
    help="Identifier scheme (doi, isbn, issn, upc, oclc, lccn); inferred if omitted",
)
@click.option("--json", "as_json", is_flag=True, help="Write results as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def identify(values: tuple[str, ...], type_: str | None, as_json: bool, verbose: bool) -> None:
    """Identify and normalize publication identifiers.

    Each VALUE may hold several identifiers separated by commas, semicolons
    or pipes. Exits with status 1 if any identifier is invalid.

    Examples
    --------
        pubvalues identify "ISBN 978-0-306-40615-7"
        pubvalues identify 2001012345 ocm12345678 --json
        pubvalues identify 12345678 --type oclc
    """
    from pubvalues.identifiers import Isbn, PublicationIdentifier
    from pubvalues.serialize import dumps

    _setup_logging(verbose)

    if type_ is not None and PublicationIdentifier.subclass(type_) is None:
        types = ", ".join(PublicationIdentifier.identifier_types())
        click.secho(f"Error: unknown identifier type {type_!r} (expected one of: {types})", fg="red", err=True)
        sys.exit(1)

    results = []
    for item in PublicationIdentifier.split(list(values)):
        identifier = PublicationIdentifier.create(item, type_=type_)
        entry = {
            "input": item,
            "type": identifier.type if identifier else None,
            "identifier": str(identifier) if identifier else None,
            "valid": bool(identifier and identifier.is_valid()),
        }
        if isinstance(identifier, Isbn) and entry["valid"]:
            entry["isbn13"] = identifier.to_isbn13(log=False)
            entry["isbn10"] = identifier.to_isbn10(log=False)
        results.append(entry)

    if as_json:
        click.echo(dumps(results, indent=2))
    else:
        for entry in results:
            if entry["identifier"] is None:
                _report(False, f"✗ {entry['input']}: not an identifier")
            elif entry["valid"]:
                _report(True, f"✓ {entry['input']} → {entry['identifier']}")
            else:
                _report(False, f"✗ {entry['input']} → {entry['identifier']} (not a valid {entry['type']})")

    if not all(entry["valid"] for entry in results):
        sys.exit(1)


@cli.command()
@click.argument("value")
@click.option(
    "--precision",
    "-p",
    type=click.Choice(_PRECISIONS),
    default="date",
    show_default=True,
    help="Coarsen to a date-time, a day or a year",
)
@click.option("--json", "as_json", is_flag=True, help="Write the result as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def date(value: str, precision: str, as_json: bool, verbose: bool) -> None:
    """Normalize a date to ISO-8601.

    Examples
    --------
        pubvalues date "2020-05-06T10:00:00+00:00"
        pubvalues date "c.2015" --precision year
        pubvalues date "D:20200506101500Z"
    """
    from pubvalues.dates import IsoDate, IsoDay, IsoYear
    from pubvalues.serialize import dumps

    _setup_logging(verbose)

    value_type = {"date": IsoDate, "day": IsoDay, "year": IsoYear}[precision]
    normalized = value_type.normalize(value)

    if as_json:
        click.echo(dumps({"input": value, "precision": precision, "value": normalized or None}))
    elif normalized:
        click.echo(normalized)
    else:
        click.secho(f"Error: {value!r} is not a recognizable date", fg="red", err=True)

    if not normalized:
        sys.exit(1)


@cli.command()
@click.argument("value", required=False)
@click.option("--years", type=float, default=None, help="Years")
@click.option("--months", type=float, default=None, help="Months")
@click.option("--weeks", type=float, default=None, help="Weeks")
@click.option("--days", type=float, default=None, help="Days")
@click.option("--hours", type=float, default=None, help="Hours")
@click.option("--minutes", type=float, default=None, help="Minutes")
@click.option("--seconds", type=float, default=None, help="Seconds")
@click.option("--json", "as_json", is_flag=True, help="Write the result as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def duration(value: str | None, as_json: bool, verbose: bool, **parts: float | None) -> None:
    """Validate an ISO-8601 duration, or build one from its parts.

    Examples
    --------
        pubvalues duration PT1H30M
        pubvalues duration --hours 1.5
    """
    from pubvalues.dates import Duration, IsoDuration
    from pubvalues.serialize import dumps

    _setup_logging(verbose)

    given = {name: amount for name, amount in parts.items() if amount is not None}
    if value is not None and given:
        click.secho("Error: give either VALUE or duration parts, not both", fg="red", err=True)
        sys.exit(1)

    source = value if value is not None else Duration.from_mapping(given)
    normalized = IsoDuration.normalize(source)

    if as_json:
        click.echo(dumps({"input": value if value is not None else given, "value": normalized or None}))
    elif normalized:
        click.echo(normalized)
    else:
        shown = value if value is not None else given
        click.secho(f"Error: {shown!r} is not an ISO-8601 duration", fg="red", err=True)

    if not normalized:
        sys.exit(1)


@cli.command(name="enum")
@click.argument("name", required=False)
@click.argument("value", required=False)
@click.option("--json", "as_json", is_flag=True, help="Write the result as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def enum_(name: str | None, value: str | None, as_json: bool, verbose: bool) -> None:
    """List vocabularies, list the values of NAME, or check VALUE against NAME.

    Examples
    --------
        pubvalues enum
        pubvalues enum DcmiType
        pubvalues enum A11yFeature "alternative_text"
    """
    from pubvalues.models import ENUMERATIONS
    from pubvalues.serialize import dumps
    from pubvalues.vocab import VOCABULARIES

    _setup_logging(verbose)

    if name is None:
        names = ENUMERATIONS.names()
        click.echo(dumps(names, indent=2) if as_json else "\n".join(names))
        return

    enum_type = VOCABULARIES.get(name)
    if enum_type is None:
        click.secho(f"Error: unknown vocabulary {name!r}", fg="red", err=True)
        sys.exit(1)

    if value is None:
        options = enum_type.options()
        if as_json:
            click.echo(dumps([{"value": v, "label": label} for v, label in options], indent=2))
        else:
            default = enum_type.default()
            for v, label in options:
                marker = "*" if v == default else " "
                click.echo(f"{marker} {v}\t{label}")
        return

    normalized = enum_type.normalize(value)
    valid = enum_type.rules.valid(value)
    if as_json:
        click.echo(dumps({"type": name, "input": value, "value": normalized, "valid": valid}))
    else:
        _report(valid, f"{'✓' if valid else '✗'} {value} → {normalized}")

    if not valid:
        sys.exit(1)


if __name__ == "__main__":
    cli()
