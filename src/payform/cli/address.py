"""CLI: payform address"""

import json
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from payform.address.section import AdditionalFields, AddressSection, CollectionMode, Defaults
from payform.elements import TextField

console = Console()


def _get_address_provider(obj):
    from payform.cli.main import _get_address_provider
    return _get_address_provider(obj)


@click.command("address")
@click.argument("country")
@click.option("--postal-countries", default=None,
              help="Collect only country, plus postal code for these comma-separated countries")
@click.option("--name", "with_name", is_flag=True, help="Also collect the full name")
@click.option("--json-output", "--json", is_flag=True)
@click.pass_obj
def address_cmd(obj, country: str, postal_countries: Optional[str], with_name: bool, json_output: bool):
    """Show the address fields collected for COUNTRY."""
    provider = _get_address_provider(obj)
    country = country.upper()
    if country not in provider.countries:
        console.print(f"[red]Unknown country {country}[/red]")
        raise SystemExit(1)
    mode = CollectionMode.all()
    if postal_countries is not None:
        mode = CollectionMode.country_and_postal(
            [c.strip().upper() for c in postal_countries.split(",") if c.strip()])
    section = AddressSection(
        address_spec_provider=provider,
        defaults=Defaults(country=country),
        collection_mode=mode,
        additional_fields=AdditionalFields.NAME if with_name else AdditionalFields.NONE,
    )

    rows = []
    for element in section.elements:
        required = element.required if isinstance(element, TextField) else True
        rows.append({"key": element.key, "label": element.label, "required": required})
    if json_output:
        click.echo(json.dumps(rows, indent=2))
        return
    table = Table(title=f"{provider.country_name(country)} address fields")
    table.add_column("Field", style="bold")
    table.add_column("Label")
    table.add_column("Required")
    for row in rows:
        table.add_row(row["key"], row["label"], "yes" if row["required"] else "no")
    console.print(table)
