"""
Command-line interface for shippingapi.

Rates, ships, tracks and lists countries against the configured endpoint, or
against canned responses with ``--mock-dir``. ``--counters`` prints the
per-endpoint call counters when the command finishes.
"""

import json
import sys
import uuid
from pathlib import Path
from typing import Any, Dict, Optional

import click
import yaml
from rich.console import Console
from rich.table import Table

from shippingapi import __version__
from shippingapi.config import settings
from shippingapi.constants import HISTOGRAM_BUCKET_MS, PRODUCTION_ENDPOINT, SANDBOX_ENDPOINT
from shippingapi.documents import save_documents
from shippingapi.exceptions import DocumentError, ShippingApiException
from shippingapi.logger import get_logger, setup_logger
from shippingapi.methods import countries_sync, create_shipment_sync, rates_sync, tracking_sync
from shippingapi.models.base import ShippingApiResponse
from shippingapi.models.shipping import CountriesRequest, Shipment, TrackingRequest
from shippingapi.session import Session, set_default_session
from shippingapi.token import MockTokenProvider
from shippingapi.transport.mock import MockRequester

# Initialize console for rich output
console = Console()
logger = get_logger(__name__)

ENVIRONMENTS = {PRODUCTION_ENDPOINT: "production", SANDBOX_ENDPOINT: "sandbox"}


def setup_cli_logging(verbose: bool = False) -> None:
    """Setup logging for CLI usage."""
    if verbose:
        setup_logger(level="DEBUG", log_format="simple")
    else:
        setup_logger(level="WARNING", log_format=settings.log_format)


def load_payload(path: str) -> Dict[str, Any]:
    """Load a JSON or YAML request document."""
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text) if path.endswith(".json") else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise click.BadParameter(f"{path} is not valid JSON/YAML: {e}")
    if not isinstance(data, dict):
        raise click.BadParameter(f"{path} must contain a single object")
    return data


def build_session(mock_dir: Optional[str]) -> Session:
    if mock_dir:
        return Session(requester=MockRequester.from_directory(mock_dir), token_provider=MockTokenProvider())
    return Session.from_settings(settings)


def print_counters(session: Session) -> None:
    table = Table(title="Endpoint Counters", show_header=True)
    table.add_column("Endpoint", style="cyan")
    table.add_column("Calls", justify="right")
    table.add_column("Errors", justify="right", style="red")
    table.add_column("Latency histogram")

    for uri, entry in sorted(session.counters.snapshot().items()):
        histogram = ", ".join(
            f"{bucket * HISTOGRAM_BUCKET_MS}ms: {count}"
            for bucket, count in sorted(entry.call_histogram.items())
        )
        table.add_row(uri, str(entry.call_count), str(entry.error_count), histogram)

    console.print(table)


def exit_on_failure(response: ShippingApiResponse) -> None:
    if response.success:
        return
    console.print(f"[red]Request failed with HTTP {response.http_status}[/red]")
    for error in response.errors:
        console.print(f"  [red]{error.error_code}[/red] {error.message}")
    sys.exit(1)


def _call(func, *args) -> ShippingApiResponse:
    try:
        return func(*args)
    except ShippingApiException as e:
        exit_on_failure(e.error_response)
        raise


@click.group()
@click.option("--mock-dir", type=click.Path(exists=True, file_okay=False), default=None,
              help="Answer calls from canned JSON responses in this directory")
@click.option("--counters", is_flag=True, help="Print per-endpoint counters when done")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, mock_dir: Optional[str], counters: bool, verbose: bool):
    """Pitney Bowes Shipping API client."""
    setup_cli_logging(verbose)
    session = build_session(mock_dir or (settings.mock_dir if settings.mock else None))
    set_default_session(session)
    ctx.obj = session
    if counters:
        ctx.call_on_close(lambda: print_counters(session))


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def rate(session: Session, file: str) -> None:
    """Rate the shipment described in FILE (JSON or YAML)."""
    shipment = Shipment.model_validate(load_payload(file))
    response = _call(rates_sync, shipment, session)
    exit_on_failure(response)

    table = Table(title="Rates", show_header=True)
    table.add_column("Carrier", style="cyan")
    table.add_column("Service")
    table.add_column("Parcel Type")
    table.add_column("Total Charge", justify="right", style="green")
    for r in response.api_response.rates or []:
        charge = "" if r.total_carrier_charge is None else f"{r.total_carrier_charge:.2f}"
        table.add_row(r.carrier or "", r.service_id or "", r.parcel_type or "", charge)
    console.print(table)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--label-dir", "-o", type=click.Path(file_okay=False), default=".",
              help="Directory the label documents are written to")
@click.pass_obj
def ship(session: Session, file: str, label_dir: str) -> None:
    """Create the shipment described in FILE and save its label."""
    shipment = Shipment.model_validate(load_payload(file))
    if not shipment.transaction_id:
        shipment.transaction_id = uuid.uuid4().hex[:25]
    if not shipment.rate_plan:
        shipment.rate_plan = session.get_config_item("RatePlan")

    response = _call(create_shipment_sync, shipment, session)
    exit_on_failure(response)

    label = response.api_response
    console.print(f"[green]✓ Shipment created[/green] {label.shipment_id or ''}")
    if label.parcel_tracking_number:
        console.print(f"  Tracking number: {label.parcel_tracking_number}")
    try:
        for path in save_documents(label.documents or [], label_dir, label.shipment_id or "label"):
            console.print(f"  Document written to {path}")
    except DocumentError as e:
        console.print(f"[red]Could not write label: {e}[/red]")
        sys.exit(1)


@cli.command()
@click.argument("tracking_number")
@click.option("--carrier", default="USPS", show_default=True)
@click.pass_obj
def track(session: Session, tracking_number: str, carrier: str) -> None:
    """Show the tracking status of a parcel."""
    request = TrackingRequest(tracking_number=tracking_number, carrier=carrier)
    response = _call(tracking_sync, request, session)
    exit_on_failure(response)
    status = response.api_response
    console.print(f"{tracking_number}: [bold]{status.status or 'unknown'}[/bold]")
    for scan in status.scan_details_list or []:
        console.print(f"  {scan.get('eventDate', '')} {scan.get('scanDescription', '')}")


@cli.command()
@click.option("--carrier", default="USPS", show_default=True)
@click.option("--origin", default="US", show_default=True, help="Origin country code")
@click.pass_obj
def countries(session: Session, carrier: str, origin: str) -> None:
    """List destination countries supported by a carrier."""
    request = CountriesRequest(carrier=carrier, origin_country_code=origin)
    response = _call(countries_sync, request, session)
    exit_on_failure(response)

    table = Table(title=f"{carrier} destinations from {origin}", show_header=True)
    table.add_column("Code", style="cyan")
    table.add_column("Country")
    for country in response.api_response or []:
        table.add_row(country.country_code, country.country_name or "")
    console.print(table)


@cli.command()
def version():
    """Show version information."""
    console.print(f"shippingapi version {__version__}")


@cli.command()
@click.pass_obj
def info(session: Session):
    """Show client configuration."""
    table = Table(title="Shipping API Client", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Version", __version__)
    table.add_row("Python", sys.version.split()[0])
    table.add_row("Endpoint", session.endpoint)
    table.add_row("Environment", ENVIRONMENTS.get(session.endpoint, "custom"))
    table.add_row("Requester", str(session.requester))
    table.add_row("Retries", str(session.retries))
    table.add_row("Timeout", f"{session.timeout_milliseconds}ms")
    table.add_row("Throw Exceptions", str(session.throw_exceptions))

    console.print(table)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
