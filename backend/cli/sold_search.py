import json

import click
from comicsold.api import service
from comicsold.config import settings
from comicsold.errors import ComicSoldError, ValidationError
from comicsold.logging_config import setup_logging


@click.command()
@click.argument("title")
@click.option("--limit", default=10, show_default=True, help="Max items (1-50)")
@click.option(
    "--mode",
    type=click.Choice(["browse", "finding"]),
    default=None,
    help="Force one upstream instead of Browse with Finding fallback",
)
def main(title, limit, mode):
    """
    Look up sold/listed eBay items for TITLE and print the normalized JSON.
    Exits 2 on invalid input, 1 on eBay or configuration failures.
    """
    setup_logging(settings.LOG_LEVEL)
    try:
        payload = service.search_sold(title, limit, mode)
    except ValidationError as e:
        click.echo(json.dumps(e.to_dict(), indent=2))
        raise SystemExit(2)
    except ComicSoldError as e:
        click.echo(json.dumps(e.to_dict(), indent=2))
        raise SystemExit(1)
    click.echo(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
