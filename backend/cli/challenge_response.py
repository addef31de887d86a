import click
from comicsold.api.ebay_compliance import respond_to_challenge
from comicsold.config import settings


@click.command()
@click.argument("challenge_code")
@click.option(
    "--token",
    default=None,
    help="Verification token (default: EBAY_DELETION_VERIFICATION_TOKEN)",
)
@click.option(
    "--endpoint",
    default=None,
    help="Endpoint URL as registered with eBay (default: EBAY_DELETION_ENDPOINT_URL)",
)
def main(challenge_code, token, endpoint):
    """Print the challengeResponse eBay expects for CHALLENGE_CODE."""
    token = token or settings.EBAY_DELETION_VERIFICATION_TOKEN
    endpoint = endpoint or settings.EBAY_DELETION_ENDPOINT_URL
    if not token or not endpoint:
        raise click.UsageError(
            "verification token and endpoint URL are required (flags or env)"
        )
    click.echo(respond_to_challenge(challenge_code, token, endpoint))


if __name__ == "__main__":
    main()
