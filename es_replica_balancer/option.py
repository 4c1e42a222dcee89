import click

option_endpoint = click.option(
    "--endpoint",
    envvar="ES_ENDPOINT",
    type=str,
    required=False,
    help="Elasticsearch HTTP endpoint, `host:port` or URL (default: localhost:9200)",
)
option_timeout = click.option(
    "--timeout",
    envvar="ES_TIMEOUT",
    type=float,
    required=False,
    help="Timeout for each HTTP request in seconds (default: 10)",
)
option_strict = click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Fail when replicas are hosted by nodes missing from the node listing",
)
option_limit = click.option(
    "--limit",
    type=click.IntRange(min=0),
    required=False,
    help="Reroute at most this many shards",
)
option_format = click.option(
    "--format",
    "format_",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format (default: table)",
)
