"""Query and URI commands."""

import json
import sqlite3
import sys

import click
from click import argument, echo, option
from rich.console import Console
from rich.table import Table

from ..columns import ID_ALIAS
from ..config import get_root, load_config
from ..errors import ProviderError
from ..uri import messages_uri

from .utils import err, get_provider, require_init


@click.command("uri", no_args_is_help=True)
@require_init
@argument('acct_uuid', metavar='UUID')
def uri(acct_uuid: str):
    """Print the messages URI of an account."""
    config = load_config(get_root())
    if acct_uuid not in config.accounts:
        err(f"Account {acct_uuid} not found.")
        sys.exit(1)
    echo(messages_uri(acct_uuid, config.authority))


@click.command("query", no_args_is_help=True)
@require_init
@option('-a', '--arg', 'args', multiple=True, help="Positional argument for '?' in the selection")
@option('-c', '--column', 'columns', multiple=True, help="Column to return (repeatable; default: all public columns)")
@option('-j', '--json', 'as_json', is_flag=True, help="Print one JSON object per row")
@option('-s', '--sort', help="Sort order, e.g. 'date DESC'")
@option('-w', '--where', help="Selection, e.g. 'folder_id = ?'")
@argument('content_uri', metavar='URI')
def query(
    args: tuple[str, ...],
    columns: tuple[str, ...],
    as_json: bool,
    sort: str | None,
    where: str | None,
    content_uri: str,
):
    """Query a provider URI and print the matching rows.

    \b
    Examples:
      emlp query content://eml.provider/account/$UUID/messages
      emlp query $URI -c id -c subject -s 'date DESC'
      emlp query $URI -w 'folder_id = ?' -a 2 -j

    The first column of the table is the row's "_id", which the
    provider maps to the message's "id".
    """
    provider, registry = get_provider()
    try:
        try:
            cursor = provider.query(
                content_uri,
                projection=list(columns) or None,
                selection=where,
                selection_args=list(args) or None,
                sort_order=sort,
            )
        except ProviderError as e:
            cause = f" ({e.__cause__})" if e.__cause__ else ""
            err(f"{e}{cause}")
            sys.exit(1)
        except sqlite3.Error as e:
            err(f"Query failed: {e}")
            sys.exit(1)

        with cursor:
            names = cursor.column_names
            id_index = cursor.get_column_index(ID_ALIAS)
            if as_json:
                for row in cursor:
                    echo(json.dumps(dict(zip(names, row)), default=str))
            else:
                table = Table()
                table.add_column(ID_ALIAS, justify="right")
                for name in names:
                    table.add_column(name)
                for row in cursor:
                    row_id = "" if id_index < 0 else str(row[id_index])
                    table.add_row(row_id, *("" if v is None else str(v) for v in row))
                Console().print(table)
                echo(f"{len(cursor)} row(s)")
    finally:
        registry.close()
