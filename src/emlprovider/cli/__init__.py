"""CLI package for emlp - query tools for local email stores.

This package organizes CLI commands into modules:
- account.py: Account registry management (add, ls, rm)
- query.py: uri, query
- misc.py: init
- utils.py: Shared utilities and helpers
"""

import click
from dotenv import load_dotenv

from .utils import AliasGroup, setup_logging

from .account import account
from .misc import init
from .query import query, uri


@click.group(cls=AliasGroup, aliases={
    'a': 'account',
    'i': 'init',
    'q': 'query',
    'u': 'uri',
})
@click.option('-v', '--verbose', count=True, help="Log more (-v info, -vv debug)")
def main(verbose: int):
    """Query local email stores by content URI."""
    load_dotenv()
    setup_logging(verbose)


main.add_command(account)
main.add_command(init)
main.add_command(query)
main.add_command(uri)


__all__ = [
    'main',
    'account',
    'init',
    'query',
    'uri',
]
