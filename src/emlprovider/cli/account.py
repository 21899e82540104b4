"""Account registry commands."""

import sys
import uuid as uuidlib

import click
import humanize
from click import argument, echo, option

from ..config import AccountConfig, database_path, get_root, load_config, save_config
from ..errors import StoreError
from ..store import open_local_store

from .utils import AliasGroup, err, require_init


@click.group(cls=AliasGroup, aliases={
    'a': 'add',
    'l': 'ls',
    'r': 'rm',
})
def account():
    """Manage registered accounts."""
    pass


@account.command("add", no_args_is_help=True)
@require_init
@option('-d', '--database', help="Database path (relative to .eml/, or absolute)")
@option('-u', '--uuid', 'acct_uuid', help="Account UUID (generated if omitted)")
@argument('name')
def account_add(database: str | None, acct_uuid: str | None, name: str):
    """Register an account and create its message database.

    \b
    Examples:
      emlp account add Work
      emlp account add Home -d ~/mail/home.db
      emlp a a Work -u 4c0f2f5e-...            # using aliases
    """
    root = get_root()
    config = load_config(root)
    acct_uuid = acct_uuid or str(uuidlib.uuid4())
    if acct_uuid in config.accounts:
        err(f"Account {acct_uuid} already exists.")
        sys.exit(1)

    acct = AccountConfig(uuid=acct_uuid, name=name, database=database)
    db_path = database_path(acct, root)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with open_local_store(db_path) as store:
            store.count()
    except StoreError as e:
        err(f"Cannot create database {db_path}: {e}")
        sys.exit(1)

    config.accounts[acct_uuid] = acct
    save_config(config, root)
    echo(f"Account '{name}' saved: {acct_uuid}")


@account.command("ls")
@require_init
def account_ls():
    """List registered accounts."""
    root = get_root()
    config = load_config(root)
    if not config.accounts:
        echo("No accounts configured.")
        return

    for acct in sorted(config.accounts.values(), key=lambda a: a.name):
        db_path = database_path(acct, root)
        if db_path.exists():
            size = humanize.naturalsize(db_path.stat().st_size)
        else:
            size = "missing"
        echo(f"  {acct.uuid}  {acct.name}  ({db_path}, {size})")


@account.command("rm", no_args_is_help=True)
@require_init
@option('-D', '--delete-db', is_flag=True, help="Also delete the account's database file")
@argument('acct_uuid', metavar='UUID')
def account_rm(delete_db: bool, acct_uuid: str):
    """Remove an account from the registry."""
    root = get_root()
    config = load_config(root)
    acct = config.accounts.pop(acct_uuid, None)
    if not acct:
        err(f"Account {acct_uuid} not found.")
        sys.exit(1)
    save_config(config, root)

    if delete_db:
        db_path = database_path(acct, root)
        for path in (db_path, db_path.with_name(db_path.name + "-wal"), db_path.with_name(db_path.name + "-shm")):
            if path.exists():
                path.unlink()
    echo(f"Account '{acct.name}' removed.")
