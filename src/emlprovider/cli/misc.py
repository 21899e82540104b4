"""Project setup commands."""

from pathlib import Path

import click
from click import echo

from ..config import ACCOUNTS_DIR, CONFIG_FILE, EML_DIR, ProviderConfig, save_config


@click.command()
@click.option('-A', '--authority', default=None, help="Provider authority for content URIs")
def init(authority: str | None):
    """Initialize a provider project in the current directory.

    \b
    Examples:
      emlp init
      emlp init -A org.example.mail
    """
    root = Path.cwd()
    eml_dir = root / EML_DIR
    config_path = eml_dir / CONFIG_FILE

    if config_path.exists():
        echo(f"Already initialized: {eml_dir}")
        return

    (eml_dir / ACCOUNTS_DIR).mkdir(parents=True, exist_ok=True)
    config = ProviderConfig()
    if authority:
        config.authority = authority
    save_config(config, root)
    echo(f"Initialized {eml_dir} (authority: {config.authority})")
