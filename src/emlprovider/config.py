"""Project configuration and account registry entries via YAML."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .uri import DEFAULT_AUTHORITY

EML_DIR = ".eml"
CONFIG_FILE = "config.yaml"
ACCOUNTS_DIR = "accounts"


@dataclass
class AccountConfig:
    """A registered account and the location of its message database."""
    uuid: str
    name: str
    database: str | None = None  # relative to .eml/, or absolute


@dataclass
class ProviderConfig:
    """Top-level provider configuration."""
    authority: str = DEFAULT_AUTHORITY
    accounts: dict[str, AccountConfig] = field(default_factory=dict)


def find_root(start: Path | None = None) -> Path | None:
    """Find project root (directory containing .eml/).

    First checks EML_ROOT environment variable, then walks up from start/cwd.
    """
    env_root = os.environ.get("EML_ROOT")
    if env_root:
        env_path = Path(env_root).resolve()
        if (env_path / EML_DIR).is_dir():
            return env_path

    path = (start or Path.cwd()).resolve()
    while path != path.parent:
        if (path / EML_DIR).is_dir():
            return path
        path = path.parent
    return None


def get_root(require: bool = True) -> Path:
    """Get project root, raising if not found and require=True."""
    root = find_root()
    if not root and require:
        raise FileNotFoundError(
            "Not in an eml project. Run 'emlp init' first."
        )
    return root or Path.cwd()


def get_config_path(root: Path | None = None) -> Path:
    root = root or get_root()
    return root / EML_DIR / CONFIG_FILE


def database_path(account: AccountConfig, root: Path | None = None) -> Path:
    """Resolve the database file of an account."""
    root = root or get_root()
    if not account.database:
        return root / EML_DIR / ACCOUNTS_DIR / f"{account.uuid}.db"
    path = Path(account.database).expanduser()
    if path.is_absolute():
        return path
    return root / EML_DIR / path


def load_config(root: Path | None = None) -> ProviderConfig:
    """Load config from config.yaml; defaults if the file is missing."""
    config_path = get_config_path(root)
    if not config_path.exists():
        return ProviderConfig()

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    accounts = {}
    for uuid, acct_data in (data.get("accounts") or {}).items():
        acct_data = acct_data or {}
        uuid = str(uuid)
        accounts[uuid] = AccountConfig(
            uuid=uuid,
            name=acct_data.get("name", uuid),
            database=acct_data.get("database"),
        )

    return ProviderConfig(
        authority=data.get("authority", DEFAULT_AUTHORITY),
        accounts=accounts,
    )


def save_config(config: ProviderConfig, root: Path | None = None) -> None:
    """Save config to config.yaml."""
    config_path = get_config_path(root)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data: dict = {"authority": config.authority}
    if config.accounts:
        data["accounts"] = {}
        for uuid, acct in config.accounts.items():
            acct_data = {"name": acct.name}
            if acct.database:
                acct_data["database"] = acct.database
            data["accounts"][uuid] = acct_data

    with open(config_path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)
