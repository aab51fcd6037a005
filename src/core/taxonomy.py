"""
Client taxonomy loading.

clients.json maps each client name to a list of alias keywords:

    {"Acme": ["acme corp", "wile"], "Beta": ["beta"]}

Key order matters: it is the priority used when a title matches more
than one client.
"""

import json
from collections.abc import Iterable, Mapping
from pathlib import Path

from core.config import CLIENTS_PATH, ConfigurationError
from models.reports import ClientRule

COPY_HINT = "Copy clients.example.json to clients.json and personalize client names/aliases."


def build_client_rules(taxonomy: Mapping[str, Iterable[str] | None]) -> tuple[ClientRule, ...]:
    """
    Turn a client -> aliases mapping into ordered classification rules.

    Raises:
        ConfigurationError: if the mapping is empty or not shaped as
            {name: [alias, ...]}
    """
    if not isinstance(taxonomy, Mapping):
        raise ConfigurationError(
            f"Client taxonomy must be an object of client name to aliases, got {type(taxonomy).__name__}"
        )
    if not taxonomy:
        raise ConfigurationError(f"Client taxonomy is empty. {COPY_HINT}")

    rules = []
    for name, aliases in taxonomy.items():
        if not isinstance(name, str) or not name.strip():
            raise ConfigurationError("Client names must be non-empty strings")
        if aliases is None:
            aliases = []
        if isinstance(aliases, str) or not isinstance(aliases, Iterable):
            raise ConfigurationError(f"Aliases for client '{name}' must be a list of strings")
        aliases = list(aliases)
        for alias in aliases:
            if alias is not None and not isinstance(alias, str):
                raise ConfigurationError(
                    f"Aliases for client '{name}' must be strings, got {alias!r}"
                )
        rules.append(ClientRule(name=name, keywords=tuple(a for a in aliases if a)))

    return tuple(rules)


def load_client_rules(path: Path = CLIENTS_PATH) -> tuple[ClientRule, ...]:
    """Read and validate the client taxonomy file."""
    if not path.exists():
        raise ConfigurationError(f"Missing {path.name}. {COPY_HINT}")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Could not read {path}: {e}") from e

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path.name} is not valid JSON: {e}") from e

    return build_client_rules(parsed)
