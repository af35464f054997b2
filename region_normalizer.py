# region_normalizer.py

from types import MappingProxyType
from typing import Mapping, Optional

DEFAULT_REGION = "eu-west-1"

# Keys are lower-cased: console display names, region codes and colloquial names.
REGION_ALIASES: Mapping[str, str] = MappingProxyType({
    "eu (ireland)": "eu-west-1",
    "eu-west-1": "eu-west-1",
    "ireland": "eu-west-1",
    "us west (oregon)": "us-west-2",
    "us-west-2": "us-west-2",
    "oregon": "us-west-2",
    "us east (n. virginia)": "us-east-1",
    "us-east-1": "us-east-1",
})


def build_alias_table(extra: Optional[Mapping[str, str]] = None) -> Mapping[str, str]:
    """Returns a read-only alias table with `extra` entries layered over the built-in ones."""
    table = dict(REGION_ALIASES)
    for alias, region in (extra or {}).items():
        table[alias.strip().lower()] = region.strip()
    return MappingProxyType(table)


def normalize_region(
    label: Optional[str],
    aliases: Mapping[str, str] = REGION_ALIASES,
    default: str = DEFAULT_REGION,
) -> str:
    """
    Maps a free-form region label (e.g. "EU (Ireland)") to a region code.
    Unknown or empty labels map to `default`; this never raises.
    """
    if not label:
        return default
    return aliases.get(label.strip().lower(), default)
