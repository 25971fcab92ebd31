"""
Export found keys and match reports.

Files written:
- ``<prefix>.key``: the private key as 0x-prefixed hex (importable by any
  Ethereum wallet)
- ``<prefix>.txt``: human-readable report with address, matched problem
  and rarity
"""

import os
from dataclasses import dataclass

from evanity.core import checksum_address
from evanity.display import display_difficulty
from evanity.matcher import MatchInfo
from evanity.problems import Problem


@dataclass
class ExportedKey:
    """All information about an exported key."""
    private_key_hex: str
    address: str
    checksum_address: str
    problem: str
    summary: str
    rarity: int


def prepare_export(private_key: bytes, address: str, problem: Problem, info: MatchInfo) -> ExportedKey:
    return ExportedKey(
        private_key_hex="0x" + private_key.hex(),
        address=address.lower(),
        checksum_address=checksum_address(address),
        problem=problem.describe(),
        summary=info.summary,
        rarity=info.rarity,
    )


def _write_private(path: str, data: str) -> str:
    abs_path = os.path.abspath(path)
    os.makedirs(os.path.dirname(abs_path) or ".", exist_ok=True)
    with open(abs_path, "w") as f:
        f.write(data)
    try:
        os.chmod(abs_path, 0o600)
    except OSError:
        pass  # Windows: chmod not fully supported
    return abs_path


def save_key_file(export: ExportedKey, path: str) -> str:
    """Save the private key as a single hex line.

    Returns the absolute path of the saved file.
    """
    return _write_private(path, export.private_key_hex + "\n")


def save_report(export: ExportedKey, path: str) -> str:
    """Save match info as a human-readable text file.

    Returns the absolute path of the saved file.
    """
    lines = [
        "# evanity Generated Key",
        f"# Address:  {export.checksum_address}",
        f"# Problem:  {export.problem}",
        f"# Match:    {export.summary}",
        f"# Rarity:   {export.rarity:,} ({display_difficulty(export.rarity)})",
        "#",
        "# Private Key (KEEP SECRET):",
        f"#   {export.private_key_hex}",
        "#",
    ]
    return _write_private(path, "\n".join(lines) + "\n")
