"""
species_names.py

Species names to query BacDive with, taken from a MetaPhlAn-style
relative abundance table (row names like
``k__Bacteria|p__Firmicutes|...|g__Dorea|s__Dorea_longicatena``) or from a
plain list with one name per line.
"""

import csv
from typing import Iterable, List

SPECIES_PREFIX = "s__"
PLACEHOLDER_TOKENS = ("_CAG_", "_sp_")  # co-abundance groups, unnamed "sp." entries


def _dedup(names: Iterable[str]) -> List[str]:
    seen, out = set(), []
    for n in names:
        if n not in seen:
            seen.add(n)
            out.append(n)
    return out


def species_from_taxonomy(taxonomy: str):
    """'k__...|g__Dorea|s__Dorea_longicatena' -> 'Dorea_longicatena' (None if no species level)."""
    parts = taxonomy.split("|")
    if len(parts) < 7 or SPECIES_PREFIX not in parts[6]:
        return None
    return parts[6].replace(SPECIES_PREFIX, "").strip()


def parse_species_names(taxonomy_strings: Iterable[str]) -> List[str]:
    """Clean species-level taxonomy strings into BacDive query names ('Dorea longicatena')."""
    raw = []
    for t in taxonomy_strings:
        if SPECIES_PREFIX not in t:
            continue
        sp = species_from_taxonomy(t)
        if sp:
            raw.append(sp)

    names = [n for n in _dedup(raw) if not any(tok in n for tok in PLACEHOLDER_TOKENS)]
    return _dedup(n.replace("_", " ") for n in names)


def read_taxonomy_table(path: str, delimiter: str = "\t") -> List[str]:
    """First column of a relative abundance table; '#' comment/header lines are skipped."""
    out = []
    with open(path, "r", newline="") as f:
        for row in csv.reader(f, delimiter=delimiter):
            if not row or not row[0].strip() or row[0].startswith("#"):
                continue
            out.append(row[0].strip())
    return out


def read_species_list(path: str) -> List[str]:
    with open(path, "r") as f:
        lines = [ln.strip() for ln in f]
    return _dedup(ln for ln in lines if ln and not ln.startswith("#"))
