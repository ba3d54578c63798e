"""
trait_records.py

Normalize BacDive strain records into trait values.

BacDive entries are nested dicts whose shape varies from strain to strain:
a section such as Morphology -> cell morphology can hold a single flat block
or a list of blocks describing the same trait. Everything here is a pure
function over the decoded JSON; the records are never modified.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence

NOT_REPORTED = "not reported"

TAXONOMY_SECTION = "Name and taxonomic classification"
MORPHOLOGY_PATH = ("Morphology", "cell morphology")
OXYGEN_PATH = ("Physiology and metabolism", "oxygen tolerance")
METABOLITE_PATH = ("Physiology and metabolism", "metabolite utilization")
ENZYME_PATH = ("Physiology and metabolism", "enzymes")


class _Absent:
    """Marker for a path or field that is not present in a record."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "ABSENT"

    def __bool__(self):
        return False


ABSENT = _Absent()


# -------------------------
# Navigation & shape
# -------------------------

def navigate(record: Any, path: Sequence[str]) -> Any:
    """Safe nested lookup: navigate(x, ['A', 'B']) -> x['A']['B'] or ABSENT.

    A JSON null counts as missing.
    """
    cur = record
    for key in path:
        if not isinstance(cur, dict) or key not in cur:
            return ABSENT
        cur = cur[key]
        if cur is None:
            return ABSENT
    return cur


def as_entry_sequence(block: Any, field: str) -> List[Dict]:
    """
    Return a uniform list of entry dicts for a block that BacDive delivers
    either as one flat dict or as a list of dicts.

    A dict counts as a single entry only if it carries ``field`` directly.
    Lists are returned unchanged when every element is a dict. Any other
    shape (including a list of scalars) is treated as absent.
    """
    if block is ABSENT:
        return []
    if isinstance(block, dict):
        return [block] if field in block else []
    if isinstance(block, list) and all(isinstance(e, dict) for e in block):
        return block
    return []


def _texts(value) -> List[str]:
    """Trimmed text of a scalar, or of each scalar in a list."""
    if value is None:
        return []
    if isinstance(value, list):
        out = []
        for item in value:
            out.extend(_texts(item))
        return out
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return [str(value).strip()]
    return []


def _unique(values: Iterable[str]) -> List[str]:
    # dedup, keep order, drop blanks
    seen, out = set(), []
    for v in values:
        if v and v not in seen:
            seen.add(v)
            out.append(v)
    return out


def _join_or_not_reported(values: Iterable[str]) -> str:
    values = _unique(values)
    return "; ".join(values) if values else NOT_REPORTED


def _field_values(record: dict, path: Sequence[str], field: str) -> List[str]:
    values = []
    for entry in as_entry_sequence(navigate(record, path), field):
        if field in entry:
            values.extend(_texts(entry[field]))
    return values


# -------------------------
# Trait extractors
# -------------------------

def extract_morphology_trait(record: dict, trait_name: str) -> str:
    """Morphology -> cell morphology -> ``trait_name`` (e.g. "gram stain", "cell shape", "motility")."""
    return _join_or_not_reported(_field_values(record, MORPHOLOGY_PATH, trait_name))


def extract_oxygen_tolerance(record: dict) -> str:
    """Lower-cased oxygen tolerance classes such as "aerobe" or "obligate anaerobe"."""
    values = _field_values(record, OXYGEN_PATH, "oxygen tolerance")
    return _join_or_not_reported(v.lower() for v in values)


def _positive_names(record: dict, path: Sequence[str], activity_field: str, name_field: str) -> List[str]:
    names = []
    for entry in as_entry_sequence(navigate(record, path), activity_field):
        activity = entry.get(activity_field)
        if activity != "+":
            continue
        if name_field not in entry:
            continue
        names.extend(_texts(entry[name_field]))
    return _unique(names)


def extract_positive_metabolites(record: dict) -> List[str]:
    """Metabolites recorded with utilization activity "+"; empty list if none."""
    return _positive_names(record, METABOLITE_PATH, "utilization activity", "metabolite")


def extract_positive_enzymes(record: dict) -> List[str]:
    """Enzymes recorded with activity "+"; the enzyme name is stored under "value"."""
    return _positive_names(record, ENZYME_PATH, "activity", "value")


def extract_strain_designation(record: dict) -> str:
    strain = navigate(record, (TAXONOMY_SECTION, "strain designation"))
    if strain is ABSENT:
        return NOT_REPORTED
    return _join_or_not_reported(_texts(strain))


# -------------------------
# Record selection
# -------------------------

def is_type_strain(record: dict) -> bool:
    val = navigate(record, (TAXONOMY_SECTION, "type strain"))
    return isinstance(val, str) and val.lower() == "yes"


def get_type_strain_index(records: Sequence[dict]) -> List[int]:
    """Positions of the type strain records, in input order."""
    return [i for i, rec in enumerate(records) if is_type_strain(rec)]


def select_preferred(records: Sequence[dict]) -> Optional[dict]:
    """
    Pick the most authoritative record for a species: the first type strain
    if there is one, otherwise the first record. None for an empty list.
    """
    if not records:
        return None
    idx = get_type_strain_index(records)
    return records[idx[0]] if idx else records[0]
