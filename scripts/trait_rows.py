"""
trait_rows.py

Turn per-species trait values into long-format rows and fold a whole
species list into one table.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, NamedTuple, Optional, Union

from bacdive_access import QueryResult
from trait_records import (
    NOT_REPORTED,
    extract_morphology_trait,
    extract_oxygen_tolerance,
    extract_positive_enzymes,
    extract_positive_metabolites,
    extract_strain_designation,
    get_type_strain_index,
    select_preferred,
)

COLUMNS = ("species", "set_type", "set_id", "value")
PRESENT = "+"


class TraitRow(NamedTuple):
    species: str
    set_type: str
    set_id: str
    value: str


def build_rows(species: str, set_type: str, set_id: str, values: Union[str, Iterable[str]]) -> List[TraitRow]:
    """
    A string is a single-valued trait and always yields one row, even when it
    is "not reported". A collection yields one "+" row per distinct value and
    nothing at all when empty.
    """
    if isinstance(values, str):
        return [TraitRow(species, set_type, set_id, values)]

    rows, seen = [], set()
    for v in values:
        if v in seen:
            continue
        seen.add(v)
        rows.append(TraitRow(species, set_type, v, PRESENT))
    return rows


@dataclass
class SpeciesOutcome:
    species: str
    rows: List[TraitRow] = field(default_factory=list)
    gram_stain_found: bool = False
    skipped_reason: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.skipped_reason is not None


@dataclass
class TraitTable:
    rows: List[TraitRow] = field(default_factory=list)
    total: int = 0
    gram_stain_found: int = 0
    skipped: List[str] = field(default_factory=list)

    def add(self, outcome: SpeciesOutcome) -> "TraitTable":
        self.total += 1
        self.rows.extend(outcome.rows)
        if outcome.gram_stain_found:
            self.gram_stain_found += 1
        if outcome.skipped:
            self.skipped.append(outcome.species)
        return self

    def coverage(self) -> str:
        return coverage(self.gram_stain_found, self.total)


def coverage(count: int, total: int) -> str:
    """Percentage string like '42.86%' (trailing zeros dropped, as '50%')."""
    if not total:
        return "0%"
    return f"{round(count / total * 100, 2):g}%"


def _run_query(query: Callable, species: str) -> QueryResult:
    try:
        result = query(species)
    except Exception as e:
        return QueryResult.failure(species, f"{type(e).__name__}: {e}")
    if isinstance(result, QueryResult):
        return result
    if result is None:
        return QueryResult.found(species, [])
    if not isinstance(result, (list, tuple)):
        return QueryResult.failure(species, f"unexpected query reply of type {type(result).__name__}")
    return QueryResult.found(species, [r for r in result if isinstance(r, dict)])


def record_rows(species: str, record: dict) -> SpeciesOutcome:
    """Extract every trait from the preferred record of one species."""
    gram_stain = extract_morphology_trait(record, "gram stain")
    cell_shape = extract_morphology_trait(record, "cell shape")
    motility = extract_morphology_trait(record, "motility")
    metabolites = extract_positive_metabolites(record)
    enzymes = extract_positive_enzymes(record)
    oxygen_tolerance = extract_oxygen_tolerance(record)

    logging.debug(f"  Gram stain:        {gram_stain}")
    logging.debug(f"  Cell shape:        {cell_shape}")
    logging.debug(f"  Motility:          {motility}")
    logging.debug(f"  Oxygen tolerance:  {oxygen_tolerance}")
    logging.debug(f"  Positive metabolites: {', '.join(metabolites)}")
    logging.debug(f"  Positive enzymes:     {', '.join(enzymes)}")

    rows = []
    rows += build_rows(species, "metabolite", "metabolite", metabolites)
    rows += build_rows(species, "enzyme", "enzyme", enzymes)
    rows += build_rows(species, "oxygen", "oxygen_tolerance", oxygen_tolerance)
    rows += build_rows(species, "gram_stain", "gram_stain", gram_stain)
    rows += build_rows(species, "cell_shape", "cell_shape", cell_shape)
    rows += build_rows(species, "motility", "motility", motility)

    return SpeciesOutcome(species, rows=rows, gram_stain_found=gram_stain != NOT_REPORTED)


def process_species(species: str, query: Callable) -> SpeciesOutcome:
    logging.info(f"Processing: {species}")

    result = _run_query(query, species)
    if not result.ok:
        logging.warning(f"Query failed for {species}: {result.error}")
        return SpeciesOutcome(species, skipped_reason=result.error)

    preferred = select_preferred(result.records)
    if preferred is None:
        logging.info(f"No records found for {species}")
        return SpeciesOutcome(species, skipped_reason="no records")

    idx = get_type_strain_index(result.records)
    logging.debug(f"  Type strain found? {'yes' if idx else 'no'} ({len(result.records)} candidates)")
    logging.debug(f"  Selected strain:   {extract_strain_designation(preferred)}")
    return record_rows(species, preferred)


def extract_traits(species_names: Iterable[str], query: Callable) -> TraitTable:
    """Process species one at a time, in input order, and accumulate their rows."""
    table = TraitTable()
    for sp in species_names:
        table.add(process_species(sp, query))
    return table
