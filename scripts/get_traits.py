#!/usr/bin/env python3
"""
get_traits.py

Pull phenotypic traits (morphology, oxygen tolerance, positive metabolite
utilization, positive enzyme activity) from the BacDive API for a list of
species and write them as a long-format table.

- Species come from a MetaPhlAn-style relative abundance table, a plain
  list file, or the command line
- One BacDive taxonomy query per species; the type strain record is
  preferred when several strains match
- Output columns: species, set_type, set_id, value (CSV, optionally SQLite)
- Logs the share of species with a reported Gram stain at the end

Usage:
    python get_traits.py \
        --info-file .bacdive_info \
        --abundance-table HMP_2012_relative_abundance.tsv \
        --out hmp_bacdive_traits.csv \
        --db bacdive_traits.sqlite \
        --log-level INFO
"""

import argparse
import contextlib
import csv
import logging
import os
import sqlite3
from typing import List, Sequence

from bacdive_access import make_query, start_client
from species_names import parse_species_names, read_species_list, read_taxonomy_table
from trait_rows import COLUMNS, TraitRow, extract_traits


# -------------------------
# Export
# -------------------------

def write_csv(path: str, rows: Sequence[TraitRow]) -> int:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(COLUMNS)
        writer.writerows(rows)
    logging.info(f"Wrote {len(rows)} trait rows → {path}")
    return len(rows)


def write_sqlite(db_path: str, rows: Sequence[TraitRow]) -> int:
    """
    Creates/appends to a SQLite DB with:
      - trait_long(species, set_type, set_id, value)
    """
    with contextlib.closing(sqlite3.connect(db_path)) as conn:
        cur = conn.cursor()

        cur.executescript("""
        CREATE TABLE IF NOT EXISTS trait_long (
            species TEXT NOT NULL,
            set_type TEXT NOT NULL,
            set_id TEXT NOT NULL,
            value TEXT
        );

        CREATE INDEX IF NOT EXISTS idx_trait_long_species ON trait_long(species);
        CREATE INDEX IF NOT EXISTS idx_trait_long_set ON trait_long(set_type, set_id);
        """)

        if not rows:
            logging.warning("No trait rows to write. Database unchanged.")
            return 0

        cur.executemany("""
        INSERT INTO trait_long (species, set_type, set_id, value)
        VALUES (:species, :set_type, :set_id, :value)
        """, [r._asdict() for r in rows])
        conn.commit()

    logging.info(f"Wrote {len(rows)} trait rows to {db_path}")
    return len(rows)


# -------------------------
# CLI
# -------------------------

def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Extract long-format phenotypic traits from the BacDive API")
    ap.add_argument("--info-file", type=str, default=".bacdive_info",
                    help="File with BacDive email (line1) and password (line2); "
                         "falls back to BACDIVE_EMAIL / BACDIVE_PASSWORD")

    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--abundance-table", type=str,
                     help="Relative abundance table whose first column holds k__|p__|...|s__ taxonomy strings")
    src.add_argument("--species-file", type=str, help="Plain text file, one species name per line")
    src.add_argument("--species", type=str, nargs="+", help="Species names to query")
    ap.add_argument("--delimiter", type=str, default="\t", help="Delimiter of --abundance-table")

    ap.add_argument("--searchtype", choices=["exact", "contains"], default="exact",
                    help="BacDive search type: exact or contains")
    ap.add_argument("--sleep", type=float, default=0.1, help="Seconds to wait after each BacDive query")

    ap.add_argument("--out", type=str, default="bacdive_traits_long.csv", help="CSV output path")
    ap.add_argument("--db", type=str, default=None, help="Optional SQLite DB to append the rows to")

    ap.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING, ERROR)")
    ap.add_argument("--dry-run", action="store_true", help="If set, don't write any output files.")
    return ap.parse_args(argv)


def load_species(args) -> List[str]:
    if args.abundance_table:
        names = parse_species_names(read_taxonomy_table(args.abundance_table, delimiter=args.delimiter))
    elif args.species_file:
        names = read_species_list(args.species_file)
    else:
        names = list(dict.fromkeys(s.strip() for s in args.species if s.strip()))
    logging.info(f"Loaded {len(names)} species names")
    return names


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO),
                        format="%(levelname)s: %(message)s")

    species = load_species(args)
    if not species:
        raise SystemExit("No species names to query; check the input source.")

    client = start_client(args.info_file, searchtype=args.searchtype)
    table = extract_traits(species, make_query(client, sleep=args.sleep))

    if table.skipped:
        logging.info(f"Skipped {len(table.skipped)} species without usable BacDive records")
    logging.info(f"Found result for {table.coverage()}")

    if not table.rows:
        logging.warning("No trait rows extracted; output will hold the header only.")

    if not args.dry_run:
        write_csv(args.out, table.rows)
        if args.db:
            write_sqlite(args.db, table.rows)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
