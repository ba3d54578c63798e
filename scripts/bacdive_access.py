"""
bacdive_access.py

Thin wrapper around the BacDive API client.

- Credentials come from a two-line info file (email, password) or, failing
  that, from the BACDIVE_EMAIL / BACDIVE_PASSWORD environment variables
- One taxonomy query per species, paced by a fixed sleep
- Failed queries are returned as a QueryResult instead of raised, so a
  batch run can skip the species and carry on
"""

import logging
import os
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

import bacdive
import requests


@dataclass
class QueryResult:
    """Outcome of one species query: the candidate records, or why the query failed."""
    species: str
    records: List[Dict] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def found(cls, species: str, records: List[Dict]) -> "QueryResult":
        return cls(species=species, records=list(records))

    @classmethod
    def failure(cls, species: str, reason: str) -> "QueryResult":
        return cls(species=species, error=reason)

    @property
    def ok(self) -> bool:
        return self.error is None


def read_credentials(info_file: str) -> Tuple[str, str]:
    if info_file and os.path.exists(info_file):
        with open(info_file, "r") as f:
            tokens = f.readlines()
        if len(tokens) < 2:
            raise ValueError(f"{info_file} must hold the BacDive email (line 1) and password (line 2)")
        return tokens[0].strip(), tokens[1].strip()

    email = os.environ.get("BACDIVE_EMAIL")
    pw = os.environ.get("BACDIVE_PASSWORD")
    if not email or not pw:
        raise ValueError(
            f"No credentials: create {info_file} or set BACDIVE_EMAIL and BACDIVE_PASSWORD."
        )
    return email, pw


def start_client(info_file: str, searchtype: Optional[str] = None) -> bacdive.BacdiveClient:
    email, pw = read_credentials(info_file)
    client = bacdive.BacdiveClient(email, pw)
    if searchtype:
        client.setSearchType(searchtype)
    return client


def retrieve_species(client, species: str, sleep: float = 0.1) -> QueryResult:
    """Run a taxonomy search for one species and materialize all hits."""
    try:
        count = client.search(taxonomy=species)
        records = list(client.retrieve()) if count else []
    except (requests.RequestException, KeyError, TypeError, ValueError) as e:
        logging.debug(f"BacDive query for '{species}' raised {type(e).__name__}: {e}")
        return QueryResult.failure(species, f"{type(e).__name__}: {e}")
    finally:
        if sleep:
            time.sleep(sleep)

    records = [r for r in records if isinstance(r, dict)]
    logging.debug(f"BacDive query '{species}' -> {len(records)} records")
    return QueryResult.found(species, records)


def make_query(client, sleep: float = 0.1) -> Callable[[str], QueryResult]:
    def query(species: str) -> QueryResult:
        return retrieve_species(client, species, sleep=sleep)
    return query
