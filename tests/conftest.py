"""
Shared fixtures: BacDive-shaped records and a fake API client.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), 'scripts'))


def make_record(type_strain=None, strain=None, morphology=None, physiology=None):
    rec = {"Name and taxonomic classification": {"species": "Escherichia coli"}}
    if type_strain is not None:
        rec["Name and taxonomic classification"]["type strain"] = type_strain
    if strain is not None:
        rec["Name and taxonomic classification"]["strain designation"] = strain
    if morphology is not None:
        rec["Morphology"] = {"cell morphology": morphology}
    if physiology is not None:
        rec["Physiology and metabolism"] = physiology
    return rec


class FakeBacdiveClient:
    """Stands in for bacdive.BacdiveClient: search() counts, retrieve() yields the hits."""

    def __init__(self, responses):
        self.responses = responses
        self.searches = []
        self.searchtype = None
        self._current = []

    def setSearchType(self, searchtype):
        self.searchtype = searchtype

    def search(self, **params):
        name = params["taxonomy"]
        self.searches.append(name)
        hits = self.responses.get(name, [])
        if isinstance(hits, Exception):
            raise hits
        self._current = hits
        return len(hits)

    def retrieve(self):
        for rec in self._current:
            yield rec


@pytest.fixture
def ecoli_record():
    return make_record(
        type_strain="yes",
        strain="U5/41",
        morphology={"gram stain": "negative", "cell shape": "rod-shaped", "motility": "yes"},
        physiology={
            "oxygen tolerance": {"oxygen tolerance": "Facultative anaerobe"},
            "metabolite utilization": [
                {"metabolite": "D-glucose", "utilization activity": "+", "kind of utilization tested": "fermentation"},
                {"metabolite": "citrate", "utilization activity": "-"},
                {"metabolite": " lactose ", "utilization activity": "+"},
            ],
            "enzymes": [
                {"value": "catalase", "activity": "+", "ec": "1.11.1.6"},
                {"value": "cytochrome oxidase", "activity": "-", "ec": "1.9.3.1"},
                {"value": "beta-galactosidase", "activity": "+", "ec": "3.2.1.23"},
            ],
        },
    )


@pytest.fixture
def fake_client_factory():
    return FakeBacdiveClient
