"""
Shared fixtures: an in-memory reference library and a gateway app whose
datastore client talks to an httpx.MockTransport instead of the network.
"""
from typing import Callable, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from kvik_gateway.clients.kegg import Compound, Gene, Pathway
from kvik_gateway.config import Settings
from kvik_gateway.errors import ReferenceLookupFailed
from kvik_gateway.main import create_app

DATASTORE_URL = "http://datastore.test/"


class FakeLibrary:
    """ReferenceLibrary backed by dicts; records every lookup."""

    def __init__(
        self,
        pathways: Optional[Dict[str, List[str]]] = None,
        genes: Optional[Dict[str, List[str]]] = None,
        names: Optional[Dict[str, str]] = None,
    ):
        self._pathways = pathways or {}
        self._genes = genes or {}
        self._names = names or {}
        self.calls: List[str] = []

    def get_pathway(self, pathway_id: str) -> Pathway:
        self.calls.append(f"pathway:{pathway_id}")
        if pathway_id not in self._pathways:
            raise ReferenceLookupFailed(pathway_id)
        return Pathway(
            id=pathway_id,
            name=f"{pathway_id} name - Homo sapiens (human)",
            genes=list(self._pathways[pathway_id]),
        )

    def get_gene(self, gene_id: str) -> Gene:
        self.calls.append(f"gene:{gene_id}")
        if gene_id not in self._genes:
            raise ReferenceLookupFailed(gene_id)
        return Gene(id=f"hsa:{gene_id}", names=[f"G{gene_id}"], pathways=list(self._genes[gene_id]))

    def pathways(self, gene: Gene) -> List[str]:
        return list(gene.pathways)

    def get_compound(self, compound_id: str) -> Compound:
        self.calls.append(f"compound:{compound_id}")
        return Compound(id=compound_id, names=["D-Glucose"], formula="C6H12O6")

    def readable_pathway_name(self, pathway_id: str) -> str:
        return self.get_pathway(pathway_id).name.split(" - ")[0]

    def gene_id_from_name(self, name: str) -> Optional[str]:
        return self._names.get(name.upper())


@pytest.fixture
def library() -> FakeLibrary:
    return FakeLibrary(
        pathways={
            "hsa00001": ["hsa:1", "hsa:2", "hsa:3"],
            "hsa00002": ["hsa:2", "hsa:3", "hsa:4"],
            "hsa00003": ["hsa:9"],
        },
        genes={
            "1": ["hsa04110", "hsa04115"],
            "2": ["hsa04115"],
        },
        names={"TP53": "hsa:7157"},
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(datastore_url=DATASTORE_URL, workdir=str(tmp_path))


@pytest.fixture
def make_client(settings, library) -> Callable[..., TestClient]:
    """Build a TestClient whose datastore is served by ``handler``."""
    clients: List[TestClient] = []

    def _make(handler: Optional[Callable[[httpx.Request], httpx.Response]] = None, **overrides) -> TestClient:
        handler = handler or (lambda request: httpx.Response(200, content=b""))
        app = create_app(
            overrides.get("settings", settings),
            library=overrides.get("library", library),
            transport=httpx.MockTransport(handler),
        )
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for c in clients:
        c.__exit__(None, None, None)
