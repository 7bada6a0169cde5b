from .kegg import Compound, Gene, KeggClient, Pathway, ReferenceLibrary

__all__ = ["Compound", "Gene", "KeggClient", "Pathway", "ReferenceLibrary"]
