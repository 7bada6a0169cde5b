"""Kvik pathway gateway.

REST front for a biological-pathway datastore and the KEGG reference library:

- proxy:     verbatim GET/POST forwarding to the datastore
- aggregate: common genes across pathways, pathway frequency across genes
- routers:   the ordered routing table and its handlers

The ASGI app lives in ``kvik_gateway.main`` (``create_app`` / ``app``).
"""

__version__ = "1.0.0"
