"""Domain layer for talikhata application.

Services are imported from their modules (e.g. ``talikhata.domain.customer``)
so that the database layer can import entities without pulling them in.
"""
