"""Bulk import of the MovieLens movies/ratings CSV files into Neo4j."""

__version__ = "0.1.0"
