"""
Ingestion — turning documents into indexed records.

A document is split into overlapping fixed-size windows, each window is
embedded, and the resulting records are added to the vector store
collection.  Failures are tracked per chunk so one bad chunk never
aborts its siblings.
"""
