"""
Ingestion Layer

Entry points for data arriving from outside the engine.
"""
