"""
Host Ingestion

Decodes tool-call results delivered by the host application.
"""

from intraday_dataflow.ingestion.host.extract import extract_intraday_payload

__all__ = ["extract_intraday_payload"]
