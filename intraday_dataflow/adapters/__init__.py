"""
NATS Adapters

Provides the NATS client wrapper and the data-request capability built on it.
"""

from intraday_dataflow.adapters.nats_client import NatsClient, NatsConfig, Topics
from intraday_dataflow.adapters.data_requester import DataRequester, NatsDataRequester

__all__ = ["NatsClient", "NatsConfig", "Topics", "DataRequester", "NatsDataRequester"]
