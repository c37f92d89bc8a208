"""
Dataflow Layer

Data I/O and pure transforms for the intraday chart. Contains:
- adapters: NATS client and the data-request capability
- ingestion: host tool-result decoding
- normalization: raw records to sorted ticks
- candle_aggregation: tick to candle aggregation
- query: HTTP API over the chart state
"""
