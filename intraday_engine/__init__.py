"""
Intraday Chart Engine

Timeframe selection, legend lookup, refresh lifecycle and the runtime
that wires them to NATS.
"""
