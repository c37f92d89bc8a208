"""
Query API

FastAPI service for the intraday chart viewer.
"""
