"""
Query Layer

Read access and viewer controls over the chart state.
"""
