"""Worker Tracker package.

This package is organized by feature modules (workers, transactions, summaries,
month_close, ...) with a thin Flask controller layer and service/repository layers.
"""
