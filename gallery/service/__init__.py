"""
Service layer for remote media import.

This module contains the import pipeline stages (validate, acquire, classify,
convert, persist) independent of the HTTP views. These functions are used by:
- The web API (gallery/views.py via gallery/operations.py)
- The CLI management command (management/commands/import_urls.py)
"""
