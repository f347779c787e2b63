# src/extraction/__init__.py — v1
