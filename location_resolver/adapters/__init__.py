"""Adapters layer - Concrete implementations of ports.

This module contains implementations of the port interfaces,
connecting the resolver to external systems like:
- Facility catalog storage (in-memory snapshot, CSV files)
- Caching systems (in-memory, null)
- Offline reference files (UN/LOCODE, airports)
"""
