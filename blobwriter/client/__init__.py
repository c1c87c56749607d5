"""
Client package for the blob writer.

This package contains all caller-side functionality including:
- Streaming writes to the local server
- Chunked append fallback
- Write orchestration
- Configuration and utilities
"""
