"""
Server package for the blob writer.

This package contains the loopback HTTP server that streams request bodies
straight to disk:
- Session lifecycle (port, token, background loop)
- Streaming write handling
- Configuration and utilities
"""
