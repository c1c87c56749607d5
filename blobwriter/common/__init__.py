"""
Definitions shared by the caller side and the local server.

Handles:
- Constants and error types
- Wire format helpers
- Blob byte sources
- Path resolution
"""
