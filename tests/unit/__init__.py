"""Unit tests for individual components in isolation.

Coverage:
    - client/: SSE parsing and chat session state
    - upstream/: Configuration, credentials, and the byte relay
"""
