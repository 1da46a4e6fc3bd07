"""Test package for Wallet Chat.

Structure:
    - unit/: Parser, client session, config, and relay in isolation
    - integration/: The FastAPI app over ASGITransport, end to end with the client

The upstream API is always faked with httpx.MockTransport.
Leverages pytest with pytest-check for soft assertions.
"""
