"""Integration tests for the proxy app working as a system.

Coverage:
    - POST /api/chat over ASGITransport with a scripted upstream
    - ChatSession driving the app from input to transcript
"""
