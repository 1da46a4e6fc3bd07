"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Transcript display with live streaming updates
    - Typing indicator while a reply is in flight
    - New-conversation control

Contains no protocol logic. Delegates streaming and state to src.client.
"""
