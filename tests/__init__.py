"""Test package for streamchat.

Structure:
    - unit/: Decoder, controller, session store, orchestrator and config tests
    - integration/: Chat endpoint and orchestrator over the real FastAPI app
    - helpers.py: Scripted transports and a fake agent backend

Leverages pytest with pytest-check for soft assertions.
"""
