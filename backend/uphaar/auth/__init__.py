# Auth package init
"""
Uphaar Backend: Authentication
==============================

    - identity.py:  Identity (decoded caller)
    - verifier.py:  TokenVerifier collaborator + Firebase ID token implementation
    - hook.py:      Authentication Hook run by the Dispatcher for requires_auth routes
"""
