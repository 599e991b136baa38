# Adapters package init
"""
Uphaar Backend: Host Bindings
=============================

Two interchangeable bindings of the same Dispatcher:

    - server.py:      create_app(), FastAPI + uvicorn, one catch-all route
    - serverless.py:  ServerlessHandler, API Gateway proxy events

Both match with the core Route Table, apply the same CorsPolicy, and set
the same request id; they differ only in how a request arrives and how the
response leaves.
"""
