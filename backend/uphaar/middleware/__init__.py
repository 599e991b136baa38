# Middleware package init
"""
Uphaar Backend: Middleware Package
==================================

What:  Cross-cutting concerns of the long-running server binding.

Middleware Chain (outermost first):
    Request → [Request ID] → [Access Log] → [CORS] → catch-all → Dispatcher

    1. Request ID: sets request_id_var so every later log line can carry it
    2. Access Log: one line per request, with the status CORS or the
       Dispatcher produced
    3. CORS: answers OPTIONS preflight with 204 and decorates every other
       response with the shared CorsPolicy headers

The serverless binding applies the same request id and CORS steps itself
(adapters/serverless.py).
"""
