"""
Uphaar Backend: Application Package
===================================

What: API for listing, browsing and claiming free or low-cost items.
How:  The same handler functions run under two host bindings: a FastAPI server
      process and a single-entry serverless function.

Architecture Note:

    ┌─────────────────────────────────────┐
    │   Host Adapters (server/serverless) │  ← native request ⇄ HttpRequest
    ├─────────────────────────────────────┤
    │   Dispatcher + Route Table + Auth   │  ← match, authenticate, invoke
    ├─────────────────────────────────────┤
    │   Route handlers (routes/)          │  ← HTTP shapes, {error} bodies
    ├─────────────────────────────────────┤
    │   Services (business rules)         │  ← claim/complete/ownership
    ├─────────────────────────────────────┤
    │   Record Store / Token Verifier     │  ← external collaborators
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
