# Services package init
"""
Uphaar Backend: Services Layer
==============================

What:  Business rules between the route handlers and the Record Store.
How:   Services take validated input and an Identity, and raise the exceptions
       in uphaar.exceptions for expected failures.

Service Inventory:
    - ItemService: listing, ownership-checked edits, claim/complete/given transitions
    - UserService: profiles keyed by uid, per-user item statistics
"""
