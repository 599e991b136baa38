# Routes package init
"""
Uphaar Backend: Route Handlers
==============================

What:  The handler functions held by the Route Table.
How:   Every handler takes an HttpRequest and returns an HttpResponse; none of
       them knows which host binding is running it.

Route Inventory (declaration order, see registry.py):
    - health.py:  GET  /health
    - auth.py:    POST /auth/verify, GET /auth/me
    - items.py:   GET  /items, /items/user, /items/user/:userId, /items/:id
                  POST /items, PUT/DELETE /items/:id
                  POST /items/:id/claim, /items/:id/complete, /items/:id/given
    - users.py:   GET/POST/PUT /users/profile, GET /users/stats,
                  GET /users/stats/:uid, GET /users/:uid

Design Principle:
    Handlers are THIN: pull params/body/identity out of the request, call a
    service, shape the response. Business rules live in services/.
"""
