# Routes package init
"""
Journey Backend — API Routes Package
=====================================

Route Inventory:
    - trips.py:         POST /trips                          (create trip)
                        GET|PUT /trips/{id}, activities, links,
                        invites, participants, confirm       (501 stubs)
    - participants.py:  PATCH /participants/{id}/confirm     (confirm participant)
    - health.py:        GET  /health                         (service health check)

Design Principle:
    Routes are THIN: decode the request, call one service method, pick the
    status code. Errors travel as exceptions to the handlers in main.py.
"""
