# Routes package init
"""
TipMate Backend — API Routes Package
======================================

Route Inventory:
    - tip_calculations.py:  GET  /api/tip-calculations  (10 most recent)
                            POST /api/tip-calculations  (create)
    - health.py:            GET  /health                (service health check)

Routes stay thin: they read the request, call the service and pick the
status code. Business rules live in services/.
"""
