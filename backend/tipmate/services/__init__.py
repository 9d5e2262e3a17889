# Services package init
"""
TipMate Backend — Services Layer
==================================

Business logic between the routes (HTTP) and the database connector.

Service Inventory:
    - TipCalculationService: validate/insert records, list the recent ones
"""
