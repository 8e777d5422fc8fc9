# Routes package init
"""
MovieLibrary Backend: API Routes Package
=========================================

Route Inventory:
    - movies.py:        /api/movies (list, search, get, add, update, delete)
    - rentals.py:       /api/rentals (list, get, create, return)
    - health.py:        GET /health
    - dependencies.py:  per-request session, repositories and services

Routes stay thin: parse the request into a command, call one service
method, return its result. Business rules live in the services.
"""
