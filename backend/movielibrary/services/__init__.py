# Services package init
"""
MovieLibrary Backend: Services Layer
=====================================

What:  Command handlers and business rules, between routes (HTTP) and the
       versioned repositories (persistence).
How:   Services receive repositories in their constructor, validate commands,
       perform one repository operation and return result values or raise
       typed exceptions from `movielibrary.exceptions`.

Service Inventory:
    - validation:        field rules for every command (aggregated errors)
    - RentalLifecycle:   Active → Returned transition and billing
    - MovieService:      add / update / delete / get / list / search movies
    - RentalService:     create / return / get / list rentals
"""
