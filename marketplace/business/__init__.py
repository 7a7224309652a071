"""
Domain layer for the marketplace order service.
Contains business logic, factories and policies separated from data
persistence concerns.
"""
