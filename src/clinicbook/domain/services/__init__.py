"""
Domain services: slot catalog, shift windows, capacity, availability,
duplicate detection and the cleanup sweep plan.
"""
