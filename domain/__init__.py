"""Domain layer for the clicker backend.

Business rules for user records (clicks, upgrades, friends), kept free of
HTTP and storage concerns.
"""
