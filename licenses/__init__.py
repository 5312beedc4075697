"""
Licenses module - License record management.

This module handles:
- License key generation
- License entity and domain logic
- License issuance and the admin listing
- License stores (Django ORM and JSON file)
"""
