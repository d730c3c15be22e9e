"""Checkout and webhook collaborator."""
