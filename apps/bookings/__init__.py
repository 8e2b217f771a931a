"""Bookings app package.

A booking reserves one service for a confirmed party once the provider
has approved the quote. Creation runs inside a transaction and refuses
duplicates for the same (event, service) pair.
"""
