"""
Service layer.

The family services wrap provider calls with the relay's validation,
configuration checks and error mapping.  The store classes own all SQL
against the local mirror tables.
"""
