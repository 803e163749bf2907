"""Game domain services: matchmaking and the per-match engine.

This package holds the concurrency core of the server. Nothing in here
imports Flask or Socket.IO; the transport is handed in as plain callables
so matches can be exercised without a running server.
"""
