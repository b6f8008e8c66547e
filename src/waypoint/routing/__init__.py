"""Routing — ordered route tables, nested routers, and the dispatch loop.

Routes are registered during setup and tried in registration order for
every request.
"""
