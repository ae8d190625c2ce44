"""CLI command modules for create-nexu.

Each module exposes one command function registered on the root app.
"""
