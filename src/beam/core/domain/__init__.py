"""BEAM domain: feed/entry/author models and the error taxonomy.

Nothing here knows about HTTP, files or the CLI.
"""
