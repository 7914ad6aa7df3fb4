"""Routing — ordered route table with byte-prefix matching.

Routes are registered during setup and frozen into an immutable
table when the app starts serving.
"""
