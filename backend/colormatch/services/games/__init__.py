"""Game domain services: deck, rules engine and per-player views.

Pure game mechanics, imported by the Socket.IO handlers and HTTP routes,
keeping transport concerns separate from the rules.
"""
