"""Domain Layer: value objects, models, events and interfaces (ports).

Nothing in here knows about the Promoted client library or the console.
"""
