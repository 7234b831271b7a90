"""Infrastructure Layer: Contains concrete implementations and adapters.

Connects the application to the outside world (the Delivery API, the
environment, the console) by implementing the interfaces defined in the
domain layer.
"""
