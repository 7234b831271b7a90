"""Domain events raised around calls to the Delivery API."""
