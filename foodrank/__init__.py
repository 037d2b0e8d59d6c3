"""
Dish ranking service.

Responsibilities:
- Load the ingredient and dish catalogs.
- Rank dishes against a user's signed priorities for a selected pricing zone.
- Expose the ranking engine over a small stateless HTTP API.
"""
