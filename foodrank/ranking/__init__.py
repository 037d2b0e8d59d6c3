"""
Dish ranking engine.

Responsibilities:
- Index the ingredient catalog by normalized name.
- Price each dish for an economic zone and analyze its raw metrics.
- Normalize metrics across the dataset into comparable 0-10 scores.
- Materialize the six (cooking mode x price unit) variants in one pass.
- Score and sort dishes against a signed priority vector.

Every function here is pure: inputs are never mutated and results are
freshly allocated. ``cache.VariantCache`` is the one stateful piece, and
callers opt into it explicitly.
"""
