"""
Catalog package.

Responsibilities:
- Define the raw ingredient, dish and economic zone records.
- Parse the static JSON catalogs into validated models.
- Keep one loaded catalog (and its ingredient index) per process.
"""
