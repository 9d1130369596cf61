"""
Routes de l'application web.

- orders : /api/v1/orders (création, lecture, listes, statut)
- health : /health
"""
