"""
Interface HTTP (FastAPI) du service de commandes.
"""
