"""
OrderCore - Service d'orchestration du cycle de vie des commandes.

Ce package crée les commandes en validant chaque ligne auprès du catalogue
produit, fige les prix au moment de la création, calcule le total et gouverne
ensuite la commande via une machine à états de statut.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entités, ports, objets valeur, règles de transition)
- services/ : Couche application (orchestration des commandes)
- adapters/ : Clients externes (catalogue produit via HTTP)
- infrastructure/ : Persistance SQLModel
- web/ : Interface HTTP (FastAPI)
"""
