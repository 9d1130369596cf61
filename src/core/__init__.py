"""
Couche domaine (core).

Contient les entités métier, ports (interfaces abstraites), objets valeur
et règles de transition de statut.
Cette couche n'a AUCUNE dépendance vers l'infrastructure (adapters, frameworks, BDD).

Sous-packages :
- entities/ : Agrégat Order et ses lignes OrderItem
- ports/ : Interfaces abstraites (catalogue, repository)
- value_objects/ : Objets valeur immutables (ProductSnapshot, Page, PageRequest)

Modules :
- exceptions : Taxonomie des erreurs métier
- status_guard : Table des transitions de statut autorisées
"""
