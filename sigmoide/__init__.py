"""sigmoide

Réseau de neurones multicouche à activation sigmoïde (rétropropagation) et
évaluation par matrice de confusion.

Exécution recommandée: `python -m sigmoide.lanceur`.
"""
