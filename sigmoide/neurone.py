"""neurone

Rôle
	Un neurone sigmoïde isolé: poids des entrées, biais, poids du biais,
	entrées courantes, delta et sortie en cache.

Cycle d'un neurone (pendant une itération)
	1. `set_entrees(X)` : reçoit les entrées (sorties de la couche précédente)
	2. `calcule_sortie()` : i = X·W + biais * poids_biais, puis Fi = sigmoïde(i)
	3. `set_delta(delta)` : signal d'erreur fixé par la rétropropagation
	4. `ajuste_poids_entree(k, c)` / `ajuste_poids_biais(c)` : w <- w - c

Convention de mise à jour
	Les corrections sont *soustraites*: le correcteur reçu contient déjà
	eta, le delta et le signe.

Le neurone ne fait aucun affichage: les lectures invalides (sortie jamais
calculée, delta jamais fixé, entrées absentes) retournent un `Resultat`
avec `ok=False` et la valeur en cache.
"""

from __future__ import annotations

import random
from typing import List, Sequence

from .fct_activation import sigmoide
from .resultat import Resultat


# ==================== tire_poids_initial =========================
def tire_poids_initial(rng: random.Random) -> float:
	"""Tire un poids initial.

	w = (tirage 0..9 + 1) / 10, puis négatif si w > 0.5.
	Les valeurs possibles sont donc 0.1..0.5 et -0.6..-1.0.
	"""
	w = (rng.randrange(10) + 1) / 10
	if w > 0.5:
		w = -w
	return w


class Neurone:
	"""Neurone sigmoïde à `n_entrees` entrées."""

	# ==================== __init__ =========================
	def __init__(self, n_entrees: int, biais: float, poids_biais: float, rng: random.Random):
		"""Crée le neurone et initialise ses poids avec `rng`."""
		self.biais = float(biais)
		self.poids_biais = float(poids_biais)
		self.poids: List[float] = [tire_poids_initial(rng) for _ in range(int(n_entrees))]
		self.entrees: List[float] = [0.0] * int(n_entrees)
		self.delta = 0.0
		self.sortie = 0.0
		self._entrees_valides = False
		self._sortie_valide = False
		self._delta_valide = False

	@property
	def nb_entrees(self) -> int:
		return len(self.poids)

	# ==================== set_entrees =========================
	def set_entrees(self, valeurs: Sequence[float]) -> None:
		"""Mémorise les entrées du neurone (copie).

		La taille doit être `nb_entrees` (vérifiée par le réseau).
		"""
		self.entrees = [float(v) for v in valeurs]
		self._entrees_valides = True

	# ==================== calcule_sortie =========================
	def calcule_sortie(self) -> Resultat:
		"""Calcule, met en cache et retourne la sortie Fi du neurone."""
		if not self._entrees_valides:
			return Resultat.echec(
				"Calcul demandé sur un neurone sans entrées (set_entrees non appelé).",
				self.sortie,
			)

		activation_i = sum(x * w for x, w in zip(self.entrees, self.poids))
		activation_i += self.biais * self.poids_biais
		self.sortie = sigmoide(activation_i)
		self._sortie_valide = True
		return Resultat.succes(self.sortie)

	# ==================== get_sortie =========================
	def get_sortie(self) -> Resultat:
		"""Retourne la sortie en cache (ok=False si jamais calculée)."""
		if not self._sortie_valide:
			return Resultat.echec("Sortie demandée avant calcule_sortie().", self.sortie)
		return Resultat.succes(self.sortie)

	# ==================== get_entree =========================
	def get_entree(self, index: int) -> Resultat:
		"""Retourne l'entrée `index` (ok=False si les entrées ne sont pas fixées)."""
		if not self._entrees_valides:
			return Resultat.echec("Entrée demandée sur un neurone sans entrées.", self.entrees[index])
		return Resultat.succes(self.entrees[index])

	def get_poids(self, index: int) -> float:
		return self.poids[index]

	def set_delta(self, valeur: float) -> None:
		self.delta = float(valeur)
		self._delta_valide = True

	# ==================== get_delta =========================
	def get_delta(self) -> Resultat:
		"""Retourne le delta (ok=False si aucune rétropropagation ne l'a fixé)."""
		if not self._delta_valide:
			return Resultat.echec("Delta demandé avant set_delta().", self.delta)
		return Resultat.succes(self.delta)

	# ==================== ajuste_poids_entree =========================
	def ajuste_poids_entree(self, index: int, correcteur: float) -> None:
		"""w[index] <- w[index] - correcteur."""
		self.poids[index] -= float(correcteur)

	# ==================== ajuste_poids_biais =========================
	def ajuste_poids_biais(self, correcteur: float) -> None:
		"""poids_biais <- poids_biais - correcteur."""
		self.poids_biais -= float(correcteur)
