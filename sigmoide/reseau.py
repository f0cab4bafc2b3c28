"""reseau

Rôle
	Réseau de neurones sigmoïdes entièrement connecté (MLP) : construction,
	propagation avant, classification, rétropropagation et apprentissage.

Topologie
	`couches` est la liste des tailles de couches, entrées comprises :
		[16, 14, 26] = 16 entrées, 1 couche cachée de 14 neurones, 26 sorties.
	La couche 0 n'a pas de neurones : sa taille fixe seulement le nombre
	d'entrées de la couche 1. Les neurones des couches 1..n-1 sont rangés
	dans `_neurones[c - 1]` (décalage explicite), accessibles par `neurones(c)`.

Apprentissage (une ligne)
	1. propagation avant
	2. delta de sortie : delta_i = -(t_i - y_i) * y_i * (1 - y_i)
	   avec t = vecteur_sortie_attendue(label) (0.9 pour la classe, 0.1 sinon)
	3. delta caché (de la dernière couche cachée vers la couche 1) :
	   delta_j = (Σ_k delta_k * w_k[j]) * y_j * (1 - y_j)
	4. corrections (de la couche de sortie vers la couche 1) :
	   w[k] <- w[k] - eta * delta * x[k]
	   poids_biais <- poids_biais - eta * delta

	La valeur retournée est la magnitude cumulée des deltas de sortie
	(Σ |delta_i|), ce n'est pas une erreur quadratique moyenne.

Erreurs
	La construction lève ValueError. Les opérations appelées en boucle
	(propager_avant, classifier, apprendre, entrainer) retournent un
	`Resultat` : une ligne invalide n'interrompt pas un apprentissage.
	Aucun affichage console ici.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Callable, Iterable, List, Sequence

from .fct_activation import derivee_depuis_sortie
from .neurone import Neurone
from .resultat import Resultat


VALEUR_HAUTE = 0.9
VALEUR_BASSE = 0.1


@dataclass(frozen=True)
class RapportEpoque:
	"""Erreur de la dernière ligne traitée pendant une époque."""

	epoque: int
	erreur: float


class ReseauSigmoide:
	"""Réseau sigmoïde multicouche."""

	# ==================== __init__ =========================
	def __init__(
		self,
		couches: Sequence[int],
		eta: float,
		biais: float,
		poids_biais: float,
		verbose: bool = False,
		seed: int | None = None,
		rng: random.Random | None = None,
	):
		"""Construit toutes les couches de neurones.

		Paramètres
			couches : tailles des couches (entrées, cachées..., sorties)
			eta : taux d'apprentissage
			biais : valeur du biais de chaque neurone
			poids_biais : poids initial du biais de chaque neurone
			verbose : produit un RapportEpoque par époque pendant `entrainer`
			seed / rng : source aléatoire des poids initiaux (rng prioritaire)
		"""
		tailles = [int(n) for n in couches]
		if len(tailles) < 2:
			raise ValueError("couches doit contenir au moins 2 valeurs (entrées + sorties)")
		if any(n <= 0 for n in tailles):
			raise ValueError("Toutes les tailles de couches doivent être > 0")
		if not math.isfinite(float(eta)):
			raise ValueError("eta doit être un nombre fini")

		self.couches = tailles
		self.eta = float(eta)
		self.biais = float(biais)
		self.poids_biais = float(poids_biais)
		self.verbose = bool(verbose)
		# RNG local (répétable avec seed, et n'impacte pas le hasard global).
		self._rng = rng if rng is not None else random.Random(seed)

		self._neurones: List[List[Neurone]] = []
		for c in range(1, len(tailles)):
			self._neurones.append(
				[Neurone(tailles[c - 1], self.biais, self.poids_biais, self._rng) for _ in range(tailles[c])]
			)

	@property
	def nb_couches(self) -> int:
		return len(self.couches)

	@property
	def largeur_entree(self) -> int:
		return self.couches[0]

	@property
	def largeur_sortie(self) -> int:
		return self.couches[-1]

	# ==================== neurones =========================
	def neurones(self, couche: int) -> List[Neurone]:
		"""Neurones de la couche `couche` (1..nb_couches-1)."""
		if not 1 <= int(couche) < self.nb_couches:
			raise IndexError(f"couche {couche} hors plage (attendu 1..{self.nb_couches - 1})")
		return self._neurones[int(couche) - 1]

	def _sorties_en_cache(self) -> List[float]:
		return [n.sortie for n in self._neurones[-1]]

	def _fixe_entrees_couche(self, couche: int, valeurs: Sequence[float]) -> None:
		for neurone in self.neurones(couche):
			neurone.set_entrees(valeurs)

	# ==================== propager_avant =========================
	def propager_avant(self, entrees: Sequence[float]) -> Resultat:
		"""Propagation avant complète.

		Retour
			Resultat dont la valeur est la liste des sorties de la dernière couche.
			Si la taille de `entrees` est invalide, aucun neurone n'est modifié et
			la valeur est la sortie en cache.
		"""
		X = [float(x) for x in entrees]
		if len(X) != self.largeur_entree:
			return Resultat.echec(
				f"Taille des entrées invalide: attendu {self.largeur_entree}, reçu {len(X)}.",
				self._sorties_en_cache(),
			)

		self._fixe_entrees_couche(1, X)
		sorties: List[float] = []
		for c in range(1, self.nb_couches):
			sorties = [neurone.calcule_sortie().valeur for neurone in self.neurones(c)]
			if c + 1 < self.nb_couches:
				self._fixe_entrees_couche(c + 1, sorties)
		return Resultat.succes(sorties)

	# ==================== classifier =========================
	def classifier(self, entrees: Sequence[float]) -> Resultat:
		"""Retourne l'index du neurone de sortie le plus élevé (premier en cas d'égalité)."""
		res = self.propager_avant(entrees)
		sorties = res.valeur
		index = max(range(len(sorties)), key=lambda i: sorties[i])
		if not res.ok:
			return Resultat.echec(res.message, index)
		return Resultat.succes(index)

	# ==================== vecteur_sortie_attendue =========================
	def vecteur_sortie_attendue(self, classe: int) -> List[float]:
		"""Vecteur cible : 0.9 à l'index `classe`, 0.1 ailleurs."""
		idx = int(classe)
		if not 0 <= idx < self.largeur_sortie:
			raise ValueError(f"classe hors plage: {classe} (attendu 0..{self.largeur_sortie - 1})")
		vec = [VALEUR_BASSE] * self.largeur_sortie
		vec[idx] = VALEUR_HAUTE
		return vec

	# ==================== apprendre =========================
	def apprendre(self, label: int, entrees: Sequence[float]) -> Resultat:
		"""Une itération complète (forward + rétroprop + mise à jour) pour une ligne.

		Retour
			Resultat dont la valeur est Σ |delta| de la couche de sortie, calculée
			avant la mise à jour des poids.
		"""
		try:
			cible = self.vecteur_sortie_attendue(label)
		except ValueError as exc:
			return Resultat.echec(str(exc), 0.0)

		res = self.propager_avant(entrees)
		if not res.ok:
			return Resultat.echec(res.message, 0.0)

		# -------------------- Delta (sortie) --------------------
		magnitude = 0.0
		for neurone, t in zip(self._neurones[-1], cible):
			y = neurone.sortie
			delta = -(t - y) * derivee_depuis_sortie(y)
			neurone.set_delta(delta)
			magnitude += math.sqrt(delta * delta)

		# -------------------- Delta (cachées) --------------------
		for c in range(self.nb_couches - 2, 0, -1):
			suivante = self.neurones(c + 1)
			for j, neurone in enumerate(self.neurones(c)):
				somme = sum(n.get_delta().valeur * n.get_poids(j) for n in suivante)
				neurone.set_delta(somme * derivee_depuis_sortie(neurone.sortie))

		# -------------------- Corrections --------------------
		for c in range(self.nb_couches - 1, 0, -1):
			for neurone in self.neurones(c):
				delta = neurone.get_delta().valeur
				for k in range(neurone.nb_entrees):
					neurone.ajuste_poids_entree(k, self.eta * delta * neurone.entrees[k])
				neurone.ajuste_poids_biais(self.eta * delta)

		return Resultat.succes(magnitude)

	# ==================== entrainer =========================
	def entrainer(
		self,
		donnees: Iterable,
		n_epoques: int,
		sur_epoque: Callable[[RapportEpoque], None] | None = None,
	) -> Resultat:
		"""Apprentissage sur `n_epoques` passes complètes du jeu de données.

		`donnees` : lignes exposant `label` et `entrees` (voir loader.LigneDonnees).
		En mode verbose, un RapportEpoque est produit à la fin de chaque époque
		(erreur de la *dernière* ligne traitée) et transmis à `sur_epoque`.

		Une ligne invalide est ignorée et comptée ; l'apprentissage continue.
		"""
		lignes = list(donnees)
		n = int(n_epoques)
		if n < 1 or not lignes:
			return Resultat.echec("Nombre d'itérations ou taille du jeu de données invalide.", [])

		rapports: List[RapportEpoque] = []
		n_ignorees = 0
		premier_message = ""
		erreur = 0.0
		for epoque in range(1, n + 1):
			for ligne in lignes:
				res = self.apprendre(ligne.label, ligne.entrees)
				if not res.ok:
					n_ignorees += 1
					premier_message = premier_message or res.message
					continue
				erreur = res.valeur
			if self.verbose:
				rapport = RapportEpoque(epoque, erreur)
				rapports.append(rapport)
				if sur_epoque is not None:
					sur_epoque(rapport)

		if n_ignorees:
			return Resultat.echec(
				f"{n_ignorees} ligne(s) ignorée(s) pendant l'apprentissage ({premier_message})",
				rapports,
			)
		return Resultat.succes(rapports)

	# ==================== poids_couche_sortie =========================
	def poids_couche_sortie(self) -> List[List[float]]:
		"""Copie des poids d'entrée de chaque neurone de sortie."""
		return [list(n.poids) for n in self._neurones[-1]]

	# ==================== texte_poids =========================
	def texte_poids(self, precision: int = 6) -> str:
		"""Texte des poids de la couche de sortie (un neurone par ligne).

		Lecture seule : aucun poids (ni poids de biais) n'est modifié.
		"""
		lignes = ["", "Poids des couches:"]
		for j, poids in enumerate(self.poids_couche_sortie()):
			valeurs = "".join(f"{format(w, f'.{int(precision)}g')}, " for w in poids)
			lignes.append(f"  Neurone {j}: {valeurs}")
		return "\n".join(lignes) + "\n"
