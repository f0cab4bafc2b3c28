"""matrice_confusion

Rôle
	Matrice de confusion carrée : `cellule[attendu][obtenu]` compte le nombre
	de fois où la classe `attendu` a été classée comme `obtenu`.

	Ex: A attendu mais C obtenu -> cellule[0][2] += 1 (erreur)
	    C attendu et C obtenu -> cellule[2][2] += 1 (succès)

Rapports (CSV, virgule finale conservée)
	- `rapport_matrice()` : toute la matrice, avec étiquettes si fournies
	- `rapport_precision()` : par colonne j, cellule[j][j] / total colonne j * 100,
	  ou `N` si la colonne est vide

Note
	La précision est calculée par *colonne* (classe obtenue) : c'est la part
	des prédictions d'une classe qui sont correctes, pas la part des exemples
	d'une classe retrouvés.
"""

from __future__ import annotations

from typing import List


MARQUEUR_SANS_DONNEES = "N"


class MatriceConfusion:
	"""Matrice de confusion `largeur` x `largeur`."""

	# ==================== __init__ =========================
	def __init__(self, largeur: int, etiquettes: str = ""):
		"""Crée une matrice nulle.

		`etiquettes` : un caractère par classe (ex. "ABC...Z"), affichage seulement.
		"""
		n = int(largeur)
		if n <= 0:
			raise ValueError("largeur doit être >= 1")
		if etiquettes and len(etiquettes) != n:
			raise ValueError(f"etiquettes doit contenir {n} caractère(s), reçu {len(etiquettes)}")
		self.largeur = n
		self.etiquettes = str(etiquettes or "")
		self.cellules: List[List[int]] = [[0] * n for _ in range(n)]

	# ==================== incremente =========================
	def incremente(self, attendu: int, obtenu: int) -> None:
		"""cellule[attendu][obtenu] += 1 (0 <= index < largeur)."""
		self.cellules[int(attendu)][int(obtenu)] += 1

	def get_cellule(self, ligne: int, colonne: int) -> int:
		return self.cellules[ligne][colonne]

	def total_colonne(self, colonne: int) -> int:
		return sum(self.cellules[i][colonne] for i in range(self.largeur))

	@property
	def total(self) -> int:
		return sum(sum(ligne) for ligne in self.cellules)

	# ==================== precision_par_colonne =========================
	def precision_par_colonne(self) -> List[float | None]:
		"""Précision (%) de chaque colonne, None si la colonne est vide."""
		out: List[float | None] = []
		for j in range(self.largeur):
			total = self.total_colonne(j)
			out.append(None if total == 0 else self.cellules[j][j] / total * 100)
		return out

	# ==================== precision_globale =========================
	def precision_globale(self) -> float | None:
		"""Part (%) des classifications correctes (diagonale / total), None si vide."""
		total = self.total
		if total == 0:
			return None
		return sum(self.cellules[i][i] for i in range(self.largeur)) / total * 100

	@staticmethod
	def _fmt(x: float, precision: int = 6) -> str:
		"""Formate un nombre comme la sortie console d'origine (6 chiffres significatifs)."""
		return format(float(x), f".{int(precision)}g")

	# ==================== rapport_precision =========================
	def rapport_precision(self) -> str:
		"""Précision par colonne en CSV (ligne d'étiquettes si fournie)."""
		lignes: List[str] = []
		if self.etiquettes:
			lignes.append("".join(f"{e}," for e in self.etiquettes))
		valeurs = [
			MARQUEUR_SANS_DONNEES if p is None else self._fmt(p)
			for p in self.precision_par_colonne()
		]
		lignes.append("".join(f"{v}," for v in valeurs))
		return "\n".join(lignes)

	# ==================== rapport_matrice =========================
	def rapport_matrice(self) -> str:
		"""Matrice complète en CSV, ligne par ligne (étiquettes si fournies)."""
		lignes: List[str] = []
		if self.etiquettes:
			lignes.append(" ," + "".join(f"{e}," for e in self.etiquettes))
		for i, ligne in enumerate(self.cellules):
			prefixe = f"{self.etiquettes[i]}," if self.etiquettes else ""
			lignes.append(prefixe + "".join(f"{v}," for v in ligne))
		return "\n".join(lignes)
