"""loader

Rôle
	Lecture et préparation des jeux de données pour le réseau.

Format de fichier attendu (ex. letter-recognition de l'UCI)
	Une ligne par exemple, champs séparés par un caractère (`,` par défaut):
		T,2,8,3,5,1,8,13,0,6,6,10,8,0,8,0,8
	Le premier champ est l'étiquette (lettre A..Z), les suivants les entrées.
	Pas de guillemets ni d'échappement.

Étapes
	1. `lire_fichier_delimite` : fichier -> lignes de champs texte
	2. `bornes_colonnes` : min/max de chaque entrée sur les jeux *combinés*
	3. `convertir_jeux` : étiquette -> index (A=0), entrées remises à l'échelle
	   via `remise_echelle`, le tout en `LigneDonnees`
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple


ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


@dataclass(frozen=True)
class LigneDonnees:
	"""Un exemple : (label, entrées). Immuable."""

	label: int
	entrees: Tuple[float, ...]

	def __post_init__(self) -> None:
		object.__setattr__(self, "label", int(self.label))
		object.__setattr__(self, "entrees", tuple(float(x) for x in self.entrees))


# ==================== lire_fichier_delimite =========================
def lire_fichier_delimite(chemin: str | Path, delimiteur: str = ",") -> tuple[list[list[str]], str]:
	"""Lit un fichier délimité et retourne (lignes, message).

	- Une ligne par ligne non vide du fichier, découpée sur `delimiteur`.
	- Le dernier champ est conservé même sans délimiteur final.
	- Fichier introuvable/illisible ou vide : ([], message d'erreur).
	"""
	if len(delimiteur) != 1:
		return [], f"Délimiteur invalide: {delimiteur!r} (attendu un seul caractère)"

	path = Path(chemin)
	try:
		with open(path, "r", encoding="utf-8") as f:
			lignes = [raw.rstrip("\r\n").split(delimiteur) for raw in f if raw.strip()]
	except OSError as exc:
		return [], f"Erreur: le fichier ne peut pas être ouvert ({path}): {exc.strerror or exc}"
	except UnicodeDecodeError:
		return [], f"Erreur: le fichier n'est pas un texte UTF-8 ({path})"

	if not lignes:
		return [], f"Erreur: le fichier ne contient aucune donnée ({path})"
	return lignes, ""


# ==================== remise_echelle =========================
def remise_echelle(x: float, xmin: float, xmax: float) -> float:
	"""x' = (x - min) / (max - min), ou x inchangé si max == min."""
	if xmax == xmin:
		return x
	return (x - xmin) / (xmax - xmin)


# ==================== lettre_vers_index =========================
def lettre_vers_index(lettre: str, alphabet: str = ALPHABET) -> int:
	"""Position (0-based) de `lettre` dans `alphabet` (A -> 0, C -> 2)."""
	s = (lettre or "").strip()
	idx = alphabet.find(s) if len(s) == 1 else -1
	if idx < 0:
		raise ValueError(f"Étiquette invalide: {lettre!r} (attendu une lettre de {alphabet[:1]}..{alphabet[-1:]})")
	return idx


# ==================== index_vers_lettre =========================
def index_vers_lettre(index: int, alphabet: str = ALPHABET) -> str:
	"""Lettre correspondant à un index de classe (2 -> C)."""
	idx = int(index)
	if not 0 <= idx < len(alphabet):
		raise ValueError(f"Index de classe hors plage: {index} (attendu 0..{len(alphabet) - 1})")
	return alphabet[idx]


def _valeurs_ligne(champs: Sequence[str], numero: int) -> list[float]:
	"""Convertit les entrées (champs 1..n) d'une ligne en floats."""
	try:
		return [float(v.strip().replace(",", ".")) for v in champs[1:]]
	except ValueError as exc:
		raise ValueError(f"Ligne {numero}: valeur d'entrée invalide ({exc})") from exc


# ==================== bornes_colonnes =========================
def bornes_colonnes(*jeux: Sequence[Sequence[str]]) -> tuple[list[float], list[float]]:
	"""Retourne (min, max) de chaque colonne d'entrée sur tous les jeux fournis.

	La colonne 0 (étiquette) est exclue.
	"""
	vmin: list[float] = []
	vmax: list[float] = []
	numero = 0
	for jeu in jeux:
		for champs in jeu:
			numero += 1
			valeurs = _valeurs_ligne(champs, numero)
			if not vmin:
				vmin = list(valeurs)
				vmax = list(valeurs)
				continue
			if len(valeurs) != len(vmin):
				raise ValueError(
					f"Ligne {numero}: {len(valeurs)} entrée(s), attendu {len(vmin)}"
				)
			for j, v in enumerate(valeurs):
				if v < vmin[j]:
					vmin[j] = v
				if v > vmax[j]:
					vmax[j] = v
	return vmin, vmax


# ==================== convertir_lignes =========================
def convertir_lignes(
	brut: Sequence[Sequence[str]],
	vmin: Sequence[float],
	vmax: Sequence[float],
	alphabet: str = ALPHABET,
) -> List[LigneDonnees]:
	"""Convertit des lignes texte en LigneDonnees (label indexé, entrées remises à l'échelle)."""
	out: List[LigneDonnees] = []
	for numero, champs in enumerate(brut, start=1):
		try:
			label = lettre_vers_index(champs[0], alphabet)
		except ValueError as exc:
			raise ValueError(f"Ligne {numero}: {exc}") from exc
		valeurs = _valeurs_ligne(champs, numero)
		if len(valeurs) != len(vmin):
			raise ValueError(f"Ligne {numero}: {len(valeurs)} entrée(s), attendu {len(vmin)}")
		entrees = [remise_echelle(v, vmin[j], vmax[j]) for j, v in enumerate(valeurs)]
		out.append(LigneDonnees(label, tuple(entrees)))
	return out


# ==================== convertir_jeux =========================
def convertir_jeux(
	brut_entrainement: Sequence[Sequence[str]],
	brut_validation: Sequence[Sequence[str]],
	alphabet: str = ALPHABET,
) -> tuple[List[LigneDonnees], List[LigneDonnees]]:
	"""Prépare les jeux d'apprentissage et de validation.

	Les bornes de remise à l'échelle sont calculées sur les deux jeux combinés.
	Lève ValueError si les jeux n'ont pas le même nombre de colonnes.
	"""
	if not brut_entrainement or not brut_validation:
		raise ValueError("Les jeux d'apprentissage et de validation ne doivent pas être vides")
	n_train = len(brut_entrainement[0])
	n_val = len(brut_validation[0])
	if n_train != n_val:
		raise ValueError(
			f"Nombre de paramètres différent entre apprentissage ({n_train}) et validation ({n_val})"
		)
	if n_train < 2:
		raise ValueError("Chaque ligne doit contenir une étiquette et au moins une entrée")

	vmin, vmax = bornes_colonnes(brut_entrainement, brut_validation)
	entrainement = convertir_lignes(brut_entrainement, vmin, vmax, alphabet)
	validation = convertir_lignes(brut_validation, vmin, vmax, alphabet)
	return entrainement, validation
