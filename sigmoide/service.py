"""service

Historique des sessions (`resultats.txt`, à côté du package par défaut).

Une ligne par entraînement + validation, six blocs entre crochets :

	[16,14,26] [0.01] [1] [-1] [0.5] [63.25%]
	 couches    eta   itér. biais poids_biais score ("N" sans validation)

La première ligne du fichier est `RESULTATS_HEADER`. Les fonctions
d'écriture ne lèvent pas sur une erreur d'I/O : elles retournent
(ok, message) pour que le lanceur et l'interface continuent.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Sequence


RESULTATS_HEADER = "[couches] [eta] [itérations] [biais] [poids biais] [score]"

_BLOC = re.compile(r"\[([^\[\]]*)\]")


def _resolve_path(resultats_path: str | Path | None) -> Path:
	if resultats_path is None:
		return Path(__file__).with_name("resultats.txt")
	return Path(resultats_path)


def read_resultats_text(resultats_path: str | Path | None = None) -> str:
	"""Contenu complet de l'historique ("" si absent ou illisible)."""
	try:
		return _resolve_path(resultats_path).read_text(encoding="utf-8")
	except (OSError, UnicodeDecodeError):
		return ""


def _fmt(x: float) -> str:
	# -1.0 -> "-1", 0.01 -> "0.01"
	xf = float(x)
	return str(int(xf)) if xf.is_integer() else format(xf, ".6g")


# ==================== format_resultat_line =========================
def format_resultat_line(
	couches: Sequence[int],
	eta: float,
	iterations: int,
	biais: float,
	poids_biais: float,
	score: float | None,
) -> str:
	"""Ligne d'historique d'un entraînement. `score` None -> "N"."""
	blocs = [
		",".join(str(int(n)) for n in couches),
		_fmt(eta),
		str(int(iterations)),
		_fmt(biais),
		_fmt(poids_biais),
		"N" if score is None else f"{float(score):.2f}%",
	]
	return " ".join(f"[{b}]" for b in blocs)


# ==================== parse_resultat_line =========================
def parse_resultat_line(line: str) -> dict[str, object]:
	"""Découpe une ligne d'historique.

	Clés : couches, eta, iterations, biais, poids_biais, score (float ou None).
	Lève ValueError si la ligne n'est pas conforme.
	"""
	blocs = [b.strip() for b in _BLOC.findall(line or "")]
	if len(blocs) != 6:
		raise ValueError(f"ligne illisible (attendu 6 blocs [], reçu {len(blocs)})")
	couches_txt, eta_txt, iter_txt, biais_txt, poids_txt, score_txt = blocs

	try:
		couches = [int(p) for p in couches_txt.split(",") if p.strip()]
		eta = float(eta_txt)
		iterations = int(iter_txt)
		biais = float(biais_txt)
		poids_biais = float(poids_txt)
	except ValueError as exc:
		raise ValueError(f"couches/eta/itérations/biais/poids biais doivent être numériques ({exc})") from exc

	if len(couches) < 2 or min(couches) <= 0:
		raise ValueError("couches doit contenir au moins 2 valeurs ≥ 1")
	if iterations < 1:
		raise ValueError("itérations doit être ≥ 1")

	if score_txt == "N":
		score = None
	else:
		try:
			score = float(score_txt.rstrip("%"))
		except ValueError as exc:
			raise ValueError(f"score illisible: {score_txt!r}") from exc

	return {
		"couches": couches,
		"eta": eta,
		"iterations": iterations,
		"biais": biais,
		"poids_biais": poids_biais,
		"score": score,
	}


def validate_resultat_line(line: str) -> None:
	"""Lève ValueError si `line` n'est pas une ligne d'historique valide."""
	parse_resultat_line(line)


def _lignes_non_vides(path: Path) -> list[str]:
	if not path.exists():
		return []
	return [l.strip() for l in path.read_text(encoding="utf-8").splitlines() if l.strip()]


# ==================== add_resultat_line =========================
def add_resultat_line(
	formatted_line: str,
	resultats_path: str | Path | None = None,
) -> tuple[bool, str]:
	"""Ajoute une ligne à l'historique (en-tête écrit à la création).

	Refuse une ligne invalide ou déjà présente. Retourne (ok, message).
	"""
	line = (formatted_line or "").strip()
	if not line:
		return False, "Ligne vide"
	try:
		validate_resultat_line(line)
	except ValueError as exc:
		return False, f"Format invalide: {exc}"

	path = _resolve_path(resultats_path)
	try:
		lignes = _lignes_non_vides(path)
		if line in lignes:
			return False, f"Refus d'écriture: doublon déjà présent dans {path.name}"
		if not lignes:
			lignes = [RESULTATS_HEADER]
		lignes.append(line)
		path.write_text("\n".join(lignes) + "\n", encoding="utf-8")
	except (OSError, UnicodeDecodeError) as exc:
		return False, f"Erreur d'écriture: {exc}"
	return True, ""


# ==================== delete_resultat_line =========================
def delete_resultat_line(
	raw_line: str,
	resultats_path: str | Path | None = None,
) -> tuple[bool, str]:
	"""Retire toutes les occurrences exactes de `raw_line` (l'en-tête reste)."""
	cible = (raw_line or "").strip()
	if not cible or cible == RESULTATS_HEADER:
		return False, "Ligne vide"

	path = _resolve_path(resultats_path)
	if not path.exists():
		return False, f"{path.name} introuvable"
	try:
		lignes = _lignes_non_vides(path)
		gardees = [l for l in lignes if l != cible]
		if len(gardees) == len(lignes):
			return False, f"Ligne non trouvée dans {path.name}"
		path.write_text("\n".join(gardees) + "\n", encoding="utf-8")
	except (OSError, UnicodeDecodeError) as exc:
		return False, f"Erreur de suppression: {exc}"
	return True, ""


def iter_resultats(resultats_path: str | Path | None = None) -> list[tuple[str, dict[str, object]]]:
	"""[(ligne brute, champs), ...] des lignes valides (en-tête exclu)."""
	out: list[tuple[str, dict[str, object]]] = []
	for line in read_resultats_text(resultats_path).splitlines():
		line = line.strip()
		if not line or line == RESULTATS_HEADER:
			continue
		try:
			out.append((line, parse_resultat_line(line)))
		except ValueError:
			continue
	return out
