"""config

Rôle
	Paramètres d'une session d'apprentissage/validation.

	Les valeurs par défaut reproduisent la configuration de la démonstration
	(letter-recognition, 16 entrées, 14 neurones cachés, 26 sorties).
	`ConfigSession.from_env()` permet de les surcharger par l'environnement :

		SIGMOIDE_COUCHES="16,14,26"   SIGMOIDE_ETA="0.01,0.1"
		SIGMOIDE_ITERATIONS="1,5"     SIGMOIDE_BIAIS=-1
		SIGMOIDE_POIDS_BIAIS=0.5      SIGMOIDE_VERBOSE=1
		SIGMOIDE_SEED=123             SIGMOIDE_LOG=détaillé
		SIGMOIDE_TRAIN=chemin         SIGMOIDE_VAL=chemin

	Une valeur illisible est ignorée (la valeur par défaut est conservée).
"""

from __future__ import annotations

import math
import os
import unicodedata
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable


# Racine des fichiers d'entrée (datasets)
root = Path(__file__).resolve().parent / "data"

NIVEAUX_CONSOLE = ("minimal", "détaillé")


def _env_int(name: str, default: int | None) -> int | None:
	try:
		raw = os.environ.get(name)
		if raw is None or not raw.strip():
			return default
		return int(raw.strip())
	except Exception:
		return default


def _env_float(name: str, default: float) -> float:
	try:
		return float(os.environ.get(name, str(default)).strip().replace(",", "."))
	except Exception:
		return default


def _env_bool(name: str, default: bool) -> bool:
	"""Lit un booléen depuis l'environnement.

	Accepte (case-insensitive): 1/0, true/false, yes/no, y/n, oui/non, on/off.
	"""
	raw = os.environ.get(name)
	if raw is None:
		return bool(default)
	s = str(raw).strip().lower()
	if s in {"1", "true", "yes", "y", "oui", "o", "on"}:
		return True
	if s in {"0", "false", "no", "n", "non", "off"}:
		return False
	return bool(default)


def _env_list(name: str, default: list, convert: Callable[[str], object]) -> list:
	"""Lit une liste séparée par des virgules/espaces (ex: "16,14,26")."""
	raw = os.environ.get(name)
	if raw is None or not raw.strip():
		return list(default)
	try:
		values = parse_liste(raw, convert)
	except Exception:
		return list(default)
	return values or list(default)


# ==================== parse_liste =========================
def parse_liste(text: str, convert: Callable[[str], object]) -> list:
	"""Parse une liste depuis un texte (ex: "16, 14, 26" / "[0.1 0.01]").

	Les virgules séparent les valeurs si présentes, sinon les espaces.
	Lève ValueError si une valeur est illisible.
	"""
	clean = (text or "").replace("[", " ").replace("]", " ").strip()
	if not clean:
		return []
	sep = "," if "," in clean else None
	parts = [p.strip() for p in clean.split(sep) if p.strip()]
	return [convert(p) for p in parts]


@dataclass(frozen=True)
class ConfigSession:
	"""Configuration complète d'une session (entraînements + validations)."""

	couches: list[int] = field(default_factory=lambda: [16, 14, 26])
	taux_apprentissage: list[float] = field(default_factory=lambda: [0.01])
	iterations: list[int] = field(default_factory=lambda: [1])
	biais: float = -1.0
	poids_biais: float = 0.5
	verbose: bool = True
	fichier_entrainement: Path = root / "letter-recognition.train.data"
	fichier_validation: Path = root / "letter-recognition.val.data"
	delimiteur: str = ","
	seed: int | None = None
	log_console: str = "minimal"

	@staticmethod
	def from_env() -> "ConfigSession":
		base = ConfigSession()
		return ConfigSession(
			couches=_env_list("SIGMOIDE_COUCHES", base.couches, int),
			taux_apprentissage=_env_list("SIGMOIDE_ETA", base.taux_apprentissage, float),
			iterations=_env_list("SIGMOIDE_ITERATIONS", base.iterations, int),
			biais=_env_float("SIGMOIDE_BIAIS", base.biais),
			poids_biais=_env_float("SIGMOIDE_POIDS_BIAIS", base.poids_biais),
			verbose=_env_bool("SIGMOIDE_VERBOSE", base.verbose),
			fichier_entrainement=Path(os.environ.get("SIGMOIDE_TRAIN") or base.fichier_entrainement),
			fichier_validation=Path(os.environ.get("SIGMOIDE_VAL") or base.fichier_validation),
			seed=_env_int("SIGMOIDE_SEED", base.seed),
			log_console=os.environ.get("SIGMOIDE_LOG") or base.log_console,
		)

	def remplace(self, **changes) -> "ConfigSession":
		"""Copie modifiée (les champs non fournis sont conservés)."""
		return replace(self, **changes)

	# ==================== valide =========================
	def valide(self) -> tuple[bool, str]:
		"""Vérifie la cohérence de la configuration. Retourne (ok, message)."""
		if len(self.couches) < 2:
			return False, "couches doit contenir au moins 2 valeurs (entrées + sorties)"
		if any(int(n) <= 0 for n in self.couches):
			return False, "couches: toutes les valeurs doivent être ≥ 1"
		if not self.taux_apprentissage:
			return False, "taux_apprentissage ne doit pas être vide"
		if any(not math.isfinite(float(eta)) or float(eta) <= 0 for eta in self.taux_apprentissage):
			return False, "taux_apprentissage: toutes les valeurs doivent être > 0"
		if not self.iterations:
			return False, "iterations ne doit pas être vide"
		if any(int(k) < 1 for k in self.iterations):
			return False, "iterations: toutes les valeurs doivent être ≥ 1"
		if len(self.delimiteur) != 1:
			return False, "delimiteur doit être un seul caractère"
		if normalise_niveau_console(self.log_console) is None:
			return False, f"log_console invalide: '{self.log_console}' (attendu: minimal/détaillé)"
		return True, ""


# ==================== normalise_niveau_console =========================
def normalise_niveau_console(value: object) -> str | None:
	"""Retourne "minimal" ou "détaillé" (synonymes acceptés), None si inconnu."""
	s = str(value or "").strip().lower()
	s = unicodedata.normalize("NFKD", s)
	s = "".join(ch for ch in s if not unicodedata.combining(ch))
	if s in {"min", "minimal", "mini", "m"}:
		return "minimal"
	if s in {"detail", "detaille", "detaile", "d", "detailed"}:
		return "détaillé"
	return None
