"""resultat

Type de retour explicite des opérations du réseau qui ne doivent pas
interrompre un apprentissage (lecture d'une sortie non calculée, vecteur
d'entrée de mauvaise taille, ...).

Un `Resultat` porte toujours une valeur: en cas d'échec c'est la dernière
valeur en cache (éventuellement sans signification) et `message` décrit
le problème.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Resultat:
	"""Couple (ok, valeur) + message d'erreur lisible."""

	ok: bool
	valeur: Any = None
	message: str = ""

	# ==================== succes =========================
	@classmethod
	def succes(cls, valeur: Any = None) -> "Resultat":
		return cls(True, valeur, "")

	# ==================== echec =========================
	@classmethod
	def echec(cls, message: str, valeur: Any = None) -> "Resultat":
		return cls(False, valeur, str(message))

	def __bool__(self) -> bool:
		return self.ok
