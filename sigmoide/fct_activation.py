r"""fct_activation

Rôle
	Sigmoïde logistique $Fi = 1 / (1 + e^{-i})$ et sa dérivée, seule
	fonction d'activation du réseau.

	La dérivée est toujours demandée après la propagation avant : elle est
	donc exprimée à partir de la sortie déjà calculée, $Fp = Fi\,(1 - Fi)$.
"""

import math


# ==================== sigmoide =========================
def sigmoide(activation_i: float) -> float:
	"""Fi pour une pré-activation `i`, sans overflow de exp() pour |i| grand."""
	i = float(activation_i)
	if i < 0.0:
		# e^i <= 1 : la forme e^i / (1 + e^i) reste finie
		e = math.exp(i)
		return e / (1.0 + e)
	return 1.0 / (1.0 + math.exp(-i))


# ==================== derivee_depuis_sortie =========================
def derivee_depuis_sortie(Fi: float) -> float:
	"""Fp = Fi * (1 - Fi)."""
	return float(Fi) * (1.0 - float(Fi))
