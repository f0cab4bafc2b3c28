"""smoke_test

Rôle
	Tests rapides (sans GUI) pour valider les éléments critiques de `sigmoide/`.

Objectifs
	- Neurone : poids initiaux, lectures invalides, sortie, corrections.
	- Réseau : construction, propagation, classification, rétropropagation
	  (valeurs recalculées à la main), apprentissage sur plusieurs époques.
	- Matrice de confusion : compteurs et rapports CSV.
	- Loader / service / config : lecture, remise à l'échelle, historique.
	- Simuler une session complète (comme si on cliquait sur "Exécuter")
	  sans lancer l'interface CustomTkinter.

Exécution
	- `python -m sigmoide.smoke_test`
	- `pytest` (les fonctions `run_*` sont collectées, voir pyproject.toml)
"""

from __future__ import annotations

import math
import os
import random
from pathlib import Path
import tempfile


TRAIN_TXT = (
	"A,0,0\n"
	"B,10,0\n"
	"C,0,10\n"
	"A,1,1\n"
	"B,9,1\n"
	"C,1,9\n"
)
VAL_TXT = (
	"A,0,1\n"
	"B,10,1\n"
	"C,1,10\n"
)


def _ecrit_jeux(dossier: Path) -> tuple[Path, Path]:
	train = Path(dossier) / "train.data"
	val = Path(dossier) / "val.data"
	train.write_text(TRAIN_TXT, encoding="utf-8")
	val.write_text(VAL_TXT, encoding="utf-8")
	return train, val


def _sigmoide(i: float) -> float:
	return 1.0 / (1.0 + math.exp(-i))


# ==================== run_activation =========================
def run_activation() -> None:
	from .fct_activation import derivee_depuis_sortie, sigmoide

	assert sigmoide(0) == 0.5
	assert sigmoide(1000) == 1.0
	assert sigmoide(-1000) == 0.0
	assert derivee_depuis_sortie(sigmoide(0.0)) == 0.25
	assert derivee_depuis_sortie(0.9) == 0.9 * (1.0 - 0.9)


# ==================== run_neurone =========================
def run_neurone() -> None:
	"""Poids initiaux, lectures avant calcul, sortie connue, corrections soustraites."""
	from .neurone import Neurone, tire_poids_initial

	autorises = {0.1, 0.2, 0.3, 0.4, 0.5, -0.6, -0.7, -0.8, -0.9, -1.0}
	rng = random.Random(3)
	for _ in range(200):
		assert tire_poids_initial(rng) in autorises

	n = Neurone(2, -1.0, 0.5, random.Random(0))
	assert n.nb_entrees == 2
	assert all(w in autorises for w in n.poids)

	# Lectures avant tout calcul: échec + valeur en cache
	res = n.get_sortie()
	assert not res.ok and res.valeur == 0.0 and res.message
	res = n.calcule_sortie()
	assert not res.ok, "calcule_sortie sans entrées devrait échouer"
	assert not n.get_entree(0).ok
	assert not n.get_delta().ok
	n.set_delta(0.25)
	assert n.get_delta().ok and n.get_delta().valeur == 0.25

	n.poids = [1.0, -0.5]
	n.set_entrees([1.0, 1.0])
	# i = 1 - 0.5 + (-1 * 0.5) = 0
	res = n.calcule_sortie()
	assert res.ok and res.valeur == 0.5
	assert n.get_sortie().valeur == 0.5
	assert n.get_entree(1).valeur == 1.0

	n.ajuste_poids_entree(0, 0.25)
	n.ajuste_poids_biais(-0.5)
	assert n.get_poids(0) == 0.75
	assert n.poids_biais == 1.0


# ==================== run_reseau_construction =========================
def run_reseau_construction() -> None:
	from .reseau import ReseauSigmoide

	r = ReseauSigmoide([3, 4, 2], 0.1, -1, 0.5, seed=11)
	assert r.nb_couches == 3
	assert len(r.neurones(1)) == 4 and len(r.neurones(2)) == 2
	assert all(n.nb_entrees == 3 for n in r.neurones(1))
	assert all(n.nb_entrees == 4 for n in r.neurones(2))
	assert all(n.poids_biais == 0.5 and n.biais == -1.0 for n in r.neurones(2))
	for couche in (0, 3):
		try:
			r.neurones(couche)
			raise AssertionError(f"neurones({couche}) devait lever IndexError")
		except IndexError:
			pass

	# Même graine -> mêmes poids
	r2 = ReseauSigmoide([3, 4, 2], 0.1, -1, 0.5, seed=11)
	assert r.poids_couche_sortie() == r2.poids_couche_sortie()
	assert [n.poids for n in r.neurones(1)] == [n.poids for n in r2.neurones(1)]

	for couches in ([3], [3, 0, 2], []):
		try:
			ReseauSigmoide(couches, 0.1, -1, 0.5)
			raise AssertionError(f"couches={couches} devait lever ValueError")
		except ValueError:
			pass


# ==================== run_propagation_classification =========================
def run_propagation_classification() -> None:
	from .reseau import ReseauSigmoide

	r = ReseauSigmoide([2, 3, 4], 0.1, -1, 0.5, seed=5)

	# Mauvaise taille: rien n'est modifié, valeur = sortie en cache
	res = r.propager_avant([1.0])
	assert not res.ok and res.valeur == [0.0, 0.0, 0.0, 0.0]
	assert all(not n.get_sortie().ok for n in r.neurones(1))

	res = r.propager_avant([0.2, 0.7])
	assert res.ok and len(res.valeur) == 4
	assert all(0.0 < y < 1.0 for y in res.valeur)

	res = r.classifier([0.2, 0.7])
	assert res.ok and 0 <= res.valeur < 4

	# Égalité: le premier maximum gagne
	egal = ReseauSigmoide([2, 2], 0.1, -1, 0.5, seed=1)
	for n in egal.neurones(1):
		n.poids = [0.0, 0.0]
		n.poids_biais = 0.0
	assert egal.classifier([1.0, 1.0]).valeur == 0

	assert r.vecteur_sortie_attendue(2) == [0.1, 0.1, 0.9, 0.1]
	try:
		r.vecteur_sortie_attendue(4)
		raise AssertionError("vecteur_sortie_attendue(4) devait lever ValueError")
	except ValueError:
		pass


# ==================== run_apprendre_sortie =========================
def run_apprendre_sortie() -> None:
	"""Réseau [2, 1] : delta et corrections comparés au calcul à la main."""
	from .reseau import ReseauSigmoide

	eta = 0.1
	r = ReseauSigmoide([2, 1], eta, -1, 0.5, seed=2)
	sortie = r.neurones(1)[0]
	w0, w1 = sortie.poids

	y = _sigmoide(w0 * 1.0 + w1 * 0.0 + (-1.0) * 0.5)
	delta = -(0.9 - y) * y * (1 - y)

	res = r.apprendre(0, [1.0, 0.0])
	assert res.ok
	assert math.isclose(res.valeur, abs(delta), rel_tol=1e-12)
	assert math.isclose(sortie.get_delta().valeur, delta, rel_tol=1e-12)
	assert math.isclose(sortie.poids[0], w0 - eta * delta * 1.0, rel_tol=1e-12)
	assert sortie.poids[1] == w1, "entrée nulle: poids inchangé"
	assert math.isclose(sortie.poids_biais, 0.5 - eta * delta, rel_tol=1e-12)

	# Le poids a bougé et la classification reste dans la plage
	assert sortie.poids[0] != w0
	assert r.classifier([1.0, 0.0]).valeur == 0

	# Ligne invalide: échec sans modification
	avant = list(sortie.poids)
	assert not r.apprendre(3, [1.0, 0.0]).ok
	assert not r.apprendre(0, [1.0]).ok
	assert sortie.poids == avant


# ==================== run_apprendre_cachee =========================
def run_apprendre_cachee() -> None:
	"""Réseau [2, 2, 1] : delta caché calculé avec les poids *avant* correction."""
	from .reseau import ReseauSigmoide

	eta = 0.5
	r = ReseauSigmoide([2, 2, 1], eta, -1, 0.5, seed=9)
	sortie = r.neurones(2)[0]
	cachees = r.neurones(1)
	w_sortie = list(sortie.poids)
	w_cachees = [list(n.poids) for n in cachees]

	X = [0.3, 0.8]
	assert r.apprendre(0, X).ok

	d_out = sortie.get_delta().valeur
	for j, n in enumerate(cachees):
		yj = n.sortie
		attendu = d_out * w_sortie[j] * yj * (1 - yj)
		assert math.isclose(n.get_delta().valeur, attendu, rel_tol=1e-12, abs_tol=1e-15)
		for k in range(2):
			assert math.isclose(n.poids[k], w_cachees[j][k] - eta * attendu * X[k], rel_tol=1e-12, abs_tol=1e-15)
	for j in range(2):
		assert math.isclose(sortie.poids[j], w_sortie[j] - eta * d_out * cachees[j].sortie, rel_tol=1e-12)


# ==================== run_entrainer =========================
def run_entrainer() -> None:
	from .loader import LigneDonnees
	from .reseau import ReseauSigmoide

	donnees = [
		LigneDonnees(0, (0.0, 0.0)),
		LigneDonnees(1, (1.0, 0.0)),
		LigneDonnees(2, (0.0, 1.0)),
	]
	r = ReseauSigmoide([2, 2, 3], 0.1, -1, 0.5, verbose=True, seed=4)
	recus = []
	res = r.entrainer(donnees, 4, sur_epoque=recus.append)
	assert res.ok, res.message
	assert [rap.epoque for rap in res.valeur] == [1, 2, 3, 4]
	assert recus == res.valeur
	assert all(rap.erreur > 0 for rap in res.valeur)

	# Sans verbose: aucun rapport
	r = ReseauSigmoide([2, 2, 3], 0.1, -1, 0.5, seed=4)
	res = r.entrainer(donnees, 2)
	assert res.ok and res.valeur == []

	assert not r.entrainer(donnees, 0).ok
	assert not r.entrainer([], 3).ok

	# Lignes invalides ignorées, l'apprentissage continue
	r = ReseauSigmoide([2, 2, 3], 0.1, -1, 0.5, verbose=True, seed=4)
	avant = r.poids_couche_sortie()
	mauvaises = donnees + [LigneDonnees(0, (1.0,)), LigneDonnees(7, (0.0, 0.0))]
	res = r.entrainer(mauvaises, 2)
	assert not res.ok
	assert "4 ligne(s)" in res.message, res.message
	assert len(res.valeur) == 2
	assert r.poids_couche_sortie() != avant


# ==================== run_texte_poids =========================
def run_texte_poids() -> None:
	"""L'affichage des poids ne modifie aucun poids (ni poids de biais)."""
	from .reseau import ReseauSigmoide

	r = ReseauSigmoide([2, 3, 2], 0.1, -1, 0.5, seed=8)
	biais_avant = [n.poids_biais for c in (1, 2) for n in r.neurones(c)]
	poids_avant = r.poids_couche_sortie()
	texte = r.texte_poids()
	assert texte == r.texte_poids()
	assert texte.startswith("\nPoids des couches:\n  Neurone 0: ")
	assert texte.count("Neurone") == 2
	assert [n.poids_biais for c in (1, 2) for n in r.neurones(c)] == biais_avant
	assert r.poids_couche_sortie() == poids_avant


# ==================== run_matrice_confusion =========================
def run_matrice_confusion() -> None:
	from .matrice_confusion import MatriceConfusion

	m = MatriceConfusion(3, "ABC")
	m.incremente(0, 0)
	m.incremente(0, 2)
	m.incremente(2, 2)
	assert m.get_cellule(0, 2) == 1 and m.total == 3
	assert m.total_colonne(1) == 0
	assert m.precision_par_colonne() == [100.0, None, 50.0]
	assert math.isclose(m.precision_globale(), 200 / 3)
	assert m.rapport_precision() == "A,B,C,\n100,N,50,"
	assert m.rapport_matrice() == " ,A,B,C,\nA,1,0,1,\nB,0,0,0,\nC,0,0,1,"

	nue = MatriceConfusion(2)
	assert nue.rapport_precision() == "N,N,"
	assert nue.rapport_matrice() == "0,0,\n0,0,"
	assert nue.precision_globale() is None

	for args in ((0,), (2, "ABC")):
		try:
			MatriceConfusion(*args)
			raise AssertionError(f"MatriceConfusion{args} devait lever ValueError")
		except ValueError:
			pass


# ==================== run_loader =========================
def run_loader() -> None:
	from . import loader

	assert loader.remise_echelle(5, 0, 10) == 0.5
	assert loader.remise_echelle(3, 3, 3) == 3
	assert loader.lettre_vers_index("A") == 0
	assert loader.lettre_vers_index("C") == 2
	assert loader.index_vers_lettre(25) == "Z"
	try:
		loader.lettre_vers_index("a")
		raise AssertionError("lettre_vers_index('a') devait lever ValueError")
	except ValueError:
		pass

	with tempfile.TemporaryDirectory() as tmp:
		p = Path(tmp) / "jeu.data"
		# Ligne vide ignorée, fin de ligne Windows, dernier champ sans délimiteur final
		p.write_text("A,1,2\n\nB,3,4\r\nC,5,6", encoding="utf-8")
		lignes, msg = loader.lire_fichier_delimite(p)
		assert msg == ""
		assert lignes == [["A", "1", "2"], ["B", "3", "4"], ["C", "5", "6"]]

		lignes, msg = loader.lire_fichier_delimite(Path(tmp) / "absent.data")
		assert lignes == [] and msg

		vide = Path(tmp) / "vide.data"
		vide.write_text("", encoding="utf-8")
		lignes, msg = loader.lire_fichier_delimite(vide)
		assert lignes == [] and msg

		lignes, msg = loader.lire_fichier_delimite(p, ";;")
		assert lignes == [] and "Délimiteur" in msg

	train = [["A", "1", "2"], ["B", "3", "4"]]
	val = [["C", "5", "6"]]
	assert loader.bornes_colonnes(train, val) == ([1.0, 2.0], [5.0, 6.0])
	t, v = loader.convertir_jeux(train, val)
	assert [x.label for x in t] == [0, 1] and v[0].label == 2
	assert t[0].entrees == (0.0, 0.0)
	assert t[1].entrees == (0.5, 0.5)
	assert v[0].entrees == (1.0, 1.0)

	for bad_train, bad_val in (([], val), (train, [["C", "5"]]), ([["A"]], [["B"]])):
		try:
			loader.convertir_jeux(bad_train, bad_val)
			raise AssertionError("convertir_jeux devait lever ValueError")
		except ValueError:
			pass


# ==================== run_service =========================
def run_service() -> None:
	"""Lecture/écriture/suppression de l'historique (dossier temporaire)."""
	from . import service

	line = service.format_resultat_line([16, 14, 26], 0.01, 1, -1, 0.5, 63.25)
	assert line == "[16,14,26] [0.01] [1] [-1] [0.5] [63.25%]"
	assert service.format_resultat_line([2, 3], 0.1, 2, -1, 0.5, None).endswith("[N]")
	fields = service.parse_resultat_line(line)
	assert fields["couches"] == [16, 14, 26] and fields["score"] == 63.25
	try:
		service.parse_resultat_line("[16,14,26] [0.01]")
		raise AssertionError("ligne incomplète devait lever ValueError")
	except ValueError:
		pass

	with tempfile.TemporaryDirectory() as tmp:
		p = Path(tmp) / "resultats.txt"
		assert service.read_resultats_text(p) == ""

		ok, msg = service.add_resultat_line(line, p)
		assert ok, f"add_resultat_line failed: {msg}"

		ok, msg = service.add_resultat_line(line, p)
		assert not ok, "duplicate add should be rejected"
		assert "doublon" in msg.lower(), f"unexpected duplicate message: {msg}"

		ok, msg = service.add_resultat_line("[pas] [une ligne]", p)
		assert not ok and "Format invalide" in msg

		assert [raw for raw, _ in service.iter_resultats(p)] == [line]

		ok, msg = service.delete_resultat_line(line, p)
		assert ok, f"delete_resultat_line failed: {msg}"
		content = p.read_text(encoding="utf-8")
		assert line not in content, "line should be removed"
		assert service.RESULTATS_HEADER in content, "header should be preserved"

		ok, msg = service.delete_resultat_line(line, p)
		assert not ok


# ==================== run_config =========================
def run_config() -> None:
	from .config import ConfigSession, normalise_niveau_console, parse_liste

	assert parse_liste("16, 14, 26", int) == [16, 14, 26]
	assert parse_liste("[0.1 0.01]", float) == [0.1, 0.01]
	assert parse_liste("", int) == []

	assert normalise_niveau_console("Détaillé") == "détaillé"
	assert normalise_niveau_console("detail") == "détaillé"
	assert normalise_niveau_console("MIN") == "minimal"
	assert normalise_niveau_console("bavard") is None

	noms = (
		"SIGMOIDE_COUCHES",
		"SIGMOIDE_ETA",
		"SIGMOIDE_ITERATIONS",
		"SIGMOIDE_SEED",
		"SIGMOIDE_VERBOSE",
		"SIGMOIDE_BIAIS",
	)
	sauvegarde = {nom: os.environ.get(nom) for nom in noms}
	try:
		os.environ["SIGMOIDE_COUCHES"] = "2,3,4"
		os.environ["SIGMOIDE_ETA"] = "0.1 0.2"
		os.environ["SIGMOIDE_ITERATIONS"] = "x"
		os.environ["SIGMOIDE_SEED"] = "abc"
		os.environ["SIGMOIDE_VERBOSE"] = "non"
		os.environ["SIGMOIDE_BIAIS"] = "1,5"
		cfg = ConfigSession.from_env()
	finally:
		for nom, valeur in sauvegarde.items():
			if valeur is None:
				os.environ.pop(nom, None)
			else:
				os.environ[nom] = valeur

	assert cfg.couches == [2, 3, 4]
	assert cfg.taux_apprentissage == [0.1, 0.2]
	assert cfg.iterations == [1], "valeur illisible: défaut conservé"
	assert cfg.seed is None
	assert cfg.verbose is False
	assert cfg.biais == 1.5

	ok, msg = ConfigSession().valide()
	assert ok, msg
	ok, msg = ConfigSession(couches=[2]).valide()
	assert not ok and "couches" in msg
	ok, msg = ConfigSession(taux_apprentissage=[0.0]).valide()
	assert not ok
	ok, msg = ConfigSession(log_console="bavard").valide()
	assert not ok and "log_console" in msg


# ==================== run_session =========================
def run_session() -> None:
	"""Session complète sur de petits fichiers temporaires (3 classes A..C)."""
	from . import lanceur, service
	from .config import ConfigSession

	with tempfile.TemporaryDirectory() as tmp:
		train, val = _ecrit_jeux(Path(tmp))
		hist = Path(tmp) / "resultats.txt"
		cfg = ConfigSession(
			couches=[2, 2, 3],
			taux_apprentissage=[0.1, 0.5],
			iterations=[1, 2],
			fichier_entrainement=train,
			fichier_validation=val,
			seed=7,
		)

		lignes: list[str] = []
		ok, msg = lanceur.executer_session(cfg, sortie=lignes.append, historique=hist)
		assert ok, msg
		assert "4 entraînement(s)" in msg, msg
		texte = "\n".join(lignes)
		assert "Résultats: (LR = 0.1 Itérations = 1)" in texte
		assert "Précision: (LR = 0.5 Itérations = 2)" in texte
		assert " ,A,B,C," in texte
		assert "1," in lignes[lignes.index("Apprentissage (LR = 0.1 Itérations = 2)...") + 1]
		assert len(service.iter_resultats(hist)) == 4

		# Même graine -> même sortie
		lignes_bis: list[str] = []
		ok, _ = lanceur.executer_session(cfg, sortie=lignes_bis.append)
		assert ok and lignes_bis == lignes

		# Niveau détaillé: poids affichés avant/après
		details: list[str] = []
		ok, _ = lanceur.executer_session(
			cfg.remplace(iterations=[1], taux_apprentissage=[0.1], log_console="détaillé"),
			sortie=details.append,
		)
		assert ok and sum("Poids des couches" in l for l in details) == 2

		ok, msg = lanceur.executer_session(cfg.remplace(couches=[3, 2, 3]), sortie=lambda _: None)
		assert not ok and "Topologie" in msg

		ok, msg = lanceur.executer_session(
			cfg.remplace(fichier_validation=Path(tmp) / "absent.data"), sortie=lambda _: None
		)
		assert not ok and "absent.data" in msg


# ==================== run_execute_payload =========================
def run_execute_payload() -> None:
	"""Smoke test: simule le clic sur 'Exécuter' sans lancer le GUI."""
	from . import lanceur

	with tempfile.TemporaryDirectory() as tmp:
		train, val = _ecrit_jeux(Path(tmp))
		payload = {
			"values": {
				"couches": "2,3,3",
				"eta": "0.2",
				"iterations": [3],
				"biais": "-1",
				"poids_biais": "0,5",
				"seed": 1,
				"fichier_entrainement": str(train),
				"fichier_validation": str(val),
				"log_console": "minimal",
				"verbose": False,
			},
		}
		lignes: list[str] = []
		ok, msg = lanceur.execute_payload(payload, sortie=lignes.append)
		assert ok, f"execute_payload a échoué: {msg}"
		assert "OK" in msg, f"message inattendu: {msg}"
		assert not any(l.startswith("1,") for l in lignes), "pas d'erreur par époque sans verbose"

		bad = {"values": {**payload["values"], "couches": "2,x,3"}}
		ok, msg = lanceur.execute_payload(bad, sortie=lambda _: None)
		assert not ok and "Erreur paramètres" in msg

		args = lanceur._build_parser().parse_args(
			["--train", str(train), "--val", str(val), "--couches", "2,4,3", "--eta", "0.1,0.3", "--silencieux"]
		)
		cfg = lanceur.config_depuis_arguments(args)
		assert cfg.couches == [2, 4, 3]
		assert cfg.taux_apprentissage == [0.1, 0.3]
		assert cfg.fichier_entrainement == train
		assert cfg.verbose is False


# ==================== run =========================
def run() -> None:
	"""Point d'entrée du smoke test (sans interface graphique)."""
	tests = (
		run_activation,
		run_neurone,
		run_reseau_construction,
		run_propagation_classification,
		run_apprendre_sortie,
		run_apprendre_cachee,
		run_entrainer,
		run_texte_poids,
		run_matrice_confusion,
		run_loader,
		run_service,
		run_config,
		run_session,
		run_execute_payload,
	)
	for test in tests:
		test()
		print(f"OK: smoke_test {test.__name__[4:]}")


if __name__ == "__main__":
	run()
