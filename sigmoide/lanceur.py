"""lanceur

Rôle
	Point d'entrée "application".

	Ce module orchestre :
		- la lecture et la préparation des données (via `loader.py`)
		- pour chaque nombre d'itérations et chaque taux d'apprentissage :
		  construction d'un réseau (`reseau.py`), apprentissage, validation
		  dans une matrice de confusion (`matrice_confusion.py`)
		- l'affichage console (CSV) des résultats
		- l'historique des sessions (via `service.py`)
		- le lancement de l'interface graphique (via `interface.py`)

Exécution
	- `python -m sigmoide.lanceur` : session console, puis menu de redémarrage
	- `python -m sigmoide.lanceur --gui` : interface CustomTkinter
	- `python -m sigmoide.lanceur --help` : options (couches, eta, fichiers, ...)

Notes
	- Aucune sortie console dans le réseau : tout passe par `sortie` (print par
	  défaut), ce qui permet à l'interface de récupérer le texte.
"""

from __future__ import annotations

import argparse
import random
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from . import loader, service
from .config import ConfigSession, normalise_niveau_console, parse_liste
from .matrice_confusion import MatriceConfusion
from .reseau import RapportEpoque, ReseauSigmoide


WELCOME_MSG = (
	"\nSigmoïde\n-------------------------------------------------------------------\n"
	"Cet outil entraîne un réseau sigmoïde multicouche à partir de données d'apprentissage,\n"
	"de taux d'apprentissage (LR) et de nombres d'itérations prédéfinis. Le réseau est ensuite\n"
	"validé avec des données de validation.\n\n"
	"Jeu de données: https://archive.ics.uci.edu/ml/machine-learning-databases/letter-recognition/letter-recognition.data\n"
	"La sortie est au format CSV (rediriger la sortie vers un fichier csv pour de meilleurs résultats)."
)

MSG_REDEMARRAGE = "Entrez n'importe quelle touche pour quitter, ou 'o' pour recommencer:"


@dataclass
class RunSession:
	"""Résultat d'un apprentissage + validation (un eta, un nombre d'itérations)."""

	eta: float
	iterations: int
	matrice: MatriceConfusion
	rapports: list[RapportEpoque] = field(default_factory=list)
	avertissement: str = ""
	poids_avant: str = ""
	poids_apres: str = ""
	n_ignorees: int = 0


def _fmt(x: float) -> str:
	return format(float(x), ".6g")


# ==================== entrainer_et_valider =========================
def entrainer_et_valider(
	entrainement: Sequence[loader.LigneDonnees],
	validation: Sequence[loader.LigneDonnees],
	config: ConfigSession,
	eta: float,
	iterations: int,
	*,
	rng: random.Random | None = None,
	sur_epoque: Callable[[RapportEpoque], None] | None = None,
) -> RunSession:
	"""Construit un réseau, l'entraîne puis le valide.

	La matrice de confusion a la largeur de la couche de sortie ; ses
	étiquettes sont les premières lettres de l'alphabet.
	"""
	reseau = ReseauSigmoide(
		config.couches,
		eta,
		config.biais,
		config.poids_biais,
		verbose=config.verbose,
		seed=config.seed,
		rng=rng,
	)
	poids_avant = reseau.texte_poids()
	res = reseau.entrainer(entrainement, iterations, sur_epoque=sur_epoque)

	largeur = reseau.largeur_sortie
	etiquettes = loader.ALPHABET[:largeur] if largeur <= len(loader.ALPHABET) else ""
	matrice = MatriceConfusion(largeur, etiquettes)
	n_ignorees = 0
	for ligne in validation:
		res_c = reseau.classifier(ligne.entrees)
		if not res_c.ok or not 0 <= ligne.label < largeur:
			n_ignorees += 1
			continue
		matrice.incremente(ligne.label, res_c.valeur)

	return RunSession(
		eta=float(eta),
		iterations=int(iterations),
		matrice=matrice,
		rapports=list(res.valeur or []),
		avertissement="" if res.ok else res.message,
		poids_avant=poids_avant,
		poids_apres=reseau.texte_poids(),
		n_ignorees=n_ignorees,
	)


# ==================== charger_donnees =========================
def charger_donnees(
	config: ConfigSession,
	sortie: Callable[[str], None] = print,
) -> tuple[bool, str, list[loader.LigneDonnees], list[loader.LigneDonnees]]:
	"""Lit, vérifie et convertit les deux jeux. Retourne (ok, message, train, val)."""
	sortie("Lecture des données d'apprentissage...")
	brut_train, msg = loader.lire_fichier_delimite(config.fichier_entrainement, config.delimiteur)
	if not brut_train:
		return False, msg, [], []
	sortie("Terminé.\nLecture des données de validation...")
	brut_val, msg = loader.lire_fichier_delimite(config.fichier_validation, config.delimiteur)
	if not brut_val:
		return False, msg, [], []
	sortie("Terminé.")

	sortie("Détermination des bornes des paramètres et conversion des données...")
	try:
		entrainement, validation = loader.convertir_jeux(brut_train, brut_val)
	except ValueError as exc:
		return False, f"Données invalides: {exc}", [], []
	sortie("Terminé.")

	n_entrees = len(entrainement[0].entrees)
	if n_entrees != int(config.couches[0]):
		return (
			False,
			f"Topologie incompatible: {config.couches[0]} entrée(s) configurée(s), {n_entrees} dans les données",
			[],
			[],
		)
	return True, "", entrainement, validation


# ==================== executer_session =========================
def executer_session(
	config: ConfigSession,
	*,
	sortie: Callable[[str], None] = print,
	historique: str | Path | None = None,
) -> tuple[bool, str]:
	"""Session complète (chemin "console").

	Pour chaque nombre d'itérations puis chaque taux d'apprentissage : un
	nouveau réseau est entraîné puis validé ; la matrice et la précision
	sont affichées en CSV. Retourne (ok, message).
	"""
	ok, msg = config.valide()
	if not ok:
		return False, f"Configuration invalide: {msg}"
	niveau = normalise_niveau_console(config.log_console)

	sortie(WELCOME_MSG)
	sortie(f"\nDonnées d'apprentissage: {config.fichier_entrainement}.")
	sortie(f"Données de validation: {config.fichier_validation}.\n")
	sortie(f"Un nouveau réseau sera entraîné {len(config.iterations)} fois pour chaque taux d'apprentissage:")
	sortie("   " + "   ".join(_fmt(eta) for eta in config.taux_apprentissage))
	sortie("Pour chaque taux, l'apprentissage sera itéré le nombre de fois suivant:")
	sortie("   " + "   ".join(str(k) for k in config.iterations))
	sortie("Ces traitements peuvent prendre un certain temps.\n")

	ok, msg, entrainement, validation = charger_donnees(config, sortie)
	if not ok:
		return False, msg

	# Une seule source aléatoire par session: répétable avec seed.
	rng = random.Random(config.seed)
	n_couches = len(config.couches)
	scores: list[float] = []
	for k in config.iterations:
		for eta in config.taux_apprentissage:
			sortie(
				f"Réseau sigmoïde: {config.couches[0]} entrées, {n_couches - 2} couche(s) cachée(s), "
				f"{config.couches[-1]} sorties."
			)
			sortie(f"Apprentissage (LR = {_fmt(eta)} Itérations = {k})...")
			run = entrainer_et_valider(
				entrainement,
				validation,
				config,
				eta,
				k,
				rng=rng,
				sur_epoque=lambda r: sortie(f"{r.epoque},{_fmt(r.erreur)}"),
			)
			if run.avertissement:
				sortie(f"Attention: {run.avertissement}")
			sortie("Terminé.\n")
			if niveau == "détaillé":
				sortie(run.poids_avant)
				sortie(run.poids_apres)

			sortie("Validation...")
			if run.n_ignorees:
				sortie(f"Attention: {run.n_ignorees} ligne(s) de validation ignorée(s)")
			sortie(f"Résultats: (LR = {_fmt(eta)} Itérations = {k})")
			sortie(run.matrice.rapport_matrice())
			sortie(f"\nPrécision: (LR = {_fmt(eta)} Itérations = {k})")
			sortie(run.matrice.rapport_precision())
			sortie("\n")

			score = run.matrice.precision_globale()
			if score is not None:
				scores.append(score)
			if historique is not None:
				line = service.format_resultat_line(
					config.couches, eta, k, config.biais, config.poids_biais, score
				)
				ok_h, msg_h = service.add_resultat_line(line, historique)
				if not ok_h:
					sortie(f"Historique: {msg_h}")

	meilleur = "N" if not scores else f"{max(scores):.2f}%"
	n_runs = len(config.iterations) * len(config.taux_apprentissage)
	return True, f"OK ({n_runs} entraînement(s), meilleur score={meilleur})"


# ==================== config_depuis_valeurs =========================
def config_depuis_valeurs(values: dict, base: ConfigSession | None = None) -> ConfigSession:
	"""Construit une ConfigSession à partir des valeurs (texte ou non) de l'UI.

	Les clés absentes ou vides gardent la valeur de `base`.
	Lève ValueError si une valeur est illisible.
	"""
	cfg = base or ConfigSession()

	def _present(key: str) -> bool:
		v = values.get(key)
		return v is not None and str(v).strip() != ""

	def _liste(key: str, convert):
		v = values.get(key)
		if isinstance(v, (list, tuple)):
			return [convert(x) for x in v]
		return parse_liste(str(v), convert)

	changes: dict[str, object] = {}
	if _present("couches"):
		changes["couches"] = _liste("couches", int)
	if _present("eta"):
		changes["taux_apprentissage"] = _liste("eta", float)
	if _present("iterations"):
		changes["iterations"] = _liste("iterations", int)
	if _present("biais"):
		changes["biais"] = float(str(values["biais"]).replace(",", "."))
	if _present("poids_biais"):
		changes["poids_biais"] = float(str(values["poids_biais"]).replace(",", "."))
	if _present("seed"):
		changes["seed"] = int(values["seed"])
	if _present("fichier_entrainement"):
		changes["fichier_entrainement"] = Path(str(values["fichier_entrainement"]).strip())
	if _present("fichier_validation"):
		changes["fichier_validation"] = Path(str(values["fichier_validation"]).strip())
	if _present("log_console"):
		changes["log_console"] = str(values["log_console"])
	if "verbose" in values:
		changes["verbose"] = bool(values["verbose"])
	return cfg.remplace(**changes)


# ==================== execute_payload =========================
def execute_payload(
	payload: dict,
	*,
	sortie: Callable[[str], None] = print,
	historique: str | Path | None = None,
) -> tuple[bool, str]:
	"""Chemin d'exécution "Exécuter" (testable hors-GUI).

	Valide le payload, construit la configuration puis lance la session.
	"""
	try:
		values = payload.get("values") or {}
		if not isinstance(values, dict):
			return False, "Payload invalide (values)"
		config = config_depuis_valeurs(values)
	except (TypeError, ValueError) as exc:
		return False, f"Erreur paramètres: {exc}"

	return executer_session(config, sortie=sortie, historique=historique)


def _build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(
		prog="sigmoide",
		description="Apprentissage et validation d'un réseau sigmoïde multicouche.",
	)
	parser.add_argument("--gui", action="store_true", help="lance l'interface graphique")
	parser.add_argument("--train", type=Path, help="fichier d'apprentissage")
	parser.add_argument("--val", type=Path, help="fichier de validation")
	parser.add_argument("--couches", help='tailles des couches, ex: "16,14,26"')
	parser.add_argument("--eta", help='taux d\'apprentissage, ex: "0.01,0.1"')
	parser.add_argument("--iterations", help='nombres d\'itérations, ex: "1,5"')
	parser.add_argument("--biais", type=float)
	parser.add_argument("--poids-biais", dest="poids_biais", type=float)
	parser.add_argument("--seed", type=int)
	parser.add_argument("--log-console", dest="log_console", help="minimal ou détaillé")
	parser.add_argument("--silencieux", action="store_true", help="n'affiche pas l'erreur par époque")
	parser.add_argument(
		"--historique",
		nargs="?",
		const=service._resolve_path(None),
		type=Path,
		help="ajoute chaque résultat à l'historique (resultats.txt par défaut)",
	)
	parser.add_argument("--une-fois", dest="une_fois", action="store_true", help="pas de menu de redémarrage")
	return parser


# ==================== config_depuis_arguments =========================
def config_depuis_arguments(args: argparse.Namespace, base: ConfigSession | None = None) -> ConfigSession:
	"""Applique les options de ligne de commande sur la configuration (environnement)."""
	values: dict[str, object] = {
		"couches": args.couches,
		"eta": args.eta,
		"iterations": args.iterations,
		"biais": args.biais,
		"poids_biais": args.poids_biais,
		"seed": args.seed,
		"fichier_entrainement": args.train,
		"fichier_validation": args.val,
		"log_console": args.log_console,
	}
	if args.silencieux:
		values["verbose"] = False
	return config_depuis_valeurs(values, base or ConfigSession.from_env())


def _lance_interface(config: ConfigSession) -> int:
	"""Ouvre l'interface CustomTkinter branchée sur ce lanceur."""
	from . import interface

	import tkinter.messagebox as messagebox

	def on_execute(payload: dict, sortie: Callable[[str], None]) -> tuple[bool, str]:
		return execute_payload(payload, sortie=sortie, historique=service._resolve_path(None))

	def on_delete_result(payload: dict) -> tuple[bool, str]:
		raw_line = str(payload.get("raw_line", "")).strip()
		if not raw_line:
			return False, "Ligne invalide"
		confirm = messagebox.askyesno(
			"Suppression",
			"Confirmer la suppression de la ligne sélectionnée dans resultats.txt ?",
		)
		if not confirm:
			return False, "Suppression annulée"
		ok, msg = service.delete_resultat_line(raw_line)
		if ok:
			app.load_resultats_text(service.read_resultats_text())
		return ok, msg

	app = interface.HMIApp(
		startup_config=config,
		resultats_text=service.read_resultats_text(),
		on_execute=on_execute,
		on_delete_result=on_delete_result,
		on_refresh=service.read_resultats_text,
	)
	app.mainloop()
	return 0


def main(argv: Sequence[str] | None = None) -> int:
	args = _build_parser().parse_args(argv)
	try:
		config = config_depuis_arguments(args)
	except ValueError as exc:
		print(f"ERREUR: paramètres invalides ({exc})")
		return 2

	if args.gui:
		return _lance_interface(config)

	rc = 0
	while True:
		ok, msg = executer_session(config, historique=args.historique)
		if ok:
			rc = 0
			print(msg)
		else:
			rc = 1
			print(f"ERREUR: {msg}")
		if args.une_fois:
			break
		try:
			reponse = input(MSG_REDEMARRAGE + "\n")
		except EOFError:
			break
		if reponse.strip().lower() not in {"o", "y"}:
			break
	return rc


if __name__ == "__main__":
	sys.exit(main())
