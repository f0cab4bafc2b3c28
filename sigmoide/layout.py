from __future__ import annotations

"""layout

Mise en forme de l'interface `HMIApp` : palette, tailles, marges, polices
et libellés. `interface.py` ne contient aucune valeur de style en dur.

Les polices CTkFont ne peuvent exister qu'une fois la fenêtre racine créée :
`init_fonts()` est donc appelé depuis `HMIApp.__init__`, alors que
`apply_theme()` est appelé à l'import de `interface`.
"""

import customtkinter as ctk


# ==================== palette =========================
COLOR_BG = "#1B1D24"
COLOR_PANEL = "#232633"
COLOR_ENTRY = "#1E212B"
COLOR_BORDER = "#3A3F4B"
COLOR_TEXT = "#DADAE6"
COLOR_TEXT_OK = "#3FB950"
COLOR_ACCENT = "#7B6CFF"
COLOR_ACCENT_HOVER = "#6B5BF3"
COLOR_ON_ACCENT = "#0C0C10"

# ==================== tailles =========================
WINDOW_W, WINDOW_H = 1000, 860
UI_SCALING = 1.0
ENTRY_W = 120           # champs numériques / listes
ENTRY_PATH_W = 420      # chemins de fichiers
BTN_W, BTN_H = 120, 30
OUTPUT_H = 380
TABLE_ROWS = 6

# ==================== marges =========================
PAD_OUTER = 18
PAD_SECTION_X = 16
PAD_SECTION_Y = 10
PAD_SMALL = 8
PAD_GAP = 6

# ==================== polices =========================
FONT_FAMILY = "Segoe UI"
FONT_MONO_FAMILY = "Consolas"

# Créées par init_fonts()
FONT_TITLE = None
FONT_LABEL = None
FONT_ENTRY = None
FONT_BUTTON = None
FONT_MONO = None


def apply_theme() -> None:
	"""Mode sombre CustomTkinter (valable avant la création de la fenêtre)."""
	ctk.set_appearance_mode("Dark")


def init_fonts() -> None:
	"""Crée les CTkFont partagées (une seule fois, fenêtre racine requise)."""
	global FONT_TITLE, FONT_LABEL, FONT_ENTRY, FONT_BUTTON, FONT_MONO
	if FONT_TITLE is not None:
		return
	FONT_TITLE = ctk.CTkFont(family=FONT_FAMILY, size=17, weight="bold")
	FONT_LABEL = ctk.CTkFont(family=FONT_FAMILY, size=12)
	FONT_ENTRY = ctk.CTkFont(family=FONT_FAMILY, size=12)
	FONT_BUTTON = ctk.CTkFont(family=FONT_FAMILY, size=12, weight="bold")
	FONT_MONO = ctk.CTkFont(family=FONT_MONO_FAMILY, size=11)


def center_window(window, width: int, height: int) -> None:
	"""Place la fenêtre au centre de l'écran (ignoré si le WM refuse)."""
	try:
		window.update_idletasks()
		left = max(0, (window.winfo_screenwidth() - int(width)) // 2)
		top = max(0, (window.winfo_screenheight() - int(height)) // 2)
		window.geometry(f"{int(width)}x{int(height)}+{left}+{top}")
	except Exception:
		return


# ==================== formulaire =========================
# (clé du payload, libellé, largeur du champ)
FORM_FIELDS: list[tuple[str, str, int]] = [
	("couches", "Couches (entrées, cachées..., sorties)", ENTRY_W),
	("eta", "Taux d'apprentissage (LR)", ENTRY_W),
	("iterations", "Itérations", ENTRY_W),
	("biais", "Biais", ENTRY_W),
	("poids_biais", "Poids initial du biais", ENTRY_W),
	("seed", "Graine (vide = aléatoire)", ENTRY_W),
	("fichier_entrainement", "Fichier d'apprentissage", ENTRY_PATH_W),
	("fichier_validation", "Fichier de validation", ENTRY_PATH_W),
]

# ==================== historique =========================
TABLE_COLUMNS = ("couches", "eta", "iterations", "biais", "poids_biais", "score")
TABLE_HEADINGS: dict[str, str] = {
	"couches": "[couches]",
	"eta": "[eta]",
	"iterations": "[itérations]",
	"biais": "[biais]",
	"poids_biais": "[poids biais]",
	"score": "[score]",
}

# ==================== libellés =========================
UI_TITLE = "HMI - Réseau sigmoïde"
UI_TITLE_FORM = "Paramètres de la session"
UI_TITLE_OUTPUT = "Sortie (CSV)"
UI_TITLE_TABLE = "Historique des résultats"
UI_LABEL_LOG = "Console"
UI_LABEL_VERBOSE = "Erreur par époque"
UI_BTN_EXECUTE = "Exécuter"
UI_BTN_DELETE = "Supprimer"
UI_BTN_CLEAR = "Effacer"
UI_STATUS_RUNNING = "Veuillez patienter, apprentissage en cours"
UI_DIALOG_ERROR = "Erreur"
