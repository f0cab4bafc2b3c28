"""interface

Rôle
	Interface HMI (CustomTkinter) du réseau sigmoïde.

Contenu
	- `HMIApp` : formulaire, zone de sortie et tableau d'historique.
	- Valider les champs utilisateur (listes de couches/eta/itérations, nombres).
	- Action "Exécuter" : construit un payload puis délègue à `lanceur.execute_payload`
	  (via le callback `on_execute`) ; le texte produit est affiché dans la zone
	  de sortie.
	- Historique : tableau des lignes de `resultats.txt` (suppression possible).

Flux
	UI -> payload (dict) -> lanceur -> (loader + reseau + matrice) -> zone de sortie
"""

from __future__ import annotations

import tkinter.messagebox as messagebox
import tkinter.ttk as ttk

import customtkinter as ctk

from . import layout
from .config import NIVEAUX_CONSOLE, ConfigSession, normalise_niveau_console, parse_liste
from .service import RESULTATS_HEADER, parse_resultat_line


layout.apply_theme()


class HMIApp(ctk.CTk):
	"""Fenêtre unique : paramètres, sortie CSV et historique."""

	# ==================== __init__ =========================
	def __init__(
		self,
		*,
		startup_config: ConfigSession | None = None,
		resultats_text: str | None = None,
		on_execute=None,
		on_delete_result=None,
		on_refresh=None,
	) -> None:
		"""Les callbacks viennent du lanceur (voir `lanceur._lance_interface`)."""
		super().__init__()
		self.startup_config = startup_config or ConfigSession()
		self.on_execute = on_execute
		self.on_delete_result = on_delete_result
		self.on_refresh = on_refresh
		self.entries: dict[str, ctk.CTkEntry] = {}
		self.table_raw_lines: dict[str, str] = {}
		try:
			ctk.set_widget_scaling(float(layout.UI_SCALING))
			ctk.set_window_scaling(float(layout.UI_SCALING))
		except Exception:
			pass
		layout.init_fonts()
		self.title(layout.UI_TITLE)
		self.geometry(f"{layout.WINDOW_W}x{layout.WINDOW_H}")
		layout.center_window(self, layout.WINDOW_W, layout.WINDOW_H)
		self.minsize(layout.WINDOW_W, layout.WINDOW_H)
		self.configure(fg_color=layout.COLOR_BG)

		self._build_ui()
		self._apply_startup_config()
		if resultats_text:
			self.load_resultats_text(resultats_text)

	def _make_entry(self, parent: ctk.CTkFrame, *, width: int = layout.ENTRY_W) -> ctk.CTkEntry:
		"""Champ de saisie aux couleurs de `layout`."""
		return ctk.CTkEntry(
			parent,
			width=width,
			height=28,
			fg_color=layout.COLOR_ENTRY,
			border_color=layout.COLOR_BORDER,
			text_color=layout.COLOR_TEXT,
			font=layout.FONT_ENTRY,
		)

	def _make_button(self, parent: ctk.CTkFrame, *, text: str, command) -> ctk.CTkButton:
		"""Bouton d'action (accent violet)."""
		return ctk.CTkButton(
			parent,
			text=text,
			width=layout.BTN_W,
			height=layout.BTN_H,
			fg_color=layout.COLOR_ACCENT,
			hover_color=layout.COLOR_ACCENT_HOVER,
			text_color=layout.COLOR_ON_ACCENT,
			font=layout.FONT_BUTTON,
			command=command,
		)

	def _make_title(self, parent: ctk.CTkFrame, text: str) -> ctk.CTkLabel:
		return ctk.CTkLabel(parent, text=text, text_color=layout.COLOR_TEXT, font=layout.FONT_TITLE)

	# ==================== _build_ui =========================
	def _build_ui(self) -> None:
		"""Construit toute l'interface (formulaire, sortie, historique)."""
		root_frame = ctk.CTkFrame(
			self,
			fg_color=layout.COLOR_PANEL,
			border_color=layout.COLOR_BORDER,
			border_width=2,
			corner_radius=18,
		)
		root_frame.pack(fill="both", expand=True, padx=layout.PAD_OUTER, pady=layout.PAD_OUTER)
		root_frame.grid_columnconfigure(0, weight=1)
		root_frame.grid_rowconfigure(1, weight=1)

		# ---------- Formulaire ----------
		form_frame = ctk.CTkFrame(root_frame, fg_color="transparent")
		form_frame.grid(row=0, column=0, padx=layout.PAD_SECTION_X, pady=(14, 6), sticky="ew")
		self._make_title(form_frame, layout.UI_TITLE_FORM).grid(
			row=0, column=0, columnspan=4, sticky="w", pady=(0, layout.PAD_SMALL)
		)

		# Champs courts sur deux colonnes, chemins de fichiers sur une ligne entière
		row, col = 1, 0
		for key, label, width in layout.FORM_FIELDS:
			pleine_ligne = width > layout.ENTRY_W
			if pleine_ligne and col:
				row, col = row + 1, 0
			ctk.CTkLabel(form_frame, text=label, text_color=layout.COLOR_TEXT, font=layout.FONT_LABEL).grid(
				row=row, column=col, sticky="w", padx=(0, layout.PAD_GAP), pady=layout.PAD_GAP
			)
			entry = self._make_entry(form_frame, width=width)
			entry.grid(
				row=row,
				column=col + 1,
				columnspan=3 if pleine_ligne else 1,
				sticky="w",
				padx=(0, layout.PAD_SECTION_X),
				pady=layout.PAD_GAP,
			)
			self.entries[key] = entry
			if pleine_ligne or col:
				row, col = row + 1, 0
			else:
				col = 2

		options_frame = ctk.CTkFrame(form_frame, fg_color="transparent")
		options_frame.grid(row=10, column=0, columnspan=4, sticky="ew", pady=(layout.PAD_SMALL, 0))

		ctk.CTkLabel(options_frame, text=layout.UI_LABEL_LOG, text_color=layout.COLOR_TEXT, font=layout.FONT_LABEL).pack(
			side="left", padx=(0, layout.PAD_SMALL)
		)
		self.log_var = ctk.StringVar(value=NIVEAUX_CONSOLE[0])
		for niveau in NIVEAUX_CONSOLE:
			ctk.CTkRadioButton(
				options_frame,
				text=niveau,
				value=niveau,
				variable=self.log_var,
				text_color=layout.COLOR_TEXT,
				font=layout.FONT_LABEL,
				fg_color=layout.COLOR_ACCENT,
			).pack(side="left", padx=layout.PAD_SMALL)

		self.verbose_var = ctk.BooleanVar(value=True)
		ctk.CTkCheckBox(
			options_frame,
			text=layout.UI_LABEL_VERBOSE,
			variable=self.verbose_var,
			text_color=layout.COLOR_TEXT,
			font=layout.FONT_LABEL,
			fg_color=layout.COLOR_ACCENT,
		).pack(side="left", padx=layout.PAD_SECTION_X)

		self._make_button(options_frame, text=layout.UI_BTN_EXECUTE, command=self._on_execute).pack(
			side="right", padx=(layout.PAD_SMALL, 0)
		)
		self._make_button(options_frame, text=layout.UI_BTN_CLEAR, command=self._clear_output).pack(side="right")

		self.status_label = ctk.CTkLabel(form_frame, text="", text_color=layout.COLOR_TEXT_OK, font=layout.FONT_LABEL)
		self.status_label.grid(row=11, column=0, columnspan=4, sticky="w")

		# ---------- Sortie ----------
		output_frame = ctk.CTkFrame(root_frame, fg_color="transparent")
		output_frame.grid(row=1, column=0, padx=layout.PAD_SECTION_X, pady=layout.PAD_SECTION_Y, sticky="nsew")
		self._make_title(output_frame, layout.UI_TITLE_OUTPUT).pack(anchor="w")
		self.output_box = ctk.CTkTextbox(
			output_frame,
			height=layout.OUTPUT_H,
			fg_color=layout.COLOR_ENTRY,
			border_color=layout.COLOR_BORDER,
			border_width=1,
			text_color=layout.COLOR_TEXT,
			font=layout.FONT_MONO,
			wrap="none",
		)
		self.output_box.pack(fill="both", expand=True, pady=(layout.PAD_GAP, 0))

		# ---------- Historique ----------
		table_frame = ctk.CTkFrame(root_frame, fg_color="transparent")
		table_frame.grid(row=2, column=0, padx=layout.PAD_SECTION_X, pady=(0, 14), sticky="ew")
		header = ctk.CTkFrame(table_frame, fg_color="transparent")
		header.pack(fill="x")
		self._make_title(header, layout.UI_TITLE_TABLE).pack(side="left")
		self._make_button(header, text=layout.UI_BTN_DELETE, command=self._on_delete_result).pack(side="right")

		self._init_table_style()
		self.table_tree = ttk.Treeview(
			table_frame,
			columns=layout.TABLE_COLUMNS,
			show="headings",
			height=layout.TABLE_ROWS,
			style="Resultats.Treeview",
		)
		for col in layout.TABLE_COLUMNS:
			self.table_tree.heading(col, text=layout.TABLE_HEADINGS[col])
			self.table_tree.column(col, anchor="center", width=140)
		self.table_tree.pack(fill="x", pady=(layout.PAD_GAP, 0))
		self.table_tree.bind("<Double-1>", self._on_table_double_click)

	def _init_table_style(self) -> None:
		"""Style sombre du Treeview (ttk n'hérite pas du thème CustomTkinter)."""
		style = ttk.Style(self)
		try:
			style.theme_use("clam")
		except Exception:
			pass
		style.configure(
			"Resultats.Treeview",
			background=layout.COLOR_ENTRY,
			fieldbackground=layout.COLOR_ENTRY,
			foreground=layout.COLOR_TEXT,
			bordercolor=layout.COLOR_BORDER,
			rowheight=24,
		)
		style.configure(
			"Resultats.Treeview.Heading",
			background=layout.COLOR_PANEL,
			foreground=layout.COLOR_TEXT,
		)
		style.map("Resultats.Treeview", background=[("selected", layout.COLOR_ACCENT)])

	def _set_entry_text(self, key: str, text: str) -> None:
		entry = self.entries.get(key)
		if entry is None:
			return
		entry.delete(0, "end")
		entry.insert(0, text)

	# ==================== _apply_startup_config =========================
	def _apply_startup_config(self) -> None:
		"""Remplit le formulaire avec la configuration de démarrage."""
		cfg = self.startup_config
		self._set_entry_text("couches", ",".join(str(n) for n in cfg.couches))
		self._set_entry_text("eta", ",".join(format(float(eta), "g") for eta in cfg.taux_apprentissage))
		self._set_entry_text("iterations", ",".join(str(k) for k in cfg.iterations))
		self._set_entry_text("biais", format(cfg.biais, "g"))
		self._set_entry_text("poids_biais", format(cfg.poids_biais, "g"))
		self._set_entry_text("seed", "" if cfg.seed is None else str(cfg.seed))
		self._set_entry_text("fichier_entrainement", str(cfg.fichier_entrainement))
		self._set_entry_text("fichier_validation", str(cfg.fichier_validation))
		self.verbose_var.set(bool(cfg.verbose))
		self.log_var.set(normalise_niveau_console(cfg.log_console) or NIVEAUX_CONSOLE[0])

	# ==================== load_resultats_text =========================
	def load_resultats_text(self, text: str) -> None:
		"""Recharge le tableau à partir du contenu de resultats.txt."""
		for item in self.table_tree.get_children():
			self.table_tree.delete(item)
		self.table_raw_lines.clear()

		for raw in (text or "").splitlines():
			line = raw.strip()
			if not line or line == RESULTATS_HEADER:
				continue
			try:
				fields = parse_resultat_line(line)
			except ValueError:
				continue
			score = fields["score"]
			item = self.table_tree.insert(
				"",
				"end",
				values=(
					",".join(str(n) for n in fields["couches"]),
					format(float(fields["eta"]), "g"),
					fields["iterations"],
					format(float(fields["biais"]), "g"),
					format(float(fields["poids_biais"]), "g"),
					"N" if score is None else f"{float(score):.2f}%",
				),
			)
			self.table_raw_lines[item] = line

	def _refresh_table(self) -> None:
		if callable(self.on_refresh):
			self.load_resultats_text(self.on_refresh())

	def _on_table_double_click(self, event=None) -> None:
		"""Recharge une configuration de l'historique dans le formulaire."""
		selected = self.table_tree.selection()
		if not selected:
			return
		raw_line = self.table_raw_lines.get(selected[0])
		if not raw_line:
			return
		try:
			fields = parse_resultat_line(raw_line)
		except ValueError:
			return
		self._set_entry_text("couches", ",".join(str(n) for n in fields["couches"]))
		self._set_entry_text("eta", format(float(fields["eta"]), "g"))
		self._set_entry_text("iterations", str(fields["iterations"]))
		self._set_entry_text("biais", format(float(fields["biais"]), "g"))
		self._set_entry_text("poids_biais", format(float(fields["poids_biais"]), "g"))

	def _on_delete_result(self) -> None:
		selected = self.table_tree.selection()
		if not selected:
			messagebox.showerror(layout.UI_DIALOG_ERROR, "Veuillez sélectionner une ligne de l'historique")
			return
		raw_line = self.table_raw_lines.get(selected[0], "")
		if callable(self.on_delete_result):
			ok, msg = self.on_delete_result({"raw_line": raw_line})
			if not ok and msg:
				messagebox.showwarning("Suppression", msg)

	def _clear_output(self) -> None:
		self.output_box.delete("1.0", "end")

	def _append_output(self, text: str) -> None:
		self.output_box.insert("end", f"{text}\n")
		self.output_box.see("end")
		self.output_box.update_idletasks()

	def _set_status(self, message: str) -> None:
		self.status_label.configure(text=message)
		try:
			self.update_idletasks()
		except Exception:
			pass

	# ==================== _validate_entries =========================
	def _validate_entries(self) -> dict[str, object]:
		"""Valide tous les champs et retourne un dictionnaire de valeurs."""
		raw = {key: entry.get().strip() for key, entry in self.entries.items()}
		values: dict[str, object] = dict(raw)
		try:
			values["couches"] = parse_liste(raw["couches"], int)
			values["eta"] = parse_liste(raw["eta"], float)
			values["iterations"] = parse_liste(raw["iterations"], int)
			values["biais"] = float(raw["biais"].replace(",", "."))
			values["poids_biais"] = float(raw["poids_biais"].replace(",", "."))
			values["seed"] = int(raw["seed"]) if raw["seed"] else None
		except ValueError as exc:
			raise ValueError(f"Valeur invalide ({exc})") from exc

		if len(values["couches"]) < 2:
			raise ValueError("couches doit contenir au moins 2 valeurs (entrées + sorties)")
		if not values["eta"] or not values["iterations"]:
			raise ValueError("eta et itérations ne doivent pas être vides")
		values["log_console"] = self.log_var.get()
		values["verbose"] = bool(self.verbose_var.get())
		return values

	# ==================== _on_execute =========================
	def _on_execute(self) -> None:
		"""Bouton Exécuter : payload -> on_execute, sortie ligne par ligne dans la zone de texte."""
		try:
			values = self._validate_entries()
		except ValueError as exc:
			messagebox.showerror(layout.UI_DIALOG_ERROR, str(exc))
			return

		if not callable(self.on_execute):
			messagebox.showinfo(layout.UI_BTN_EXECUTE, "Aucun lanceur connecté (callback on_execute manquant)")
			return

		self._clear_output()
		self._set_status(layout.UI_STATUS_RUNNING)
		try:
			ok, msg = self.on_execute({"values": values}, self._append_output)
		except Exception as exc:
			messagebox.showerror(layout.UI_BTN_EXECUTE, f"Erreur (lanceur): {exc}")
			return
		finally:
			self._set_status("")

		self._refresh_table()
		if ok:
			messagebox.showinfo(layout.UI_BTN_EXECUTE, msg or "OK")
		else:
			messagebox.showwarning(layout.UI_BTN_EXECUTE, msg or "Paramètres refusés")
