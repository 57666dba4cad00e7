"""Export PDF du devis de portes coulissantes.

Une page A4 portrait (ou plus si les tableaux debordent):
    - En-tete avec titre et date.
    - Carte d'informations: gamme, rail, disposition, dimensions, vantaux,
      finition, poignee.
    - Tableaux Profils, Accessoires et Remplissages (en-tete sombre, lignes
      alternees), avec saut de page automatique.
    - Pied de page numerote.
"""

from dataclasses import dataclass
from datetime import datetime
import logging

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from .catalogue import libelle_finition
from .devis import Devis, lignes_accessoires, lignes_profils, lignes_remplissages

logger = logging.getLogger(__name__)


MARGE = 12 * mm
HAUTEUR_LIGNE = 13
TAILLE_POLICE = 8
HAUTEUR_PIED = 14


def _tronquer(texte, nb: int) -> str:
    texte = str(texte)
    return texte if len(texte) <= nb else texte[:nb - 1] + "."


# =========================================================================
#  ELEMENTS DE PAGE
# =========================================================================

def _dessiner_entete(c: canvas.Canvas, titre: str, page_w: float, page_h: float) -> float:
    """Dessine le titre et la date; retourne le Y sous le trait de separation."""
    y_top = page_h - MARGE
    c.setFont("Helvetica-Bold", 14)
    c.setFillColor(colors.black)
    c.drawString(MARGE, y_top - 4, titre)
    c.setFont("Helvetica", 8)
    c.drawRightString(page_w - MARGE, y_top - 4,
                      f"Date : {datetime.now().strftime('%d/%m/%Y %H:%M')}")
    y_sep = y_top - 12
    c.setStrokeColor(colors.grey)
    c.setLineWidth(0.5)
    c.line(MARGE, y_sep, page_w - MARGE, y_sep)
    return y_sep - 8


def _dessiner_pied(c: canvas.Canvas, page_w: float, numero: int):
    c.setFont("Helvetica", 7)
    c.setFillColor(colors.grey)
    c.drawString(MARGE, MARGE - 4, "Devis portes coulissantes")
    c.drawRightString(page_w - MARGE, MARGE - 4, f"Page {numero}")
    c.setFillColor(colors.black)


def _dessiner_carte_infos(c: canvas.Canvas, devis: Devis, x: float, w: float,
                          y_start: float) -> float:
    """Dessine la carte d'informations de la configuration."""
    config = devis.configuration
    infos = [
        ("Gamme", f"{config.gamme} (ep. {config.epaisseur})"),
        ("Rail", config.rail),
        ("Disposition", config.disposition),
        ("Dimensions", f"{config.largeur} x {config.hauteur} mm"),
        ("Vantaux", str(config.nb_vantaux)),
        ("Finition", libelle_finition(config.finition) or config.finition or "—"),
        ("Poignee", config.poignee or "—"),
    ]
    if config.nom:
        infos.insert(0, ("Projet", config.nom))

    # deux colonnes de paires libelle / valeur
    nb_lignes = (len(infos) + 1) // 2
    h = nb_lignes * 12 + 10
    c.setFillColor(colors.Color(0.96, 0.96, 0.96))
    c.setStrokeColor(colors.Color(0.7, 0.7, 0.7))
    c.setLineWidth(0.5)
    c.roundRect(x, y_start - h, w, h, 4, fill=1, stroke=1)

    col_w = w / 2
    for i, (libelle, valeur) in enumerate(infos):
        cx = x + 8 + (i // nb_lignes) * col_w
        cy = y_start - 14 - (i % nb_lignes) * 12
        c.setFillColor(colors.Color(0.35, 0.35, 0.35))
        c.setFont("Helvetica", 8)
        c.drawString(cx, cy, f"{libelle} :")
        c.setFillColor(colors.black)
        c.setFont("Helvetica-Bold", 8)
        c.drawString(cx + 60, cy, _tronquer(valeur, 40))
    return y_start - h - 10


# =========================================================================
#  TABLEAUX
# =========================================================================

@dataclass
class Colonne:
    titre: str
    largeur: float
    alignement: str = "gauche"  # gauche, droite ou centre


def _ecrire_cellule(c: canvas.Canvas, x: float, col: Colonne, y: float, texte: str):
    if col.alignement == "droite":
        c.drawRightString(x + col.largeur - 3, y, texte)
    elif col.alignement == "centre":
        c.drawCentredString(x + col.largeur / 2, y, texte)
    else:
        c.drawString(x + 3, y, texte)


def _ecrire_ligne(c: canvas.Canvas, x0: float, cols: list[Colonne], y: float,
                  cellules: list[str]):
    x = x0
    for col, texte in zip(cols, cellules):
        _ecrire_cellule(c, x, col, y, texte)
        x += col.largeur


def _dessiner_tableau(c: canvas.Canvas, x0: float, y_haut: float, cols: list[Colonne],
                      lignes: list[list[str]]) -> float:
    """Dessine un tableau: en-tete fonce, lignes alternees, grille.

    Les titres suivent l'alignement de leur colonne.

    Returns:
        Position Y sous la derniere ligne.
    """
    largeur = sum(col.largeur for col in cols)
    nb = len(lignes) + 1
    y_bas = y_haut - nb * HAUTEUR_LIGNE

    # fonds: en-tete puis une ligne sur deux
    c.setFillColor(colors.Color(0.2, 0.2, 0.2))
    c.rect(x0, y_haut - HAUTEUR_LIGNE, largeur, HAUTEUR_LIGNE, fill=1, stroke=0)
    c.setFillColor(colors.Color(0.95, 0.95, 0.95))
    for i in range(1, len(lignes), 2):
        c.rect(x0, y_haut - (i + 2) * HAUTEUR_LIGNE, largeur, HAUTEUR_LIGNE,
               fill=1, stroke=0)

    c.setFont("Helvetica-Bold", TAILLE_POLICE)
    c.setFillColor(colors.white)
    _ecrire_ligne(c, x0, cols, y_haut - HAUTEUR_LIGNE + 3, [col.titre for col in cols])
    c.setFont("Helvetica", TAILLE_POLICE)
    c.setFillColor(colors.black)
    for i, cellules in enumerate(lignes, start=2):
        _ecrire_ligne(c, x0, cols, y_haut - i * HAUTEUR_LIGNE + 3, cellules)

    c.setStrokeColor(colors.grey)
    c.setLineWidth(0.3)
    for i in range(nb + 1):
        y = y_haut - i * HAUTEUR_LIGNE
        c.line(x0, y, x0 + largeur, y)
    x = x0
    for col in cols:
        c.line(x, y_haut, x, y_bas)
        x += col.largeur
    c.line(x, y_haut, x, y_bas)
    return y_bas



# =========================================================================
#  PAGINATION
# =========================================================================

class _Pages:
    """Curseur vertical avec saut de page et numerotation."""

    def __init__(self, c: canvas.Canvas, titre: str):
        self.c = c
        self.titre = titre
        self.page_w, self.page_h = A4
        self.numero = 1
        self.y = _dessiner_entete(c, titre, self.page_w, self.page_h)

    @property
    def y_min(self) -> float:
        return MARGE + HAUTEUR_PIED

    def nouvelle_page(self):
        _dessiner_pied(self.c, self.page_w, self.numero)
        self.c.showPage()
        self.numero += 1
        self.y = _dessiner_entete(self.c, self.titre, self.page_w, self.page_h)

    def terminer(self):
        _dessiner_pied(self.c, self.page_w, self.numero)

    def section(self, titre: str, cols: list[Colonne], rows: list[list[str]]):
        """Dessine une section titree; le tableau est coupe sur plusieurs pages si besoin."""
        c = self.c
        # titre + en-tete + au moins une ligne
        if self.y - 14 - 2 * HAUTEUR_LIGNE < self.y_min:
            self.nouvelle_page()

        c.setFont("Helvetica-Bold", 10)
        c.setFillColor(colors.black)
        c.drawString(MARGE, self.y - 10, titre)
        self.y -= 14

        if not rows:
            c.setFont("Helvetica-Oblique", 8)
            c.drawString(MARGE + 4, self.y - 10, "Aucun element")
            self.y -= 22
            return

        restantes = list(rows)
        while restantes:
            capacite = int((self.y - self.y_min) / HAUTEUR_LIGNE) - 1
            if capacite < 1:
                self.nouvelle_page()
                continue
            morceau, restantes = restantes[:capacite], restantes[capacite:]
            self.y = _dessiner_tableau(c, MARGE, self.y, cols, morceau)
            if restantes:
                self.nouvelle_page()
        self.y -= 12


# =========================================================================
#  EXPORT
# =========================================================================

COLONNES_ARTICLES = [
    ("Ref.", 14, "gauche"),
    ("Designation", 40, "gauche"),
    ("Finition", 20, "gauche"),
    ("Qte", 8, "droite"),
    ("Longueur", 18, "droite"),
]
COLONNES_REMPLISSAGES = [
    ("Designation", 50, "gauche"),
    ("Qte", 12, "droite"),
    ("Dimensions (L x H)", 38, "centre"),
]


def colonnes(definition: list[tuple[str, float, str]], largeur_totale: float) -> list[Colonne]:
    """Convertit des largeurs relatives en colonnes de largeur_totale points."""
    total = sum(w for _, w, _ in definition)
    return [Colonne(titre, largeur_totale * w / total, alignement)
            for titre, w, alignement in definition]


def exporter_pdf_devis(filepath: str, devis: Devis, titre: str = "Portes coulissantes"):
    """Exporte le devis en PDF A4 portrait.

    Args:
        filepath: Chemin du fichier PDF a generer.
        devis: Devis calcule par ``calculer_devis``.
        titre: Titre affiche en en-tete de chaque page.

    Returns:
        Chemin du fichier PDF genere (identique a filepath).
    """
    c = canvas.Canvas(filepath, pagesize=A4)
    c.setTitle(titre)
    pages = _Pages(c, titre)
    tab_w = pages.page_w - 2 * MARGE

    pages.y = _dessiner_carte_infos(c, devis, MARGE, tab_w, pages.y)

    cols = colonnes(COLONNES_ARTICLES, tab_w)
    rows = [[_tronquer(r["ref"], 14), _tronquer(r["designation"], 44),
             _tronquer(r["finition"], 20), str(r["quantite"]), r["longueur"]]
            for r in lignes_profils(devis)]
    pages.section("Profils", cols, rows)

    rows = [[_tronquer(r["ref"], 14), _tronquer(r["designation"], 44),
             r["finition"], str(r["quantite"]), r["longueur"]]
            for r in lignes_accessoires(devis)]
    pages.section("Accessoires", cols, rows)

    cols = colonnes(COLONNES_REMPLISSAGES, tab_w)
    rows = [[r["designation"], str(r["quantite"]), r["dimensions"]]
            for r in lignes_remplissages(devis)]
    pages.section("Remplissages", cols, rows)

    pages.terminer()
    c.save()
    logger.info("PDF devis exporte: %s (%d page(s))", filepath, pages.numero)
    return filepath
