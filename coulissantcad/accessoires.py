"""Calcul des accessoires d'un ensemble coulissant.

Roulettes, cales, freins, guides, antideraillements, joints, balais,
profils de vitrage, capots et equerres de suspension. Les longueurs des
joints et balais viennent des profils deja calcules (``LongueursProfils``).

Une ligne de quantite nulle n'est jamais emise.
"""

import logging
import math
from dataclasses import dataclass, field

from .catalogue import Catalogue, catalogue_standard
from .configuration import Configuration, configuration_bornee
from .outils import entier_borne
from .profils import ResultatProfils

logger = logging.getLogger(__name__)

# Longueur de rail couverte par une equerre de suspension (mm)
PAS_EQUERRE_SUSPENSION = 500

# Finitions affichees dans le devis pour les accessoires
FINITIONS_ACCESSOIRES = ("Noir", "Gris", "Translucide")

VARIANTES_JOINT = {"Noir": "JBUTNO", "Gris": "JBUTNO"}
VARIANTES_BALAI_1050 = {"Noir": "JB48/1050NO", "Gris": "JB48/1050"}
VARIANTES_BALAI_500 = {"Noir": "JB48/500NO", "Gris": "JB48/500"}


@dataclass
class LigneAccessoire:
    ref: str
    designation: str
    type: str
    quantite: int
    longueur: int | None = None
    libelle_finition: str | None = None

    def __repr__(self):
        lg = f" L={self.longueur}mm" if self.longueur else ""
        return f"{self.ref}: x{self.quantite}{lg} - {self.designation}"


@dataclass
class LongueursProfils:
    """Longueurs issues du calcul des profils (mm)."""
    poignee: int = 0
    traverse_haute: int = 0
    corniere: int = 0
    qte_traverses: int = 0
    longueur_traverses: int = 0


@dataclass
class ResultatAccessoires:
    liste: list[LigneAccessoire] = field(default_factory=list)
    par_type: dict[str, list[LigneAccessoire]] = field(default_factory=dict)
    meta: dict = field(default_factory=dict)


def longueurs_depuis_profils(profils: ResultatProfils) -> LongueursProfils:
    """Extrait les longueurs utiles aux accessoires d'un resultat profils."""
    def premiere(lignes):
        return lignes[0].longueur if lignes else 0

    return LongueursProfils(
        poignee=premiere(profils.poignees),
        traverse_haute=premiere(profils.traverses_hautes),
        corniere=premiere(profils.cornieres),
        qte_traverses=sum(l.quantite for l in profils.traverses_intermediaires),
        longueur_traverses=premiere(profils.traverses_intermediaires),
    )


def variante_couleur(ref_base: str, couleur: str,
                     variantes: dict[str, str]) -> tuple[str, str | None]:
    """Choisit la reference selon la couleur; retourne (reference, finition)."""
    return variantes.get(couleur, ref_base), (couleur or None)


class _Liste:
    """Accumulateur de lignes d'accessoires."""

    def __init__(self, catalogue: Catalogue):
        self.catalogue = catalogue
        self.lignes: list[LigneAccessoire] = []

    def ajouter(self, ref: str, quantite, role: str, designation: str | None = None,
                longueur=None, finition: str | None = None):
        quantite = entier_borne(quantite, 0)
        if quantite <= 0:
            return
        longueur = entier_borne(longueur, 0) if longueur is not None else 0
        self.lignes.append(LigneAccessoire(
            ref=ref,
            designation=designation if designation is not None
            else self.catalogue.designation(ref),
            type=self.catalogue.type_reference(ref) or role or "",
            quantite=quantite,
            longueur=longueur or None,
            libelle_finition=finition or None,
        ))


# =========================================================================
#  REGLES PAR FAMILLE
# =========================================================================

def _roues(acc: _Liste, gamme: str, epaisseur: str, n: int):
    if gamme in ("82", "96"):
        acc.ajouter("KITROUPRO", n, "roue")
        if epaisseur == "16":
            acc.ajouter("CALE16-19", n, "cale")
    if gamme == "96CA":
        acc.ajouter("ROUTHB52", n * 2, "roue")


def _freins(acc: _Liste, gamme: str, epaisseur: str, fram: int, freco: int,
            frlamelle: int):
    if gamme == "82":
        acc.ajouter("FR82", fram, "frein")
        acc.ajouter("FR82E", freco, "frein")
    elif gamme == "96":
        acc.ajouter("FR96-16" if epaisseur == "16" else "FR96", fram, "frein")
    elif gamme == "96CA":
        acc.ajouter("FRBASEO", fram, "frein")
    else:
        return
    # frein a lamelle: toujours la base et la version enrobee
    acc.ajouter("FREIN", frlamelle, "frein")
    acc.ajouter("FREINENROB", frlamelle, "frein")


def _guides(acc: _Liste, gamme: str, epaisseur: str, n: int, fram: int, freco: int):
    if gamme == "82":
        acc.ajouter("GUIDHAUT82CN", max(0, (n - (fram + freco)) * 2), "guide")
    elif gamme == "96":
        acc.ajouter("GUIDHAUT16" if epaisseur == "16" else "GUIDHAUT96",
                    max(0, (n - fram) * 2), "guide")
    elif gamme == "96CA":
        quantite = n + max(0, n - fram)
        acc.ajouter("GUIDHAUTBASEO", quantite, "guide")
        acc.ajouter("ANTIDERAIL1", quantite, "antideraillement")


def _joints_balais_96(acc: _Liste, config: Configuration, longueur_rail: int,
                      longueurs: LongueursProfils):
    n = config.nb_vantaux
    ref, finition = variante_couleur("JBUT", config.couleurs.joint, VARIANTES_JOINT)
    if longueur_rail > 0:
        acc.ajouter(ref, 1, "joint", "Joint de butée", longueur_rail, finition)

    ref, finition = variante_couleur("JB48/1050", config.couleurs.balais,
                                     VARIANTES_BALAI_1050)
    if longueurs.corniere > 0:
        acc.ajouter(ref, n, "balai", "Balai anti-poussière", longueurs.corniere, finition)

    ref, finition = variante_couleur("JB48/500", config.couleurs.balais,
                                     VARIANTES_BALAI_500)
    if longueurs.poignee > 0:
        acc.ajouter(ref, n * 2, "balai", "Balai de côté", longueurs.poignee, finition)


def _joints_vitrage_96ca(acc: _Liste, config: Configuration, longueur_rail: int,
                         longueurs: LongueursProfils):
    n = config.nb_vantaux
    ref, finition = variante_couleur("JBUT", config.couleurs.joint, VARIANTES_JOINT)
    if longueur_rail > 0:
        acc.ajouter(ref, 1, "joint", "Joint de butée", longueur_rail, finition)
    if longueurs.poignee > 0:
        acc.ajouter(ref, n * 2, "joint", "Joint de butée", longueurs.poignee, finition)

    if config.epaisseur not in ("6-8", "10-12"):
        return
    base = "PVITRAGE" if config.epaisseur == "6-8" else "PVITRAGE12"
    designation = f"Profil de vitrage {config.epaisseur}"
    ref, finition = variante_couleur(base, config.couleurs.vitrage,
                                     {"Noir": base + "NO", "Translucide": base})
    # le long des poignees, en haut, puis sur les traverses intermediaires
    if longueurs.poignee > 0:
        acc.ajouter(ref, n * 2, "joint", designation, longueurs.poignee, finition)
    if longueurs.traverse_haute > 0:
        acc.ajouter(ref, n * 2, "joint", designation, longueurs.traverse_haute, finition)
    if longueurs.qte_traverses > 0 and longueurs.longueur_traverses > 0:
        acc.ajouter(ref, longueurs.qte_traverses, "joint", designation,
                    longueurs.longueur_traverses, finition)


def _monorail(acc: _Liste, config: Configuration):
    if config.rail != "simple":
        return
    if config.gamme in ("96", "96CA"):
        acc.ajouter("CAPOTRH50", 2, "capot", "Capot monorail haut", finition="Noir")
        acc.ajouter("CAPOTRB48", 2, "capot", "Capot monorail bas", finition="Noir")
    longueur_totale = config.largeur * config.nb_vantaux * 2
    acc.ajouter("EQUERSUSPM", math.ceil(longueur_totale / PAS_EQUERRE_SUSPENSION),
                "equerre", "Équerre de suspension + vis", finition="Noir")


def grouper_par_type(lignes: list[LigneAccessoire]) -> dict[str, list[LigneAccessoire]]:
    groupes: dict[str, list[LigneAccessoire]] = {}
    for ligne in lignes:
        groupes.setdefault(ligne.type or "autre", []).append(ligne)
    return groupes


# =========================================================================
#  CALCUL PRINCIPAL
# =========================================================================

def calculer_accessoires(config: Configuration, longueurs: LongueursProfils | None = None,
                         catalogue: Catalogue | None = None) -> ResultatAccessoires:
    """Calcule la liste des accessoires d'une configuration.

    Args:
        config: Configuration de l'ensemble.
        longueurs: Longueurs issues du calcul des profils (0 partout si None).
        catalogue: Catalogue de reference, catalogue standard par defaut.

    Returns:
        ResultatAccessoires: liste a plat, regroupement par type et meta.
    """
    config = configuration_bornee(config)
    catalogue = catalogue or catalogue_standard()
    longueurs = longueurs or LongueursProfils()
    longueurs = LongueursProfils(
        poignee=entier_borne(longueurs.poignee, 0),
        traverse_haute=entier_borne(longueurs.traverse_haute, 0),
        corniere=entier_borne(longueurs.corniere, 0),
        qte_traverses=entier_borne(longueurs.qte_traverses, 0),
        longueur_traverses=entier_borne(longueurs.longueur_traverses, 0),
    )
    gamme = config.gamme
    epaisseur = config.epaisseur
    n = entier_borne(config.nb_vantaux, 1)
    fram = config.freins.fram
    freco = config.freins.freco
    frlamelle = config.freins.frlamelle

    if config.rail == "simple":
        longueur_rail = config.largeur * n * 2
    else:
        longueur_rail = config.largeur

    acc = _Liste(catalogue)
    _roues(acc, gamme, epaisseur, n)
    _freins(acc, gamme, epaisseur, fram, freco, frlamelle)
    _guides(acc, gamme, epaisseur, n, fram, freco)
    if gamme == "96":
        _joints_balais_96(acc, config, longueur_rail, longueurs)
    elif gamme == "96CA":
        _joints_vitrage_96ca(acc, config, longueur_rail, longueurs)
    _monorail(acc, config)

    logger.debug("Accessoires calcules: %d lignes (gamme=%s rail=%s)",
                 len(acc.lignes), gamme, config.rail)
    return ResultatAccessoires(
        liste=acc.lignes,
        par_type=grouper_par_type(acc.lignes),
        meta={
            "gamme": gamme,
            "epaisseur": epaisseur,
            "rail": config.rail,
            "nb_vantaux": n,
            "freins": {"fram": fram, "freco": freco, "frlamelle": frlamelle},
            "couleurs": {
                "joint": config.couleurs.joint,
                "balais": config.couleurs.balais,
                "vitrage": config.couleurs.vitrage,
            },
            "longueurs": {
                "poignee": longueurs.poignee,
                "traverse_haute": longueurs.traverse_haute,
                "corniere": longueurs.corniere,
                "qte_traverses": longueurs.qte_traverses,
                "longueur_traverses": longueurs.longueur_traverses,
            },
        },
    )
