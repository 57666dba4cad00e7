"""Cotes de debit des remplissages (largeur et hauteurs) par vantail.

Les traverses intermediaires decoupent le remplissage d'un vantail en
segments: un segment bas, un segment entre chaque paire de traverses
consecutives et un segment haut. Les positions de traverses sont donnees
depuis le bas du panneau jusqu'a l'axe de la traverse.

Gamme 96 (et gammes sans regle propre):
    sans traverse : H = hauteur - 50
    bas           : y1 - 1
    entre         : y(k+1) - y(k) - 2
    haut          : hauteur - 50 - yn - 1

Gamme 96CA (TI28 par defaut / TI37):
    sans traverse : H = hauteur - 54 - 120
    bas           : y1 - (45 + 5)       / y1 - (45 + 9.5)
    entre         : y(k+1) - y(k) - 10  / y(k+1) - y(k) - 19
    haut          : hauteur - (55 + 20 + 5) - yn / hauteur - (55 + 20 + 9.5) - yn

Apres le calcul brut, un vantail dont les traverses sont regulierement
espacees recoit des segments tous egaux (egalisation), puis les hauteurs
quasi identiques entre vantaux sont ramenees a une seule valeur
(regroupement). Les cotes negatives sont ramenees a 0.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from . import tolerances
from .configuration import Configuration, configuration_bornee
from .outils import clip0, entier_borne, nombre_propre, vers_nombre
from .profils import ResultatProfils, reference_traverse_intermediaire

logger = logging.getLogger(__name__)


# Deductions gamme 96 (mm)
DEDUCTION_96_SANS_TRAVERSE = 50
DEDUCTION_96_BAS = 1
DEDUCTION_96_ENTRE = 2
DEDUCTION_96_HAUT = 50 + 1

# Deductions gamme 96CA (mm)
DEDUCTION_96CA_SANS_TRAVERSE = 54 + 120
DEDUCTIONS_96CA = {
    "TI37": {"bas": 45 + 9.5, "entre": 19, "haut": 55 + 20 + 9.5},
    "TI28": {"bas": 45 + 5, "entre": 10, "haut": 55 + 20 + 5},
}


@dataclass
class HauteursRemplissage:
    """Hauteurs des segments de remplissage d'un vantail (mm).

    ``entre`` contient n - 1 valeurs pour n traverses; ``haut`` vaut None
    quand le vantail n'a pas de traverse (``bas`` porte alors toute la
    hauteur).
    """
    bas: float = 0
    entre: list[float] = field(default_factory=list)
    haut: float | None = None

    def segments(self) -> list[float]:
        """Segments dans l'ordre bas -> haut."""
        valeurs = [self.bas, *self.entre]
        if self.haut is not None:
            valeurs.append(self.haut)
        return valeurs


@dataclass
class LargeurRemplissage:
    brute: int = 0
    coupe: int = 0


@dataclass
class EntreeRemplissage:
    largeur: LargeurRemplissage = field(default_factory=LargeurRemplissage)
    hauteurs: HauteursRemplissage = field(default_factory=HauteursRemplissage)


@dataclass
class ResultatRemplissages:
    par_vantail: dict[int, EntreeRemplissage] = field(default_factory=dict)
    meta: dict = field(default_factory=dict)


def _deductions_96ca(ref_traverse: str | None) -> dict:
    if str(ref_traverse or "").strip().upper() == "TI37":
        return DEDUCTIONS_96CA["TI37"]
    return DEDUCTIONS_96CA["TI28"]


def _trier_centres(centres) -> list[float]:
    return sorted(vers_nombre(c, 0.0) for c in (centres or []))


# =========================================================================
#  CALCUL BRUT
# =========================================================================

def calculer_hauteurs_brutes(gamme: str, hauteur, centres,
                             ref_traverse: str | None = None) -> HauteursRemplissage:
    """Applique les formules de debit sans egalisation."""
    hauteur = vers_nombre(hauteur, 0.0)
    ys = _trier_centres(centres)
    n = len(ys)

    if gamme == "96CA":
        if n == 0:
            sans = hauteur - DEDUCTION_96CA_SANS_TRAVERSE
            return HauteursRemplissage(nombre_propre(clip0(sans)), [], None)
        d = _deductions_96ca(ref_traverse)
        bas = ys[0] - d["bas"]
        entre = [ys[k] - ys[k - 1] - d["entre"] for k in range(1, n)]
        haut = hauteur - d["haut"] - ys[-1]
    else:
        if n == 0:
            sans = hauteur - DEDUCTION_96_SANS_TRAVERSE
            return HauteursRemplissage(nombre_propre(clip0(sans)), [], None)
        bas = ys[0] - DEDUCTION_96_BAS
        entre = [ys[k] - ys[k - 1] - DEDUCTION_96_ENTRE for k in range(1, n)]
        haut = hauteur - DEDUCTION_96_HAUT - ys[-1]

    return HauteursRemplissage(
        bas=nombre_propre(clip0(bas)),
        entre=[nombre_propre(clip0(v)) for v in entre],
        haut=nombre_propre(clip0(haut)),
    )


# =========================================================================
#  EGALISATION
# =========================================================================

def hauteur_totale_theorique(gamme: str, hauteur, nb_traverses: int,
                             ref_traverse: str | None = None) -> float:
    """Somme theorique des segments d'un vantail a n traverses.

    Calculee a partir des deductions (et non de la somme des segments
    bruts) pour ne pas cumuler les arrondis de mesure.
    """
    hauteur = vers_nombre(hauteur, 0.0)
    n = nb_traverses
    if gamme == "96CA":
        if str(ref_traverse or "").strip().upper() == "TI37":
            return hauteur - (139 + 19 * (n - 1))
        return hauteur - (130 + 10 * (n - 1))
    return hauteur - 50 - 2 * n


def entraxes_reguliers(centres) -> bool:
    """Vrai si les ecarts entre traverses consecutives sont egaux a 1 mm pres.

    Il faut au moins deux traverses pour qu'un ecart existe.
    """
    ys = _trier_centres(centres)
    ecarts = [ys[k] - ys[k - 1] for k in range(1, len(ys))]
    if not ecarts:
        return False
    return max(ecarts) - min(ecarts) <= tolerances.TOLERANCE_ENTRAXES_MM


def egaliser_hauteurs(hauteurs: HauteursRemplissage, gamme: str, hauteur, centres,
                      ref_traverse: str | None = None,
                      forcer: bool = False) -> HauteursRemplissage:
    """Remplace les segments d'un vantail par une valeur unique si la repartition est reguliere.

    La cible ``floor(somme theorique / (n + 1))`` n'est appliquee que si les
    traverses sont regulierement espacees (ecarts egaux a
    ``TOLERANCE_ENTRAXES_MM`` pres) ou si l'egalisation est forcee. Dans
    tous les autres cas les segments bruts sont conserves.

    Avec deux traverses il n'existe qu'un ecart: le vantail est toujours
    egalise.

    Args:
        hauteurs: Segments bruts du vantail.
        gamme: Gamme ('96', '96CA'...).
        hauteur: Hauteur du panneau en mm.
        centres: Positions des traverses (ordre quelconque).
        ref_traverse: Reference de traverse (TI37 change les deductions 96CA).
        forcer: Egalise sans test de regularite des entraxes.

    Returns:
        Nouvelle HauteursRemplissage (les segments recus ne sont pas modifies).
    """
    n = len(centres or [])
    if n == 0 or hauteurs.haut is None:
        return HauteursRemplissage(hauteurs.bas, list(hauteurs.entre), hauteurs.haut)

    if not (forcer or entraxes_reguliers(centres)):
        return HauteursRemplissage(hauteurs.bas, list(hauteurs.entre), hauteurs.haut)

    total = hauteur_totale_theorique(gamme, hauteur, n, ref_traverse)
    cible = max(0, math.floor(total / (n + 1)))
    logger.debug("Egalisation gamme=%s: %s -> %s x %d",
                 gamme, hauteurs.segments(), cible, n + 1)
    return HauteursRemplissage(cible, [cible] * (n - 1), cible)


def calculer_hauteurs_remplissage(gamme: str, hauteur, centres,
                                  ref_traverse: str | None = None,
                                  forcer_egalisation: bool = False) -> HauteursRemplissage:
    """Hauteurs de remplissage d'un vantail: calcul brut puis egalisation."""
    brutes = calculer_hauteurs_brutes(gamme, hauteur, centres, ref_traverse)
    return egaliser_hauteurs(brutes, gamme, hauteur, centres, ref_traverse,
                             forcer_egalisation)


# =========================================================================
#  REGROUPEMENT ENTRE VANTAUX
# =========================================================================

def _correspondances_regroupement(valeurs: list[float]) -> dict[float, float]:
    """Associe chaque valeur au minimum de son groupe (ecart <= tolerance)."""
    correspondances = {}
    minimum_groupe = None
    for v in sorted(set(valeurs)):
        if minimum_groupe is None or v - minimum_groupe > tolerances.TOLERANCE_REGROUPEMENT_MM:
            minimum_groupe = v
        correspondances[v] = minimum_groupe
    return correspondances


def regrouper_hauteurs(par_vantail: dict[int, HauteursRemplissage]) -> dict[int, HauteursRemplissage]:
    """Ramene les hauteurs quasi identiques de tous les vantaux a une meme cote.

    Toutes les valeurs positives (bas, entre, haut) de tous les vantaux sont
    triees puis regroupees: une valeur a moins de ``TOLERANCE_REGROUPEMENT_MM``
    du minimum de son groupe prend la valeur de ce minimum.
    """
    valeurs = [s for h in par_vantail.values() for s in h.segments() if s > 0]
    table = _correspondances_regroupement(valeurs)

    def ramener(v):
        return table.get(v, v) if v is not None and v > 0 else v

    return {
        num: HauteursRemplissage(
            bas=ramener(h.bas),
            entre=[ramener(v) for v in h.entre],
            haut=ramener(h.haut),
        )
        for num, h in par_vantail.items()
    }


# =========================================================================
#  PAR VANTAIL
# =========================================================================

def groupe_du_vantail(config: Configuration, numero: int):
    """Groupe de traverses d'un vantail (numero a partir de 1), ou None."""
    groupes = config.traverses.groupes
    if not groupes:
        return None
    if config.traverses.identiques:
        return groupes[0]
    return groupes[numero - 1] if numero - 1 < len(groupes) else None


def centres_par_vantail(config: Configuration) -> dict[int, list[float]]:
    """Positions de traverses de chaque vantail, triees."""
    out = {}
    for numero in range(1, entier_borne(config.nb_vantaux, 1) + 1):
        groupe = groupe_du_vantail(config, numero)
        out[numero] = _trier_centres(groupe.hauteurs) if groupe is not None else []
    return out


def calculer_remplissages(config: Configuration, profils: ResultatProfils,
                          forcer_egalisation: bool = False) -> ResultatRemplissages:
    """Calcule largeur et hauteurs de remplissage de chaque vantail.

    Args:
        config: Configuration de l'ensemble.
        profils: Resultat du calcul des profils (fournit la largeur).
        forcer_egalisation: Egalise les segments de chaque vantail a traverses.

    Returns:
        ResultatRemplissages indexe par numero de vantail (1..n).
    """
    config = configuration_bornee(config)
    largeur = entier_borne(profils.meta.get("largeur_remplissage", 0), 0)
    centres = centres_par_vantail(config)

    hauteurs = {}
    refs = {}
    for numero, ys in centres.items():
        groupe = groupe_du_vantail(config, numero)
        ref = reference_traverse_intermediaire(
            config.gamme, config.epaisseur, groupe.type if groupe is not None else "")
        refs[numero] = ref
        hauteurs[numero] = calculer_hauteurs_remplissage(
            config.gamme, config.hauteur, ys, ref, forcer_egalisation)

    hauteurs = regrouper_hauteurs(hauteurs)

    par_vantail = {
        numero: EntreeRemplissage(
            largeur=LargeurRemplissage(brute=largeur, coupe=largeur),
            hauteurs=hauteurs[numero],
        )
        for numero in centres
    }
    return ResultatRemplissages(
        par_vantail=par_vantail,
        meta={
            "gamme": config.gamme,
            "epaisseur": config.epaisseur,
            "traverses": refs,
            "centres": centres,
        },
    )
