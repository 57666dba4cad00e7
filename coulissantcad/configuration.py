"""Configuration d'un ensemble de portes coulissantes.

Une ``Configuration`` est une valeur immuable: chaque calcul la recoit en
parametre et la relit sans jamais la modifier. Pour changer un champ,
l'appelant construit une nouvelle configuration (``dataclasses.replace``).

Deux niveaux de traitement des saisies:
    - ``configuration_depuis_dict``: borne chaque champ numerique et
      normalise les codes, champ par champ, sans jamais lever d'exception.
    - ``normaliser_configuration``: coherence entre champs (epaisseur valide
      pour la gamme, finition valide pour gamme + epaisseur, poignee valide
      pour gamme + epaisseur + finition, rail double force en gamme 82).
      Les calculateurs ne l'appliquent pas: ils font confiance au tuple recu.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path

from .outils import entier_borne, normaliser_couleur, normaliser_epaisseur, vers_nombre

logger = logging.getLogger(__name__)


# =========================================================================
#  TABLES DE COHERENCE
# =========================================================================

GAMMES = ("82", "96", "96CA")

EPAISSEURS_PAR_GAMME: dict[str, list[str]] = {
    "96": ["16", "19"],
    "96CA": ["6-8", "10-12"],
    "82": ["19"],
}

FINITIONS_PAR_GAMME: dict[str, list[str] | dict[str, list[str]]] = {
    "82": ["LBL", "SA", "BR"],
    "96": {
        "16": ["LBL", "SA", "LNOG", "PB", "BR"],
        "19": ["LBL", "SA", "LNOG", "L9002G", "BI", "PB", "BR"],
    },
    "96CA": ["LBLG", "LBL", "SA", "LNOG", "BI", "BR"],
}

# Gamme 96 / 19 mm: chaque poignee n'existe que dans certaines finitions
POIGNEES_96_19: list[tuple[str, list[str]]] = [
    ("P30", ["BR", "LBLG", "LNOG"]),
    ("P200", ["BR", "SA", "LBL"]),
    ("P300-19", ["BR", "SA", "LBL", "LNOG", "L9002G", "PB"]),
    ("P400", ["BR", "SA", "LBL", "LNOG"]),
    ("P600", ["BR", "SA", "LBL", "LNOG", "L9002G", "PB", "BI"]),
    ("P700", ["BR", "SA", "LBL", "LNOG", "L9002G", "BI"]),
    ("P710", ["BR", "SA", "LBL", "LNOG", "L9002G", "BI"]),
]

POIGNEES_PAR_GAMME: dict[str, list[str]] = {
    "82": ["P100", "P110"],
    "96-16": ["P300-16"],
    "96CA": ["P810"],
}


def options_epaisseur(gamme: str) -> list[str]:
    """Epaisseurs de remplissage disponibles pour une gamme."""
    return list(EPAISSEURS_PAR_GAMME.get(str(gamme), ["19"]))


def options_finition(gamme: str, epaisseur: str) -> list[str]:
    """Codes finition disponibles pour une gamme et une epaisseur."""
    codes = FINITIONS_PAR_GAMME.get(str(gamme))
    if isinstance(codes, dict):
        return list(codes.get(str(epaisseur), []))
    return list(codes or [])


def options_poignee(gamme: str, epaisseur: str, finition: str) -> list[str]:
    """Poignees disponibles pour une gamme, une epaisseur et une finition."""
    gamme = str(gamme)
    epaisseur = str(epaisseur)
    if gamme == "96" and epaisseur == "19":
        return [ref for ref, finitions in POIGNEES_96_19 if str(finition) in finitions]
    if gamme == "96" and epaisseur == "16":
        return list(POIGNEES_PAR_GAMME["96-16"])
    return list(POIGNEES_PAR_GAMME.get(gamme, []))


# =========================================================================
#  VALEURS
# =========================================================================

@dataclass(frozen=True)
class GroupeTraverses:
    """Traverses intermediaires d'un vantail (ou de tous si identiques).

    ``hauteurs`` sont les positions (mm) mesurees depuis le bas du panneau
    jusqu'a l'axe de chaque traverse, dans un ordre quelconque.
    """
    type: str = ""
    nombre: int = 0
    hauteurs: tuple[float, ...] = ()


@dataclass(frozen=True)
class Traverses:
    groupes: tuple[GroupeTraverses, ...] = ()
    identiques: bool = True


@dataclass(frozen=True)
class Freins:
    """Nombre de freins par type."""
    fram: int = 0        # freins amortisseurs
    freco: int = 0       # freins eco
    frlamelle: int = 0   # freins a lamelles


@dataclass(frozen=True)
class Couleurs:
    """Couleurs libres utilisees pour choisir les variantes d'accessoires."""
    joint: str = ""
    balais: str = ""
    vitrage: str = ""


@dataclass(frozen=True)
class Configuration:
    nom: str = ""
    gamme: str = "82"
    epaisseur: str = "19"
    rail: str = "double"
    disposition: str = "quinconce"
    largeur: int = 1200
    hauteur: int = 2100
    nb_vantaux: int = 2
    poignee: str = "P100"
    finition: str = "SA"
    traverses: Traverses = field(default_factory=Traverses)
    freins: Freins = field(default_factory=Freins)
    couleurs: Couleurs = field(default_factory=Couleurs)
    remplissage: str = "standard"


# Parametres par defaut d'un nouvel ensemble
PARAMS_DEFAUT = {
    "nom": "",
    "gamme": "82",
    "epaisseur": "19",
    "rail": "double",
    "disposition": "quinconce",
    "largeur": 1200,
    "hauteur": 2100,
    "nb_vantaux": 2,
    "poignee": "P100",
    "finition": "SA",
    "traverses": {
        "groupes": [
            {"type": "28", "nombre": 0, "hauteurs": []},
        ],
        "identiques": True,
    },
    "freins": {"fram": 0, "freco": 0, "frlamelle": 0},
    "couleurs": {"joint": "", "balais": "", "vitrage": ""},
    "remplissage": "standard",
}

# Cles du store de configuration (interface web) -> cles internes
ALIAS = {
    "name": "nom",
    "range": "gamme",
    "tick": "epaisseur",
    "arrangement": "disposition",
    "width": "largeur",
    "height": "hauteur",
    "leavesCount": "nb_vantaux",
    "handle": "poignee",
    "finishCode": "finition",
    "colorProfiles": "finition",
    "absorber": "freins",
    "colors": "couleurs",
    "filling": "remplissage",
}

ALIAS_GROUPES = {"groups": "groupes", "sameForAllLeaves": "identiques"}
ALIAS_GROUPE = {"count": "nombre", "heights": "hauteurs"}
ALIAS_COULEURS = {"seal": "joint", "brushes": "balais", "pglass": "vitrage"}

# Couleurs a plat dans le store: colorSeal, colorBrushes, colorPGlass
ALIAS_COULEURS_PLATES = {
    "colorSeal": "joint",
    "colorBrushes": "balais",
    "colorPGlass": "vitrage",
}


def _renommer(data: dict, alias: dict) -> dict:
    out = {}
    for cle, val in data.items():
        out[alias.get(cle, cle)] = val
    return out


def _groupe_depuis_dict(data) -> GroupeTraverses:
    if not isinstance(data, dict):
        return GroupeTraverses()
    data = _renommer(data, ALIAS_GROUPE)
    brutes = data.get("hauteurs") or []
    if not isinstance(brutes, (list, tuple)):
        brutes = []
    return GroupeTraverses(
        type=str(data.get("type") if data.get("type") is not None else ""),
        nombre=entier_borne(data.get("nombre"), 0),
        hauteurs=tuple(vers_nombre(h, 0.0) for h in brutes),
    )


def _traverses_depuis_dict(data) -> Traverses:
    if not isinstance(data, dict):
        return Traverses()
    data = _renommer(data, ALIAS_GROUPES)
    groupes = data.get("groupes") or []
    if not isinstance(groupes, (list, tuple)):
        groupes = []
    identiques = data.get("identiques", True)
    return Traverses(
        groupes=tuple(_groupe_depuis_dict(g) for g in groupes),
        identiques=bool(identiques),
    )


def configuration_depuis_dict(data: dict | None) -> Configuration:
    """Construit une Configuration a partir d'un dictionnaire de saisie.

    Accepte les cles internes (francaises) comme celles du store web
    (``range``, ``tick``, ``leavesCount``...). Les champs absents prennent la
    valeur de ``PARAMS_DEFAUT``. Chaque champ est borne individuellement;
    la coherence entre champs n'est pas verifiee ici.

    Args:
        data: Dictionnaire de parametres (peut etre None ou incomplet).

    Returns:
        Configuration immuable.
    """
    data = _renommer(dict(data or {}), ALIAS)
    couleurs_plates = {
        ALIAS_COULEURS_PLATES[k]: v for k, v in data.items() if k in ALIAS_COULEURS_PLATES
    }

    def lire(cle):
        val = data.get(cle)
        return PARAMS_DEFAUT[cle] if val is None else val

    gamme = str(lire("gamme")).strip().upper()
    rail = "simple" if str(lire("rail")).strip().lower() == "simple" else "double"

    freins = lire("freins")
    if not isinstance(freins, dict):
        freins = {}
    couleurs = lire("couleurs")
    couleurs = _renommer(couleurs, ALIAS_COULEURS) if isinstance(couleurs, dict) else {}
    couleurs = {**couleurs_plates, **couleurs}

    config = Configuration(
        nom=str(lire("nom")).strip()[:80],
        gamme=gamme,
        epaisseur=normaliser_epaisseur(lire("epaisseur")),
        rail=rail,
        disposition=str(lire("disposition")).strip().lower(),
        largeur=entier_borne(lire("largeur"), 0),
        hauteur=entier_borne(lire("hauteur"), 0),
        nb_vantaux=entier_borne(lire("nb_vantaux"), 1),
        poignee=str(lire("poignee")).strip(),
        finition=str(lire("finition")).strip(),
        traverses=_traverses_depuis_dict(lire("traverses")),
        freins=Freins(
            fram=entier_borne(freins.get("fram"), 0),
            freco=entier_borne(freins.get("freco"), 0),
            frlamelle=entier_borne(freins.get("frlamelle"), 0),
        ),
        couleurs=Couleurs(
            joint=normaliser_couleur(couleurs.get("joint")),
            balais=normaliser_couleur(couleurs.get("balais")),
            vitrage=normaliser_couleur(couleurs.get("vitrage")),
        ),
        remplissage=str(lire("remplissage")).strip().lower(),
    )
    logger.debug("Configuration lue: gamme=%s rail=%s %sx%s mm, %s vantaux",
                 config.gamme, config.rail, config.largeur, config.hauteur,
                 config.nb_vantaux)
    return config


def configuration_bornee(config: Configuration) -> Configuration:
    """Borne les champs numeriques d'une configuration construite directement.

    Largeur, hauteur, quantites de freins et nombre de traverses sont
    ramenes a des entiers >= 0, le nombre de vantaux a un entier >= 1, les
    positions de traverses a des nombres. Les codes sont convertis en
    chaines. La coherence entre champs n'est pas touchee.
    """
    groupes = config.traverses.groupes if isinstance(config.traverses, Traverses) else ()
    return replace(
        config,
        gamme=str(config.gamme if config.gamme is not None else ""),
        epaisseur=normaliser_epaisseur(config.epaisseur),
        rail="simple" if config.rail == "simple" else "double",
        disposition=str(config.disposition if config.disposition is not None else ""),
        largeur=entier_borne(config.largeur, 0),
        hauteur=entier_borne(config.hauteur, 0),
        nb_vantaux=entier_borne(config.nb_vantaux, 1),
        poignee=str(config.poignee if config.poignee is not None else ""),
        finition=str(config.finition if config.finition is not None else ""),
        traverses=Traverses(
            groupes=tuple(
                GroupeTraverses(
                    type=str(g.type if g.type is not None else ""),
                    nombre=entier_borne(g.nombre, 0),
                    hauteurs=tuple(vers_nombre(h, 0.0) for h in (g.hauteurs or ())),
                )
                for g in (groupes or ()) if isinstance(g, GroupeTraverses)
            ),
            identiques=bool(config.traverses.identiques)
            if isinstance(config.traverses, Traverses) else True,
        ),
        freins=Freins(
            fram=entier_borne(config.freins.fram, 0),
            freco=entier_borne(config.freins.freco, 0),
            frlamelle=entier_borne(config.freins.frlamelle, 0),
        ) if isinstance(config.freins, Freins) else Freins(),
    )


def normaliser_configuration(config: Configuration) -> Configuration:
    """Rend une configuration coherente entre ses champs.

    - gamme 82: rail double impose;
    - epaisseur ramenee a la premiere valeur valide pour la gamme;
    - finition ramenee a la premiere valeur valide pour gamme + epaisseur;
    - poignee ramenee a la premiere valeur valide pour gamme + epaisseur
      + finition.

    Returns:
        Nouvelle Configuration (l'originale n'est pas modifiee).
    """
    rail = "double" if config.gamme == "82" else config.rail

    epaisseurs = options_epaisseur(config.gamme)
    epaisseur = config.epaisseur if config.epaisseur in epaisseurs else epaisseurs[0]

    finitions = options_finition(config.gamme, epaisseur)
    finition = config.finition if config.finition in finitions else (
        finitions[0] if finitions else "")

    poignees = options_poignee(config.gamme, epaisseur, finition)
    poignee = config.poignee if config.poignee in poignees else (
        poignees[0] if poignees else "")

    if (rail, epaisseur, finition, poignee) != (
            config.rail, config.epaisseur, config.finition, config.poignee):
        logger.debug("Configuration corrigee: rail=%s epaisseur=%s finition=%s poignee=%s",
                     rail, epaisseur, finition, poignee)
    return replace(config, rail=rail, epaisseur=epaisseur,
                   finition=finition, poignee=poignee)


def charger_configuration(path: str | Path) -> Configuration:
    """Charge une configuration depuis un fichier JSON.

    Les cles du fichier remplacent celles de ``PARAMS_DEFAUT``.

    Raises:
        ValueError: Si la racine du JSON n'est pas un objet.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Le fichier de configuration doit contenir un objet JSON: {path}")
    params = dict(PARAMS_DEFAUT)
    params.update(data)
    return configuration_depuis_dict(params)
