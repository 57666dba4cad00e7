"""Calcul des profils d'un ensemble coulissant.

Ce module fournit:
- Le choix des references de rails selon la gamme et le type de rail
- Les longueurs et quantites de rails, poignees, corniere, traverses
  hautes/basses et traverses intermediaires
- Les metadonnees reutilisees par les accessoires et les remplissages
  (largeur de remplissage, constantes de la poignee, traverse retenue)

Une reference absente du catalogue ne produit aucune ligne.
"""

import logging
from dataclasses import dataclass, field

from .catalogue import Catalogue, catalogue_standard, libelle_finition
from .configuration import Configuration, configuration_bornee
from .largeur_remplissage import calculer_largeur_remplissage
from .outils import entier_borne, normaliser_epaisseur

logger = logging.getLogger(__name__)


# Jeu en bout de poignee selon la gamme (mm)
DEDUCTION_POIGNEE = {"96CA": 54}
DEDUCTION_POIGNEE_DEFAUT = 50

REF_CORNIERE = "CCLA"
REF_TRAVERSE_HAUTE = "TI28"
REF_TRAVERSE_BASSE = "THB52"


@dataclass
class LigneProfil:
    """Ligne de la liste de debit profils."""
    ref: str
    description: str
    longueur: int
    quantite: int
    code_finition: str = ""
    libelle_finition: str = ""

    def __repr__(self):
        return f"{self.ref}: {self.longueur}mm (x{self.quantite}) - {self.description}"


@dataclass
class ResultatProfils:
    rails: list[LigneProfil] = field(default_factory=list)
    poignees: list[LigneProfil] = field(default_factory=list)
    cornieres: list[LigneProfil] = field(default_factory=list)
    traverses_hautes: list[LigneProfil] = field(default_factory=list)
    traverses_basses: list[LigneProfil] = field(default_factory=list)
    traverses_intermediaires: list[LigneProfil] = field(default_factory=list)
    meta: dict = field(default_factory=dict)

    def toutes(self) -> list[LigneProfil]:
        """Toutes les lignes, dans l'ordre de la fiche."""
        return [
            *self.rails,
            *self.poignees,
            *self.cornieres,
            *self.traverses_hautes,
            *self.traverses_basses,
            *self.traverses_intermediaires,
        ]


# =========================================================================
#  REFERENCES
# =========================================================================

def references_rails(gamme: str, rail: str) -> tuple[str, str]:
    """Retourne (rail haut, rail bas) pour une gamme et un type de rail."""
    if gamme == "82":
        return "RH82", "RB55"
    if gamme in ("96", "96CA") and rail == "simple":
        return "RH50", "RB48"
    return "RH96", "RB65"


def reference_traverse_intermediaire(gamme: str, epaisseur: str,
                                     type_traverse) -> str | None:
    """Reference de traverse intermediaire, ou None si la gamme n'en a pas.

    - gamme 96: selon l'epaisseur (16 -> TI16, sinon TI19);
    - gamme 96CA: selon le type de traverse (28 -> TI28, 37 -> TI37);
    - gamme 82: aucune.
    """
    if gamme == "96":
        return "TI16" if normaliser_epaisseur(epaisseur) == "16" else "TI19"
    if gamme == "96CA":
        return {"28": "TI28", "37": "TI37"}.get(str(type_traverse).strip())
    return None


# =========================================================================
#  LIGNES
# =========================================================================

def _ligne(catalogue: Catalogue, ref: str, libelle_defaut: str, longueur, quantite,
           config: Configuration) -> LigneProfil | None:
    """Construit une ligne si la reference existe et la quantite est > 0."""
    if not catalogue.contient(ref):
        logger.debug("Profil %s absent du catalogue: ligne omise", ref)
        return None
    quantite = entier_borne(quantite, 0)
    if quantite <= 0:
        return None
    return LigneProfil(
        ref=ref,
        description=catalogue.designation(ref) or libelle_defaut,
        longueur=entier_borne(longueur, 0),
        quantite=quantite,
        code_finition=config.finition,
        libelle_finition=libelle_finition(config.finition),
    )


def _en_liste(ligne: LigneProfil | None) -> list[LigneProfil]:
    return [ligne] if ligne is not None else []


def _calculer_rails(config: Configuration, catalogue: Catalogue) -> list[LigneProfil]:
    ref_haut, ref_bas = references_rails(config.gamme, config.rail)
    # Le monorail fait l'aller-retour sur chaque vantail
    if config.rail == "simple":
        longueur = config.largeur * config.nb_vantaux * 2
    else:
        longueur = config.largeur
    return (_en_liste(_ligne(catalogue, ref_haut, "Rail haut", longueur, 1, config))
            + _en_liste(_ligne(catalogue, ref_bas, "Rail bas", longueur, 1, config)))


def longueur_poignee(gamme: str, hauteur: int) -> int:
    return hauteur - DEDUCTION_POIGNEE.get(gamme, DEDUCTION_POIGNEE_DEFAUT)


def _calculer_poignees(config: Configuration, catalogue: Catalogue) -> list[LigneProfil]:
    if not catalogue.contient(config.poignee):
        return []
    return _en_liste(_ligne(
        catalogue, config.poignee, "Poignée",
        longueur_poignee(config.gamme, config.hauteur),
        config.nb_vantaux * 2,  # une de chaque cote du vantail
        config,
    ))


def _calculer_cornieres(config: Configuration, catalogue: Catalogue,
                        largeur_remplissage: int, c: float) -> list[LigneProfil]:
    if config.gamme == "96CA":
        return []
    return _en_liste(_ligne(catalogue, REF_CORNIERE, "Cornière basse",
                            largeur_remplissage - c, config.nb_vantaux, config))


def _calculer_traverses_haute_basse(config: Configuration, catalogue: Catalogue,
                                    largeur_remplissage: int,
                                    t: float) -> tuple[list[LigneProfil], list[LigneProfil]]:
    if config.gamme != "96CA":
        return [], []
    longueur = largeur_remplissage - t
    hautes = _en_liste(_ligne(catalogue, REF_TRAVERSE_HAUTE, "Traverse haute",
                              longueur, config.nb_vantaux, config))
    basses = _en_liste(_ligne(catalogue, REF_TRAVERSE_BASSE, "Traverse basse",
                              longueur, config.nb_vantaux, config))
    return hautes, basses


def _calculer_traverses_intermediaires(config: Configuration, catalogue: Catalogue,
                                       largeur_remplissage: int,
                                       t: float) -> list[LigneProfil]:
    groupes = config.traverses.groupes
    if not groupes:
        return []

    # ref -> quantite, dans l'ordre de premiere apparition
    quantites: dict[str, int] = {}

    def ajouter(type_traverse, quantite):
        ref = reference_traverse_intermediaire(config.gamme, config.epaisseur, type_traverse)
        if ref is None or quantite <= 0:
            return
        quantites[ref] = quantites.get(ref, 0) + quantite

    if config.traverses.identiques:
        g0 = groupes[0]
        ajouter(g0.type, g0.nombre * config.nb_vantaux)
    else:
        # chaque groupe porte deja le nombre de traverses de son vantail
        for g in groupes:
            ajouter(g.type, g.nombre)

    longueur = largeur_remplissage - t
    lignes = []
    for ref, quantite in quantites.items():
        lignes.extend(_en_liste(_ligne(catalogue, ref, "Traverse intermédiaire",
                                       longueur, quantite, config)))
    return lignes


# =========================================================================
#  CALCUL PRINCIPAL
# =========================================================================

def calculer_profils(config: Configuration,
                     catalogue: Catalogue | None = None) -> ResultatProfils:
    """Calcule la liste des profils d'une configuration.

    Args:
        config: Configuration (supposee deja coherente entre ses champs).
        catalogue: Catalogue de reference, catalogue standard par defaut.

    Returns:
        ResultatProfils avec une liste par role et les metadonnees
        ``largeur_remplissage``, ``poignee``, ``y``, ``z``, ``c``, ``t``,
        ``traverse_intermediaire``, ``qte_traverses_intermediaires``,
        ``longueur_traverses_intermediaires``.
    """
    config = configuration_bornee(config)
    catalogue = catalogue or catalogue_standard()
    constantes = catalogue.constantes_poignee(config.poignee)
    largeur_remplissage = calculer_largeur_remplissage(
        config.gamme, config.rail, config.disposition,
        config.largeur, config.nb_vantaux, config.poignee, catalogue,
    )

    rails = _calculer_rails(config, catalogue)
    poignees = _calculer_poignees(config, catalogue)
    cornieres = _calculer_cornieres(config, catalogue, largeur_remplissage, constantes.c)
    hautes, basses = _calculer_traverses_haute_basse(
        config, catalogue, largeur_remplissage, constantes.t)
    intermediaires = _calculer_traverses_intermediaires(
        config, catalogue, largeur_remplissage, constantes.t)

    meta = {
        "gamme": config.gamme,
        "rail": config.rail,
        "nb_vantaux": config.nb_vantaux,
        "largeur_remplissage": largeur_remplissage,
        "poignee": config.poignee if constantes.trouve else None,
        "y": constantes.y,
        "z": constantes.z,
        "c": constantes.c,
        "t": constantes.t,
        "traverse_intermediaire": intermediaires[0].ref if intermediaires else None,
        "qte_traverses_intermediaires": sum(l.quantite for l in intermediaires),
        "longueur_traverses_intermediaires": (
            intermediaires[0].longueur if intermediaires else 0),
    }
    resultat = ResultatProfils(
        rails=rails,
        poignees=poignees,
        cornieres=cornieres,
        traverses_hautes=hautes,
        traverses_basses=basses,
        traverses_intermediaires=intermediaires,
        meta=meta,
    )
    logger.debug("Profils calcules: %d lignes, largeur remplissage %s mm",
                 len(resultat.toutes()), largeur_remplissage)
    return resultat
