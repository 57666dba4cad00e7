"""Devis d'un ensemble coulissant - enchainement des calculs et vues de sortie.

Ce module fournit:
- ``calculer_devis``: profils, puis accessoires et remplissages a partir des
  longueurs et references des profils
- Les lignes a plat consommees par l'export PDF
- La geometrie consommee par le constructeur 3D
- La fiche texte du devis
"""

from dataclasses import dataclass
from datetime import datetime
import logging

from .accessoires import (
    FINITIONS_ACCESSOIRES, ResultatAccessoires, calculer_accessoires,
    longueurs_depuis_profils,
)
from .catalogue import Catalogue, catalogue_standard, libelle_finition
from .configuration import Configuration, configuration_bornee
from .outils import nombre_propre
from .profils import ResultatProfils, calculer_profils, references_rails
from .remplissages import ResultatRemplissages, calculer_remplissages

logger = logging.getLogger(__name__)


MATERIAUX_REMPLISSAGE = {
    "miroir": "miroir",
    "verre": "verre",
}
MATERIAU_REMPLISSAGE_DEFAUT = "coffrage_creme"


@dataclass
class Devis:
    configuration: Configuration
    profils: ResultatProfils
    accessoires: ResultatAccessoires
    remplissages: ResultatRemplissages


def calculer_devis(config: Configuration, catalogue: Catalogue | None = None,
                   forcer_egalisation: bool = False) -> Devis:
    """Calcule profils, accessoires et remplissages d'une configuration.

    Chaque appel repart de la configuration: aucun resultat precedent n'est
    reutilise.
    """
    config = configuration_bornee(config)
    catalogue = catalogue or catalogue_standard()
    profils = calculer_profils(config, catalogue)
    accessoires = calculer_accessoires(config, longueurs_depuis_profils(profils), catalogue)
    remplissages = calculer_remplissages(config, profils, forcer_egalisation)
    logger.info("Devis calcule: gamme %s, %d profils, %d accessoires, %d vantaux",
                config.gamme, len(profils.toutes()), len(accessoires.liste),
                len(remplissages.par_vantail))
    return Devis(config, profils, accessoires, remplissages)


# =========================================================================
#  LIGNES POUR LE PDF
# =========================================================================

def _mm(valeur) -> str:
    return f"{nombre_propre(valeur)} mm"


def lignes_profils(devis: Devis) -> list[dict]:
    """Lignes du tableau Profils: reference, designation, finition, quantite, longueur."""
    return [
        {
            "ref": l.ref,
            "designation": l.description,
            "finition": l.libelle_finition or l.code_finition or "—",
            "quantite": l.quantite,
            "longueur": _mm(l.longueur),
        }
        for l in devis.profils.toutes()
    ]


def lignes_accessoires(devis: Devis) -> list[dict]:
    """Lignes du tableau Accessoires.

    Seules les finitions Noir, Gris et Translucide sont affichees.
    """
    lignes = []
    for l in devis.accessoires.liste:
        lignes.append({
            "ref": l.ref,
            "designation": l.designation or "—",
            "finition": l.libelle_finition if l.libelle_finition in FINITIONS_ACCESSOIRES else "—",
            "quantite": l.quantite,
            "longueur": _mm(l.longueur) if l.longueur else "—",
        })
    return lignes


def lignes_remplissages(devis: Devis) -> list[dict]:
    """Lignes du tableau Remplissages: une ligne par piece de dimensions identiques."""
    compte: dict[tuple, int] = {}
    for entree in devis.remplissages.par_vantail.values():
        largeur = entree.largeur.coupe
        for hauteur in entree.hauteurs.segments():
            if hauteur <= 0 or largeur <= 0:
                continue
            cle = (largeur, nombre_propre(hauteur))
            compte[cle] = compte.get(cle, 0) + 1

    return [
        {
            "designation": "Remplissage",
            "quantite": qte,
            "dimensions": f"{largeur} x {hauteur} mm",
        }
        for (largeur, hauteur), qte in compte.items()
    ]


# =========================================================================
#  GEOMETRIE POUR LE CONSTRUCTEUR 3D
# =========================================================================

def classe_materiau_remplissage(remplissage: str) -> str:
    """Classe de materiau du remplissage: miroir, verre ou coffrage creme."""
    return MATERIAUX_REMPLISSAGE.get(str(remplissage or "").strip().lower(),
                                     MATERIAU_REMPLISSAGE_DEFAUT)


def _profil(lignes) -> dict:
    if not lignes:
        return {"ref": None, "longueur": 0, "quantite": 0}
    l = lignes[0]
    return {"ref": l.ref, "longueur": l.longueur, "quantite": l.quantite}


def geometrie_3d(devis: Devis) -> dict:
    """Donnees du constructeur 3D: references, longueurs, positions et offsets."""
    config = devis.configuration
    profils = devis.profils
    meta = profils.meta
    ref_haut, ref_bas = references_rails(config.gamme, config.rail)
    rails = {l.ref: l for l in profils.rails}

    def rail(ref):
        l = rails.get(ref)
        return {"ref": ref if l else None, "longueur": l.longueur if l else 0}

    remplissages = devis.remplissages
    return {
        "ensemble": {
            "largeur": config.largeur,
            "hauteur": config.hauteur,
            "rail": config.rail,
            "disposition": config.disposition,
            "nb_vantaux": config.nb_vantaux,
            "finition": {
                "code": config.finition,
                "libelle": libelle_finition(config.finition),
            },
        },
        "profils": {
            "rails": {"haut": rail(ref_haut), "bas": rail(ref_bas)},
            "poignee": _profil(profils.poignees),
            "corniere": _profil(profils.cornieres),
            "traverses": {
                "haute": _profil(profils.traverses_hautes),
                "basse": _profil(profils.traverses_basses),
                "intermediaire": {
                    **_profil(profils.traverses_intermediaires),
                    "par_vantail": {
                        num: list(ys)
                        for num, ys in remplissages.meta.get("centres", {}).items()
                    },
                },
            },
        },
        "constantes_poignee": {k: meta.get(k, 0) for k in ("y", "z", "c", "t")},
        "remplissages": {
            "largeur_par_vantail": meta.get("largeur_remplissage", 0),
            "hauteurs_par_vantail": {
                num: e.hauteurs.segments() for num, e in remplissages.par_vantail.items()
            },
            "materiau": classe_materiau_remplissage(config.remplissage),
        },
    }


# =========================================================================
#  FICHE TEXTE
# =========================================================================

def generer_texte(devis: Devis) -> str:
    """Genere la fiche du devis en texte formate."""
    config = devis.configuration
    lines = []
    lines.append("=" * 80)
    lines.append("  FICHE DE DEBIT - PORTES COULISSANTES")
    lines.append("=" * 80)
    lines.append(f"  Date : {datetime.now().strftime('%d/%m/%Y %H:%M')}")
    if config.nom:
        lines.append(f"  Projet : {config.nom}")
    lines.append("")
    lines.append("  CONFIGURATION")
    lines.append(f"    Gamme     : {config.gamme} (epaisseur {config.epaisseur})")
    lines.append(f"    Rail      : {config.rail} / {config.disposition}")
    lines.append(f"    Largeur   : {config.largeur} mm")
    lines.append(f"    Hauteur   : {config.hauteur} mm")
    lines.append(f"    Vantaux   : {config.nb_vantaux}")
    lines.append(f"    Finition  : {libelle_finition(config.finition) or '-'}")
    lines.append("")

    lines.append("-" * 80)
    lines.append("  PROFILS")
    lines.append("-" * 80)
    lines.append(f"  {'Ref':<12} {'Designation':<34} {'Qte':<5} {'Long.':<10} {'Finition'}")
    for r in lignes_profils(devis):
        lines.append(f"  {r['ref']:<12} {r['designation']:<34} {r['quantite']:<5} "
                     f"{r['longueur']:<10} {r['finition']}")
    lines.append("")

    if devis.accessoires.liste:
        lines.append("-" * 80)
        lines.append("  ACCESSOIRES")
        lines.append("-" * 80)
        for r in lignes_accessoires(devis):
            lines.append(f"  {r['ref']:<12} {r['designation']:<34} x{r['quantite']:<4} "
                         f"{r['longueur']:<10} {r['finition']}")
        lines.append("")

    lines.append("-" * 80)
    lines.append("  REMPLISSAGES")
    lines.append("-" * 80)
    for r in lignes_remplissages(devis):
        lines.append(f"    {r['designation']:<20} x{r['quantite']:<4} {r['dimensions']}")
    lines.append("")
    lines.append("=" * 80)
    return "\n".join(lines)
