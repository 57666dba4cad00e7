"""Largeur utile de remplissage par vantail."""

import logging
import math

from .catalogue import Catalogue, catalogue_standard
from .outils import entier_borne, vers_nombre

logger = logging.getLogger(__name__)


def calculer_largeur_remplissage(gamme: str, rail: str, disposition: str,
                                 largeur, nb_vantaux, poignee: str,
                                 catalogue: Catalogue | None = None) -> int:
    """Calcule la largeur de remplissage d'un vantail en mm.

    Les constantes y (recouvrement entre vantaux) et z (jeu en bout de rail)
    viennent de la poignee; une poignee inconnue donne y = z = 0.

    - rail double, disposition centre: (L - 4z + 2y) / 4
    - rail double, quinconce:          (L - 2z + y(n - 1)) / n
    - rail simple:                     L - 2z

    Le resultat est arrondi a l'entier inferieur et borne a 0.
    ``gamme`` ne change pas la formule.
    """
    catalogue = catalogue or catalogue_standard()
    constantes = catalogue.constantes_poignee(poignee)
    y, z = constantes.y, constantes.z
    L = entier_borne(largeur, 0)
    n = entier_borne(nb_vantaux, 1)

    if rail == "double":
        if disposition == "centre":
            brute = (L - 4 * z + 2 * y) / 4
        else:
            brute = (L - 2 * z + y * (n - 1)) / n
    else:
        brute = L - 2 * z

    resultat = max(0, math.floor(vers_nombre(brute, 0.0)))
    logger.debug("Largeur remplissage gamme=%s rail=%s disposition=%s L=%s n=%s "
                 "poignee=%s (y=%s z=%s) -> %s",
                 gamme, rail, disposition, L, n, poignee, y, z, resultat)
    return resultat
