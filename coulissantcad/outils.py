"""Petits utilitaires numeriques partages par les calculateurs.

Toutes les valeurs saisies passent par ces fonctions avant d'entrer dans
un calcul: rien ne leve d'exception, une valeur illisible vaut 0.
"""

import math


def vers_nombre(valeur, defaut: float = 0.0) -> float:
    """Convertit une valeur quelconque en float fini, sinon retourne defaut."""
    if isinstance(valeur, bool):
        return float(valeur)
    try:
        n = float(valeur)
    except (TypeError, ValueError):
        return defaut
    if not math.isfinite(n):
        return defaut
    return n


def entier_borne(valeur, minimum: int = 0) -> int:
    """Arrondit a l'entier inferieur et borne a minimum."""
    n = math.floor(vers_nombre(valeur, 0.0))
    return max(minimum, n)


def clip0(valeur) -> float:
    """Ramene une valeur negative a 0."""
    n = vers_nombre(valeur, 0.0)
    return 0 if n < 0 else n


def normaliser_epaisseur(valeur) -> str:
    """Normalise un code d'epaisseur ('6', '8', '12', '10 - 12', ...)."""
    v = "".join(str(valeur if valeur is not None else "").split())
    if v in ("6", "8", "6-8"):
        return "6-8"
    if v in ("12", "10-12"):
        return "10-12"
    return v


def normaliser_couleur(valeur) -> str:
    return str(valeur if valeur is not None else "").strip()


def nombre_propre(valeur: float) -> float | int:
    """Retourne un int quand la valeur est entiere (ex. 498.0 -> 498)."""
    if float(valeur).is_integer():
        return int(valeur)
    return valeur
