"""Catalogue des references profils et accessoires des portes coulissantes.

Ce module definit les tables de reference consultees par les calculateurs:
designation, type et, pour les poignees, les constantes geometriques
utilisees dans le calcul de la largeur de remplissage.

Chaque entree est un dictionnaire avec les cles suivantes:
    - reference (str): Code article (ex. 'RH96', 'P600').
    - designation (str): Libelle affiche dans les fiches et le devis.
    - type (str): Classification ('rail', 'poignee', 'traverse', 'frein', ...).
    - y (float): Recouvrement entre deux vantaux (poignees uniquement).
    - z (float): Jeu en bout de rail (poignees uniquement).
    - c (float): Deduction cornière basse (poignees uniquement).
    - t (float): Deduction traverses (poignees uniquement).

Les calculateurs recoivent un objet ``Catalogue`` en parametre; les tables
standard ci-dessous ne sont qu'une valeur par defaut et peuvent etre
remplacees par les tables de production.
"""

from dataclasses import dataclass
import copy

from .outils import vers_nombre


# =====================================================================
#  Finitions profils
# =====================================================================

FINITIONS: dict[str, str] = {
    "LBL": "Laqué Blanc 9010",
    "LBLG": "Laqué Blanc 9003 Granité",
    "L9002G": "Laqué Blanc Gris 9002 Granité",
    "SA": "Anodisé Argent",
    "LNOG": "Laqué Noir 9005 Granité",
    "BI": "Inox Brossé",
    "PB": "Bronze Poli",
    "BR": "Brut",
}


def libelle_finition(code: str) -> str:
    """Retourne le libelle d'une finition, ou le code lui-meme s'il est inconnu."""
    code = str(code or "")
    return FINITIONS.get(code) or code or ""


# =====================================================================
#  Definition d'une entree
# =====================================================================

def creer_profil(
    reference: str,
    designation: str,
    type: str,
    y: float | None = None,
    z: float | None = None,
    c: float | None = None,
    t: float | None = None,
) -> dict:
    """Cree une entree de catalogue profil.

    Args:
        reference: Code article.
        designation: Libelle du profil.
        type: Classification ('rail', 'poignee', 'corniere', 'traverse').
        y: Recouvrement entre vantaux en mm (poignees).
        z: Jeu en bout de rail en mm (poignees).
        c: Deduction de la corniere basse en mm (poignees).
        t: Deduction des traverses en mm (poignees).

    Returns:
        Dictionnaire de profil.
    """
    entree = {"reference": reference, "designation": designation, "type": type}
    for cle, val in (("y", y), ("z", z), ("c", c), ("t", t)):
        if val is not None:
            entree[cle] = val
    return entree


def creer_accessoire(reference: str, designation: str, type: str) -> dict:
    """Cree une entree de catalogue accessoire."""
    return {"reference": reference, "designation": designation, "type": type}


# =====================================================================
#  Tables standard
# =====================================================================

_PROFILS = [
    # Rails
    creer_profil("RH82", "Rail haut 82", "rail"),
    creer_profil("RB55", "Rail bas 55", "rail"),
    creer_profil("RH96", "Rail haut double 96", "rail"),
    creer_profil("RB65", "Rail bas double 65", "rail"),
    creer_profil("RH50", "Rail haut monorail 50", "rail"),
    creer_profil("RB48", "Rail bas monorail 48", "rail"),
    # Corniere et traverses
    creer_profil("CCLA", "Cornière basse", "corniere"),
    creer_profil("TI16", "Traverse intermédiaire 16", "traverse"),
    creer_profil("TI19", "Traverse intermédiaire 19", "traverse"),
    creer_profil("TI28", "Traverse intermédiaire 28", "traverse"),
    creer_profil("TI37", "Traverse intermédiaire 37", "traverse"),
    creer_profil("THB52", "Traverse haute/basse 52", "traverse"),
    # Poignees gamme 82
    creer_profil("P100", "Poignée P100", "poignee", y=25, z=12, c=30, t=30),
    creer_profil("P110", "Poignée P110", "poignee", y=25, z=12, c=30, t=30),
    # Poignees gamme 96
    creer_profil("P300-16", "Poignée P300 16 mm", "poignee", y=22, z=10, c=24, t=24),
    creer_profil("P30", "Poignée P30", "poignee", y=20, z=9, c=20, t=20),
    creer_profil("P200", "Poignée P200", "poignee", y=24, z=10, c=26, t=26),
    creer_profil("P300-19", "Poignée P300 19 mm", "poignee", y=22, z=10, c=24, t=24),
    creer_profil("P400", "Poignée P400", "poignee", y=26, z=11, c=28, t=28),
    creer_profil("P600", "Poignée P600", "poignee", y=28, z=11, c=30, t=30),
    creer_profil("P700", "Poignée P700", "poignee", y=30, z=12, c=32, t=32),
    creer_profil("P710", "Poignée P710", "poignee", y=30, z=12, c=32, t=32),
    # Poignee gamme 96CA (cadre alu)
    creer_profil("P810", "Poignée P810 cadre alu", "poignee", y=34, z=14, c=36, t=36.5),
]

_ACCESSOIRES = [
    creer_accessoire("KITROUPRO", "Kit roulettes", "roue"),
    creer_accessoire("CALE16-19", "Cale 16-19 mm", "cale"),
    creer_accessoire("ROUTHB52", "Roulette traverse basse 52", "roue"),
    creer_accessoire("FR82", "Frein amortisseur 82", "frein"),
    creer_accessoire("FR82E", "Frein éco 82", "frein"),
    creer_accessoire("FR96", "Frein amortisseur 96", "frein"),
    creer_accessoire("FR96-16", "Frein amortisseur 96 - 16 mm", "frein"),
    creer_accessoire("FRBASEO", "Frein amortisseur cadre alu", "frein"),
    creer_accessoire("FREIN", "Frein à lamelle", "frein"),
    creer_accessoire("FREINENROB", "Frein à lamelle enrobé", "frein"),
    creer_accessoire("GUIDHAUT82CN", "Guide haut 82", "guide"),
    creer_accessoire("GUIDHAUT96", "Guide haut 96", "guide"),
    creer_accessoire("GUIDHAUT16", "Guide haut 96 - 16 mm", "guide"),
    creer_accessoire("GUIDHAUTBASEO", "Guide haut cadre alu", "guide"),
    creer_accessoire("ANTIDERAIL1", "Antidéraillement", "antideraillement"),
    creer_accessoire("JBUT", "Joint de butée", "joint"),
    creer_accessoire("JBUTNO", "Joint de butée noir", "joint"),
    creer_accessoire("JB48/1050", "Balai anti-poussière", "balai"),
    creer_accessoire("JB48/1050NO", "Balai anti-poussière noir", "balai"),
    creer_accessoire("JB48/500", "Balai de côté", "balai"),
    creer_accessoire("JB48/500NO", "Balai de côté noir", "balai"),
    creer_accessoire("PVITRAGE", "Profil de vitrage 6-8", "joint"),
    creer_accessoire("PVITRAGENO", "Profil de vitrage 6-8 noir", "joint"),
    creer_accessoire("PVITRAGE12", "Profil de vitrage 10-12", "joint"),
    creer_accessoire("PVITRAGE12NO", "Profil de vitrage 10-12 noir", "joint"),
    creer_accessoire("CAPOTRH50", "Capot monorail haut", "capot"),
    creer_accessoire("CAPOTRB48", "Capot monorail bas", "capot"),
    creer_accessoire("EQUERSUSPM", "Équerre de suspension + vis", "equerre"),
]

PROFILS_STANDARD: dict[str, dict] = {p["reference"]: p for p in _PROFILS}
ACCESSOIRES_STANDARD: dict[str, dict] = {a["reference"]: a for a in _ACCESSOIRES}


# =====================================================================
#  Acces au catalogue
# =====================================================================

@dataclass(frozen=True)
class ConstantesPoignee:
    """Constantes geometriques d'une poignee (mm)."""
    y: float = 0.0
    z: float = 0.0
    c: float = 0.0
    t: float = 0.0
    trouve: bool = False


class Catalogue:
    """Table de reference en lecture seule (reference -> metadonnees).

    Les entrees sont copiees a la construction et a chaque lecture:
    un appelant ne peut pas modifier le catalogue partage.
    """

    def __init__(self, profils: dict[str, dict] | None = None,
                 accessoires: dict[str, dict] | None = None):
        self._entrees: dict[str, dict] = {}
        for table in (accessoires or {}, profils or {}):
            for ref, entree in table.items():
                self._entrees[str(ref)] = copy.deepcopy(entree)

    def __contains__(self, reference) -> bool:
        return self.contient(reference)

    def __len__(self) -> int:
        return len(self._entrees)

    def contient(self, reference) -> bool:
        return reference is not None and str(reference) in self._entrees

    def trouver(self, reference) -> dict | None:
        """Retourne les metadonnees d'une reference, ou None si inconnue."""
        if reference is None:
            return None
        entree = self._entrees.get(str(reference))
        return copy.deepcopy(entree) if entree is not None else None

    def designation(self, reference) -> str:
        entree = self._entrees.get(str(reference)) if reference is not None else None
        return (entree or {}).get("designation") or ""

    def type_reference(self, reference) -> str:
        entree = self._entrees.get(str(reference)) if reference is not None else None
        return (entree or {}).get("type") or ""

    def constantes_poignee(self, reference) -> ConstantesPoignee:
        """Retourne les constantes y, z, c, t d'une poignee (0 si absentes)."""
        entree = self._entrees.get(str(reference)) if reference is not None else None
        if entree is None:
            return ConstantesPoignee()
        return ConstantesPoignee(
            y=vers_nombre(entree.get("y"), 0.0),
            z=vers_nombre(entree.get("z"), 0.0),
            c=vers_nombre(entree.get("c"), 0.0),
            t=vers_nombre(entree.get("t"), 0.0),
            trouve=True,
        )


_CATALOGUE_STANDARD = Catalogue(PROFILS_STANDARD, ACCESSOIRES_STANDARD)


def catalogue_standard() -> Catalogue:
    """Retourne le catalogue standard partage (lecture seule)."""
    return _CATALOGUE_STANDARD
