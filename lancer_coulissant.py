"""
Devis de portes coulissantes.

Modifier les PARAMS ci-dessous puis executer:
    python lancer_coulissant.py [config.json] [sortie.pdf]

Un fichier JSON passe en argument remplace les PARAMS.
"""

import logging
import sys

from coulissantcad.configuration import (
    charger_configuration, configuration_depuis_dict, normaliser_configuration,
)
from coulissantcad.devis import calculer_devis, generer_texte
from coulissantcad.pdf_export import exporter_pdf_devis

# ===========================================================================
#  PARAMETRES
# ===========================================================================

PARAMS = {
    "nom": "Dressing chambre",

    # --- Gamme et rail ---
    "gamme": "96",              # 82 | 96 | 96CA
    "epaisseur": "19",          # 96: 16 / 19, 96CA: 6-8 / 10-12, 82: 19
    "rail": "double",           # simple | double
    "disposition": "quinconce",  # quinconce | centre

    # --- Dimensions (mm) ---
    "largeur": 2400,
    "hauteur": 2500,
    "nb_vantaux": 3,

    # --- Profils ---
    "poignee": "P600",
    "finition": "SA",

    # --- Traverses intermediaires (positions depuis le bas, mm) ---
    "traverses": {
        "groupes": [
            {"type": "19", "nombre": 2, "hauteurs": [800, 1600]},
        ],
        "identiques": True,
    },

    # --- Accessoires ---
    "freins": {"fram": 2, "freco": 0, "frlamelle": 0},
    "couleurs": {"joint": "Gris", "balais": "Gris", "vitrage": ""},

    "remplissage": "miroir",
}

SORTIE_PDF = "devis_coulissant.pdf"


def main(argv: list[str]) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if len(argv) > 1:
        config = charger_configuration(argv[1])
    else:
        config = configuration_depuis_dict(PARAMS)
    config = normaliser_configuration(config)
    sortie = argv[2] if len(argv) > 2 else SORTIE_PDF

    devis = calculer_devis(config)
    print(generer_texte(devis))
    exporter_pdf_devis(sortie, devis)
    print(f"\nPDF genere: {sortie}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
