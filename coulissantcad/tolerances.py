"""Tolerances de l'egalisation et du regroupement des hauteurs de remplissage.

Valeurs empiriques issues des fiches atelier. Elles sont conservees telles
quelles; les modifier change les pieces de debit produites.
"""

# Ecart max entre le plus grand et le plus petit entraxe de traverses (mm)
# pour considerer un vantail comme "reparti regulierement"
TOLERANCE_ENTRAXES_MM: float = 1.0

# Deux hauteurs de remplissage (tous vantaux confondus) distantes de moins
# de cette valeur sont ramenees a la plus petite (mm)
TOLERANCE_REGROUPEMENT_MM: float = 1.0
