"""
Tests unitaires pour le calcul des accessoires.
"""

import pytest
from coulissantcad.accessoires import (
    LigneAccessoire, LongueursProfils, calculer_accessoires, grouper_par_type,
    longueurs_depuis_profils, variante_couleur, VARIANTES_BALAI_1050,
)
from coulissantcad.catalogue import Catalogue
from coulissantcad.configuration import (
    Configuration, Couleurs, Freins, GroupeTraverses, Traverses,
)
from coulissantcad.profils import calculer_profils


def _quantites(resultat) -> dict:
    """ref -> quantite totale."""
    out = {}
    for ligne in resultat.liste:
        out[ligne.ref] = out.get(ligne.ref, 0) + ligne.quantite
    return out


class TestRouesFreinsGuides:
    """Tests des roulettes, freins et guides par gamme."""

    def test_gamme_82(self):
        config = Configuration(gamme="82", nb_vantaux=2, freins=Freins(fram=1))
        qte = _quantites(calculer_accessoires(config))
        assert qte["KITROUPRO"] == 2
        assert qte["FR82"] == 1
        assert "FR82E" not in qte
        assert qte["GUIDHAUT82CN"] == 2
        assert "FREIN" not in qte

    def test_gamme_82_freins_eco(self):
        config = Configuration(gamme="82", nb_vantaux=3, freins=Freins(fram=1, freco=1))
        qte = _quantites(calculer_accessoires(config))
        assert qte["FR82E"] == 1
        assert qte["GUIDHAUT82CN"] == 2

    def test_gamme_96_16(self):
        config = Configuration(gamme="96", epaisseur="16", nb_vantaux=3,
                               poignee="P300-16", freins=Freins(fram=1))
        qte = _quantites(calculer_accessoires(config))
        assert qte["KITROUPRO"] == 3
        assert qte["CALE16-19"] == 3
        assert qte["FR96-16"] == 1
        assert qte["GUIDHAUT16"] == 4

    def test_gamme_96_19(self):
        config = Configuration(gamme="96", epaisseur="19", nb_vantaux=2,
                               poignee="P600", freins=Freins(fram=2))
        qte = _quantites(calculer_accessoires(config))
        assert qte["FR96"] == 2
        assert "CALE16-19" not in qte
        # tous les vantaux freines: plus de guide
        assert "GUIDHAUT96" not in qte

    def test_gamme_96ca(self):
        config = Configuration(gamme="96CA", epaisseur="6-8", nb_vantaux=2,
                               poignee="P810", freins=Freins(fram=1))
        qte = _quantites(calculer_accessoires(config))
        assert qte["ROUTHB52"] == 4
        assert qte["FRBASEO"] == 1
        assert qte["GUIDHAUTBASEO"] == 3
        assert qte["ANTIDERAIL1"] == 3
        assert "KITROUPRO" not in qte

    def test_freins_lamelle(self):
        config = Configuration(gamme="96", nb_vantaux=2, freins=Freins(frlamelle=2))
        qte = _quantites(calculer_accessoires(config))
        assert qte["FREIN"] == 2
        assert qte["FREINENROB"] == 2


class TestJointsBalais:
    """Tests des joints, balais et profils de vitrage."""

    def test_gamme_96(self):
        config = Configuration(gamme="96", largeur=1200, nb_vantaux=2, poignee="P600",
                               couleurs=Couleurs(joint="Noir"))
        res = calculer_accessoires(config, LongueursProfils(poignee=2450, corniere=570))
        lignes = {l.ref: l for l in res.liste}
        assert lignes["JBUTNO"].longueur == 1200
        assert lignes["JBUTNO"].quantite == 1
        assert lignes["JBUTNO"].libelle_finition == "Noir"
        assert lignes["JB48/1050"].quantite == 2
        assert lignes["JB48/1050"].longueur == 570
        assert lignes["JB48/500"].quantite == 4
        assert lignes["JB48/500"].longueur == 2450
        assert lignes["JB48/500"].libelle_finition is None

    def test_balais_sans_longueur(self):
        config = Configuration(gamme="96", nb_vantaux=2, poignee="P600")
        refs = [l.ref for l in calculer_accessoires(config).liste]
        assert "JB48/1050" not in refs
        assert "JB48/500" not in refs

    def test_gamme_96ca_vitrage(self):
        config = Configuration(gamme="96CA", epaisseur="10-12", largeur=2000, nb_vantaux=2,
                               poignee="P810", couleurs=Couleurs(vitrage="Noir"))
        longueurs = LongueursProfils(poignee=2346, traverse_haute=966,
                                     qte_traverses=2, longueur_traverses=966)
        res = calculer_accessoires(config, longueurs)
        vitrage = [(l.quantite, l.longueur) for l in res.liste if l.ref == "PVITRAGE12NO"]
        assert vitrage == [(4, 2346), (4, 966), (2, 966)]
        joints = [(l.quantite, l.longueur) for l in res.liste if l.ref == "JBUT"]
        assert joints == [(1, 2000), (4, 2346)]

    def test_variante_couleur(self):
        assert variante_couleur("JB48/1050", "Noir", VARIANTES_BALAI_1050) == (
            "JB48/1050NO", "Noir")
        assert variante_couleur("JB48/1050", "", VARIANTES_BALAI_1050) == ("JB48/1050", None)


class TestMonorail:
    """Tests des capots et equerres du monorail."""

    def test_capots_et_equerres(self):
        config = Configuration(gamme="96", rail="simple", largeur=1000, nb_vantaux=2,
                               poignee="P600")
        res = calculer_accessoires(config)
        qte = _quantites(res)
        assert qte["CAPOTRH50"] == 2
        assert qte["CAPOTRB48"] == 2
        assert qte["EQUERSUSPM"] == 8
        equerre = next(l for l in res.liste if l.ref == "EQUERSUSPM")
        assert equerre.libelle_finition == "Noir"

    def test_equerres_arrondi_superieur(self):
        config = Configuration(gamme="96", rail="simple", largeur=1100, nb_vantaux=2)
        assert _quantites(calculer_accessoires(config))["EQUERSUSPM"] == 9

    def test_gamme_82_sans_capot(self):
        config = Configuration(gamme="82", rail="simple", largeur=1000, nb_vantaux=2)
        qte = _quantites(calculer_accessoires(config))
        assert "CAPOTRH50" not in qte
        assert qte["EQUERSUSPM"] == 8

    def test_rail_double_sans_equerre(self):
        qte = _quantites(calculer_accessoires(Configuration(gamme="96")))
        assert "EQUERSUSPM" not in qte


class TestResultat:

    def test_aucune_quantite_nulle(self):
        for gamme, epaisseur in (("82", "19"), ("96", "16"), ("96", "19"),
                                 ("96CA", "6-8"), ("96CA", "10-12")):
            for rail in ("simple", "double"):
                config = Configuration(gamme=gamme, epaisseur=epaisseur, rail=rail,
                                       nb_vantaux=2, freins=Freins(fram=5))
                res = calculer_accessoires(config, LongueursProfils(poignee=2000))
                assert all(l.quantite > 0 for l in res.liste)

    def test_reference_hors_catalogue(self):
        res = calculer_accessoires(Configuration(gamme="82"), catalogue=Catalogue())
        kit = next(l for l in res.liste if l.ref == "KITROUPRO")
        assert kit.type == "roue"
        assert kit.designation == ""

    def test_par_type(self):
        res = calculer_accessoires(Configuration(gamme="82", freins=Freins(fram=1)))
        assert set(res.par_type) == {"roue", "frein", "guide"}
        assert sum(len(v) for v in res.par_type.values()) == len(res.liste)

    def test_grouper_type_vide(self):
        groupes = grouper_par_type([LigneAccessoire("X", "", "", 1)])
        assert list(groupes) == ["autre"]

    def test_longueurs_depuis_profils(self):
        config = Configuration(
            gamme="96CA", epaisseur="6-8", largeur=2000, hauteur=2400, poignee="P810",
            traverses=Traverses((GroupeTraverses("28", 1, (1200,)),)))
        longueurs = longueurs_depuis_profils(calculer_profils(config))
        assert longueurs == LongueursProfils(poignee=2346, traverse_haute=966, corniere=0,
                                             qte_traverses=2, longueur_traverses=966)

    def test_longueurs_negatives_bornees(self):
        config = Configuration(gamme="96", nb_vantaux=2)
        res = calculer_accessoires(config, LongueursProfils(poignee=-10, corniere=-5))
        assert res.meta["longueurs"]["poignee"] == 0
        assert all(l.longueur is None or l.longueur > 0 for l in res.liste)


@pytest.mark.parametrize("nb_vantaux", [1, 2, 4])
def test_roulettes_par_vantail(nb_vantaux):
    config = Configuration(gamme="96", nb_vantaux=nb_vantaux)
    assert _quantites(calculer_accessoires(config))["KITROUPRO"] == nb_vantaux


class TestConfigurationMalformee:

    def test_freins_negatifs(self):
        config = Configuration(gamme="82", nb_vantaux=2, freins=Freins(fram=-3, freco=-1))
        qte = _quantites(calculer_accessoires(config))
        assert "FR82" not in qte
        assert qte["GUIDHAUT82CN"] == 4

    def test_largeur_texte(self):
        config = Configuration(gamme="96", rail="simple", largeur="1100", nb_vantaux=2)
        assert _quantites(calculer_accessoires(config))["EQUERSUSPM"] == 9
