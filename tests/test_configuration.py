"""
Tests unitaires pour la lecture et la normalisation des configurations.
"""

import dataclasses
import json

import pytest
from coulissantcad.configuration import (
    Configuration, Freins, GroupeTraverses, Traverses, charger_configuration,
    configuration_bornee, configuration_depuis_dict, normaliser_configuration,
    options_epaisseur, options_finition, options_poignee,
)


class TestConfigurationDepuisDict:
    """Tests de la lecture champ par champ."""

    def test_valeurs_par_defaut(self):
        config = configuration_depuis_dict(None)
        assert config.gamme == "82"
        assert config.rail == "double"
        assert config.largeur == 1200
        assert config.hauteur == 2100
        assert config.nb_vantaux == 2
        assert config.poignee == "P100"

    def test_cles_du_store(self):
        config = configuration_depuis_dict({
            "range": "96ca",
            "tick": "8",
            "leavesCount": "3",
            "handle": "P810",
            "finishCode": "LBL",
            "width": "2000.7",
            "height": -5,
            "filling": "Miroir",
        })
        assert config.gamme == "96CA"
        assert config.epaisseur == "6-8"
        assert config.nb_vantaux == 3
        assert config.poignee == "P810"
        assert config.finition == "LBL"
        assert config.largeur == 2000
        assert config.hauteur == 0
        assert config.remplissage == "miroir"

    def test_nb_vantaux_minimum(self):
        assert configuration_depuis_dict({"nb_vantaux": 0}).nb_vantaux == 1
        assert configuration_depuis_dict({"nb_vantaux": "abc"}).nb_vantaux == 1

    def test_rail(self):
        assert configuration_depuis_dict({"rail": "SIMPLE"}).rail == "simple"
        assert configuration_depuis_dict({"rail": "autre"}).rail == "double"

    def test_traverses(self):
        config = configuration_depuis_dict({
            "traverses": {
                "groups": [{"type": 28, "count": "2", "heights": ["500", 1000]}],
                "sameForAllLeaves": False,
            },
        })
        assert config.traverses.identiques is False
        groupe = config.traverses.groupes[0]
        assert groupe.type == "28"
        assert groupe.nombre == 2
        assert groupe.hauteurs == (500.0, 1000.0)

    def test_traverses_invalides(self):
        config = configuration_depuis_dict({"traverses": "rien"})
        assert config.traverses == Traverses()

    def test_freins_bornes(self):
        config = configuration_depuis_dict({"absorber": {"fram": "2", "freco": -1}})
        assert config.freins.fram == 2
        assert config.freins.freco == 0
        assert config.freins.frlamelle == 0

    def test_couleurs_a_plat(self):
        config = configuration_depuis_dict({"colorSeal": " Noir ", "colorBrushes": "Gris"})
        assert config.couleurs.joint == "Noir"
        assert config.couleurs.balais == "Gris"

    def test_couleurs_imbriquees_prioritaires(self):
        config = configuration_depuis_dict({
            "colorSeal": "Noir",
            "colors": {"seal": "Gris", "pglass": "Translucide"},
        })
        assert config.couleurs.joint == "Gris"
        assert config.couleurs.vitrage == "Translucide"

    def test_configuration_immuable(self):
        config = Configuration()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.largeur = 10


class TestOptions:
    """Tests des tables de coherence."""

    def test_epaisseurs(self):
        assert options_epaisseur("96") == ["16", "19"]
        assert options_epaisseur("96CA") == ["6-8", "10-12"]
        assert options_epaisseur("82") == ["19"]

    def test_finitions(self):
        assert options_finition("96", "16") == ["LBL", "SA", "LNOG", "PB", "BR"]
        assert options_finition("82", "19") == ["LBL", "SA", "BR"]
        assert options_finition("XX", "19") == []

    def test_poignees(self):
        assert options_poignee("82", "19", "SA") == ["P100", "P110"]
        assert options_poignee("96", "16", "SA") == ["P300-16"]
        assert options_poignee("96", "19", "LBLG") == ["P30"]
        assert options_poignee("96", "19", "BI") == ["P600", "P700", "P710"]
        assert options_poignee("96CA", "6-8", "LBL") == ["P810"]


class TestNormaliserConfiguration:
    """Tests de la coherence entre champs."""

    def test_gamme_82_force_rail_double(self):
        config = normaliser_configuration(Configuration(gamme="82", rail="simple"))
        assert config.rail == "double"

    def test_gamme_96_16(self):
        config = normaliser_configuration(Configuration(
            gamme="96", epaisseur="16", finition="L9002G", poignee="P600"))
        assert config.finition == "LBL"
        assert config.poignee == "P300-16"

    def test_gamme_96ca(self):
        config = normaliser_configuration(Configuration(
            gamme="96CA", epaisseur="19", finition="PB", poignee="P100"))
        assert config.epaisseur == "6-8"
        assert config.finition == "LBLG"
        assert config.poignee == "P810"

    def test_poignee_selon_finition(self):
        config = normaliser_configuration(Configuration(
            gamme="96", epaisseur="19", finition="BI", poignee="P30"))
        assert config.poignee == "P600"

    def test_configuration_valide_inchangee(self):
        config = Configuration(gamme="96", epaisseur="19", finition="SA",
                               poignee="P600", rail="simple")
        assert normaliser_configuration(config) == config

    def test_entree_non_modifiee(self):
        config = Configuration(gamme="82", rail="simple")
        normaliser_configuration(config)
        assert config.rail == "simple"


class TestChargerConfiguration:

    def test_fichier_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"gamme": "96", "largeur": 1800}), encoding="utf-8")
        config = charger_configuration(path)
        assert config.gamme == "96"
        assert config.largeur == 1800
        assert config.hauteur == 2100
        assert config.traverses.groupes == (GroupeTraverses("28", 0, ()),)

    def test_racine_invalide(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError):
            charger_configuration(path)


class TestConfigurationBornee:
    """Tests du bornage d'une configuration construite directement."""

    def test_champs_numeriques(self):
        config = configuration_bornee(Configuration(
            largeur="1200.9", hauteur=-10, nb_vantaux=0,
            freins=Freins(fram=-3, freco="2", frlamelle=None)))
        assert config.largeur == 1200
        assert config.hauteur == 0
        assert config.nb_vantaux == 1
        assert config.freins == Freins(fram=0, freco=2, frlamelle=0)

    def test_traverses(self):
        config = configuration_bornee(Configuration(traverses=Traverses(
            (GroupeTraverses(28, "2", ["500", "x"]),), identiques=0)))
        assert config.traverses == Traverses((GroupeTraverses("28", 2, (500.0, 0.0)),), False)

    def test_configuration_valide_inchangee(self):
        config = Configuration(gamme="96", epaisseur="19", poignee="P600",
                               traverses=Traverses((GroupeTraverses("", 2, (700.0, 1400.0)),)))
        assert configuration_bornee(config) == config
