"""Shared fixtures for the extraction engine tests."""

import logging
from datetime import datetime
from typing import Iterable, List, Tuple

import pytest

from invoice_engine.config import ConfigurationManager
from invoice_engine.document_loader import TextFragment, build_full_text
from invoice_engine.utils.logger import ROOT_LOGGER_NAME

FIXED_NOW = datetime(2024, 6, 15, 10, 30, 0)


def make_fragments(rows: Iterable[Tuple[str, float]], page: int = 0) -> List[TextFragment]:
    """Build fragments from (text, y) pairs, in the given emission order."""
    return [TextFragment(text, x=40.0, y=float(y), height=10.0, page=page) for text, y in rows]


def text_of(fragments: List[TextFragment]) -> str:
    return build_full_text(fragments)


@pytest.fixture(autouse=True)
def reset_configuration():
    """Every test starts from the packaged settings.yaml."""
    ConfigurationManager.reset()
    yield
    ConfigurationManager.reset()


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logger during a test."""
    yield
    app_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in app_logger.handlers:
        handler.close()
    app_logger.handlers.clear()
    app_logger.propagate = True


@pytest.fixture
def fixed_clock():
    """Clock always returning FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def sold_to_fragments() -> List[TextFragment]:
    """Client block followed by a later section repeating the name."""
    return make_fragments([
        ("Sold To:", 100),
        ("Jean DUPONT", 90),
        ("5 Rue X, 75001 Paris", 80),
        ("Payment Method", 50),
        ("Jean DUPONT", 40),
    ])


@pytest.fixture
def ici_store_fragments() -> List[TextFragment]:
    """Single-page ICI-Store style invoice."""
    return make_fragments([
        ("ICI-Store", 800),
        ("Facture", 780),
        ("Date de commande : 15 juin 2024", 770),
        ("Commande #104532", 760),
        ("Vendu à :", 700),
        ("Philippe NARD", 690),
        ("12 Rue de Kerveguen", 680),
        ("29870 Lannilis", 670),
        ("T : 0612345678", 660),
        ("philippe.nard@example.fr", 650),
        ("contact@ici-store.com", 640),
        ("Mode de paiement", 600),
        ("Carte bancaire", 590),
        ("STORBOX 300 - Store banne Coffre Intégral sur mesure", 500),
        ("Couleur d'armature : Blanc RAL 9016", 490),
        ("Couleur de la toile : Dickson Orchestra Gris", 480),
        ("Moteur : Somfy Sunea 50 CSI io", 470),
        ("Option capteur de vent Eolis 3D", 460),
        ("Prix unitaire : 1 028,80 €", 400),
        ("TVA FR (20.0%) : 205,76 €", 390),
        ("Frais de port : 0,00 €", 380),
        ("Montant global : 1 234,56 €", 370),
    ])


@pytest.fixture
def leroy_merlin_fragments() -> List[TextFragment]:
    """Leroy Merlin style invoice."""
    return make_fragments([
        ("LEROY MERLIN", 800),
        ("Facture", 780),
        ("Client :", 700),
        ("M. Jean DUPONT", 690),
        ("12 Rue des Lilas", 680),
        ("Bâtiment B", 670),
        ("75001 Paris", 660),
        ("Tél : 06 12 34 56 78", 650),
        ("Livraison", 600),
        ("Articles", 500),
        ("Store banne Réf : 82345678", 490),
        ("Couleur toile : Gris perle", 480),
        ("Couleur : Blanc", 470),
        ("Motorisation : Somfy io", 460),
        ("Total", 400),
        ("Total TTC : 1 499,00 €", 390),
        ("Date de commande : 12/05/2024", 380),
    ])
