"""
Données de démarrage du catalogue (articles de la caisse, tailles, couleurs, clients).

Utilisées par le stockage en mémoire et pour initialiser une base SQL vide.
"""
from decimal import Decimal
from typing import List

from atelier.catalog.domain.entities import Article, Color, Customer, Size, Variant

# (id, nom, code, ordre)
_SIZES = [
    ("t1", "Extra Small", "XS", 1),
    ("t2", "Small", "S", 2),
    ("t3", "Medium", "M", 3),
    ("t4", "Large", "L", 4),
    ("t5", "Extra Large", "XL", 5),
    ("t6", "Double Extra Large", "XXL", 6),
]

# (id, nom, hex, rgb)
_COLORS = [
    ("c1", "Rouge", "#FF0000", "255,0,0"),
    ("c2", "Bleu", "#0000FF", "0,0,255"),
    ("c3", "Vert", "#00FF00", "0,255,0"),
    ("c4", "Jaune", "#FFFF00", "255,255,0"),
    ("c5", "Noir", "#000000", "0,0,0"),
    ("c6", "Blanc", "#FFFFFF", "255,255,255"),
    ("c7", "Orange", "#FFA500", "255,165,0"),
    ("c8", "Violet", "#800080", "128,0,128"),
]

# (id, nom, description, catégorie, prix_base, code_barre, collection, prix_achat)
_ARTICLES = [
    ("art1", "Kaftan Traditionnel Homme", "Kaftan élégant en wax premium avec broderies artisanales",
     "vetement_homme", "35000", "KAF001", "col1", "25000"),
    ("art2", "Boubou Grand Boubou", "Boubou traditionnel ivoirien en tissu local premium",
     "vetement_homme", "45000", "BOU001", "col1", "32000"),
    ("art3", "Robe en Pagne Traditionnel", "Robe élégante en pagne ivoirien authentique",
     "vetement_femme", "28000", "ROB001", "col2", "20000"),
    ("art4", "Chemise Traditionnelle Wax", "Chemise moderne en tissu wax pour homme et femme",
     "vetement_homme", "18000", "CHE001", "col2", "13000"),
    ("art5", "Pantalon Wax Moderne", "Pantalon confortable en tissu wax, coupe moderne",
     "vetement_homme", "22000", "PAN001", "col2", "16000"),
    ("art6", "Ensemble Complet Cérémonie", "Ensemble coordonné pour occasions spéciales et cérémonies",
     "vetement_homme", "55000", "ENS001", "col3", "40000"),
]

# (id, article, taille, couleur, sku, stock, stock_min, code_barre)
_VARIANTS = [
    ("d1", "art1", "t3", "c1", "KAF-M-RED-001", 8, 3, "1234567890123"),
    ("d2", "art1", "t4", "c2", "KAF-L-BLUE-001", 5, 2, "1234567890124"),
    ("d3", "art2", "t3", "c3", "BOU-M-GREEN-001", 6, 2, "1234567890125"),
    ("d4", "art2", "t4", "c4", "BOU-L-YELLOW-001", 4, 2, "1234567890126"),
    ("d5", "art3", "t2", "c5", "ROB-S-BLACK-001", 7, 3, "1234567890127"),
    ("d6", "art3", "t3", "c6", "ROB-M-WHITE-001", 9, 3, "1234567890128"),
    ("d7", "art4", "t3", "c7", "CHE-M-ORANGE-001", 12, 4, "1234567890129"),
    ("d8", "art4", "t4", "c8", "CHE-L-VIOLET-001", 8, 3, "1234567890130"),
    ("d9", "art5", "t3", "c1", "PAN-M-RED-001", 10, 4, "1234567890131"),
    ("d10", "art5", "t4", "c2", "PAN-L-BLUE-001", 6, 3, "1234567890132"),
    ("d11", "art6", "t3", "c3", "ENS-M-GREEN-001", 4, 2, "1234567890133"),
    ("d12", "art6", "t4", "c4", "ENS-L-YELLOW-001", 3, 1, "1234567890134"),
]

# Accessoires vendus sans déclinaison (stock à plat)
_PLAIN_ARTICLES = [
    ("art7", "Sac à Main Signature", "Sac en cuir avec fermoir doré", "accessoire", "32000", "SAC001", 5),
    ("art8", "Boucles d'oreilles Plume d'Or", "Boucles d'oreilles plaquées or", "accessoire", "12000", "BOU-OR-01", 10),
]

_CUSTOMERS = [
    ("1", "Kouassi", "Jean", "jean.kouassi@email.com", "+225 07 12 34 56 78"),
    ("2", "Traoré", "Aminata", "aminata.traore@email.com", "+225 05 98 76 54 32"),
]


def default_sizes() -> List[Size]:
    return [Size(id=i, name=n, code=c, order=o) for i, n, c, o in _SIZES]


def default_colors() -> List[Color]:
    return [Color(id=i, name=n, hex_code=h, rgb_code=r) for i, n, h, r in _COLORS]


def default_customers() -> List[Customer]:
    return [Customer(id=i, last_name=ln, first_name=fn, email=e, phone=p) for i, ln, fn, e, p in _CUSTOMERS]


def default_articles() -> List[Article]:
    articles = []
    for art_id, name, description, category, price, barcode, collection, purchase in _ARTICLES:
        variants = [
            Variant(
                id=v_id,
                article_id=art_id,
                size_id=size_id,
                color_id=color_id,
                sku=sku,
                price=Decimal(price),
                purchase_price=Decimal(purchase),
                stock=stock,
                min_stock=min_stock,
                barcode=v_barcode,
            )
            for v_id, v_article, size_id, color_id, sku, stock, min_stock, v_barcode in _VARIANTS
            if v_article == art_id
        ]
        articles.append(Article(
            id=art_id,
            name=name,
            description=description,
            category=category,
            base_price=Decimal(price),
            barcode=barcode,
            collection_id=collection,
            variants=variants,
        ))
    for art_id, name, description, category, price, barcode, stock in _PLAIN_ARTICLES:
        articles.append(Article(
            id=art_id,
            name=name,
            description=description,
            category=category,
            base_price=Decimal(price),
            barcode=barcode,
            stock=stock,
        ))
    return articles
