"""
Atelier - caisse, panier et encaissement d'une maison de couture.
"""
__version__ = "1.0.0"
