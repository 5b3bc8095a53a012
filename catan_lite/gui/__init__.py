"""GUI package: interface pygame de Catan-Lite.

Modules:
- geometry: transformation logique -> écran et détection des clics
- app: modèle d'interface headless (modes, surbrillances, boutons, bots)
- renderer: rendu pygame du plateau, des pièces et du panneau latéral
- sfx: effets sonores de fin de partie
"""

__all__ = [
    "geometry",
    "app",
    "renderer",
    "sfx",
]
