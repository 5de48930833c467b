"""
Unctico clinical knowledge base.

Contains the fixed safety catalogues:
- Contraindication conditions (category, severity, recommendations)
- Red-flag symptoms (urgency, recommended action)
"""
