"""BurgerLab backend: menu/nutrition API and brand menu ingest."""
