"""
Meal Planner.

Recipe catalogue, custom recipes, weekly meal planning and a scalable
shopping list, served as a JSON API.
"""

__version__ = "0.1.0"
