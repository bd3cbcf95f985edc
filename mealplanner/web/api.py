"""
JSON API routes: recipe catalogue, custom recipes, planning and shopping list.
"""

import logging

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from .auth import current_user_id, error_response, login_required
from .schemas import (
    AddRecipeToListRequest,
    CreateCustomRecipeRequest,
    CreateMealPlanningRequest,
    ManualItemRequest,
    ServingsChangeRequest,
    UpdateCustomRecipeRequest,
    UpdateMealPlanningRequest,
    validation_message,
)

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__, url_prefix="/api")


def services():
    return current_app.extensions["mealplanner"]


def json_body() -> dict:
    return request.get_json(silent=True) or {}


@api_bp.errorhandler(ValidationError)
def handle_validation_error(e: ValidationError):
    return error_response(validation_message(e), 400)


# ==================== Recipe catalogue ====================

@api_bp.route('/recipes', methods=['GET'])
def list_recipes():
    """
    Browse the catalogue.

    Query params:
        q: Text matched against name, cuisine or type
    """
    try:
        recipes = services().recipes.list_recipes(query=request.args.get('q'))
        return jsonify([r.to_dict() for r in recipes])
    except Exception as e:
        logger.error(f"Error listing recipes: {e}", exc_info=True)
        return error_response("Failed to fetch recipes", 500)


@api_bp.route('/recipes/certified', methods=['GET'])
def certified_recipes():
    try:
        return jsonify([r.to_dict() for r in services().recipes.certified()])
    except Exception as e:
        logger.error(f"Error listing certified recipes: {e}", exc_info=True)
        return error_response("Failed to fetch recipes", 500)


@api_bp.route('/recipes/<int:recipe_id>', methods=['GET'])
def get_recipe(recipe_id):
    try:
        recipe = services().recipes.get(recipe_id)
        if not recipe:
            return error_response("Recipe not found", 404)
        return jsonify(recipe.to_dict())
    except Exception as e:
        logger.error(f"Error getting recipe {recipe_id}: {e}", exc_info=True)
        return error_response("Failed to fetch recipe", 500)


# ==================== Custom recipes ====================

@api_bp.route('/custom-recipes', methods=['GET'])
@login_required
def list_custom_recipes():
    """All custom recipes of the authenticated user."""
    try:
        recipes = services().custom_recipes.get_all(current_user_id())
        return jsonify([r.to_dict() for r in recipes])
    except Exception as e:
        logger.error(f"Error listing custom recipes: {e}", exc_info=True)
        return error_response("Failed to fetch custom recipes", 500)


@api_bp.route('/custom-recipes', methods=['POST'])
@login_required
def create_custom_recipe():
    body = CreateCustomRecipeRequest.model_validate(json_body())
    try:
        recipe = services().custom_recipes.create(current_user_id(), body.to_fields())
        return jsonify(recipe.to_dict()), 201
    except Exception as e:
        logger.error(f"Error creating custom recipe: {e}", exc_info=True)
        return error_response("Failed to create custom recipe", 500)


@api_bp.route('/custom-recipes/<recipe_id>', methods=['GET'])
@login_required
def get_custom_recipe(recipe_id):
    try:
        recipe = services().custom_recipes.get_by_id(recipe_id, current_user_id())
        if not recipe:
            return error_response("Custom recipe not found", 404)
        return jsonify(recipe.to_dict())
    except Exception as e:
        logger.error(f"Error getting custom recipe {recipe_id}: {e}", exc_info=True)
        return error_response("Failed to fetch custom recipe", 500)


@api_bp.route('/custom-recipes/<recipe_id>', methods=['PATCH'])
@login_required
def update_custom_recipe(recipe_id):
    body = UpdateCustomRecipeRequest.model_validate(json_body())
    try:
        recipe = services().custom_recipes.update(recipe_id, current_user_id(), body.to_updates())
        if not recipe:
            return error_response("Custom recipe not found", 404)
        return jsonify(recipe.to_dict())
    except Exception as e:
        logger.error(f"Error updating custom recipe {recipe_id}: {e}", exc_info=True)
        return error_response("Failed to update custom recipe", 500)


@api_bp.route('/custom-recipes/<recipe_id>', methods=['DELETE'])
@login_required
def delete_custom_recipe(recipe_id):
    try:
        if not services().custom_recipes.delete(recipe_id, current_user_id()):
            return error_response("Custom recipe not found", 404)
        return jsonify({"success": True, "message": "Custom recipe deleted"})
    except Exception as e:
        logger.error(f"Error deleting custom recipe {recipe_id}: {e}", exc_info=True)
        return error_response("Failed to delete custom recipe", 500)


# ==================== Planning ====================

@api_bp.route('/planning', methods=['GET'])
@login_required
def get_planning():
    """Every planned meal of the authenticated user, by date."""
    try:
        entries = services().planning.get_user_planning(current_user_id())
        return jsonify([e.to_dict() for e in entries])
    except Exception as e:
        logger.error(f"Error fetching planning: {e}", exc_info=True)
        return error_response("Failed to fetch planning", 500)


@api_bp.route('/planning', methods=['POST'])
@login_required
def add_to_planning():
    body = CreateMealPlanningRequest.model_validate(json_body())
    try:
        entry = services().planning.add_meal(
            user_id=current_user_id(),
            date=body.date,
            recipe_id=body.recipe_id,
            source=body.source,
            slot=body.slot,
        )
        return jsonify(entry.to_dict()), 201
    except Exception as e:
        logger.error(f"Error adding to planning: {e}", exc_info=True)
        return error_response("Failed to add meal to planning", 500)


@api_bp.route('/planning/week', methods=['GET'])
@login_required
def get_planning_week():
    """
    Monday-to-Sunday grid.

    Query params:
        start: Any day of the wanted week, YYYY-MM-DD (defaults to today)
    """
    start = request.args.get('start')
    try:
        week = services().planning.get_week(current_user_id(), start)
    except ValueError:
        return error_response("start must be in YYYY-MM-DD format", 400)
    except Exception as e:
        logger.error(f"Error building week: {e}", exc_info=True)
        return error_response("Failed to fetch planning", 500)
    return jsonify(week)


@api_bp.route('/planning/<entry_id>', methods=['PATCH'])
@login_required
def update_planning(entry_id):
    body = UpdateMealPlanningRequest.model_validate(json_body())
    try:
        entry = services().planning.update_meal(entry_id, current_user_id(), body.to_updates())
        if not entry:
            return error_response("Planning entry not found", 404)
        return jsonify(entry.to_dict())
    except Exception as e:
        logger.error(f"Error updating planning {entry_id}: {e}", exc_info=True)
        return error_response("Failed to update planning", 500)


@api_bp.route('/planning/<entry_id>', methods=['DELETE'])
@login_required
def delete_planning(entry_id):
    try:
        if not services().planning.remove_meal(entry_id, current_user_id()):
            return error_response("Planning entry not found", 404)
        return jsonify({"success": True, "message": "Meal removed from planning"})
    except Exception as e:
        logger.error(f"Error deleting planning {entry_id}: {e}", exc_info=True)
        return error_response("Failed to delete planning entry", 500)


# ==================== Shopping list ====================

@api_bp.route('/shopping-list', methods=['GET'])
@login_required
def get_shopping_list():
    try:
        engine = services().shopping.engine_for(current_user_id())
        return jsonify(engine.view())
    except Exception as e:
        logger.error(f"Error loading shopping list: {e}", exc_info=True)
        return error_response("Failed to load shopping list", 500)


@api_bp.route('/shopping-list', methods=['DELETE'])
@login_required
def clear_shopping_list():
    try:
        engine = services().shopping.engine_for(current_user_id())
        engine.clear()
        return jsonify(engine.view())
    except Exception as e:
        logger.error(f"Error clearing shopping list: {e}", exc_info=True)
        return error_response("Failed to clear shopping list", 500)


@api_bp.route('/shopping-list/recipes', methods=['POST'])
@login_required
def add_recipe_to_shopping_list():
    """Capture a recipe's ingredients as a new, scalable group."""
    body = AddRecipeToListRequest.model_validate(json_body())
    user_id = current_user_id()
    try:
        shopping = services().shopping
        group = shopping.add_recipe(user_id, body.recipe_id, source=body.source, servings=body.servings)
        if group is None:
            return error_response("Recipe not found", 404)
        return jsonify(shopping.engine_for(user_id).view()), 201
    except Exception as e:
        logger.error(f"Error adding recipe to shopping list: {e}", exc_info=True)
        return error_response("Failed to update shopping list", 500)


@api_bp.route('/shopping-list/recipes/<int:index>', methods=['PATCH'])
@login_required
def change_servings(index):
    body = ServingsChangeRequest.model_validate(json_body())
    try:
        engine = services().shopping.engine_for(current_user_id())
        engine.adjust_servings(index, body.delta)
        return jsonify(engine.view())
    except IndexError:
        return error_response("Recipe group not found", 404)
    except Exception as e:
        logger.error(f"Error changing servings: {e}", exc_info=True)
        return error_response("Failed to update shopping list", 500)


@api_bp.route('/shopping-list/recipes/<int:index>', methods=['DELETE'])
@login_required
def delete_recipe_group(index):
    try:
        engine = services().shopping.engine_for(current_user_id())
        engine.delete_group(index)
        return jsonify(engine.view())
    except IndexError:
        return error_response("Recipe group not found", 404)
    except Exception as e:
        logger.error(f"Error deleting recipe group: {e}", exc_info=True)
        return error_response("Failed to update shopping list", 500)


@api_bp.route('/shopping-list/items', methods=['POST'])
@login_required
def add_manual_item():
    """Add a free-text item. A blank name changes nothing."""
    body = ManualItemRequest.model_validate(json_body())
    try:
        engine = services().shopping.engine_for(current_user_id())
        item = engine.add_manual_item(body.name)
        return jsonify(engine.view()), 201 if item else 200
    except Exception as e:
        logger.error(f"Error adding manual item: {e}", exc_info=True)
        return error_response("Failed to update shopping list", 500)


@api_bp.route('/shopping-list/items/<int:index>', methods=['DELETE'])
@login_required
def delete_manual_item(index):
    try:
        engine = services().shopping.engine_for(current_user_id())
        engine.delete_manual_item(index)
        return jsonify(engine.view())
    except IndexError:
        return error_response("Item not found", 404)
    except Exception as e:
        logger.error(f"Error deleting manual item: {e}", exc_info=True)
        return error_response("Failed to update shopping list", 500)
