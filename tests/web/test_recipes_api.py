"""
Tests for catalogue and custom recipe endpoints.
"""


class TestCatalogue:

    def test_list_is_public(self, client):
        response = client.get('/api/recipes')
        assert response.status_code == 200
        recipes = response.get_json()
        assert len(recipes) == 5
        assert recipes[0]["prepTime"] == 15

    def test_search(self, client):
        response = client.get('/api/recipes?q=italienne')
        assert [r["name"] for r in response.get_json()] == ["Risotto aux champignons"]

    def test_certified(self, client):
        response = client.get('/api/recipes/certified')
        assert [r["id"] for r in response.get_json()] == [2, 4]

    def test_get_recipe(self, client):
        response = client.get('/api/recipes/1')
        assert response.status_code == 200
        assert response.get_json()["servings"] == 4

    def test_unknown_recipe(self, client):
        response = client.get('/api/recipes/999')
        assert response.status_code == 404
        assert response.get_json()["success"] is False


class TestCustomRecipes:

    def create(self, client, **overrides):
        body = {
            'name': 'Tarte aux pommes',
            'type': 'dessert',
            'prepTime': 20,
            'cookTime': 35,
            'servings': 6,
            'image': '',
            'ingredients': [{'name': 'Pommes', 'quantity': 4, 'unit': ''}],
            'steps': ['Éplucher', 'Cuire'],
        }
        body.update(overrides)
        return client.post('/api/custom-recipes', json=body)

    def test_create_and_list(self, auth_client):
        response = self.create(auth_client)
        assert response.status_code == 201
        created = response.get_json()
        assert created["prepTime"] == 20
        assert created["image"] is None

        listed = auth_client.get('/api/custom-recipes').get_json()
        assert [r["id"] for r in listed] == [created["id"]]

    def test_create_invalid(self, auth_client):
        response = self.create(auth_client, name='')
        assert response.status_code == 400
        response = self.create(auth_client, image='not-a-url')
        assert response.status_code == 400

    def test_get_update_delete(self, auth_client):
        recipe_id = self.create(auth_client).get_json()["id"]

        response = auth_client.get(f'/api/custom-recipes/{recipe_id}')
        assert response.get_json()["name"] == 'Tarte aux pommes'

        response = auth_client.patch(f'/api/custom-recipes/{recipe_id}', json={'servings': 8})
        assert response.status_code == 200
        assert response.get_json()["servings"] == 8
        assert response.get_json()["name"] == 'Tarte aux pommes'

        response = auth_client.delete(f'/api/custom-recipes/{recipe_id}')
        assert response.get_json() == {"success": True, "message": "Custom recipe deleted"}

        response = auth_client.get(f'/api/custom-recipes/{recipe_id}')
        assert response.status_code == 404
        assert response.get_json()["message"] == "Custom recipe not found"

    def test_other_users_cannot_touch(self, auth_client, other_client):
        recipe_id = self.create(auth_client).get_json()["id"]

        assert other_client.get(f'/api/custom-recipes/{recipe_id}').status_code == 404
        assert other_client.patch(f'/api/custom-recipes/{recipe_id}', json={'name': 'X'}).status_code == 404
        assert other_client.delete(f'/api/custom-recipes/{recipe_id}').status_code == 404
        assert other_client.get('/api/custom-recipes').get_json() == []
