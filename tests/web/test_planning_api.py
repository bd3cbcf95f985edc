"""
Tests for meal planning endpoints.
"""


def plan(client, day='2025-01-20', recipe_id=1, source='predefined', **extra):
    body = {'date': day, 'recipeId': recipe_id, 'source': source}
    body.update(extra)
    return client.post('/api/planning', json=body)


class TestPlanning:

    def test_add_defaults_to_dinner(self, auth_client):
        response = plan(auth_client)
        assert response.status_code == 201
        entry = response.get_json()
        assert entry["slot"] == "diner"
        assert entry["recipeId"] == "1"
        assert entry["source"] == "predefined"

    def test_list_sorted_by_date(self, auth_client):
        plan(auth_client, day='2025-01-23')
        plan(auth_client, day='2025-01-21', slot='dejeuner')

        entries = auth_client.get('/api/planning').get_json()
        assert [e["date"] for e in entries] == ['2025-01-21', '2025-01-23']

    def test_invalid_bodies(self, auth_client):
        assert plan(auth_client, day='21/01/2025').status_code == 400
        assert plan(auth_client, source='external').status_code == 400
        assert plan(auth_client, slot='brunch').status_code == 400
        assert auth_client.post('/api/planning', json={'date': '2025-01-20'}).status_code == 400

    def test_update_and_delete(self, auth_client):
        entry_id = plan(auth_client).get_json()["id"]

        response = auth_client.patch(f'/api/planning/{entry_id}', json={'slot': 'collation'})
        assert response.status_code == 200
        assert response.get_json()["slot"] == "collation"

        response = auth_client.delete(f'/api/planning/{entry_id}')
        assert response.status_code == 200
        assert auth_client.get('/api/planning').get_json() == []

        response = auth_client.delete(f'/api/planning/{entry_id}')
        assert response.status_code == 404
        assert response.get_json()["message"] == "Planning entry not found"

    def test_other_users_cannot_touch(self, auth_client, other_client):
        entry_id = plan(auth_client).get_json()["id"]

        assert other_client.get('/api/planning').get_json() == []
        assert other_client.patch(f'/api/planning/{entry_id}', json={'slot': 'diner'}).status_code == 404
        assert other_client.delete(f'/api/planning/{entry_id}').status_code == 404
        assert len(auth_client.get('/api/planning').get_json()) == 1


class TestWeek:

    def test_week_grid(self, auth_client):
        plan(auth_client, day='2025-01-20', recipe_id=1, slot='petit-dejeuner')
        plan(auth_client, day='2025-01-24', recipe_id=2)
        plan(auth_client, day='2025-01-28', recipe_id=3)

        response = auth_client.get('/api/planning/week?start=2025-01-22')
        assert response.status_code == 200
        week = response.get_json()

        assert week["weekStart"] == "2025-01-20"
        assert week["nextWeek"] == "2025-01-27"
        assert week["mealCount"] == 2
        assert [d["dayName"] for d in week["days"]][:2] == ["Lundi", "Mardi"]
        assert week["days"][0]["meals"]["petit-dejeuner"]["recipe"]["id"] == 1
        assert week["days"][4]["meals"]["diner"]["recipe"]["name"] == "Blanquette de veau"

    def test_custom_recipe_left_unresolved(self, auth_client):
        plan(auth_client, recipe_id='some-uuid', source='custom')
        week = auth_client.get('/api/planning/week?start=2025-01-20').get_json()
        meal = week["days"][0]["meals"]["diner"]
        assert meal["recipe"] is None
        assert meal["planning"]["recipeId"] == "some-uuid"

    def test_bad_start(self, auth_client):
        response = auth_client.get('/api/planning/week?start=nope')
        assert response.status_code == 400
