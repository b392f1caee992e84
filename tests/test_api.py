"""Tests for the JSON API routes."""

from models import MealPlanEntry


RECIPE = {
    'title': 'Pancakes',
    'servings': 4,
    'sections': [{'ingredients': [{'raw': '2 cups flour'}], 'steps': [{'text': 'Mix'}]}],
}


class TestRecipeRoutes:

    def test_create_and_fetch(self, client):
        resp = client.post('/api/recipes', json=RECIPE)
        assert resp.status_code == 201
        recipe_id = resp.get_json()['id']

        detail = client.get(f'/api/recipes/{recipe_id}').get_json()
        assert detail['title'] == 'Pancakes'
        assert detail['servings_amount'] == 4
        assert detail['unsectioned_ingredients'][0]['raw_text'] == '2 cups flour'
        assert detail['unsectioned_ingredients'][0]['amount'] == '2'

    def test_create_invalid(self, client):
        resp = client.post('/api/recipes', json={'title': '', 'servings': 0})
        assert resp.status_code == 400
        body = resp.get_json()
        assert body['error'] == 'Invalid recipe'
        fields = {d['field'] for d in body['details']}
        assert 'title' in fields
        assert 'servings.amount' in fields

    def test_create_without_body(self, client):
        resp = client.post('/api/recipes', data='not json', content_type='text/plain')
        assert resp.status_code == 400

    def test_missing_recipe(self, client):
        resp = client.get('/api/recipes/999')
        assert resp.status_code == 404
        assert 'error' in resp.get_json()

    def test_edit_payload_and_update(self, client, pancakes):
        edit = client.get(f'/api/recipes/{pancakes}/edit').get_json()
        assert edit['sections'][0]['name'] == 'Main'

        edit['title'] = 'Fluffy Pancakes'
        edit['sections'][0]['ingredients'].append({'raw': '2 eggs'})
        resp = client.put(f'/api/recipes/{pancakes}', json=edit)
        assert resp.status_code == 200
        assert resp.get_json() == {'success': True, 'id': pancakes}

        detail = client.get(f'/api/recipes/{pancakes}').get_json()
        assert detail['title'] == 'Fluffy Pancakes'
        assert [i['raw_text'] for i in detail['unsectioned_ingredients']] == ['2 cups flour', '2 eggs']

    def test_oversized_raw_amount_stored_as_text(self, client):
        line = '100000000000000000 g flour'
        resp = client.post('/api/recipes', json={**RECIPE, 'sections': [{'ingredients': [{'raw': line}]}]})
        assert resp.status_code == 201

        stored = client.get(f"/api/recipes/{resp.get_json()['id']}").get_json()['unsectioned_ingredients'][0]
        assert stored['raw_text'] == line
        assert stored['quantity_numerator'] is None
        assert stored['item'] == line

    def test_oversized_structured_amount_rejected(self, client):
        body = {**RECIPE, 'sections': [{'ingredients': [{'item': 'flour', 'amount': 1e17}]}]}
        resp = client.post('/api/recipes', json=body)
        assert resp.status_code == 400
        fields = [d['field'] for d in resp.get_json()['details']]
        assert fields == ['sections.0.ingredients.0.amount']

    def test_huge_ids_are_not_found(self, client):
        url = '/api/recipes/100000000000000000000'
        assert client.get(url).status_code == 404
        assert client.get(f'{url}/edit').status_code == 404
        assert client.put(url, json=RECIPE).status_code == 404
        assert client.delete(url).status_code == 404

    def test_update_missing(self, client):
        assert client.put('/api/recipes/999', json=RECIPE).status_code == 404

    def test_list_and_search(self, client, pancakes):
        client.post('/api/recipes', json={**RECIPE, 'title': 'Crepes'})

        recipes = client.get('/api/recipes').get_json()['recipes']
        assert [r['title'] for r in recipes] == ['Crepes', 'Pancakes']

        found = client.get('/api/recipes?q=pan').get_json()['recipes']
        assert found == [{'id': pancakes, 'title': 'Pancakes'}]

    def test_delete(self, client, pancakes):
        assert client.delete(f'/api/recipes/{pancakes}').get_json() == {'success': True}
        assert client.get(f'/api/recipes/{pancakes}').status_code == 404
        assert client.delete(f'/api/recipes/{pancakes}').status_code == 404


class TestImportAndGenerateRoutes:

    def test_import_requires_http_url(self, client):
        resp = client.post('/api/recipes/import', json={'url': 'file:///etc/passwd'})
        assert resp.status_code == 400

    def test_import_blocked_host(self, client):
        resp = client.post('/api/recipes/import', json={'url': 'http://localhost:5000/recipe'})
        assert resp.status_code == 400
        assert 'blocked' in resp.get_json()['error']

    def test_generate_unconfigured(self, client):
        resp = client.post('/api/recipes/generate', json={'prompt': 'soup'})
        assert resp.status_code == 503

    def test_generate_prompt_required(self, client):
        assert client.post('/api/recipes/generate', json={'prompt': ''}).status_code == 400

    def test_generate(self, app, client):
        app.config['RECIPE_GENERATOR'] = lambda prompt: {
            'title': 'Miso Soup',
            'servings': 2,
            'sections': [{'ingredients': [{'item': 'miso', 'amount': 2, 'unit': 'tbsp'}]}],
        }
        resp = client.post('/api/recipes/generate', json={'prompt': 'miso soup'})

        assert resp.status_code == 200
        recipe = resp.get_json()['recipe']
        assert recipe['title'] == 'Miso Soup'
        assert recipe['source_type'] == 'ai'
        assert recipe['sections'][0]['ingredients'][0]['item'] == 'miso'


class TestMealPlanRoutes:

    def test_create_then_update_cell(self, client, pancakes):
        entry = {'date': '2024-01-01', 'mealSlot': 'breakfast', 'recipeId': pancakes}

        first = client.post('/api/meal-plan', json=entry)
        assert first.status_code == 201

        second = client.post('/api/meal-plan', json={**entry, 'servings': 8})
        assert second.status_code == 200
        assert second.get_json()['entry']['id'] == first.get_json()['entry']['id']
        assert second.get_json()['entry']['servings'] == 8

    def test_invalid_entry(self, client):
        resp = client.post('/api/meal-plan', json={'date': '2024-02-30', 'meal_slot': 'brunch'})
        assert resp.status_code == 400
        fields = {d['field'] for d in resp.get_json()['details']}
        assert fields == {'date', 'meal_slot'}

    def test_unknown_recipe(self, client):
        resp = client.post('/api/meal-plan', json={'date': '2024-01-01', 'meal_slot': 'lunch', 'recipe_id': 99})
        assert resp.status_code == 404

    def test_range(self, client, pancakes):
        client.post('/api/meal-plan', json={'date': '2024-01-02', 'meal_slot': 'dinner', 'recipe_id': pancakes})
        client.post('/api/meal-plan', json={'date': '2024-01-02', 'meal_slot': 'breakfast'})

        entries = client.get('/api/meal-plan?start=2024-01-01&end=2024-01-07').get_json()['entries']
        assert [(e['meal_slot'], e['recipe_title']) for e in entries] == [
            ('breakfast', None),
            ('dinner', 'Pancakes'),
        ]

    def test_huge_ids(self, client):
        resp = client.post('/api/meal-plan', json={'date': '2024-01-01', 'meal_slot': 'lunch', 'recipe_id': 10 ** 20})
        assert resp.status_code == 400
        assert [d['field'] for d in resp.get_json()['details']] == ['recipe_id']

        assert client.delete('/api/meal-plan/100000000000000000000').status_code == 404
        assert client.delete('/api/meal-plan?id=100000000000000000000').status_code == 404

    def test_range_requires_dates(self, client):
        assert client.get('/api/meal-plan?start=2024-01-01').status_code == 400

    def test_delete_by_path_and_query(self, client, pancakes):
        a = client.post('/api/meal-plan', json={'date': '2024-01-01', 'meal_slot': 'lunch'}).get_json()['entry']
        b = client.post('/api/meal-plan', json={'date': '2024-01-01', 'meal_slot': 'dinner'}).get_json()['entry']

        assert client.delete(f"/api/meal-plan/{a['id']}").status_code == 200
        assert client.delete(f"/api/meal-plan?id={b['id']}").status_code == 200
        assert MealPlanEntry.query.count() == 0
        assert client.delete(f"/api/meal-plan/{a['id']}").status_code == 404
        assert client.delete('/api/meal-plan').status_code == 400


class TestShoppingListRoute:

    def test_pancakes(self, client, pancakes):
        client.post('/api/meal-plan', json={'date': '2024-01-01', 'meal_slot': 'breakfast', 'recipe_id': pancakes})
        client.post('/api/meal-plan', json={'date': '2024-01-02', 'meal_slot': 'breakfast',
                                            'recipe_id': pancakes, 'servings': 8})

        body = client.get('/api/shopping-list?start=2024-01-01&end=2024-01-02').get_json()

        assert body['ingredients'] == [{'ingredient': '6 cups flour', 'recipes': ['Pancakes']}]
        assert body['recipes'][0]['total_servings'] == 12

    def test_recipe_deleted_from_plan(self, client, pancakes):
        client.post('/api/meal-plan', json={'date': '2024-01-01', 'meal_slot': 'dinner', 'recipe_id': pancakes})
        client.delete(f'/api/recipes/{pancakes}')

        entries = client.get('/api/meal-plan?start=2024-01-01&end=2024-01-01').get_json()['entries']
        assert len(entries) == 1
        assert entries[0]['recipe_id'] is None

        body = client.get('/api/shopping-list?start=2024-01-01&end=2024-01-01').get_json()
        assert body['ingredients'] == []

    def test_unknown_route_is_json(self, client):
        resp = client.get('/api/nothing-here')
        assert resp.status_code == 404
        assert 'error' in resp.get_json()
