import pytest


def new_game(client):
    response = client.post('/api/games')
    assert response.status_code == 201
    return response.get_json()['game_id']


def test_new_game_hides_answer(client):
    response = client.post('/api/games')
    data = response.get_json()

    assert data['success'] is True
    assert data['state']['status'] == 'in_progress'
    assert data['state']['answer'] is None
    assert data['state']['max_attempts'] == 6
    assert data['state']['guesses'] == []


def test_get_state(client):
    game_id = new_game(client)

    response = client.get(f'/api/games/{game_id}')

    assert response.status_code == 200
    assert response.get_json()['state']['game_id'] == game_id


def test_unknown_game_is_404(client):
    assert client.get('/api/games/nope').status_code == 404
    assert client.get('/api/games/nope/guesses').status_code == 404

    response = client.post('/api/games/nope/guesses', json={'guess': 'CRANE'})
    assert response.status_code == 404
    assert response.get_json()['reason'] == 'session_not_found'


def test_submit_guess_returns_record_and_state(client):
    game_id = new_game(client)

    response = client.post(f'/api/games/{game_id}/guesses', json={'guess': 'slate'})
    data = response.get_json()

    assert response.status_code == 200
    assert data['guess']['text'] == 'SLATE'
    assert data['guess']['tags'] == ['ABSENT', 'ABSENT', 'CORRECT', 'ABSENT', 'CORRECT']
    assert data['guess']['attempt'] == 1
    assert data['state']['attempts'] == 1


def test_missing_guess_is_400(client):
    game_id = new_game(client)
    response = client.post(f'/api/games/{game_id}/guesses', json={})
    assert response.status_code == 400


@pytest.mark.parametrize('body', ['crane', ['crane'], 5, None])
def test_non_object_body_is_400(client, body):
    game_id = new_game(client)

    response = client.post(f'/api/games/{game_id}/guesses', json=body)

    assert response.status_code == 400
    assert response.get_json()["error"] == "Guess is required"
    assert client.get(f"/api/games/{game_id}/guesses").get_json()["guesses"] == []


def test_rejections_map_to_status_codes(client):
    game_id = new_game(client)

    response = client.post(f'/api/games/{game_id}/guesses', json={'guess': 'CRA'})
    assert response.status_code == 400
    assert response.get_json()['reason'] == 'invalid_shape'

    response = client.post(f'/api/games/{game_id}/guesses', json={'guess': 'HOUSE'})
    assert response.status_code == 400
    assert response.get_json()['reason'] == 'not_an_acceptable_word'

    client.post(f'/api/games/{game_id}/guesses', json={'guess': 'CRANE'})
    response = client.post(f'/api/games/{game_id}/guesses', json={'guess': 'SLATE'})
    assert response.status_code == 409
    assert response.get_json()['reason'] == 'session_terminal'


def test_win_reveals_answer_and_guess_list(client):
    game_id = new_game(client)
    for guess in ['SLATE', 'TRACE', 'CRANE']:
        response = client.post(f'/api/games/{game_id}/guesses', json={'guess': guess})

    state = response.get_json()['state']
    assert state['won'] is True
    assert state['answer'] == 'CRANE'

    guesses = client.get(f'/api/games/{game_id}/guesses').get_json()['guesses']
    assert [guess['result'] for guess in guesses] == ['XXCXC', 'XCC~C', 'CCCCC']


def test_loss_after_six_misses(client):
    game_id = new_game(client)
    for guess in ['SLATE', 'TRACE', 'REACT', 'CATER', 'CARET', 'RECAP']:
        response = client.post(f'/api/games/{game_id}/guesses', json={'guess': guess})

    state = response.get_json()['state']
    assert state['status'] == 'lost'
    assert state['game_over'] is True
    assert state['answer'] == 'CRANE'


def test_health_check(client):
    new_game(client)
    data = client.get('/api/health').get_json()
    assert data['status'] == 'healthy'
    assert data['sessions'] == 1
    assert data['storage'] == 'InMemorySessionRepository'
