def _create_game(admin_client, **overrides):
    payload = {
        'date': '2025-09-13',
        'opponents': 'Wimbledon 3s',
        'team_sheet': ['Alice', 'Bob', 'Cara'],
        'moments': ['Reverse-stick goal', 'Goal-line clearance'],
    }
    payload.update(overrides)
    return admin_client.post('/api/games', json=payload)


def test_health(client):
    res = client.get('/api/health')
    assert res.status_code == 200
    assert res.get_json() == {'ok': True}


def test_admin_login_logout(client):
    assert client.get('/api/admin/check').get_json() == {'is_authenticated': False}
    res = client.post('/api/admin/login', json={'password': 'wrong'})
    assert res.status_code == 401
    res = client.post('/api/admin/login', json={'password': 'letmein'})
    assert res.status_code == 200
    assert client.get('/api/admin/check').get_json() == {'is_authenticated': True}
    client.post('/api/admin/logout')
    assert client.get('/api/admin/check').get_json() == {'is_authenticated': False}


def test_create_game_requires_admin(client):
    res = client.post('/api/games', json={'date': '2025-09-13', 'opponents': 'X', 'team_sheet': ['A']})
    assert res.status_code == 401
    assert res.get_json()['code'] == 'unauthorized'


def test_create_and_fetch_game(admin_client, client):
    res = _create_game(admin_client)
    assert res.status_code == 201
    game = res.get_json()
    assert game['status'] == 'open'
    assert game['team_name'] == 'Weysiders'
    assert game['club_name'] == 'Guildford Hockey Club'
    assert game['team_sheet'] == ['Alice', 'Bob', 'Cara']
    assert [m['text'] for m in game['moments']] == ['Reverse-stick goal', 'Goal-line clearance']

    fetched = client.get(f"/api/games/{game['id']}").get_json()
    assert fetched['id'] == game['id']
    assert fetched['opponents'] == 'Wimbledon 3s'


def test_create_game_validation(admin_client):
    res = _create_game(admin_client, team_sheet=[])
    assert res.status_code == 400
    assert res.get_json()['code'] == 'validation_error'
    res = _create_game(admin_client, opponents='  ')
    assert res.status_code == 400


def test_unknown_game_is_json_404(client):
    res = client.get('/api/games/999')
    assert res.status_code == 404
    assert res.get_json()['code'] == 'not_found'
    res = client.get('/api/games/999/results')
    assert res.status_code == 404
    res = client.post('/api/games/999/votes', json={'voter': {'name': 'Zed', 'token': 't'}})
    assert res.status_code == 404


def test_vote_and_results_flow(admin_client, client):
    game = _create_game(admin_client).get_json()
    gid = game['id']
    goal_id = game['moments'][0]['id']

    res = client.post(f'/api/games/{gid}/votes', json={
        'voter': {'name': 'Sam', 'token': 'tok-sam'},
        'mom': {'player': 'Alice', 'comment': 'Ran the midfield'},
        'dod': {'player': 'Bob', 'comment': 'Own goal'},
        'moment': {'event_id': goal_id},
    })
    assert res.status_code == 200
    vote = res.get_json()
    assert vote['mom'] == {'player': 'Alice', 'comment': 'Ran the midfield'}
    assert vote['moment']['event_id'] == goal_id

    res = client.post(f'/api/games/{gid}/votes', json={
        'voter': {'name': 'Kim', 'token': 'tok-kim'},
        'mom': {'player': 'Alice'},
        'moment': {'new_text': 'Keeper dribbled to halfway'},
    })
    assert res.status_code == 200

    results = client.get(f'/api/games/{gid}/results?token=tok-sam').get_json()
    assert results['game']['id'] == gid
    assert results['totals']['mom'] == [
        {'player': 'Alice', 'count': 2, 'comments': ['Ran the midfield']},
    ]
    assert results['totals']['dod'] == [{'player': 'Bob', 'count': 1, 'comments': ['Own goal']}]
    assert len(results['moments']) == 3
    assert {m['text']: m['count'] for m in results['moments']} == {
        'Reverse-stick goal': 1,
        'Goal-line clearance': 0,
        'Keeper dribbled to halfway': 1,
    }
    assert results['my_vote']['mom'] == {'player': 'Alice', 'comment': 'Ran the midfield'}
    assert results['my_vote']['moment']['text'] == 'Reverse-stick goal'

    anonymous = client.get(f'/api/games/{gid}/results').get_json()
    assert 'my_vote' not in anonymous


def test_closed_game_rejects_votes_until_reopened(admin_client, client):
    gid = _create_game(admin_client).get_json()['id']

    res = admin_client.post(f'/api/games/{gid}/status', json={'status': 'closed'})
    assert res.status_code == 200
    assert res.get_json()['status'] == 'closed'
    # Closing twice is fine
    assert admin_client.post(f'/api/games/{gid}/status', json={'status': 'closed'}).status_code == 200

    ballot = {'voter': {'name': 'Sam', 'token': 'tok-sam'}, 'mom': {'player': 'Alice'}}
    res = client.post(f'/api/games/{gid}/votes', json=ballot)
    assert res.status_code == 403
    assert res.get_json()['code'] == 'voting_closed'

    admin_client.post(f'/api/games/{gid}/status', json={'status': 'open'})
    assert client.post(f'/api/games/{gid}/votes', json=ballot).status_code == 200


def test_status_change_requires_admin_and_valid_status(admin_client, client):
    gid = _create_game(admin_client).get_json()['id']
    assert client.post(f'/api/games/{gid}/status', json={'status': 'closed'}).status_code == 401
    res = admin_client.post(f'/api/games/{gid}/status', json={'status': 'finished'})
    assert res.status_code == 400
    assert admin_client.post('/api/games/999/status', json={'status': 'closed'}).status_code == 404


def test_vote_requires_voter_identity(admin_client, client):
    gid = _create_game(admin_client).get_json()['id']
    res = client.post(f'/api/games/{gid}/votes', json={'mom': {'player': 'Alice'}})
    assert res.status_code == 400
    assert res.get_json()['code'] == 'validation_error'
    res = client.post(f'/api/games/{gid}/votes', json={'voter': {'name': ' ', 'token': 'tok'}})
    assert res.status_code == 400


def test_resubmission_amends_single_vote(admin_client, client):
    gid = _create_game(admin_client).get_json()['id']
    first = client.post(f'/api/games/{gid}/votes', json={
        'voter': {'name': 'Sam', 'token': 'tok-sam'}, 'mom': {'player': 'Alice'},
    }).get_json()
    second = client.post(f'/api/games/{gid}/votes', json={
        'voter': {'name': 'Sam', 'token': 'tok-sam'}, 'mom': {'player': 'Cara'},
    }).get_json()
    assert first['id'] == second['id']
    results = client.get(f'/api/games/{gid}/results').get_json()
    assert results['totals']['mom'] == [{'player': 'Cara', 'count': 1, 'comments': []}]


def test_unexpected_errors_are_opaque(client, monkeypatch):
    import motm.api.games as routes

    def boom(*args, **kwargs):
        raise RuntimeError('connection to db-host:5432 refused')

    monkeypatch.setattr(routes, 'svc_get_results', boom)
    res = client.get('/api/games/1/results')
    assert res.status_code == 500
    assert res.get_json() == {'error': 'Internal server error', 'code': 'internal_error'}


def test_admin_login_does_not_leak_to_other_clients(flask_app, admin_client):
    assert admin_client.get('/api/admin/check').get_json() == {'is_authenticated': True}
    other = flask_app.test_client()
    assert other.get('/api/admin/check').get_json() == {'is_authenticated': False}
    gid = _create_game(admin_client).get_json()['id']
    assert other.post(f'/api/games/{gid}/status', json={'status': 'closed'}).status_code == 401


def test_overlong_voter_name_is_a_validation_error(admin_client, client):
    gid = _create_game(admin_client).get_json()['id']
    res = client.post(f'/api/games/{gid}/votes', json={
        'voter': {'name': 'N' * 200, 'token': 'tok'},
        'moment': {'new_text': 'Should not appear'},
    })
    assert res.status_code == 400
    assert res.get_json()['code'] == 'validation_error'
    assert len(client.get(f'/api/games/{gid}').get_json()['moments']) == 2
