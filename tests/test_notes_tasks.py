def test_note_crud(client):
    created = client.post('/api/notes', json={'title': 'Optics', 'content': 'Snell', 'tags': 'physics, light'})
    assert created.status_code == 201
    note = created.get_json()['note']
    assert note['tags'] == ['physics', 'light']
    assert note['color'] == '#FFFFFF'

    updated = client.put(f"/api/notes/{note['id']}", json={'color': '#FFEEAA'}).get_json()['note']
    assert updated['title'] == 'Optics'
    assert updated['content'] == 'Snell'
    assert updated['color'] == '#FFEEAA'

    assert client.get(f"/api/notes/{note['id']}").get_json()['note']['color'] == '#FFEEAA'
    assert [n['id'] for n in client.get('/api/notes').get_json()['notes']] == [note['id']]

    assert client.delete(f"/api/notes/{note['id']}").status_code == 200
    assert client.get(f"/api/notes/{note['id']}").status_code == 404


def test_note_requires_title(client):
    assert client.post('/api/notes', json={'content': 'no title'}).status_code == 400
    note_id = client.post('/api/notes', json={'title': 'Keep'}).get_json()['note']['id']
    assert client.put(f'/api/notes/{note_id}', json={'title': ' '}).status_code == 400


def test_note_fields_must_be_strings(client):
    assert client.post('/api/notes', json={'title': 42}).status_code == 400
    note_id = client.post('/api/notes', json={'title': 'Keep'}).get_json()['note']['id']
    response = client.put(f'/api/notes/{note_id}', json={'content': [1]})
    assert response.status_code == 400
    assert response.get_json() == {'error': 'content must be a string'}
    assert client.put(f'/api/notes/{note_id}', json={'color': 7}).status_code == 400
    assert client.get(f'/api/notes/{note_id}').get_json()['note']['content'] == ''


def test_notes_are_private(client, other_client):
    note_id = client.post('/api/notes', json={'title': 'Mine'}).get_json()['note']['id']
    assert other_client.get(f'/api/notes/{note_id}').status_code == 404
    assert other_client.put(f'/api/notes/{note_id}', json={'title': 'Stolen'}).status_code == 404
    assert other_client.delete(f'/api/notes/{note_id}').status_code == 404
    assert other_client.get('/api/notes').get_json()['notes'] == []


def test_task_crud(client):
    created = client.post('/api/tasks', json={
        'title': 'Lab report', 'description': 'Pendulum', 'due_date': '2026-02-01',
    })
    assert created.status_code == 201
    task = created.get_json()['task']
    assert task['due_date'] == '2026-02-01'

    updated = client.put(f"/api/tasks?id={task['id']}", json={'title': 'Lab report v2', 'due_date': '2026-02-03'})
    assert updated.status_code == 200
    assert updated.get_json()['task']['description'] == 'Pendulum'
    assert updated.get_json()['task']['due_date'] == '2026-02-03'

    assert client.get('/api/tasks').get_json()['tasks'][0]['title'] == 'Lab report v2'
    assert client.delete(f"/api/tasks?id={task['id']}").status_code == 200
    assert client.get('/api/tasks').get_json()['tasks'] == []


def test_task_validation(client):
    assert client.post('/api/tasks', json={'title': 'x', 'due_date': '2026-02-01'}).status_code == 400
    assert client.post('/api/tasks', json={
        'title': 'x', 'description': 'y', 'due_date': 'soon',
    }).status_code == 400
    assert client.put('/api/tasks', json={'title': 'x', 'due_date': '2026-02-01'}).status_code == 400
    assert client.delete('/api/tasks').status_code == 400


def test_tasks_are_private(client, other_client):
    task_id = client.post('/api/tasks', json={
        'title': 'Mine', 'description': 'd', 'due_date': '2026-02-01',
    }).get_json()['task']['id']
    assert other_client.delete(f'/api/tasks?id={task_id}').status_code == 404
    assert other_client.put(f'/api/tasks?id={task_id}', json={
        'title': 'Stolen', 'due_date': '2026-02-01',
    }).status_code == 404
    assert len(client.get('/api/tasks').get_json()['tasks']) == 1
