def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_room_lookup(client, connect):
    host = connect('Alice')
    host.emit('createRoom')
    code = next(p['args'][0] for p in host.get_received() if p['name'] == 'roomCreated')

    res = client.get(f'/api/rooms/{code.lower()}')
    assert res.status_code == 200
    data = res.get_json()
    assert data == {'code': code, 'participants': ['Alice'], 'started': False}


def test_room_lookup_unknown(client):
    res = client.get('/api/rooms/NOPE1')
    assert res.status_code == 404
    assert res.get_json() == {'error': 'Room not found'}
