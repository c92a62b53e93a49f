import re

import pytest


def get_csrf(client):
    html = client.get('/').get_data(as_text=True)
    m = re.search(r'name="csrf_token" value="([0-9a-f]+)"', html)
    assert m, 'no csrf token in login page'
    return m.group(1)


def session_value(client, key):
    with client.session_transaction() as sess:
        return sess.get(key)


def test_login_page_lists_identities(client):
    r = client.get('/')
    assert r.status_code == 200
    html = r.get_data(as_text=True)
    assert 'Ingreso al Sistema POS' in html
    assert 'Vendedor - Local Centro' in html
    assert 'ADMINISTRADOR - (Dashboard Global)' in html
    assert r.headers['X-Frame-Options'] == 'DENY'


@pytest.mark.parametrize('identity,destination', [
    ('1', '/pos'), ('2', '/pos'), ('3', '/pos'), ('admin', '/dashboard'),
])
def test_login_redirects_by_role(client, identity, destination):
    token = get_csrf(client)
    r = client.post('/', data={'identity': identity, 'csrf_token': token})
    assert r.status_code == 302
    assert r.headers['Location'].endswith(destination)
    assert session_value(client, 'sucursal_activa') == identity


def test_login_rejects_unknown_identity(client):
    token = get_csrf(client)
    r = client.post('/', data={'identity': '9', 'csrf_token': token}, follow_redirects=True)
    assert r.status_code == 200
    assert 'Selecciona una sucursal o el rol administrador.' in r.get_data(as_text=True)
    assert session_value(client, 'sucursal_activa') is None


def test_login_requires_csrf(client):
    get_csrf(client)
    r = client.post('/', data={'identity': '1'})
    assert r.status_code == 302
    assert session_value(client, 'sucursal_activa') is None


def test_logout_clears_identity_and_cart(client, login_as):
    login_as('1')
    with client.session_transaction() as sess:
        sess['carrito'] = [{'id': 1, 'name': 'Yerba Mate 1kg', 'price': 5.5, 'qty': 1}]
    r = client.get('/logout')
    assert r.status_code == 302
    assert session_value(client, 'sucursal_activa') is None
    assert session_value(client, 'carrito') is None


@pytest.mark.parametrize('identity', [None, 'admin'])
def test_pos_guard_redirects_to_login(client, login_as, identity):
    login_as(identity)
    r = client.get('/pos', follow_redirects=True)
    assert r.status_code == 200
    assert r.request.path == '/'
    assert 'Selecciona una sucursal para usar la caja.' in r.get_data(as_text=True)


@pytest.mark.parametrize('identity', [None, '1', '3'])
def test_dashboard_guard_redirects_to_login(client, login_as, identity):
    login_as(identity)
    r = client.get('/dashboard', follow_redirects=True)
    assert r.request.path == '/'
    assert 'Acceso denegado. Solo administradores.' in r.get_data(as_text=True)


def test_api_guards_answer_json(client, login_as):
    headers = login_as('admin')
    r = client.post('/api/carrito/ajustar', json={'product_id': 1, 'delta': 1}, headers=headers)
    assert r.status_code == 403
    assert r.get_json()['ok'] is False

    headers = login_as('2')
    r = client.get('/api/dashboard', headers=headers)
    assert r.status_code == 403


def test_pos_renders_catalog_for_store(client, login_as):
    login_as('2')
    r = client.get('/pos')
    assert r.status_code == 200
    html = r.get_data(as_text=True)
    assert 'Local Shopping' in html
    assert 'Yerba Mate 1kg' in html
    assert 'Bolsa reutilizable' in html


def test_api_productos_filters_by_name_or_category(client, login_as):
    login_as('1')
    names = [p['name'] for p in client.get('/api/productos?q=ALMAC').get_json()['productos']]
    assert names == ['Café molido 500g', 'Yerba Mate 1kg']

    names = [p['name'] for p in client.get('/api/productos?q=agua').get_json()['productos']]
    assert names == ['Agua mineral 2L']

    everything = client.get('/api/productos').get_json()['productos']
    assert len(everything) == 5


def test_cart_api_requires_csrf(client, login_as):
    login_as('1')
    r = client.post('/api/carrito/ajustar', json={'product_id': 1, 'delta': 1})
    assert r.status_code == 403
    assert session_value(client, 'carrito') is None


def test_checkout_flow(client, login_as, container):
    headers = login_as('3')

    client.post('/api/carrito/ajustar', json={'product_id': 1, 'delta': 1}, headers=headers)
    client.post('/api/carrito/ajustar', json={'product_id': 1, 'delta': 1}, headers=headers)
    r = client.post('/api/carrito/ajustar', json={'product_id': 4, 'delta': 1}, headers=headers)
    cart = r.get_json()['carrito']
    assert [(i['id'], i['qty']) for i in cart['items']] == [(1, 2), (4, 1)]
    assert cart['total'] == pytest.approx(11.8)

    r = client.post('/api/carrito/ajustar', json={'product_id': 4, 'delta': -1}, headers=headers)
    assert [i['id'] for i in r.get_json()['carrito']['items']] == [1]

    r = client.post('/api/carrito/confirmar', headers=headers)
    assert r.status_code == 200
    body = r.get_json()
    assert body['success'] is True
    assert body['total'] == pytest.approx(11.0)
    assert body['mensaje'] == f"¡Venta Exitosa! Total: $11.00. Ticket #{body['order_id']}"

    orders = container.order_repo.get_all()
    assert [(o['store_id'], o['status']) for o in orders] == [(3, 'completada')]
    assert client.get('/api/carrito/ver').get_json()['carrito']['items'] == []


def test_checkout_empty_cart(client, login_as, container):
    headers = login_as('1')
    r = client.post('/api/carrito/confirmar', headers=headers)
    assert r.status_code == 400
    assert r.get_json() == {
        'success': False,
        'error': 'El carrito está vacío o la sucursal no está definida.',
    }
    assert container.order_repo.get_all() == []


def test_remove_and_clear(client, login_as):
    headers = login_as('1')
    client.post('/api/carrito/ajustar', json={'product_id': 2, 'delta': 1}, headers=headers)
    client.post('/api/carrito/ajustar', json={'product_id': 3, 'delta': 1}, headers=headers)

    r = client.post('/api/carrito/eliminar', json={'product_id': 2}, headers=headers)
    assert [i['id'] for i in r.get_json()['carrito']['items']] == [3]

    r = client.post('/api/carrito/limpiar', headers=headers)
    assert r.get_json()['carrito']['items'] == []


def test_dashboard_shows_sales_and_filter(client, login_as, container):
    container.sales_service.finalize_sale([{'id': 1, 'name': 'Yerba Mate 1kg', 'price': 5.5, 'qty': 2}], 1)
    container.sales_service.finalize_sale([{'id': 3, 'name': 'Agua mineral 2L', 'price': 1.2, 'qty': 1}], 2)
    login_as('admin')

    r = client.get('/dashboard')
    assert r.status_code == 200
    html = r.get_data(as_text=True)
    assert 'Panel de Administración Global' in html
    assert '$12.20' in html
    assert 'sales-by-store' in html

    r = client.get('/dashboard?store=2')
    html = r.get_data(as_text=True)
    assert 'Sucursal 2' in html
    assert '$1.20' in html
    assert 'id="sales-by-store"' not in html

    data = client.get('/api/dashboard?store=1').get_json()
    assert data['ticket_count'] == 1
    assert data['total_revenue'] == pytest.approx(11.0)
    assert len(data['sales_by_store']) == 3


def test_cancel_sale_requires_confirmation(client, login_as, container):
    sale = container.sales_service.finalize_sale(
        [{'id': 1, 'name': 'Yerba Mate 1kg', 'price': 5.5, 'qty': 1}], 1
    )
    order_id = sale['order_id']
    headers = login_as('admin')

    r = client.post(f'/ventas/{order_id}/anular', data={'store': '1'}, headers=headers)
    assert r.status_code == 302
    assert '/dashboard' in r.headers['Location']
    assert container.order_repo.get_all()[0]['status'] == 'completada'

    r = client.post(f'/ventas/{order_id}/anular',
                    data={'confirmar': 'si', 'store': '1'}, headers=headers,
                    follow_redirects=True)
    assert r.status_code == 200
    assert f'Venta #{order_id} anulada' in r.get_data(as_text=True)
    assert container.order_repo.get_all()[0]['status'] == 'cancelada'


def test_cancel_sale_is_admin_only(client, login_as, container):
    sale = container.sales_service.finalize_sale(
        [{'id': 1, 'name': 'Yerba Mate 1kg', 'price': 5.5, 'qty': 1}], 1
    )
    headers = login_as('1')
    client.post(f"/ventas/{sale['order_id']}/anular", data={'confirmar': 'si'}, headers=headers)
    assert container.order_repo.get_all()[0]['status'] == 'completada'


def test_large_cart_fits_in_session_cookie(client, login_as, container):
    container.product_repo.save_all([
        {'id': n, 'name': f'Producto de prueba {n:03d}', 'price': round(n * 1.25, 2),
         'image_url': f'https://cdn.example.com/catalogo/imagenes/producto-{n:03d}.png',
         'category': 'Almacén', 'subcategory': 'Varios'}
        for n in range(1, 81)
    ])
    headers = login_as('1')

    for n in range(1, 81):
        r = client.post('/api/carrito/ajustar', json={'product_id': n, 'delta': 1}, headers=headers)
        assert r.status_code == 200

    assert r.get_json()['carrito']['items_count'] == 80
    cookies = [c for c in r.headers.getlist('Set-Cookie') if c.startswith('session=')]
    assert cookies
    assert len(cookies[-1]) < 4093


def test_pos_cards_expose_name_and_category_separately(client, login_as):
    login_as('1')
    html = client.get('/pos').get_data(as_text=True)
    assert 'data-name="yerba mate 1kg"' in html
    assert 'data-category="almacén"' in html
    assert 'data-search=' not in html


def test_fecha_filter_accepts_short_fractional_seconds():
    from pos_sucursales.main import format_date

    assert format_date('2024-05-06T12:34:56.12345+00:00') == '06/05/2024'
    assert format_date('2024-05-06T12:34:56Z') == '06/05/2024'
    assert format_date(None) == ''
    assert format_date('ayer') == ''
