import os

# Sin archivos de profiling durante los tests
os.environ.setdefault('POS_ENABLE_PROFILING', '0')

import pytest

from pos_sucursales.app_container import AppContainer, get_container
from pos_sucursales.main import app

CSRF = 'test-csrf-token'

PRODUCTS = [
    {'id': 1, 'name': 'Yerba Mate 1kg', 'price': 5.5, 'image_url': None,
     'category': 'Almacén', 'subcategory': 'Infusiones'},
    {'id': 2, 'name': 'Café molido 500g', 'price': 4.25, 'image_url': None,
     'category': 'Almacén', 'subcategory': 'Infusiones'},
    {'id': 3, 'name': 'Agua mineral 2L', 'price': 1.2, 'image_url': None,
     'category': 'Bebidas', 'subcategory': 'Aguas'},
    {'id': 4, 'name': 'Alfajor de chocolate', 'price': 0.8, 'image_url': None,
     'category': 'Golosinas', 'subcategory': None},
    {'id': 5, 'name': 'Bolsa reutilizable', 'price': 0.5, 'image_url': None,
     'category': None, 'subcategory': None},
]


@pytest.fixture
def container(tmp_path):
    AppContainer.reset_instance()
    c = get_container(str(tmp_path), backend='json')
    c.product_repo.save_all(PRODUCTS)
    yield c
    AppContainer.reset_instance()


@pytest.fixture
def client(container):
    app.config['TESTING'] = True
    with app.test_client() as c:
        yield c


@pytest.fixture
def login_as(client):
    """Guarda identidad + token CSRF en la cookie de sesión del cliente."""
    def _login(identity):
        with client.session_transaction() as sess:
            sess['csrf_token'] = CSRF
            if identity is None:
                sess.pop('sucursal_activa', None)
            else:
                sess['sucursal_activa'] = identity
        return {'X-CSRF-Token': CSRF}
    return _login


@pytest.fixture
def products():
    return [dict(p) for p in PRODUCTS]
