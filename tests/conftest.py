# tests/conftest.py
import pytest
from dotenv import load_dotenv
from flask_jwt_extended import create_access_token

from localmart.app import create_app
from localmart.config import TestingConfig, config
from localmart.extensions import db as _db
from localmart.models import CustomerPost, User

# Load environment variables from .env file if present
load_dotenv()


@pytest.fixture(scope='session')
def app():
    """建立並設定一個新的 app 實例供測試使用"""
    app = create_app(config_name='testing')

    # 建立應用程式上下文
    with app.app_context():
        yield app


@pytest.fixture(scope='session')
def client(app):
    """為 app 建立一個測試客戶端"""
    return app.test_client()


@pytest.fixture(scope='function')
def db(app):
    """在每個測試函式執行前後，建立與清除資料庫"""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.close()
        _db.drop_all()


@pytest.fixture(scope='function')
def session(db):
    """回傳資料庫 session"""
    yield db.session


@pytest.fixture(scope='function')
def file_app(tmp_path, monkeypatch):
    """An app on a SQLite file, so every thread gets its own connection."""
    file_config = type('FileTestingConfig', (TestingConfig,), {
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'localmart.db'}",
    })
    monkeypatch.setitem(config, 'file_testing', file_config)
    app = create_app(config_name='file_testing')

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()
        for engine in _db.engines.values():
            engine.dispose()


def make_user(session, name, email, role='CUSTOMER', password='password'):
    """Helper function to create a user."""
    user = User(name=name, email=email, role=role)
    if role == 'SHOPKEEPER':
        user.shop_name = f"{name}'s Shop"
        user.address = '1 Market Street'
        user.phone = '0912345678'
    user.set_password(password)
    session.add(user)
    session.commit()
    return user


def seed_marketplace(session):
    """A customer with one request, two shopkeepers and an unrelated customer."""
    customer = make_user(session, 'Carol', 'carol@test.com')
    shopkeeper = make_user(session, 'Sam', 'sam@test.com', role='SHOPKEEPER')
    other_shopkeeper = make_user(session, 'Olga', 'olga@test.com', role='SHOPKEEPER')
    outsider = make_user(session, 'Otto', 'otto@test.com')

    post = CustomerPost(customer_id=customer.id, title='Need a 10mm wrench', description='Before 6pm')
    session.add(post)
    session.commit()

    return {
        "customer": customer,
        "shopkeeper": shopkeeper,
        "other_shopkeeper": other_shopkeeper,
        "outsider": outsider,
        "post": post,
    }


@pytest.fixture(scope='function')
def marketplace(session):
    return seed_marketplace(session)


@pytest.fixture(scope='function')
def file_marketplace(file_app):
    """Ids of the seeded marketplace on the file database."""
    return {key: obj.id for key, obj in seed_marketplace(_db.session).items()}


@pytest.fixture
def auth_headers(app):
    """Returns a function building the Authorization header for a user."""
    def _headers(user):
        token = create_access_token(identity=str(user.id))
        return {'Authorization': f'Bearer {token}'}
    return _headers
