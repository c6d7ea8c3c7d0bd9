import pytest
from flask import Flask
from crudrouter import CrudApi
from .models import db


@pytest.fixture
def app():
    app = Flask("crudrouter_test")
    app.config.update(SQLALCHEMY_DATABASE_URI="sqlite://", TESTING=True)
    db.init_app(app)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()


@pytest.fixture
def api(app):
    return CrudApi(app)


@pytest.fixture
def client(app):
    return app.test_client()
