import os, sys, pytest
# Ensure the backend directory is on path so 'dashboard' can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
import dashboard
from dashboard import create_app, get_db
from dashboard.models import Base  # registers every table


@pytest.fixture(scope='session', autouse=True)
def app_instance(tmp_path_factory):
    app = create_app({
        'TESTING': True,
        'DATABASE_URL': 'sqlite+pysqlite:///:memory:',
        'JWT_SECRET_KEY': 'test-secret-key-with-enough-length-for-hs256',
        'UPLOAD_DIR': str(tmp_path_factory.mktemp('uploads')),
        'MAIL_SERVER': None,
    })
    with app.app_context():
        Base.metadata.create_all(get_db().get_bind())
    yield app


@pytest.fixture(autouse=True)
def clean_db(app_instance):
    # Each test starts from empty tables on the shared in-memory database
    dashboard.SessionLocal.remove()
    engine = dashboard.db_engine
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    yield
    dashboard.SessionLocal.remove()


@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()
