import pytest
from fastapi.testclient import TestClient

from crr_pricer.config import Settings
from crr_pricer.main import create_app
from crr_pricer.services.dividends import Dividend


@pytest.fixture()
def client():
    app = create_app(Settings(default_steps=200, max_steps=20000))
    return TestClient(app)


@pytest.fixture()
def hull_dividend():
    # 2.06 paid 3.5 months in
    return [Dividend(amount=2.06, time_to_ex_div=3.5 / 12.0)]
