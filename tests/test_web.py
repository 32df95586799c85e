import pytest

from tilgungsplan_web.app import app


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_empty_form(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "Tilgungsplan" in response.get_data(as_text=True)


def test_calculates_schedule(client):
    response = client.post(
        "/",
        data={"principal": "100000", "rate": "5", "initial_repayment": "2", "fixed_period_years": "1"},
    )
    page = response.get_data(as_text=True)
    assert response.status_code == 200
    assert "-97.953,56 €" in page
    assert "416,67 €" in page
    assert "more rows not shown" not in page


def test_truncates_long_schedule(client):
    response = client.post(
        "/",
        data={"principal": "100000", "rate": "5", "initial_repayment": "2", "fixed_period_years": "20"},
    )
    assert "121 more rows not shown." in response.get_data(as_text=True)


def test_full_schedule_on_request(client):
    response = client.post(
        "/",
        data={
            "principal": "100000",
            "rate": "5",
            "initial_repayment": "2",
            "fixed_period_years": "20",
            "show_full_schedule": "1",
        },
    )
    page = response.get_data(as_text=True)
    assert "more rows not shown" not in page
    assert "-31.495,88 €" in page


def test_field_errors(client):
    response = client.post(
        "/",
        data={"principal": "", "rate": "abc", "initial_repayment": "2", "fixed_period_years": "1"},
    )
    page = response.get_data(as_text=True)
    assert "This field is required." in page
    assert "Please enter a number." in page
    assert "Summary" not in page


def test_insufficient_rate_message(client):
    response = client.post(
        "/",
        data={"principal": "100000", "rate": "12", "initial_repayment": "0.00001", "fixed_period_years": "1"},
    )
    page = response.get_data(as_text=True)
    assert response.status_code == 200
    assert "exactly covers the first month" in page


def test_very_large_principal(client):
    response = client.post(
        "/",
        data={"principal": "1e30", "rate": "5", "initial_repayment": "2", "fixed_period_years": "1"},
    )
    page = response.get_data(as_text=True)
    assert response.status_code == 200
    assert "-1.000.000.000.000.000.000.000.000.000.000,00 €" in page


def test_non_ascii_period_is_a_field_error(client):
    response = client.post(
        "/",
        data={"principal": "100000", "rate": "5", "initial_repayment": "2", "fixed_period_years": "²"},
    )
    assert response.status_code == 200
    assert "Please enter a whole number." in response.get_data(as_text=True)
