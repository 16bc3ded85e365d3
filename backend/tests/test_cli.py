"""
CLI command tests (flask data / users / orders groups).
"""

from pizzadash.services import auth_service


def test_users_create_and_list(app, app_store):
    runner = app.test_cli_runner()

    result = runner.invoke(args=[
        "users", "create",
        "--name", "Cli Admin",
        "--email", "cli@pizza.test",
        "--password", "secret1",
        "--role", "administrator",
    ])
    assert result.exit_code == 0, result.output
    assert "PASS Created user" in result.output
    assert app_store.users[0].status == "approved"

    result = runner.invoke(args=["users", "list"])
    assert "cli@pizza.test" in result.output


def test_users_create_rejects_short_password(app, app_store):
    result = app.test_cli_runner().invoke(args=[
        "users", "create",
        "--name", "Cli Admin",
        "--email", "cli@pizza.test",
        "--password", "123",
        "--role", "staff",
    ])
    assert result.exit_code != 0
    assert app_store.users == []


def test_users_list_empty(app):
    result = app.test_cli_runner().invoke(args=["users", "list"])
    assert "No users found." in result.output


def test_orders_clear(app, app_store):
    result = app.test_cli_runner().invoke(args=["orders", "clear", "--yes"])
    assert "PASS Deleted 7 orders" in result.output
    assert app_store.orders == []


def test_orders_clear_aborts_without_confirmation(app, app_store):
    result = app.test_cli_runner().invoke(args=["orders", "clear"], input="n\n")
    assert result.exit_code != 0
    assert len(app_store.orders) == 7


def test_data_seed_keeps_accounts(app, app_store, admin_user):
    app.test_cli_runner().invoke(args=["orders", "clear", "--yes"])

    result = app.test_cli_runner().invoke(args=["data", "seed"])

    assert result.exit_code == 0, result.output
    assert len(app_store.orders) == 7
    assert auth_service.find_by_email(app_store, admin_user.email) is not None


def test_data_reset_removes_accounts(app, app_store, admin_user):
    result = app.test_cli_runner().invoke(args=["data", "reset", "--yes"])
    assert result.exit_code == 0, result.output
    assert app_store.users == []
    assert len(app_store.products) == 7
