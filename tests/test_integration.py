"""Integration tests for end-to-end workflows."""

from datetime import date

from forecastit.cli.main import cli


def test_full_workflow(cli_runner, temp_db):
    """Test complete workflow: accounts → rules → ledger → edit → reconcile."""

    def run(*args):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])
        assert result.exit_code == 0, result.output
        return result.output

    # Step 1: Create accounts
    output = run("account", "create", "Checking", "--balance", "2,500.00")
    assert "Created account 'Checking'" in output
    run("account", "create", "Savings", "--type", "savings", "--balance", "10000", "--threshold", "1000")

    # Step 2: Describe recurring cash flow
    run("category", "create-group", "Income", "--color", "lime")
    run("category", "create", "Salary", "--group", "Income")
    output = run(
        "rule", "create", "Payday",
        "--type", "income", "--frequency", "biweekly", "--amount", "2100",
        "--account", "Checking", "--category", "Income > Salary",
    )
    assert "Created rule 'Payday'" in output
    run(
        "rule", "create", "Rent",
        "--type", "expense", "--frequency", "monthly", "--amount", "1800",
        "--account", "Checking", "--day-of-month", "1",
    )
    run(
        "rule", "create", "Rainy day",
        "--type", "transfer", "--frequency", "monthly_last", "--amount", "200",
        "--account", "Checking", "--to", "Savings",
    )

    # Step 3: View the ledger
    output = run("ledger")
    assert "Checking (checking)" in output
    assert "Savings (savings)" in output
    assert "Rainy day" in output
    assert "Status:" in output

    # Step 4: Edit one projected rent payment
    temp_db.disconnect()
    rent = next(r for r in temp_db.list_rules() if r.description == "Rent")
    first_rent = temp_db.list_entries(recurring_rule_id=rent.id)[0]
    output = run("entry", "update", str(first_rent.id), "--amount", "-1850")
    assert f"Updated transaction {first_rent.id}" in output

    # Step 5: Changing the rule keeps the edited payment
    run("rule", "update", str(rent.id), "--amount", "1900")
    temp_db.disconnect()
    amounts = {e.id: e.amount for e in temp_db.list_entries(recurring_rule_id=rent.id)}
    assert str(amounts.pop(first_rent.id)) == "-1850.00"
    assert all(str(a) == "-1900.00" for a in amounts.values())

    # Step 6: Reconcile against the bank
    output = run("account", "reconcile", "Checking", "2,480.12")
    assert "Balance set to $2,480.12" in output

    temp_db.disconnect()
    checking = temp_db.get_account_by_name("Checking")
    assert checking.balance_date == date.today()
    assert all(e.date >= date.today() for e in temp_db.list_entries(account_id=checking.id))

    output = run("account", "status", "Checking")
    assert "$2,480.12" in output
