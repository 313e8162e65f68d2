"""End-to-end tests driving the command line interface."""

import pytest

from famfin.cli.main import cli


def _extract_id(output):
    for line in output.split("\n"):
        if "ID:" in line:
            return line.split("ID:")[1].strip().rstrip(")")
    return None


@pytest.fixture
def run(cli_runner, temp_db):
    """Invoke the CLI against the temporary database."""

    def invoke(*args, **kwargs):
        return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)

    return invoke


@pytest.fixture
def card_setup(run):
    """A "Checking" account paying the default credit card."""
    result = run("account", "create", "Checking", "--initial-balance", "1.000,00")
    assert result.exit_code == 0
    result = run("method", "link", "Credit Card", "Checking")
    assert result.exit_code == 0
    return run


def test_help_does_not_need_a_database(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "Family finance tracker" in result.output


def test_create_and_list_accounts(run):
    result = run("account", "create", "Checking", "--initial-balance", "1.234,56")
    assert result.exit_code == 0
    assert "Created account 'Checking'" in result.output
    assert _extract_id(result.output)

    result = run("account", "list")
    assert result.exit_code == 0
    assert "Main Wallet" in result.output
    assert "R$ 1.234,56" in result.output


def test_duplicate_account_name_is_rejected(run):
    run("account", "create", "Checking")
    result = run("account", "create", "checking")
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_default_reference_data_is_listed(run):
    result = run("category", "list", "--type", "income")
    assert result.exit_code == 0
    assert "Salary" in result.output
    assert "Food" not in result.output

    result = run("method", "list")
    assert "Boleto" in result.output
    assert "CreditCard" in result.output


def test_card_purchase_creates_invoice(card_setup):
    run = card_setup
    result = run(
        "tx", "add",
        "--date", "2025-03-10",
        "--value", "300,00",
        "--category", "Food",
        "--account", "Checking",
        "--method", "Credit Card",
        "--description", "Groceries",
    )
    assert result.exit_code == 0
    assert "Created transaction" in result.output

    result = run("tx", "list", "--month", "4", "--year", "2025")
    assert result.exit_code == 0
    assert "Invoice: Credit Card" in result.output
    assert "Projected" in result.output

    result = run("tx", "list", "--month", "4", "--year", "2025", "--hide-invoices")
    assert "No transactions found." in result.output

    result = run("summary", "month", "2025", "4")
    assert result.exit_code == 0
    assert "R$ 300,00" in result.output
    assert "Food" in result.output

    result = run("account", "list")
    assert "R$ 1.000,00" in result.output
    assert "R$ 700,00" in result.output


def test_installment_purchase(card_setup):
    run = card_setup
    result = run(
        "tx", "add",
        "--date", "2025-01-15",
        "--value", "1.200,00",
        "--category", "Leisure",
        "--account", "Checking",
        "--method", "Credit Card",
        "--installments", "12",
    )
    assert result.exit_code == 0
    assert "Created 12 installments of R$ 100,00" in result.output

    result = run("summary", "invoices", "2025", "--card", "Credit Card")
    assert result.exit_code == 0
    assert "(1 purchase(s))" in result.output


def test_pix_name_resolves_by_transaction_type(run):
    result = run(
        "tx", "add",
        "--value", "50,00",
        "--category", "Food",
        "--account", "Main Wallet",
        "--method", "Pix",
        "--description", "Market",
    )
    assert result.exit_code == 0
    assert "Method: Pix" in result.output

    result = run("tx", "search", "market")
    assert "1 transaction(s)" in result.output


def test_invalid_value_is_rejected(run):
    result = run(
        "tx", "add",
        "--value", "abc",
        "--category", "Food",
        "--account", "Main Wallet",
        "--method", "Pix",
    )
    assert result.exit_code == 1
    assert "Value must be greater than zero" in result.output


def test_unknown_category_is_rejected(run):
    result = run(
        "tx", "add",
        "--value", "10,00",
        "--category", "Nope",
        "--account", "Main Wallet",
        "--method", "Pix",
    )
    assert result.exit_code == 1
    assert "Category 'Nope' not found" in result.output


def test_toggle_and_delete_transaction(run):
    result = run(
        "tx", "add",
        "--value", "10,00",
        "--category", "Food",
        "--account", "Main Wallet",
        "--method", "Pix",
    )
    transaction_id = result.output.split("Created transaction ")[1].split("\n")[0].strip()

    result = run("tx", "toggle", transaction_id)
    assert result.exit_code == 0
    assert "now Projected" in result.output

    result = run("tx", "delete", transaction_id, input="n\n")
    assert "Deletion cancelled." in result.output

    result = run("tx", "delete", transaction_id, "--yes")
    assert result.exit_code == 0

    result = run("tx", "toggle", transaction_id)
    assert result.exit_code == 1
    assert "not found" in result.output


def test_card_invoice_cannot_be_toggled(card_setup):
    run = card_setup
    run(
        "tx", "add",
        "--date", "2025-03-10",
        "--value", "300,00",
        "--category", "Food",
        "--account", "Checking",
        "--method", "Credit Card",
    )

    result = run("tx", "toggle", "invoice-pm4-2025-04")
    assert result.exit_code == 1
    assert "cannot be toggled" in result.output

    result = run("tx", "list", "--month", "4", "--year", "2025")
    assert "Projected" in result.output


def test_account_with_transactions_cannot_be_deleted(run):
    run(
        "tx", "add",
        "--value", "10,00",
        "--category", "Food",
        "--account", "Main Wallet",
        "--method", "Pix",
    )
    result = run("account", "delete", "Main Wallet")
    assert result.exit_code == 1
    assert "used by existing transactions" in result.output

    result = run("category", "delete", "Food")
    assert result.exit_code == 1

    result = run("category", "delete", "Health")
    assert result.exit_code == 0


def test_closing_day_commands(run):
    result = run("closing-day", "set", "2025", "3", "20")
    assert result.exit_code == 0
    assert "Closing day for 2025-03 set to 20" in result.output

    result = run("closing-day", "set", "2025", "3", "40")
    assert result.exit_code == 1
    assert "Error:" in result.output

    result = run("closing-day", "show", "2025")
    assert result.exit_code == 0
    assert "2025: day 20" in result.output
    assert "2025: day 25" in result.output


def test_bill_commands(run):
    result = run("bill", "create", "Housing", "--due-day", "10", "--value", "1.500,00")
    assert result.exit_code == 0
    bill_id = _extract_id(result.output)

    result = run("bill", "toggle", bill_id, "2025", "5")
    assert "paid for 2025-05" in result.output

    result = run("bill", "list")
    assert "Housing" in result.output
    assert "R$ 1.500,00" in result.output

    result = run("bill", "delete", bill_id)
    assert result.exit_code == 0
    result = run("bill", "delete", bill_id)
    assert result.exit_code == 1


def test_backup_export_and_import(run, tmp_path):
    run("account", "create", "Checking")
    target = tmp_path / "backup.csv"

    result = run("export", str(target))
    assert result.exit_code == 0
    assert target.exists()

    result = run("import", str(target))
    assert result.exit_code == 0

    broken = tmp_path / "broken.csv"
    broken.write_text("nothing here", encoding="utf-8")
    result = run("import", str(broken))
    assert result.exit_code == 1
    assert "Invalid or corrupt backup file." in result.output


def test_sync_command(card_setup):
    result = card_setup("sync")
    assert result.exit_code == 0
    assert "Invoices synchronized" in result.output


def test_package_exposes_cli_entry_point():
    import famfin
    from famfin.cli.main import main

    assert famfin.main is main
    assert famfin.__version__ == "0.1.0"


def test_corrupt_document_points_to_backup_restore(temp_db, monkeypatch, capsys):
    from famfin.cli.main import main

    temp_db.set("transactions", "{broken")
    temp_db.disconnect()
    monkeypatch.setattr("sys.argv", ["famfin", "--db-path", temp_db.database_path, "tx", "list"])

    with pytest.raises(SystemExit) as excinfo:
        main()

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "is corrupt" in err
    assert "famfin import FILE" in err
