from models.alert import Alert
from models.lost_item import LostItem
from models.note import Note
from models.personal_details import PersonalDetails
from models.report import Report
from models.user import User
from seed import ALERTS, CITIZENS, LOST_ITEMS, OFFICERS, REPORTS, seed_example_data


def test_seed_example_data_loads_every_table(app):
    failures = seed_example_data()

    assert not failures
    assert User.query.count() == len(CITIZENS) + len(OFFICERS)
    assert User.query.filter_by(is_officer=True).count() == len(OFFICERS)
    assert Report.query.count() == len(REPORTS)
    assert Note.query.count() == sum(len(r["notes"]) for r in REPORTS)
    assert LostItem.query.count() == len(LOST_ITEMS)
    assert Alert.query.count() == len(ALERTS)
    assert PersonalDetails.query.count() == (
        sum(len(r["witnesses"]) for r in REPORTS) + sum(1 for i in LOST_ITEMS if i["owner"])
    )


def test_seed_is_repeatable(app):
    seed_example_data()
    assert not seed_example_data()
    assert User.query.count() == len(CITIZENS) + len(OFFICERS)


def test_seed_cli_command(app):
    result = app.test_cli_runner().invoke(args=["seed-example-data"])
    assert result.exit_code == 0
    assert "Example data created." in result.output
