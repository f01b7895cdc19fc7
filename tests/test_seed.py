import calendar
from datetime import date

from models_auth import User
from models_events import Event
from models_rooms import Room
from seed import seed_all, weekdays_in_month


class TestSeed:
    def test_rooms_events_and_admin(self, app):
        counts = seed_all(year=2025, admin_email="Boss@Example.com", admin_password="secret123")
        assert counts["rooms"] == 7
        assert Room.query.count() == 7
        assert counts["admin"] == "boss@example.com"
        assert User.query.filter_by(email="boss@example.com").one().is_admin

        fridays = sum(len(weekdays_in_month(2025, m, calendar.FRIDAY)) for m in range(1, 13))
        assert counts["events"] == 12 + 2 * fridays + 5
        assert Event.query.count() == counts["events"]

    def test_board_meeting_on_second_thursday(self, app):
        seed_all(year=2025)
        meetings = Event.query.filter_by(title="Alnwick Board Meeting").order_by(Event.date).all()
        assert len(meetings) == 12
        assert meetings[0].date == date(2025, 1, 9)
        assert all(m.date.weekday() == calendar.THURSDAY and 8 <= m.date.day <= 14 for m in meetings)
        assert (meetings[0].start_time, meetings[0].end_time) == ("17:00", "18:00")

    def test_friday_events(self, app):
        seed_all(year=2025)
        gym = Room.query.filter_by(name="Gymnasium").one()
        dances = Event.query.filter_by(title="Borderline Band Dance").all()
        assert all(d.date.weekday() == calendar.FRIDAY and d.room_id == gym.id for d in dances)
        karaoke = Event.query.filter_by(title="New Sounds Karaoke").first()
        assert (karaoke.start_time, karaoke.end_time) == ("19:00", "22:00")

    def test_idempotent(self, app):
        seed_all(year=2025)
        again = seed_all(year=2025)
        assert again["events"] == 0
        assert Room.query.count() == 7

    def test_no_admin_without_credentials(self, app):
        assert seed_all(year=2025, admin_email="", admin_password="")["admin"] is None

    def test_cli_command(self, app, monkeypatch):
        monkeypatch.setattr("seed.ADMIN_EMAIL", "")
        runner = app.test_cli_runner()
        result = runner.invoke(args=["seed-db"])
        assert result.exit_code == 0, result.output
        assert Room.query.count() == 7
