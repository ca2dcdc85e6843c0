import importlib.util
from datetime import timedelta
from pathlib import Path

import pytest

from mascate_pro.core.config import settings
from mascate_pro.core.database import utcnow
from mascate_pro.core.security import verify_password
from mascate_pro.models.activity_log import ActivityLog
from mascate_pro.models.configuration import Configuration
from mascate_pro.models.user import User
from mascate_pro.services import activity_logger

SCRIPTS = Path(__file__).resolve().parents[1] / "scripts"


def load_script(name):
    spec = importlib.util.spec_from_file_location(f"scripts_{name}", SCRIPTS / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_init_db_seeds_configurations_and_superadmin(database, monkeypatch):
    init_db = load_script("init_db")
    monkeypatch.setattr(settings, "INITIAL_ADMIN_EMAIL", "Dono@MascatePro.com.br")
    monkeypatch.setattr(settings, "INITIAL_ADMIN_PASSWORD", "first-login-123")

    init_db.init_db(database)
    init_db.init_db(database)

    with database.session() as db:
        keys = sorted(key for (key,) in db.query(Configuration.key))
        assert keys == ["backup_config", "business_rules"]

        admins = db.query(User).filter(User.role == "superadmin").all()
        assert len(admins) == 1
        assert admins[0].email == "dono@mascatepro.com.br"
        assert verify_password("first-login-123", admins[0].password_hash)


def test_init_db_without_admin_credentials(database, monkeypatch):
    init_db = load_script("init_db")
    monkeypatch.setattr(settings, "INITIAL_ADMIN_EMAIL", None)
    monkeypatch.setattr(settings, "INITIAL_ADMIN_PASSWORD", None)

    init_db.init_db(database)

    with database.session() as db:
        assert db.query(User).count() == 0


@pytest.fixture
def aged_logs(db, staff):
    old = activity_logger.add_entry(db, staff.id, "OLD")
    old.created_at = utcnow() - timedelta(days=45)
    activity_logger.add_entry(db, staff.id, "NEW")
    db.commit()


def test_prune_script_dry_run(database, db, aged_logs, capsys):
    prune = load_script("prune_activity_logs")

    assert prune.main(["--days", "30", "--dry-run"], database=database) == 0
    assert "1 entries older than 30 days would be deleted" in capsys.readouterr().out
    assert db.query(ActivityLog).count() == 2


def test_prune_script_deletes(database, db, aged_logs, capsys):
    prune = load_script("prune_activity_logs")

    assert prune.main(["--days", "30"], database=database) == 0
    assert "Deleted 1 entries" in capsys.readouterr().out
    assert [a for (a,) in db.query(ActivityLog.action)] == ["NEW"]
