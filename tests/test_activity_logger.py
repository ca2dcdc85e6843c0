from datetime import timedelta

from sqlalchemy.exc import OperationalError

from mascate_pro.core.database import utcnow
from mascate_pro.models.activity_log import ActivityLog
from mascate_pro.services import activity_logger


def test_record_stores_entry(db, staff):
    entry = activity_logger.record(
        db, staff.id, "PAGE_VISIT", "Dashboard", "10.0.0.1", "Mozilla/5.0 " * 100
    )

    assert entry.id
    assert entry.user_id == staff.id
    assert entry.action == "PAGE_VISIT"
    assert len(entry.user_agent) == 500


def test_record_without_user(db):
    entry = activity_logger.record(db, None, "LOGIN_FAILED", "unknown@example.com")
    assert entry.user_id is None


def test_record_swallows_storage_errors(db, staff, monkeypatch, caplog):
    def failing_commit():
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", failing_commit)

    assert activity_logger.record(db, staff.id, "LOGOUT") is None
    assert "Failed to record activity LOGOUT" in caplog.text


def test_cap_keeps_newest_entries(db, staff):
    for i in range(5):
        activity_logger.record(db, staff.id, f"ACTION_{i}", max_entries=3)

    actions = [a for (a,) in db.query(ActivityLog.action).order_by(ActivityLog.created_at)]
    assert actions == ["ACTION_2", "ACTION_3", "ACTION_4"]


def test_prune_older_than(db, staff):
    old = activity_logger.add_entry(db, staff.id, "OLD")
    old.created_at = utcnow() - timedelta(days=120)
    activity_logger.add_entry(db, staff.id, "RECENT")
    db.commit()

    assert activity_logger.prune_older_than(db, timedelta(days=90)) == 1
    assert [a for (a,) in db.query(ActivityLog.action)] == ["RECENT"]


def test_list_logs_pages_newest_first(db, staff, admin):
    for i in range(4):
        activity_logger.record(db, staff.id, "PAGE_VISIT", f"page {i}")
    activity_logger.record(db, admin.id, "LOGIN_SUCCESS")

    page = activity_logger.list_logs(db, limit=2)
    assert page["total"] == 5
    assert page["has_more"] is True
    assert [e.action for e in page["items"]] == ["LOGIN_SUCCESS", "PAGE_VISIT"]

    filtered = activity_logger.list_logs(db, user_id=staff.id, action="PAGE_VISIT", offset=3)
    assert filtered["total"] == 4
    assert [e.details for e in filtered["items"]] == ["page 0"]
    assert filtered["has_more"] is False


def test_list_logs_clamps_limit(db):
    assert activity_logger.list_logs(db, limit=1000)["limit"] == 100
    assert activity_logger.list_logs(db, limit=0)["limit"] == 1


def test_log_stats(db, staff, admin):
    for _ in range(3):
        activity_logger.record(db, staff.id, "PAGE_VISIT")
    activity_logger.record(db, admin.id, "LOGIN_SUCCESS")
    yesterday = activity_logger.add_entry(db, admin.id, "LOGOUT")
    yesterday.created_at = utcnow() - timedelta(days=1)
    db.commit()

    stats = activity_logger.log_stats(db)
    assert stats["total_logs"] == 5
    assert stats["action_counts"] == {"PAGE_VISIT": 3, "LOGIN_SUCCESS": 1, "LOGOUT": 1}
    assert stats["top_users"][0]["user_id"] == staff.id
    assert stats["top_users"][0]["activity_count"] == 3
    assert stats["today_logs"] + stats["yesterday_logs"] == 5
