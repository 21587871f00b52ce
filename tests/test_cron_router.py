import jobguide.routers.cron as cron_mod
import jobguide.services.job_scraper as job_scraper


def test_cron_runs_scraper(monkeypatch, client):
    calls = []
    monkeypatch.setattr(cron_mod.settings, "cron_secret", "")
    monkeypatch.setattr(cron_mod, "schedule_job_scraping", lambda db: calls.append(db))
    resp = client.get("/cron/scrape-jobs")
    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    assert len(calls) == 1


def test_cron_requires_secret_when_configured(monkeypatch, client):
    monkeypatch.setattr(cron_mod.settings, "cron_secret", "s3cret")
    monkeypatch.setattr(cron_mod, "schedule_job_scraping", lambda db: None)
    assert client.get("/cron/scrape-jobs").status_code == 401
    assert client.get("/cron/scrape-jobs", headers={"Authorization": "Bearer nope"}).status_code == 401
    resp = client.get("/cron/scrape-jobs", headers={"Authorization": "Bearer s3cret"})
    assert resp.status_code == 200


def test_cron_reports_success_when_scraping_fails(monkeypatch, client):
    monkeypatch.setattr(cron_mod.settings, "cron_secret", "")

    def _boom(db, keywords):
        raise RuntimeError("boom")

    monkeypatch.setattr(job_scraper, "scrape_all_job_sites", _boom)
    resp = client.get("/cron/scrape-jobs")
    assert resp.status_code == 200
    assert resp.json() == {"success": True}
