# cloudbox_app/extensions.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_migrate import Migrate
from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy import text



db = SQLAlchemy()
bcrypt = Bcrypt()
migrate = Migrate()
scheduler = BackgroundScheduler(daemon=True)

def init_extensions(app):
    # DB/Bcrypt/Migrate
    db.init_app(app)
    bcrypt.init_app(app)
    migrate.init_app(app, db)

def init_scheduler(app):
    """Registers the expired-share reaper; each run gets its own app context."""
    from .services.sharing import purge_expired_shares

    def _sweep():
        with app.app_context():
            purge_expired_shares()

    scheduler.add_job(
        _sweep, "interval",
        minutes=app.config.get("SHARE_SWEEP_MINUTES", 60),
        id="purge-expired-shares", replace_existing=True,
    )
    if not scheduler.running:
        scheduler.start()

def register_cli(app):
    @app.cli.command("init-db")
    def init_db_cmd():
        """Creates the tables (DEV/MVP). For production: use flask db upgrade."""
        with app.app_context():
            # sanity check
            db.session.execute(text("SELECT 1"))
            db.create_all()
            print("Tables created.")

    @app.cli.command("purge-expired-shares")
    def purge_expired_shares_cmd():
        """Deletes share links whose expiration date has passed."""
        from .services.sharing import purge_expired_shares
        with app.app_context():
            removed = purge_expired_shares()
            print(f"Expired shares removed: {removed}")
