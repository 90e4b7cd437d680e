# pharmatrust/database.py
from __future__ import annotations

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

PPB_SEED_COUNT = 20

_SEED_NAMES = [
    "Acme Pharma", "Nairobi Generics", "Rift Valley Distributors", "Mombasa Chemists",
    "Kisumu MedSupply", "Highland Pharmaceuticals", "Lakeside Logistics", "CityCare Pharmacy",
    "Savanna Biotech", "Coastline Wholesale", "Summit Drugstore", "Equator Labs",
    "Unity Medical Distributors", "GreenLeaf Pharmacy", "Crescent Therapeutics",
    "Meridian Supply Chain", "Harmony Chemists", "Keystone Pharma", "Baobab Distributors",
    "Sunrise Pharmacy",
]


def seed_ppb_records() -> int:
    """
    Insert the synthetic PPB registry rows if the table is empty.
    Returns how many rows were inserted (0 when already seeded).
    """
    from pharmatrust.models.registry_models import PPBRecord

    existing = db.session.execute(db.select(db.func.count(PPBRecord.id))).scalar_one()
    if existing:
        return 0

    for i in range(PPB_SEED_COUNT):
        name = _SEED_NAMES[i % len(_SEED_NAMES)]
        slug = name.lower().replace(" ", "")
        db.session.add(
            PPBRecord(
                name=name,
                email=f"info@{slug}.co.ke",
                licenseNumber=f"PPB-{1001 + i}",
                role=(i % 3) + 1,
            )
        )
    db.session.commit()
    return PPB_SEED_COUNT


def init_db(app):
    """
    Bind Flask-SQLAlchemy, create tables and seed the PPB mirror.
    Call this during app startup (create_app).
    """
    db.init_app(app)

    # tables must be registered on db.metadata before create_all
    from pharmatrust.models import registry_models  # noqa: F401

    with app.app_context():
        db.create_all()
        if app.config.get("SEED_PPB", True):
            inserted = seed_ppb_records()
            if inserted:
                app.logger.info("Seeded %d PPB registry records", inserted)

    return db
