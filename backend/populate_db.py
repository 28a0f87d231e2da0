import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from config import settings
from database import SessionLocal, init_db
from models.users import User
from models.product import Product
from utils.hashing import get_password_hash

logger = logging.getLogger(__name__)

# Demo catalog: (name, category, price, stock, description)
DEMO_PRODUCTS = [
    ("Drill", "Power Tools", "1000.00", 25, "Corded 13 mm impact drill, 650 W."),
    ("Angle Grinder", "Power Tools", "2450.00", 12, "100 mm grinder with side handle."),
    ("Claw Hammer", "Hand Tools", "349.00", 60, "450 g forged steel head, fibreglass handle."),
    ("Screwdriver Set", "Hand Tools", "599.00", 40, "12 piece flat and Phillips set."),
    ("Measuring Tape", "Hand Tools", "199.00", 80, "5 m steel tape with lock."),
    ("PVC Pipe 1in", "Plumbing", "145.50", 200, "3 m length, ISI marked."),
    ("Ball Valve", "Plumbing", "275.00", 90, "Brass, 1 inch."),
    ("LED Bulb 9W", "Electrical", "89.00", 300, "Cool daylight, B22 base."),
    ("Extension Board", "Electrical", "420.00", 55, "4 sockets with surge protection."),
    ("Wall Putty 20kg", "Paint", "780.00", 30, "White cement based putty."),
]


def seed_admin(db: Session) -> User:
    """Create the configured administrator account when it does not exist yet."""
    admin = db.query(User).filter(User.email == settings.ADMIN_EMAIL).first()
    if admin:
        return admin

    admin = User(
        name="Master Admin",
        email=settings.ADMIN_EMAIL,
        password_hash=get_password_hash(settings.ADMIN_PASSWORD),
        is_admin=True,
        cart_data="[]",
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info("Admin account created: %s", settings.ADMIN_EMAIL)
    return admin


def seed_catalog(db: Session) -> int:
    existing = {name for (name,) in db.query(Product.name).all()}
    added = 0
    for name, category, price, stock, description in DEMO_PRODUCTS:
        if name in existing:
            continue
        db.add(Product(name=name, category=category, price=Decimal(price), stock=stock, description=description))
        added += 1
    db.commit()
    return added


def load_all_data():
    init_db()
    session = SessionLocal()
    try:
        seed_admin(session)
        added = seed_catalog(session)
        print(f"Seeded {added} products.")
    finally:
        session.close()


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    load_all_data()
