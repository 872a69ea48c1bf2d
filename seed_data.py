from decimal import Decimal
from sqlmodel import Session, select
from storefront.db.session import engine, create_db_and_tables
from storefront.models.product import Product

def seed_products():
    print("Creating database and tables...")
    create_db_and_tables()

    with Session(engine) as session:
        # Check if products already exist to avoid duplicates
        existing_products = session.exec(select(Product)).all()
        if existing_products:
            print(f"Database already contains {len(existing_products)} products. Skipping seed.")
            return

        print("Seeding initial products...")
        products = [
            Product(
                name="Mechanical Keyboard",
                description="Tenkeyless keyboard with hot-swappable switches.",
                unit_price=Decimal("89.90"),
                category_id=1,
                supplier_id=1,
            ),
            Product(
                name="Wireless Mouse",
                description="Ergonomic mouse with a 70 day battery.",
                unit_price=Decimal("34.50"),
                category_id=1,
                supplier_id=2,
            ),
            Product(
                name="USB-C Hub",
                description="7-in-1 hub with HDMI, card reader and 100W pass-through.",
                unit_price=Decimal("42.00"),
                category_id=2,
                supplier_id=2,
            ),
            Product(
                name="27\" Monitor",
                description="1440p IPS panel, 144Hz.",
                unit_price=Decimal("299.00"),
                category_id=3,
                supplier_id=3,
            ),
            Product(
                name="Laptop Stand",
                description="Aluminium stand, adjustable height.",
                unit_price=Decimal("25.00"),
                category_id=2,
                supplier_id=1,
            ),
        ]

        for product in products:
            session.add(product)

        session.commit()
        print(f"Successfully seeded {len(products)} products!")

if __name__ == "__main__":
    seed_products()
