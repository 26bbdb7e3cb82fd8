"""
Seed data for the Storefront API

Creates categories, sellers with approved stores, products with images,
an admin, a demo customer with checkout data, and a few delivered orders
with reviews. Run after `python manage.py migrate --run-syncdb`.
"""
import os
import random
import sys
import uuid
from datetime import timedelta
from decimal import Decimal

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Setup Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.base')

import django  # noqa: E402
django.setup()

from django.db import transaction  # noqa: E402
from django.utils import timezone  # noqa: E402
from django.utils.text import slugify  # noqa: E402
from faker import Faker  # noqa: E402

from apps.accounts.models import Address, PaymentMethod, User, UserSession  # noqa: E402
from apps.cart.models import CartItem  # noqa: E402
from apps.cart.pricing import calculate_totals  # noqa: E402
from apps.catalog.models import Category, Product, ProductImage  # noqa: E402
from apps.core.utils import unique_slug  # noqa: E402
from apps.orders.models import Order, OrderItem, OrderTracking  # noqa: E402
from apps.orders.services import generate_order_number  # noqa: E402
from apps.reviews.models import Review  # noqa: E402
from apps.stores.models import Seller, Store, StoreReview  # noqa: E402

fake = Faker()

DEMO_PASSWORD = 'password123'

CATEGORY_NAMES = ['Electronics', 'Home & Kitchen', 'Sports & Outdoors', 'Clothing', 'Books', 'Toys & Games']

PRODUCT_TEMPLATES = [
    ('Wireless Headphones', 'Electronics', 49.99, 299.99),
    ('Mechanical Keyboard', 'Electronics', 79.99, 199.99),
    ('Smart Watch', 'Electronics', 149.99, 499.99),
    ('USB-C Hub', 'Electronics', 19.99, 89.99),
    ('Coffee Maker', 'Home & Kitchen', 29.99, 199.99),
    ('Air Fryer', 'Home & Kitchen', 49.99, 199.99),
    ('Yoga Mat', 'Sports & Outdoors', 19.99, 79.99),
    ('Running Shoes', 'Sports & Outdoors', 49.99, 199.99),
    ('Cotton T-Shirt', 'Clothing', 9.99, 39.99),
    ('Winter Jacket', 'Clothing', 79.99, 299.99),
    ('Programming Book', 'Books', 29.99, 79.99),
    ('Board Game', 'Toys & Games', 24.99, 59.99),
]


def create_user(role, email=None, first_name=None, last_name=None):
    user = User(
        email=email or fake.unique.email(),
        first_name=first_name or fake.first_name(),
        last_name=last_name or fake.last_name(),
        phone=fake.phone_number()[:20],
        role=role,
        is_email_verified=True,
    )
    user.set_password(DEMO_PASSWORD)
    user.save()
    return user


def generate_categories():
    print("Generating categories...")
    categories = {
        name: Category.objects.create(name=name, slug=slugify(name), description=fake.sentence())
        for name in CATEGORY_NAMES
    }
    print(f"Created {len(categories)} categories")
    return categories


def generate_sellers(count=4):
    """Seller users, their profiles and one approved store each."""
    print(f"Generating {count} sellers with stores...")
    stores = []
    for _ in range(count):
        user = create_user(User.SELLER)
        seller = Seller.objects.create(
            user=user,
            name=fake.company(),
            email=user.email,
            description=fake.catch_phrase(),
            is_verified=True,
        )
        name = f"{seller.name} Store"
        stores.append(Store.objects.create(
            seller=seller,
            name=name,
            slug=unique_slug(Store, name),
            description=fake.paragraph(nb_sentences=2),
            category=random.choice(CATEGORY_NAMES),
            address=fake.street_address(),
            city=fake.city(),
            state=fake.state_abbr(),
            zip_code=fake.zipcode(),
            phone=fake.phone_number()[:30],
            email=user.email,
            website=fake.url(),
            established_year=random.randint(1990, 2023),
            status=Store.APPROVED,
            is_active=True,
            is_premium=random.random() < 0.25,
        ))
    print(f"Created {len(stores)} stores")
    return stores


def generate_products(categories, stores, per_template=3):
    print("Generating products...")
    products = []
    for name_base, category_name, min_price, max_price in PRODUCT_TEMPLATES:
        for _ in range(per_template):
            variation = random.choice(['Pro', 'Lite', 'Plus', 'Max', 'Mini', ''])
            title = f"{name_base} {variation}".strip()
            price = Decimal(str(round(random.uniform(min_price, max_price), 2)))
            store = random.choice(stores)
            stock = random.randint(0, 200)

            product = Product.objects.create(
                title=title,
                slug=f"{slugify(title)}-{uuid.uuid4().hex[:8]}",
                description=fake.paragraph(nb_sentences=3),
                price=price,
                original_price=(price * Decimal('1.2')).quantize(Decimal('0.01')) if random.random() < 0.4 else None,
                sku=f"SKU-{uuid.uuid4().hex[:8].upper()}",
                brand=fake.company().split()[0],
                stock_quantity=stock,
                in_stock=stock > 0,
                features=[fake.sentence(nb_words=6) for _ in range(3)],
                specifications=[{'name': 'Color', 'value': fake.color_name()}],
                category=categories[category_name],
                seller=store.seller,
                store=store,
            )
            ProductImage.objects.create(
                product=product,
                url=f"https://picsum.photos/seed/{product.sku}/600/600",
                alt=title,
            )
            products.append(product)
    print(f"Created {len(products)} products")
    return products


def generate_customer():
    customer = create_user(User.CUSTOMER, email='customer@example.com', first_name='Demo', last_name='Customer')
    address = Address.objects.create(
        user=customer,
        first_name=customer.first_name,
        last_name=customer.last_name,
        street=fake.street_address(),
        city=fake.city(),
        state=fake.state_abbr(),
        zip_code=fake.zipcode(),
        phone=customer.phone,
        is_default=True,
    )
    payment_method = PaymentMethod.objects.create(
        user=customer,
        last4=fake.credit_card_number()[-4:],
        brand='VISA',
        expiry_month=random.randint(1, 12),
        expiry_year=timezone.now().year + 3,
        is_default=True,
    )
    return customer, address, payment_method


def generate_delivered_orders(customer, address, payment_method, products, count=3):
    """Delivered orders so the demo customer can leave verified reviews."""
    print(f"Generating {count} delivered orders...")
    orders = []
    for product in random.sample([p for p in products if p.stock_quantity > 0], count):
        totals = calculate_totals([(product.price, 1)])
        delivered_at = timezone.now() - timedelta(days=random.randint(1, 20))
        with transaction.atomic():
            order = Order.objects.create(
                user=customer,
                order_number=generate_order_number(),
                status=Order.DELIVERED,
                subtotal=totals.subtotal,
                tax=totals.tax,
                shipping=totals.shipping,
                total=totals.total,
                shipping_address=address,
                billing_address=address,
                payment_method=payment_method,
                estimated_delivery=delivered_at,
                delivered_at=delivered_at,
            )
            OrderItem.objects.create(order=order, product=product, quantity=1, price=product.price)
            OrderTracking.objects.create(order=order, status='Order Placed', description='Your order has been successfully placed')
            OrderTracking.objects.create(order=order, status=Order.DELIVERED, description='Order has been delivered')
        orders.append(order)
    print(f"Created {len(orders)} orders")
    return orders


def generate_reviews(customer, orders):
    print("Generating reviews...")
    reviews = []
    for order in orders[:-1]:
        item = order.items.first()
        reviews.append(Review.objects.create(
            user=customer,
            product=item.product,
            rating=random.randint(3, 5),
            title=fake.sentence(nb_words=4),
            content=fake.paragraph(nb_sentences=2),
            is_verified=True,
        ))
    print(f"Created {len(reviews)} reviews")
    return reviews


def clear_all_data():
    """Clear all existing data."""
    print("Clearing existing data...")

    for model in (Review, StoreReview, OrderTracking, OrderItem, Order, CartItem, ProductImage, Product,
                  Category, Store, Seller, PaymentMethod, Address, UserSession, User):
        model.objects.all().delete()

    print("All data cleared")


def main():
    """Main function to generate all data."""
    print("\n" + "=" * 60)
    print("Storefront Seed Data")
    print("=" * 60 + "\n")

    clear_all_data()

    categories = generate_categories()
    stores = generate_sellers(4)
    products = generate_products(categories, stores)
    admin = create_user(User.ADMIN, email='admin@example.com', first_name='Site', last_name='Admin')
    customer, address, payment_method = generate_customer()
    orders = generate_delivered_orders(customer, address, payment_method, products)
    reviews = generate_reviews(customer, orders)

    print("\n" + "=" * 60)
    print("Seeding Complete!")
    print("=" * 60)
    print("\nSummary:")
    print(f"  - Categories: {len(categories)}")
    print(f"  - Stores: {len(stores)}")
    print(f"  - Products: {len(products)}")
    print(f"  - Orders: {len(orders)}")
    print(f"  - Reviews: {len(reviews)}")
    print(f"\nLogins (password '{DEMO_PASSWORD}'): {admin.email}, {customer.email}")
    print()


if __name__ == '__main__':
    main()
