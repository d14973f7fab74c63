from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.carts.models import CartSnapshot
from apps.catalog.models import Product
from apps.comments.models import Comment
from apps.orders.models import Order
from apps.users.models import User

PRODUCTS = [
    # name, price, category, image, description
    (
        "Canvas Daypack 22L",
        "64.90",
        "bags",
        "https://images.example.com/products/daypack.png",
        "Water resistant canvas backpack with a padded 15 inch laptop sleeve.",
    ),
    (
        "Merino Crew Sweater",
        "89.00",
        "clothing",
        "https://images.example.com/products/merino-crew.png",
        "Midweight merino wool sweater with ribbed cuffs.",
    ),
    (
        "Linen Button-Down Shirt",
        "45.50",
        "clothing",
        "https://images.example.com/products/linen-shirt.png",
        "Relaxed fit shirt in washed European linen.",
    ),
    (
        "Sterling Silver Hoops",
        "39.99",
        "jewelry",
        "https://images.example.com/products/silver-hoops.png",
        "Small polished hoops in 925 sterling silver.",
    ),
    (
        "Braided Gold Bracelet",
        "129.00",
        "jewelry",
        "https://images.example.com/products/gold-bracelet.png",
        "Gold plated braided chain bracelet with a lobster clasp.",
    ),
    (
        "Portable SSD 1TB",
        "109.00",
        "electronics",
        "https://images.example.com/products/ssd.png",
        "USB-C external drive with read speeds up to 1050MB/s.",
    ),
    (
        "27 inch IPS Monitor",
        "249.99",
        "electronics",
        "https://images.example.com/products/monitor.png",
        "QHD panel with a 75Hz refresh rate and a thin bezel.",
    ),
    (
        "Wireless Earbuds",
        "59.95",
        "electronics",
        "https://images.example.com/products/earbuds.png",
        "Bluetooth 5.3 earbuds with a charging case and 24 hours of playback.",
    ),
    (
        "Ceramic Pour-Over Set",
        "34.00",
        "home",
        "https://images.example.com/products/pour-over.png",
        "Dripper, carafe and two cups in matte stoneware.",
    ),
    (
        "Wool Throw Blanket",
        "72.25",
        "home",
        "https://images.example.com/products/throw.png",
        "Herringbone throw woven from recycled wool.",
    ),
]

USERS = [
    {
        "username": "admin",
        "email": "admin@example.com",
        "password": "Admin123!",
        "first_name": "Store",
        "last_name": "Admin",
        "is_staff": True,
        "is_superuser": True,
    },
    {
        "username": "catalog_manager",
        "email": "catalog@example.com",
        "password": "Catalog123!",
        "first_name": "Nigar",
        "last_name": "Huseynova",
        "is_staff": True,
    },
    {
        "username": "leyla_a",
        "email": "leyla@example.com",
        "password": "Shopper123!",
        "first_name": "Leyla",
        "last_name": "Aliyeva",
        "phone": "+994 50 123 45 67",
    },
    {
        "username": "tural_m",
        "email": "tural@example.com",
        "password": "Shopper123!",
        "first_name": "Tural",
        "last_name": "Mammadov",
        "phone": "+994 55 765 43 21",
    },
]

COMMENTS = [
    # product name, author, content, replies as (author, content)
    (
        "Canvas Daypack 22L",
        "leyla_a",
        "Fits my laptop and a lunch box with room to spare.",
        [("tural_m", "Does the sleeve have a zip?"), ("leyla_a", "It closes with velcro.")],
    ),
    ("Portable SSD 1TB", "tural_m", "Fast enough to edit video straight off the drive.", []),
]


class Command(BaseCommand):
    help = "Seed the storefront with demo products, users and comments."

    def add_arguments(self, parser):
        parser.add_argument(
            "--flush", action="store_true", help="Delete existing data before seeding"
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options["flush"]:
            self.stdout.write("Flushing existing data...")
            Comment.objects.all().delete()
            Order.objects.all().delete()
            CartSnapshot.objects.all().delete()
            Product.objects.all().delete()
            User.objects.all().delete()

        self.stdout.write("Seeding products...")
        products = {}
        for name, price, category, image, description in PRODUCTS:
            product, _ = Product.objects.update_or_create(
                name=name,
                defaults=dict(
                    price=Decimal(price),
                    category=category,
                    image=image,
                    description=description,
                ),
            )
            products[name] = product

        self.stdout.write("Seeding users...")
        users = {}
        for payload in USERS:
            attrs = dict(payload)
            raw_password = attrs.pop("password")
            # Superusers must also be staff
            attrs["is_staff"] = attrs.get("is_staff", False) or attrs.get("is_superuser", False)
            user, _ = User.objects.update_or_create(
                username=attrs.pop("username"), defaults=attrs
            )
            user.set_password(raw_password)
            user.save()
            users[user.username] = user

        self.stdout.write("Seeding comments...")
        for product_name, author, content, replies in COMMENTS:
            product = products[product_name]
            parent, _ = Comment.objects.get_or_create(
                product=product, author=users[author], content=content, parent=None
            )
            for reply_author, reply_content in replies:
                Comment.objects.get_or_create(
                    product=product,
                    author=users[reply_author],
                    content=reply_content,
                    parent=parent,
                )

        self.stdout.write(self.style.SUCCESS("Storefront seed completed."))
