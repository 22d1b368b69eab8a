import random
from decimal import Decimal

from sqlalchemy import delete, insert
from sqlalchemy.ext.asyncio import AsyncSession

from klenhub_backend.core.logger import get_component_logger
from klenhub_backend.core.models import Product, ProductImage, ProductSize

logger = get_component_logger("seeders")

NAME = "20250225-demo-products"

DEMO_PRODUCTS = [
    {
        "name": "Classic White T-Shirt",
        "description": "A comfortable and versatile white t-shirt made from 100% cotton.",
        "price": Decimal("29.99"),
        "category": "T-Shirts",
    },
    {
        "name": "Black Denim Jeans",
        "description": "Stylish black denim jeans with a modern fit.",
        "price": Decimal("79.99"),
        "category": "Jeans",
    },
    {
        "name": "Casual Sneakers",
        "description": "Comfortable casual sneakers perfect for everyday wear.",
        "price": Decimal("89.99"),
        "category": "Shoes",
    },
]

DEMO_SIZES = ("S", "M", "L", "XL")
MAX_SIZE_QUANTITY = 20

# (index into DEMO_PRODUCTS, url, is_main)
DEMO_IMAGES = [
    (0, "https://images.unsplash.com/photo-1521572163474-6864f9cf17ab?w=800", True),
    (0, "https://images.unsplash.com/photo-1581655353564-df123a1eb820?w=800", False),
    (1, "https://images.unsplash.com/photo-1541099649105-f69ad21f3246?w=800", True),
    (2, "https://images.unsplash.com/photo-1560769629-975ec94e6a86?w=800", True),
]


async def up(session: AsyncSession) -> list[int]:
    """Insert the demo catalogue and return the new product ids."""
    products = [Product(**data) for data in DEMO_PRODUCTS]
    session.add_all(products)
    await session.flush()
    product_ids = [product.id for product in products]

    sizes = [
        {
            "product_id": product_id,
            "size": size,
            "quantity": random.randrange(MAX_SIZE_QUANTITY),
        }
        for product_id in product_ids
        for size in DEMO_SIZES
    ]
    await session.execute(insert(ProductSize), sizes)

    images = [
        {
            "product_id": product_ids[index],
            "image_url": url,
            "is_main": is_main,
        }
        for index, url, is_main in DEMO_IMAGES
    ]
    await session.execute(insert(ProductImage), images)

    await session.commit()
    logger.info(
        "seeded %s products, %s sizes, %s images",
        len(products),
        len(sizes),
        len(images),
    )
    return product_ids


async def down(session: AsyncSession) -> None:
    await session.execute(delete(ProductImage))
    await session.execute(delete(ProductSize))
    await session.execute(delete(Product))
    await session.commit()
    logger.info("removed demo products, sizes and images")
