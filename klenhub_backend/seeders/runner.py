from types import ModuleType

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from klenhub_backend.core.logger import get_component_logger
from klenhub_backend.core.models import db_helper
from . import demo_products

logger = get_component_logger("seeders")

# Applied in this order on "up", in reverse on "down"
SEEDERS: dict[str, ModuleType] = {
    demo_products.NAME: demo_products,
}

DIRECTIONS = ("up", "down")


async def run_seeders(
    direction: str,
    name: str | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> list[str]:
    """Run every registered seeder (or just `name`) in `direction`.

    Returns the names of the seeders that ran. Errors are not caught here;
    a failing seeder leaves its session rolled back and propagates.
    """
    if direction not in DIRECTIONS:
        raise ValueError(f"direction must be one of {DIRECTIONS}, got {direction!r}")

    if name is not None:
        if name not in SEEDERS:
            raise KeyError(name)
        names = [name]
    else:
        names = list(SEEDERS)
        if direction == "down":
            names.reverse()

    factory = session_factory or db_helper.session_factory
    for seeder_name in names:
        logger.info("running seeder %s %s", seeder_name, direction)
        async with factory() as session:
            await getattr(SEEDERS[seeder_name], direction)(session)
    return names
