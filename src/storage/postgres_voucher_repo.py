"""PostgreSQL repository for Voucher entities."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.logging import get_logger
from src.models.voucher import Voucher
from src.storage.db_models import VoucherTable
from src.storage.repository_base import RepositoryBase

logger = get_logger(__name__)


class PostgresVoucherRepository(RepositoryBase[Voucher]):
    """Voucher repository using PostgreSQL."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_by_id(self, id: UUID) -> Optional[Voucher]:
        """Retrieve voucher by ID."""
        db_voucher = await self.session.get(VoucherTable, id)
        if not db_voucher:
            return None
        return self._to_domain_model(db_voucher)

    async def get_by_code(self, code: str, for_update: bool = False) -> Optional[Voucher]:
        """Retrieve voucher by code, optionally locking it until commit."""
        stmt = select(VoucherTable).where(VoucherTable.code == code)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        db_voucher = result.scalar_one_or_none()

        if not db_voucher:
            return None

        return self._to_domain_model(db_voucher)

    async def create(self, entity: Voucher) -> Voucher:
        """Create new voucher."""
        db_voucher = VoucherTable(
            id=entity.id,
            code=entity.code,
            quantity=entity.quantity,
            valid_from=entity.valid_from,
            valid_to=entity.valid_to,
            min_order_value=entity.min_order_value,
            discount_amount=entity.discount_amount,
            discount_percentage=entity.discount_percentage,
            max_discount_amount=entity.max_discount_amount,
        )
        self.session.add(db_voucher)
        await self.session.flush()

        logger.info("voucher_created", voucher_id=str(db_voucher.id), code=entity.code)

        return self._to_domain_model(db_voucher)

    async def update(self, entity: Voucher) -> Voucher:
        """Update quantity and validity of a voucher."""
        db_voucher = await self.session.get(VoucherTable, entity.id)
        if not db_voucher:
            raise ValueError(f"Voucher not found: {entity.id}")

        db_voucher.quantity = entity.quantity
        db_voucher.valid_from = entity.valid_from
        db_voucher.valid_to = entity.valid_to
        await self.session.flush()

        return self._to_domain_model(db_voucher)

    async def delete(self, id: UUID) -> bool:
        """Delete voucher by ID."""
        db_voucher = await self.session.get(VoucherTable, id)
        if not db_voucher:
            return False

        await self.session.delete(db_voucher)
        await self.session.flush()

        return True

    async def decrement_quantity(self, voucher_id: UUID) -> bool:
        """
        Consume one redemption.

        Part of the booking transaction: flushed here, committed together with
        the booking insert.

        Returns:
            False if no redemption was left
        """
        stmt = (
            update(VoucherTable)
            .where(VoucherTable.id == voucher_id)
            .where(VoucherTable.quantity > 0)
            .values(quantity=VoucherTable.quantity - 1)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def increment_quantity(self, voucher_id: UUID) -> bool:
        """Give one redemption back (cancelled or expired booking)."""
        stmt = (
            update(VoucherTable)
            .where(VoucherTable.id == voucher_id)
            .values(quantity=VoucherTable.quantity + 1)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()

        if result.rowcount > 0:
            logger.info("voucher_refunded", voucher_id=str(voucher_id))
            return True
        return False

    def _to_domain_model(self, db_voucher: VoucherTable) -> Voucher:
        """Convert database model to domain model."""
        return Voucher(
            id=db_voucher.id,
            code=db_voucher.code,
            quantity=db_voucher.quantity,
            valid_from=db_voucher.valid_from,
            valid_to=db_voucher.valid_to,
            min_order_value=db_voucher.min_order_value,
            discount_amount=db_voucher.discount_amount,
            discount_percentage=db_voucher.discount_percentage,
            max_discount_amount=db_voucher.max_discount_amount,
        )
