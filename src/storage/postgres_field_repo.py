"""PostgreSQL repository for Field and FieldType entities."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.logging import get_logger
from src.models.field import Field, FieldInput, FieldType
from src.storage.db_models import BookingTable, FieldTable, FieldTypeTable
from src.storage.repository_base import RepositoryBase

logger = get_logger(__name__)


class PostgresFieldRepository(RepositoryBase[Field]):
    """Field repository using PostgreSQL."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_by_id(self, id: UUID) -> Optional[Field]:
        """Retrieve field by ID."""
        db_field = await self.session.get(FieldTable, id)
        if not db_field:
            return None
        return self._to_domain_model(db_field)

    async def create(self, entity: FieldInput) -> Field:
        """Create new field."""
        db_field = FieldTable(
            name=entity.name,
            field_type_id=entity.field_type_id,
            is_active=entity.is_active,
        )
        self.session.add(db_field)
        await self.session.flush()

        logger.info("field_created", field_id=str(db_field.id), name=entity.name)

        return self._to_domain_model(db_field)

    async def update(self, entity: Field) -> Field:
        """Update name, type and status of a field."""
        db_field = await self.session.get(FieldTable, entity.id)
        if not db_field:
            raise ValueError(f"Field not found: {entity.id}")

        db_field.name = entity.name
        db_field.field_type_id = entity.field_type_id
        db_field.is_active = entity.is_active
        await self.session.flush()

        logger.info("field_updated", field_id=str(entity.id), is_active=entity.is_active)

        return self._to_domain_model(db_field)

    async def delete(self, id: UUID) -> bool:
        """Delete field by ID."""
        db_field = await self.session.get(FieldTable, id)
        if not db_field:
            return False

        await self.session.delete(db_field)
        await self.session.flush()

        logger.info("field_deleted", field_id=str(id))

        return True

    async def list_all(self, field_type_id: Optional[UUID] = None) -> list[Field]:
        """Get all fields ordered by name, optionally of one pricing category."""
        stmt = select(FieldTable).order_by(FieldTable.name.asc())
        if field_type_id is not None:
            stmt = stmt.where(FieldTable.field_type_id == field_type_id)
        result = await self.session.execute(stmt)
        return [self._to_domain_model(f) for f in result.scalars().all()]

    async def has_bookings(self, field_id: UUID) -> bool:
        """Check whether any booking, in any status, references the field."""
        stmt = select(BookingTable.id).where(BookingTable.field_id == field_id).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def get_field_type(self, id: UUID) -> Optional[FieldType]:
        """Retrieve pricing category by ID."""
        db_type = await self.session.get(FieldTypeTable, id)
        if not db_type:
            return None
        return self._to_field_type(db_type)

    async def list_field_types(self) -> list[FieldType]:
        """Get all pricing categories ordered by name."""
        result = await self.session.execute(select(FieldTypeTable).order_by(FieldTypeTable.name.asc()))
        return [self._to_field_type(t) for t in result.scalars().all()]

    async def create_field_type(self, name: str, description: Optional[str] = None) -> FieldType:
        """Create a pricing category."""
        db_type = FieldTypeTable(name=name, description=description)
        self.session.add(db_type)
        await self.session.flush()

        logger.info("field_type_created", field_type_id=str(db_type.id), name=name)

        return self._to_field_type(db_type)

    def _to_field_type(self, db_type: FieldTypeTable) -> FieldType:
        return FieldType(id=db_type.id, name=db_type.name, description=db_type.description)

    def _to_domain_model(self, db_field: FieldTable) -> Field:
        """Convert database model to domain model."""
        return Field(
            id=db_field.id,
            name=db_field.name,
            field_type_id=db_field.field_type_id,
            is_active=db_field.is_active,
            created_at=db_field.created_at,
            updated_at=db_field.updated_at,
        )
