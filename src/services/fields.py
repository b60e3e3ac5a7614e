"""Field and field type administration."""

from typing import Optional
from uuid import UUID

from src.logging import get_logger
from src.logging.audit import AuditEventType, AuditLogger
from src.models.field import Field, FieldInput, FieldType, FieldTypeInput, FieldUpdate
from src.services.errors import InvalidRequest, NotFound
from src.storage.postgres_field_repo import PostgresFieldRepository

logger = get_logger(__name__)


class FieldService:
    """Manages the fields customers book and their pricing categories."""

    def __init__(self, field_repo: PostgresFieldRepository):
        self.field_repo = field_repo

    async def list_fields(self, field_type_id: Optional[UUID] = None) -> list[Field]:
        return await self.field_repo.list_all(field_type_id)

    async def get_field(self, field_id: UUID) -> Field:
        field = await self.field_repo.get_by_id(field_id)
        if field is None:
            raise NotFound(f"Field with ID {field_id} does not exist.")
        return field

    async def create_field(self, data: FieldInput, actor_id: Optional[UUID] = None) -> Field:
        """
        Add a field to an existing pricing category.

        Raises:
            NotFound: Unknown field type
        """
        await self._require_field_type(data.field_type_id)

        field = await self.field_repo.create(data)

        AuditLogger.log_field_changed(
            AuditEventType.FIELD_CREATED,
            actor_id=actor_id,
            field_id=field.id,
            changes={"name": field.name, "field_type_id": str(field.field_type_id)},
        )

        return field

    async def update_field(
        self, field_id: UUID, changes: FieldUpdate, actor_id: Optional[UUID] = None
    ) -> Field:
        """
        Apply a partial update to a field.

        Setting ``is_active`` to false takes the field out of service without
        touching its existing bookings.

        Raises:
            NotFound: Unknown field or field type
        """
        field = await self.get_field(field_id)

        fields = changes.model_dump(exclude_unset=True, exclude_none=True)
        if not fields:
            return field

        if "field_type_id" in fields:
            await self._require_field_type(fields["field_type_id"])

        updated = await self.field_repo.update(field.model_copy(update=fields))

        AuditLogger.log_field_changed(
            AuditEventType.FIELD_UPDATED,
            actor_id=actor_id,
            field_id=field_id,
            changes={k: str(v) for k, v in fields.items()},
        )

        return updated

    async def delete_field(self, field_id: UUID, actor_id: Optional[UUID] = None) -> Field:
        """
        Remove a field that has never been booked.

        Raises:
            NotFound: Unknown field
            InvalidRequest: The field has bookings
        """
        field = await self.get_field(field_id)

        if await self.field_repo.has_bookings(field_id):
            raise InvalidRequest(
                "This field has bookings and cannot be deleted. Deactivate it instead."
            )

        await self.field_repo.delete(field_id)

        AuditLogger.log_field_changed(
            AuditEventType.FIELD_DELETED, actor_id=actor_id, field_id=field_id
        )

        return field

    async def list_field_types(self) -> list[FieldType]:
        return await self.field_repo.list_field_types()

    async def create_field_type(self, data: FieldTypeInput) -> FieldType:
        """
        Create a pricing category.

        Raises:
            InvalidRequest: A category with this name already exists
        """
        existing = await self.field_repo.list_field_types()
        if any(t.name == data.name for t in existing):
            raise InvalidRequest(f'Field type "{data.name}" already exists.')

        return await self.field_repo.create_field_type(data.name, data.description)

    async def _require_field_type(self, field_type_id: UUID) -> FieldType:
        field_type = await self.field_repo.get_field_type(field_type_id)
        if field_type is None:
            raise NotFound(f"Field type with ID {field_type_id} does not exist.")
        return field_type
