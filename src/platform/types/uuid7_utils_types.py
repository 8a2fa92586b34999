"""
https://docs.pydantic.dev/latest/concepts/types/#customizing-validation-with-__get_pydantic_core_schema__
https://docs.pydantic.dev/latest/concepts/json_schema/#implementing-__get_pydantic_json_schema__

Booking ids are uuid_utils.UUID (UUID7), which pydantic cannot validate,
serialize or describe in OpenAPI on its own. UtilsUUID7 adds that support:

    class BookingCreatedResponse(BaseModel):
        booking_id: UtilsUUID7   # "0193..." <-> uuid_utils.UUID
"""

from typing import Any

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema
from uuid_utils import UUID


class UtilsUUID7(UUID):
    """Pydantic-compatible uuid_utils.UUID"""

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """
        JSON mode accepts only strings (JSON has no UUID type); Python mode
        also accepts UUID objects as-is. Serialization is always `str()`.

        A chain of str_schema + plain validator is used instead of
        with_info_plain_validator_function because the latter cannot be
        converted to a JSON schema, which FastAPI needs for OpenAPI.
        """

        def _to_uuid(value: Any) -> UUID:
            try:
                return UUID(str(value))
            except ValueError as e:
                raise ValueError(f'Invalid UUID: {value}') from e

        def validate_uuid_python(value: Any) -> UUID:
            if isinstance(value, UUID):
                return value
            return _to_uuid(value)

        return core_schema.json_or_python_schema(
            json_schema=core_schema.chain_schema(
                [
                    core_schema.str_schema(),
                    core_schema.no_info_plain_validator_function(_to_uuid),
                ]
            ),
            python_schema=core_schema.union_schema(
                [
                    core_schema.is_instance_schema(UUID),
                    core_schema.chain_schema(
                        [
                            core_schema.str_schema(),
                            core_schema.no_info_plain_validator_function(validate_uuid_python),
                        ]
                    ),
                ]
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(
                str,
                when_used='always',
                return_schema=core_schema.str_schema(),
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        # handler(schema) would expand the validator chain into the OpenAPI document
        return {'type': 'string', 'format': 'uuid'}
