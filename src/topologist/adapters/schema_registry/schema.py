"""Pydantic models for Schema Registry request and response bodies."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RegistryBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RegisterSchemaRequest(RegistryBaseModel):
    schema_: str = Field(alias="schema")
    schema_type: str = Field(default="AVRO", alias="schemaType")


class RegisterSchemaResponse(RegistryBaseModel):
    id: int


class ErrorResponse(RegistryBaseModel):
    error_code: int
    message: str
