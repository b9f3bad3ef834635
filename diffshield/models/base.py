"""
Base Model
Shared pydantic base accepting both snake_case and camelCase field names,
so collaborator payloads in either style validate into the same model.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)
