"""
Base schema for transform parameters.
"""

from typing import Any, Dict, Set

from pydantic import AliasChoices, BaseModel, ConfigDict


class BaseTransformParams(BaseModel):
    """
    Base class for all per-kind transform parameter models.

    Parameter models are frozen: once a stage is appended to a pipeline its
    parameters never change. Fields may also be given under the camelCase
    names of the pipeline wire format (validation aliases).
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    @classmethod
    def accepted_keys(cls) -> Set[str]:
        """Field names plus every validation alias."""
        keys = set()
        for name, info in cls.model_fields.items():
            keys.add(name)
            alias = info.validation_alias
            if isinstance(alias, AliasChoices):
                keys.update(choice for choice in alias.choices if isinstance(choice, str))
            elif isinstance(alias, str):
                keys.add(alias)
        return keys

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary with enum values as strings."""
        data = self.model_dump(exclude_none=True)
        for key, value in data.items():
            if hasattr(value, "value"):
                data[key] = value.value
        return data
