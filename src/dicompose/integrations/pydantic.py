from dicompose._internal.integrations.pydantic import (
    MODEL_BASES,
    is_pydantic_model,
    pydantic_model_as_mapping,
)

__all__ = ["MODEL_BASES", "is_pydantic_model", "pydantic_model_as_mapping"]
