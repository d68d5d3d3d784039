
import pydantic
from packaging.version import parse
from pydantic.version import VERSION

version_parsed = parse(str(VERSION))

if version_parsed.major >= 2:
    PydanticVersion = 2
    from pydantic import ConfigDict
else:
    PydanticVersion = 1
    ConfigDict = None


BaseModel: type = pydantic.BaseModel
Field: type = pydantic.Field


def get_model_config(frozen: bool = False) -> dict:
    """
    Return a ``model_config`` dict for Pydantic V2 models.

    Only meaningful on V2; V1 models declare an inner ``Config`` class instead.
    """
    if PydanticVersion == 1:
        return {}
    return ConfigDict(frozen=frozen)


# Pydantic V1: .dict(); Pydantic V2: .model_dump()
def model_dump_compat(model, **kwargs) -> dict:
    if PydanticVersion == 1:
        return model.dict(**kwargs)
    return model.model_dump(**kwargs)


__all__ = [
    "BaseModel",
    "Field",
    "ConfigDict",
    "get_model_config",
    "model_dump_compat",
    "PydanticVersion",
]
