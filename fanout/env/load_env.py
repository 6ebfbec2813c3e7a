import os
from typing import Any, Dict, Mapping, TypeVar

from dotenv import dotenv_values

from .env import Env

E = TypeVar("E", bound=Env)


def _typed_values(env_type: type[Env], source: Mapping[str, str | None]) -> Dict[str, Any]:
    types_map = env_type.types_map()

    return {
        name: types_map[name](value)
        for name, value in source.items()
        if name in types_map and value
    }


def load_env(
    env_type: type[E] = Env,
    env_file: str | None = ".env",
    override: E | None = None,
) -> E:
    """
    Build settings from, lowest to highest precedence: field defaults,
    the process environment, the env file (if it exists) and any fields
    set on the override model. Empty values are ignored.
    """
    values = _typed_values(env_type, os.environ)

    if env_file and os.path.exists(env_file):
        values.update(
            _typed_values(env_type, dotenv_values(dotenv_path=env_file))
        )

    if override is not None:
        values.update(override.model_dump(exclude_unset=True))

    return env_type(**values)
