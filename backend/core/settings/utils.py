"""
Helpers for environment-aware settings.

Each environment reads its variables from a dedicated .env file at the
repository root, loaded through python-decouple.
"""

from pathlib import Path

from decouple import Config, RepositoryEnv
from decouple import config as default_config

ENV_FILES = {
    "development": ".env.dev",
    "production": ".env.production",
}


def load_environment_config(environment):
    """
    Return a decouple config callable bound to the environment's .env file.

    Args:
        environment (str): 'development' or 'production'

    Returns:
        Config bound to the matching .env file, or decouple's default config
        (process environment + nearest .env) when the file does not exist.
    """
    env_file_name = ENV_FILES.get(environment, ".env")
    env_file_path = Path(__file__).resolve().parent.parent.parent.parent / env_file_name

    if env_file_path.exists():
        print(f"✓ Loading environment: {environment} from {env_file_name}")
        return Config(RepositoryEnv(env_file_path))

    print(f"✗ Warning: {env_file_name} not found, using default config")
    return default_config
