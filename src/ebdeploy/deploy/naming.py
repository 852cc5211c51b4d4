"""Provider-safe environment identifiers."""

import hashlib

from ebdeploy.core.exceptions import NameTooLong

# Elastic Beanstalk caps environment names; the suffix below must still fit.
MAX_ENV_NAME_LENGTH = 15
DIGEST_LENGTH = 7


def derive_id(app_id: str, env_name: str) -> str:
    """Map (application, environment name) to a unique environment id.

    The id keeps the human-chosen name readable and appends a short SHA1
    digest of ``app_id-env_name`` so two applications can both own a
    ``production`` environment without colliding.

    Args:
        app_id: Application name
        env_name: Human-chosen environment name

    Returns:
        ``<env_name>-<7 hex chars>``

    Raises:
        NameTooLong: If env_name is longer than 15 characters
    """
    if len(env_name) > MAX_ENV_NAME_LENGTH:
        raise NameTooLong(env_name, MAX_ENV_NAME_LENGTH)

    digest = hashlib.sha1(f"{app_id}-{env_name}".encode("utf-8")).hexdigest()
    return f"{env_name}-{digest[:DIGEST_LENGTH]}"
