"""
Archive.org login credentials.

The login file is either a JSON object::

    {"email": "me@example.com", "password": "secret"}

or a legacy two-line text file with the email on the first line and the
password on the second.
"""

import json
import logging
from pathlib import Path
from typing import Union

from pydantic import BaseModel, EmailStr, Field, ValidationError, field_validator

from common.errors import CredentialsError

logger = logging.getLogger(__name__)


class Credentials(BaseModel):
    """Email and password used on the archive.org login form."""
    email: EmailStr = Field(..., description="Archive.org account email")
    password: str = Field(..., min_length=1, description="Archive.org account password")

    @field_validator('email', mode='before')
    @classmethod
    def strip_email(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


def _parse_text(content: str) -> dict:
    lines = content.splitlines()
    if len(lines) < 2:
        raise CredentialsError(
            "Login file must contain the email on line 1 and the password on line 2"
        )
    return {'email': lines[0], 'password': lines[1]}


def parse_credentials(content: str) -> Credentials:
    """
    Parse login file content into validated credentials.

    JSON is tried first; content that is not JSON at all falls back to the
    two-line text format.

    Raises:
        CredentialsError: if the content is malformed or the email is invalid
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        data = _parse_text(content)
    else:
        if not isinstance(data, dict):
            raise CredentialsError("Error while parsing login file")

    try:
        return Credentials(**data)
    except ValidationError as e:
        fields = {str(err['loc'][0]) for err in e.errors() if err.get('loc')}
        if 'email' in fields:
            raise CredentialsError("Email is not valid") from e
        if 'password' in fields:
            raise CredentialsError("Password cannot be empty") from e
        raise CredentialsError("Error while parsing login file") from e


def load_credentials(path: Union[str, Path]) -> Credentials:
    """
    Read and validate a login file.

    Args:
        path: Path to the JSON or two-line text login file

    Returns:
        Validated Credentials

    Raises:
        CredentialsError: if the file is missing, unreadable or invalid
    """
    if not path:
        raise CredentialsError("Login file cannot be empty")

    login_file = Path(path)
    if not login_file.is_file():
        raise CredentialsError(f"File {login_file} does not exist")

    try:
        content = login_file.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise CredentialsError(f"Error while reading login file {login_file}: {e}") from e

    credentials = parse_credentials(content)
    logger.debug(f"Loaded credentials for {credentials.email} from {login_file}")
    return credentials
