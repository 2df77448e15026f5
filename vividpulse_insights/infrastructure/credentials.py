"""API credential lookup from the process environment"""

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence
from vividpulse_insights.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credential:
    """Resolved API key; the secret is kept out of repr and logs"""

    value: str = field(repr=False)
    source: str


class CredentialResolver:
    """Return the first non-empty credential from an ordered list of variables"""

    def __init__(self, env_vars: Sequence[str] | None = None, environ: Mapping[str, str] | None = None):
        self.env_vars = tuple(env_vars if env_vars is not None else settings.credential_env_vars)
        self.environ = environ if environ is not None else os.environ

    def resolve(self) -> Optional[Credential]:
        """
        Look up the credential.

        Returns:
            Credential from the first variable holding a non-blank value,
            or None when none is set (a normal outcome, not an error).
        """
        for name in self.env_vars:
            value = (self.environ.get(name) or "").strip()
            if value:
                logger.debug("AI credential resolved", extra={"credential_source": name})
                return Credential(value=value, source=name)
        return None
