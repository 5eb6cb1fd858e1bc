"""
Human-readable access code generation.

Format: 5 to 7 characters, uppercase letters and digits plus exactly one
symbol ("-" or "@"), every position shuffled.
Examples: 4K-Q7, @B9XT2, 7RM2P@Z

Uniqueness is checked against the registry of the code's namespace
(member codes or group access codes). The check is advisory: the unique
constraint on the column is what actually prevents duplicates.
"""
import logging
import random
import secrets
import string
from typing import Optional
from app.core.config import settings
from app.models.enums import CodeNamespace
from app.services.store import CodeStore

logger = logging.getLogger(__name__)

ALPHABET = string.ascii_uppercase + string.digits
SYMBOLS = ("-", "@")
CODE_LENGTHS = (5, 6, 7)

_system_random = secrets.SystemRandom()


class CodeGenerationError(Exception):
    """Raised when no unique code was found within the attempt limit"""
    pass


def normalize_code(code: str) -> str:
    return code.strip().upper()


def generate_code(rng: Optional[random.Random] = None) -> str:
    rng = rng or _system_random

    length = rng.choice(CODE_LENGTHS)
    symbol = rng.choice(SYMBOLS)

    chars = rng.choices(ALPHABET, k=length - 1)
    chars.append(symbol)

    # Fisher-Yates over all positions
    rng.shuffle(chars)
    return "".join(chars)


class AccessCodeGenerator:
    def __init__(
        self,
        store: CodeStore,
        namespace: CodeNamespace,
        max_attempts: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.namespace = namespace
        self.max_attempts = max_attempts if max_attempts is not None else settings.CODE_MAX_ATTEMPTS
        self.rng = rng

    def generate(self) -> str:
        return generate_code(self.rng)

    async def is_unique(self, code: str, exclude_id: Optional[int] = None) -> bool:
        """
        Check that no other record in the namespace holds the code.

        Args:
            code: Candidate code, compared uppercased and trimmed
            exclude_id: Record being edited, ignored by the check

        Returns:
            True only if the store confirmed no other record uses the code.
            A failed lookup counts as not unique.
        """
        normalized_code = normalize_code(code)

        try:
            exists = await self.store.code_exists(self.namespace, normalized_code, exclude_id)
        except Exception as e:
            logger.error(f"Failed to check {self.namespace.value} code {normalized_code}: {e}", exc_info=True)
            return False

        return not exists

    async def generate_unique(self, exclude_id: Optional[int] = None) -> str:
        """
        Generate a code not used by any other record in the namespace.

        Raises:
            CodeGenerationError: If every attempt collided
        """
        for attempt in range(1, self.max_attempts + 1):
            code = self.generate()
            if await self.is_unique(code, exclude_id):
                return code
            logger.warning(f"{self.namespace.value} code collision on attempt {attempt}/{self.max_attempts}")

        raise CodeGenerationError(
            f"Could not generate a unique {self.namespace.value} code after {self.max_attempts} attempts"
        )
