"""
Quiz code generation
"""
import logging
import random
import string
from typing import Callable, Optional

from app.config import settings
from app.errors import CodeSpaceExhaustedError
from app.stores.base import QuizStore

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.digits + string.ascii_uppercase  # base-36, upper-case


class CodeGenerator:
    """
    Produces short shareable quiz codes

    Candidates are sampled uniformly from the base-36 alphabet and checked
    against the store. The number of attempts is bounded; the store's own
    uniqueness guarantee covers the window between check and insert.
    """

    def __init__(
        self,
        length: int = None,
        max_attempts: int = None,
        sampler: Optional[Callable[[int], str]] = None
    ):
        self.length = length or settings.QUIZ_CODE_LENGTH
        self.max_attempts = max_attempts or settings.MAX_CODE_ATTEMPTS
        self._sampler = sampler or self._random_code
        self._rng = random.SystemRandom()

    def sample(self) -> str:
        return self._sampler(self.length)

    def generate_code(self, store: QuizStore, attempts: int = None) -> str:
        """
        Return a code no existing quiz uses

        Args:
            store: Quiz store to check against
            attempts: Attempt budget, defaults to max_attempts

        Raises:
            CodeSpaceExhaustedError: every sampled candidate was taken
        """
        budget = attempts or self.max_attempts

        for attempt in range(1, budget + 1):
            code = self.sample()
            if not store.code_exists(code):
                return code
            logger.warning(f"Quiz code collision: {code} (attempt {attempt}/{budget})")

        logger.error(f"No free quiz code after {budget} attempts")
        raise CodeSpaceExhaustedError()

    def _random_code(self, length: int) -> str:
        return "".join(self._rng.choice(CODE_ALPHABET) for _ in range(length))


# Global instance
code_generator = CodeGenerator()
