import logging
from typing import Callable, Iterable, Optional

logger = logging.getLogger(__name__)


class BarcodeScanner:
    """One-shot barcode input.

    ``activate`` arms the scanner with a callback; the first non-blank code
    passed to ``report`` is delivered and the scanner disarms itself, so any
    further frames from the same burst are dropped. The caller re-activates it
    for the next product.
    """

    def __init__(self) -> None:
        self._on_code: Optional[Callable[[str], None]] = None

    @property
    def is_active(self) -> bool:
        return self._on_code is not None

    def activate(self, on_code: Callable[[str], None]) -> None:
        self._on_code = on_code

    def cancel(self) -> None:
        self._on_code = None

    def report(self, codes: Iterable[str]) -> Optional[str]:
        if self._on_code is None:
            return None
        for code in codes:
            code = (code or "").strip()
            if not code:
                continue
            on_code, self._on_code = self._on_code, None
            logger.debug("Scanner decoded %s", code)
            on_code(code)
            return code
        return None
