"""Manual catalog backup: export, import and reset of the local cache."""

import json
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from storefront.infra.local_cache import LocalCacheError, LocalCacheStore
from storefront.infra.logging import get_logger
from storefront.schemas.backup import BackupDocument

logger = get_logger(__name__)

PRODUCTS_KEY = "products"
CATEGORIES_KEY = "categories"
CART_KEY = "cart"
BACKUP_KEYS = (PRODUCTS_KEY, CATEGORIES_KEY, CART_KEY)

INVALID_BACKUP_MESSAGE = "Este ficheiro não é uma cópia válida da loja."
UNREADABLE_BACKUP_MESSAGE = "Erro ao ler o ficheiro de backup"
UNREADABLE_FILE_MESSAGE = "Erro ao ler o ficheiro"


def backup_filename(day: date | None = None) -> str:
    return f"Backup-Loja-{(day or date.today()).isoformat()}.txt"


def format_size(size: int) -> str:
    """Human-readable size: `B` below 1 KiB, then `KB` and `MB` with two decimals."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.2f} KB"
    return f"{size / 1024 / 1024:.2f} MB"


class CatalogBackup:
    """Backs up the cached products and categories.

    Imports replace the cached collections only; repositories pick the data
    up on their next load.
    """

    def __init__(self, cache: LocalCacheStore) -> None:
        self._cache = cache

    def export_data(self) -> BackupDocument:
        return BackupDocument(
            products=self._cached_list(PRODUCTS_KEY),
            categories=self._cached_list(CATEGORIES_KEY),
        )

    def export_to_file(self, directory: Path | str) -> Path:
        """Write the backup as pretty-printed JSON into `directory`.

        Returns:
            Path of the written file
        """
        document = self.export_data()
        target_dir = Path(directory)
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / backup_filename(document.exported_at.date())
        path.write_text(
            json.dumps(document.to_json_dict(), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        logger.info(
            "Backup exported",
            path=str(path),
            products=len(document.products),
            categories=len(document.categories),
        )
        return path

    def import_data(self, content: str) -> tuple[bool, str]:
        """Replace the cached catalog with a backup's content.

        Returns:
            (success, message) with a customer-facing message
        """
        try:
            raw = json.loads(content)
        except ValueError as e:
            logger.warning("Backup is not valid JSON", error=str(e))
            return False, UNREADABLE_BACKUP_MESSAGE

        if not isinstance(raw, dict) or not all(raw.get(k) is not None for k in ("version", "products", "categories")):
            return False, INVALID_BACKUP_MESSAGE

        try:
            document = BackupDocument.model_validate(raw)
        except ValidationError as e:
            logger.warning("Backup failed validation", error=str(e))
            return False, INVALID_BACKUP_MESSAGE

        try:
            self._cache.set(PRODUCTS_KEY, document.products)
            self._cache.set(CATEGORIES_KEY, document.categories)
        except LocalCacheError as e:
            logger.error("Failed to store imported backup", error=str(e))
            return False, UNREADABLE_BACKUP_MESSAGE

        logger.info(
            "Backup imported",
            version=document.version,
            products=len(document.products),
            categories=len(document.categories),
        )
        return True, (
            f"Dados recuperados! {len(document.products)} produtos "
            f"e {len(document.categories)} categorias."
        )

    def import_file(self, path: Path | str) -> tuple[bool, str]:
        try:
            content = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read backup file", path=str(path), error=str(e))
            return False, UNREADABLE_FILE_MESSAGE
        return self.import_data(content)

    def clear_all_data(self) -> bool:
        """Remove cached products, categories and cart.

        Raises:
            LocalCacheError: If an entry cannot be removed
        """
        for key in BACKUP_KEYS:
            self._cache.remove(key)
        logger.info("Local catalog data cleared", keys=list(BACKUP_KEYS))
        return True

    def storage_size(self) -> tuple[int, str]:
        """Bytes used by the backed-up entries, and the same as a label."""
        total = sum(self._cache.size(key) for key in BACKUP_KEYS)
        return total, format_size(total)

    def _cached_list(self, key: str) -> list[dict]:
        value = self._cache.get(key, [])
        return value if isinstance(value, list) else []
