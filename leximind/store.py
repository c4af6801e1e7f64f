"""
Local persistence for the wordbook.

The collection is a JSON array of SavedItem records kept in a single file
named after the storage key. It is rewritten after every mutation and read
once at startup; a missing, unreadable or corrupt file means an empty
wordbook, never a crash.
"""

import json
import os
from pathlib import Path
from typing import Iterable, List, Optional

from .logger import logger
from .models import SavedItem


class CollectionStore:
    """Bookmarked words, newest first. No two items share (word, image_url)."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._items: List[SavedItem] = self._load()

    def _load(self) -> List[SavedItem]:
        if not self.path.exists():
            logger.store(f"No wordbook at {self.path}, starting empty")
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(data, list):
                raise ValueError("wordbook file does not contain a list")
            items = [SavedItem.from_dict(entry) for entry in data]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.store_error(f"Could not read wordbook, starting empty: {e}")
            return []
        logger.store(f"Loaded {len(items)} saved item(s) from {self.path}")
        return items

    def _persist(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            payload = json.dumps([item.to_dict() for item in self._items], ensure_ascii=False, indent=2)
            self.path.write_text(payload, encoding="utf-8")
        except (OSError, TypeError) as e:
            logger.store_error(f"Could not write wordbook: {e}")
            return
        logger.debug(f"Wordbook written ({len(self._items)} item(s))")

    @property
    def items(self) -> List[SavedItem]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def contains(self, word: str, image_url: Optional[str]) -> bool:
        return any(item.word == word and item.image_url == image_url for item in self._items)

    def save(self, word: str, image_url: str, definition: str) -> Optional[SavedItem]:
        """Insert at the front. Returns None when (word, image_url) is already saved."""
        if self.contains(word, image_url):
            logger.store(f"'{word}' with this image is already saved")
            return None
        item = SavedItem(word=word, image_url=image_url, definition=definition)
        self._items.insert(0, item)
        self._persist()
        logger.store(f"Saved '{word}' ({len(self._items)} item(s))")
        return item

    def prune_images(self, images_dir: Path, keep: Iterable[str] = ()) -> int:
        """
        Delete generated PNGs in `images_dir` that no saved item references.

        `keep` lists extra paths still on screen. Returns the number of files removed.
        """
        images_dir = Path(images_dir)
        if not images_dir.is_dir():
            return 0

        referenced = {os.path.realpath(p) for p in keep}
        referenced.update(os.path.realpath(item.image_url) for item in self._items)

        removed = 0
        for path in images_dir.glob("*.png"):
            if os.path.realpath(path) in referenced:
                continue
            try:
                path.unlink()
            except OSError as e:
                logger.store_error(f"Could not delete {path.name}: {e}")
                continue
            removed += 1
        if removed:
            logger.store(f"Pruned {removed} unsaved image(s) from {images_dir}")
        return removed

    def release_image(self, image_url: str, keep: Iterable[str] = ()) -> bool:
        """Delete one generated image unless a saved item or `keep` still uses it."""
        target = os.path.realpath(image_url)
        if any(os.path.realpath(p) == target for p in keep):
            return False
        if any(os.path.realpath(item.image_url) == target for item in self._items):
            return False
        try:
            os.remove(target)
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.store_error(f"Could not delete {image_url}: {e}")
            return False
        logger.debug(f"Deleted unsaved image {image_url}")
        return True

    def remove(self, item_id: str) -> bool:
        remaining = [item for item in self._items if item.id != item_id]
        if len(remaining) == len(self._items):
            return False
        self._items = remaining
        self._persist()
        logger.store(f"Removed item {item_id} ({len(self._items)} item(s) left)")
        return True
