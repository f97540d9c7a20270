"""Data Dragon loader."""
import logging
from typing import Any, Dict, List, Optional
import httpx

from config import settings
from domain.entities import ChampionInfo
from .tables import ReferenceTables

logger = logging.getLogger(__name__)


class DataDragonLoader:
    """Fetches versions, champions and items from Riot's static CDN."""

    def __init__(
        self,
        base_url: str = settings.DD_BASE,
        *,
        locale: str = "en_US",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.locale = locale
        self._transport = transport

    async def load(self, version: Optional[str] = None) -> ReferenceTables:
        """Build reference tables; falls back to a pinned version offline.

        Champion or item data that cannot be fetched leaves the tables empty
        for that part rather than failing the whole load.
        """
        async with httpx.AsyncClient(timeout=settings.REQUEST_TIMEOUT, transport=self._transport) as client:
            if version is None:
                version = await self._latest_version(client)
            champions = await self._champions(client, version)
            items = await self._items(client, version)
        logger.info(f"Data Dragon {version}: {len(champions)} champions, {len(items)} items")
        return ReferenceTables(version, champions, items)

    async def _fetch_json(self, client: httpx.AsyncClient, url: str) -> Optional[Any]:
        try:
            response = await client.get(url)
        except httpx.HTTPError as exc:
            logger.error(f"Data Dragon fetch error {url}: {exc}")
            return None
        if response.status_code != 200:
            logger.warning(f"Data Dragon {url} returned {response.status_code}")
            return None
        try:
            return response.json()
        except ValueError:
            logger.warning(f"Data Dragon {url} returned invalid JSON")
            return None

    async def _latest_version(self, client: httpx.AsyncClient) -> str:
        versions = await self._fetch_json(client, f"{self.base_url}/api/versions.json")
        if isinstance(versions, list) and versions:
            return str(versions[0])
        logger.warning(f"Could not fetch Data Dragon version, using {settings.DD_FALLBACK_VERSION}")
        return settings.DD_FALLBACK_VERSION

    async def _champions(self, client: httpx.AsyncClient, version: str) -> List[ChampionInfo]:
        data = await self._fetch_json(client, f"{self.base_url}/cdn/{version}/data/{self.locale}/champion.json")
        out: List[ChampionInfo] = []
        for champ_id, champ in ((data or {}).get("data") or {}).items():
            try:
                info = champ.get("info", {})
                out.append(ChampionInfo(
                    id=champ_id,
                    key=int(champ["key"]),
                    name=champ.get("name", champ_id),
                    attack=int(info.get("attack", 5)),
                    defense=int(info.get("defense", 5)),
                    magic=int(info.get("magic", 5)),
                    tags=tuple(champ.get("tags", ())),
                ))
            except (KeyError, TypeError, ValueError):
                logger.debug(f"Skipped malformed champion entry {champ_id}")
        return out

    async def _items(self, client: httpx.AsyncClient, version: str) -> Dict[int, dict]:
        data = await self._fetch_json(client, f"{self.base_url}/cdn/{version}/data/{self.locale}/item.json")
        out: Dict[int, dict] = {}
        for item_id, item in ((data or {}).get("data") or {}).items():
            try:
                out[int(item_id)] = {
                    "name": item.get("name", f"Item {item_id}"),
                    "gold": int((item.get("gold") or {}).get("total", 0)),
                }
            except (TypeError, ValueError):
                continue
        return out
