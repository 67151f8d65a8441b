"""Persistent storage for campaigns using local JSON files with a Google Sheets mirror."""
from __future__ import annotations

import fcntl
import json
import logging
import uuid
from collections.abc import Callable, Iterable
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import gspread
from google.oauth2.service_account import Credentials

from campaign_scout.core.config import get_settings
from campaign_scout.core.exceptions import DatabaseError
from campaign_scout.domain.models import (
    VERTICAL_ORDER,
    AnyResult,
    Campaign,
    CampaignDetail,
    NormalizedInput,
    ReferenceInputRow,
    ResearchResults,
    Vertical,
)
from campaign_scout.utils import utc_now

logger = logging.getLogger(__name__)

CAMPAIGN_HEADERS = ["id", "name", "created_at"]
REFERENCE_INPUT_HEADERS = ["campaign_id", "input_url", "input_index", "input_type", "normalized_id"]
RESULT_HEADERS = ["campaign_id", "vertical", "id", "matched_inputs", "payload"]


class CampaignStorage:
    """
    Campaign persistence: one locked JSON document per campaign.

    When a gspread client and spreadsheet id are supplied, every write is
    mirrored to one worksheet per table so campaigns survive a wiped local
    disk, and reads fall back to the sheet when the local file is missing.
    """

    CAMPAIGNS_SHEET = "Campaigns"
    REFERENCE_INPUTS_SHEET = "Reference_Inputs"

    def __init__(
        self,
        storage_dir: Path | None = None,
        sheets_client: gspread.Client | None = None,
        spreadsheet_id: str | None = None,
    ):
        self.storage_dir = Path(storage_dir or get_settings().STORAGE_DIR)
        self.storage_dir.mkdir(exist_ok=True, parents=True)
        self.sheets_client = sheets_client
        self.spreadsheet_id = spreadsheet_id

    # Local files

    def _path(self, campaign_id: str) -> Path:
        return self.storage_dir / f"{campaign_id}.json"

    def _write(self, campaign_id: str, document: dict[str, Any]) -> None:
        try:
            with open(self._path(campaign_id), "w") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                json.dump(document, f, indent=2)
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to write campaign {campaign_id}: {e}")
            raise DatabaseError(f"Failed to write campaign {campaign_id}") from e

    def _read(self, campaign_id: str) -> dict[str, Any] | None:
        path = self._path(campaign_id)
        if not path.exists():
            return None
        try:
            with open(path, "r") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                document = json.load(f)
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
            return document
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load campaign {campaign_id} from file: {e}")
            return None

    def _update(self, campaign_id: str, mutate: Callable[[dict[str, Any]], None]) -> None:
        """Read-modify-write one campaign document under an exclusive lock."""
        path = self._path(campaign_id)
        if not path.exists():
            raise DatabaseError(f"Campaign {campaign_id} not found")
        try:
            with open(path, "r+") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                document = json.load(f)
                mutate(document)
                f.seek(0)
                f.truncate()
                json.dump(document, f, indent=2)
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to update campaign {campaign_id}: {e}")
            raise DatabaseError(f"Failed to update campaign {campaign_id}") from e

    # Google Sheets mirror

    def _get_worksheet(self, title: str, headers: list[str]) -> Optional[gspread.Worksheet]:
        """Get or create a mirror worksheet."""
        if not self.sheets_client or not self.spreadsheet_id:
            return None
        try:
            spreadsheet = self.sheets_client.open_by_key(self.spreadsheet_id)
            try:
                return spreadsheet.worksheet(title)
            except gspread.exceptions.WorksheetNotFound:
                worksheet = spreadsheet.add_worksheet(title=title, rows=1000, cols=len(headers))
                worksheet.append_row(headers)
                return worksheet
        except (gspread.exceptions.GSpreadException, OSError) as e:
            logger.error(f"Failed to get {title} worksheet: {e}")
            return None

    def _mirror_rows(self, title: str, headers: list[str], rows: list[list[Any]]) -> None:
        if not rows:
            return
        worksheet = self._get_worksheet(title, headers)
        if not worksheet:
            return
        try:
            worksheet.append_rows(rows, value_input_option="RAW")
            logger.info(f"Mirrored {len(rows)} rows to {title}")
        except (gspread.exceptions.GSpreadException, OSError) as e:
            logger.error(f"Failed to mirror rows to {title}: {e}")

    def _records_for(self, title: str, headers: list[str], campaign_id: str) -> list[dict[str, Any]]:
        worksheet = self._get_worksheet(title, headers)
        if not worksheet:
            return []
        records = worksheet.get_all_records(expected_headers=headers)
        return [record for record in records if str(record.get("campaign_id", record.get("id"))) == campaign_id]

    def _load_from_sheets(self, campaign_id: str) -> dict[str, Any] | None:
        """Rebuild a campaign document from the mirror worksheets."""
        if not self.sheets_client or not self.spreadsheet_id:
            return None
        try:
            campaigns = self._records_for(self.CAMPAIGNS_SHEET, CAMPAIGN_HEADERS, campaign_id)
            if not campaigns:
                return None
            document = _empty_document(
                campaign_id, str(campaigns[0]["name"]), str(campaigns[0]["created_at"])
            )
            document["reference_inputs"] = [
                {**record, "campaign_id": campaign_id, "normalized_id": str(record["normalized_id"])}
                for record in self._records_for(self.REFERENCE_INPUTS_SHEET, REFERENCE_INPUT_HEADERS, campaign_id)
            ]
            for vertical in VERTICAL_ORDER:
                records = self._records_for(_results_sheet(vertical), RESULT_HEADERS, campaign_id)
                document["results"][vertical.value] = [json.loads(record["payload"]) for record in records]
            return document
        except (gspread.exceptions.GSpreadException, OSError, KeyError, ValueError) as e:
            logger.error(f"Failed to load campaign {campaign_id} from Sheets: {e}")
            return None

    # Public API

    def create_campaign(self, name: str) -> str:
        """Create an empty campaign and return its id."""
        campaign_id = str(uuid.uuid4())
        created_at = utc_now().isoformat()
        self._write(campaign_id, _empty_document(campaign_id, name, created_at))
        self._mirror_rows(self.CAMPAIGNS_SHEET, CAMPAIGN_HEADERS, [[campaign_id, name, created_at]])
        logger.info(f"Created campaign {campaign_id}")
        return campaign_id

    def save_reference_inputs(self, campaign_id: str, inputs: Iterable[NormalizedInput]) -> None:
        rows = [
            ReferenceInputRow(
                campaign_id=campaign_id,
                input_url=item.original_url,
                input_index=item.input_index,
                input_type=item.type,
                normalized_id=item.id,
            ).model_dump(mode="json")
            for item in inputs
        ]

        def mutate(document: dict[str, Any]) -> None:
            document["reference_inputs"] = rows

        self._update(campaign_id, mutate)
        self._mirror_rows(
            self.REFERENCE_INPUTS_SHEET,
            REFERENCE_INPUT_HEADERS,
            [[row[header] for header in REFERENCE_INPUT_HEADERS] for row in rows],
        )

    def save_vertical_results(self, campaign_id: str, vertical: Vertical, results: Iterable[AnyResult]) -> None:
        """Replace one vertical's stored rows; every row carries campaign id and vertical."""
        vertical = Vertical(vertical)
        rows = [
            {**result.model_dump(mode="json"), "campaign_id": campaign_id, "vertical": vertical.value}
            for result in results
        ]

        def mutate(document: dict[str, Any]) -> None:
            document["results"][vertical.value] = rows

        self._update(campaign_id, mutate)
        self._mirror_rows(
            _results_sheet(vertical),
            RESULT_HEADERS,
            [
                [campaign_id, vertical.value, row["id"], json.dumps(row["matched_inputs"]), json.dumps(row)]
                for row in rows
            ],
        )
        logger.info(f"Saved {len(rows)} {vertical.value} results for campaign {campaign_id}")

    def get_campaign_with_results(self, campaign_id: str) -> CampaignDetail | None:
        """
        Retrieve a campaign with its inputs and results.

        Checks the local file first, then the Sheets mirror (re-caching
        locally on a hit). Returns None when neither has it.
        """
        document = self._read(campaign_id)
        if document is None:
            document = self._load_from_sheets(campaign_id)
            if document is None:
                logger.warning(f"Campaign {campaign_id} not found in any storage")
                return None
            try:
                self._write(campaign_id, document)
                logger.info(f"Re-cached campaign {campaign_id} from Sheets to local file")
            except DatabaseError as e:
                logger.warning(f"Failed to re-cache campaign {campaign_id}: {e}")
        return _to_detail(document)

    def list_campaigns(self, limit: int = 50) -> list[dict[str, Any]]:
        """Campaign metadata, newest first, without result rows."""
        campaigns = []
        files = sorted(self.storage_dir.glob("*.json"), key=lambda p: p.stat().st_mtime, reverse=True)
        for path in files[:limit]:
            document = self._read(path.stem)
            if not document or "campaign" not in document:
                logger.warning(f"Skipping unreadable campaign file {path}")
                continue
            campaigns.append(
                {
                    **document["campaign"],
                    "input_count": len(document.get("reference_inputs", [])),
                    "result_count": sum(len(rows) for rows in document.get("results", {}).values()),
                }
            )
        return campaigns

    def save_campaign(self, name: str, inputs: list[NormalizedInput], results: ResearchResults) -> str:
        """Write a campaign, its inputs and every vertical's results; raises DatabaseError."""
        campaign_id = self.create_campaign(name)
        self.save_reference_inputs(campaign_id, inputs)
        for vertical in VERTICAL_ORDER:
            rows = results.for_vertical(vertical)
            if rows:
                self.save_vertical_results(campaign_id, vertical, rows)
        return campaign_id


def _results_sheet(vertical: Vertical) -> str:
    return f"{vertical.value}_results"


def _empty_document(campaign_id: str, name: str, created_at: str) -> dict[str, Any]:
    return {
        "campaign": {"id": campaign_id, "name": name, "created_at": created_at},
        "reference_inputs": [],
        "results": {vertical.value: [] for vertical in VERTICAL_ORDER},
    }


def _to_detail(document: dict[str, Any]) -> CampaignDetail:
    stored = document.get("results", {})
    return CampaignDetail(
        campaign=Campaign(**document["campaign"]),
        reference_inputs=[ReferenceInputRow(**row) for row in document.get("reference_inputs", [])],
        results=ResearchResults(
            **{f"{vertical.value}_results": stored.get(vertical.value, []) for vertical in VERTICAL_ORDER}
        ),
    )


@lru_cache(maxsize=1)
def get_campaign_storage() -> CampaignStorage:
    """Get or create the singleton storage instance with Google Sheets integration."""
    sheets_client = None
    spreadsheet_id = None
    settings = get_settings()

    if settings.GOOGLE_CREDENTIALS and settings.SHEET_ID:
        try:
            credentials = Credentials.from_service_account_info(
                json.loads(settings.GOOGLE_CREDENTIALS),
                scopes=["https://www.googleapis.com/auth/spreadsheets"],
            )
            sheets_client = gspread.authorize(credentials)
            spreadsheet_id = settings.SHEET_ID
            logger.info("CampaignStorage initialised with Google Sheets mirror")
        except (ValueError, gspread.exceptions.GSpreadException) as e:
            logger.error(f"Failed to initialise Google Sheets for CampaignStorage: {e}")
    else:
        logger.warning("Google credentials or Sheet ID not configured; CampaignStorage using local files only")

    return CampaignStorage(
        storage_dir=Path(settings.STORAGE_DIR),
        sheets_client=sheets_client,
        spreadsheet_id=spreadsheet_id,
    )
