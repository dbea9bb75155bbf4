"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets can be used as the storage backend because:
1. Non-technical users can view their data directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)
4. Easy to export/migrate later

TRADEOFFS:
- Not suitable for high-volume data (we're fine for a household)
- No transactions (we handle this with careful ordering and the write lock)
- Limited query capabilities (we filter in Python)

One worksheet per entity. The implementation follows the abstract
interface, so we can swap to SQLite later without changing business logic.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional, TypeVar
from uuid import UUID

import gspread
from google.oauth2.service_account import Credentials
from pydantic import ValidationError
from tenacity import retry, stop_after_attempt, wait_exponential

from household_ledger.config import get_settings
from household_ledger.models.ledger import (
    Category,
    CategoryPurpose,
    Person,
    Transaction,
    TransactionKind,
)
from household_ledger.services.storage.interface import (
    ConnectionError,
    LedgerStorageInterface,
    StorageError,
)


# Column mappings for each sheet
PEOPLE_COLUMNS = [
    "id",
    "created_at",
    "name",
    "age",
]

CATEGORY_COLUMNS = [
    "id",
    "created_at",
    "description",
    "purpose",
]

TRANSACTION_COLUMNS = [
    "id",
    "created_at",
    "description",
    "amount",
    "kind",
    "person_id",
    "category_id",
]

T = TypeVar("T")


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def _get_or_create_sheet(self, title: str, columns: list[str]) -> gspread.Worksheet:
        """Get a worksheet by title, creating it with headers if missing."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=1000,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_people_sheet(self) -> gspread.Worksheet:
        return self._get_or_create_sheet(self._settings.people_sheet_name, PEOPLE_COLUMNS)

    def get_categories_sheet(self) -> gspread.Worksheet:
        return self._get_or_create_sheet(self._settings.categories_sheet_name, CATEGORY_COLUMNS)

    def get_transactions_sheet(self) -> gspread.Worksheet:
        return self._get_or_create_sheet(
            self._settings.transactions_sheet_name, TRANSACTION_COLUMNS
        )


# =============================================================================
# ROW CONVERSION
# =============================================================================

def _safe_get(row: list, index: int, default: str = "") -> str:
    try:
        return row[index] if row[index] else default
    except IndexError:
        return default


def person_to_row(person: Person) -> list:
    return [
        str(person.id),
        person.created_at.isoformat(),
        person.name,
        str(person.age),
    ]


def row_to_person(row: list) -> Person:
    return Person(
        id=UUID(_safe_get(row, 0)),
        created_at=datetime.fromisoformat(_safe_get(row, 1)),
        name=_safe_get(row, 2),
        age=int(_safe_get(row, 3)),
    )


def category_to_row(category: Category) -> list:
    return [
        str(category.id),
        category.created_at.isoformat(),
        category.description,
        category.purpose.value,
    ]


def row_to_category(row: list) -> Category:
    return Category(
        id=UUID(_safe_get(row, 0)),
        created_at=datetime.fromisoformat(_safe_get(row, 1)),
        description=_safe_get(row, 2),
        purpose=CategoryPurpose(_safe_get(row, 3)),
    )


def transaction_to_row(transaction: Transaction) -> list:
    return [
        str(transaction.id),
        transaction.created_at.isoformat(),
        transaction.description,
        str(transaction.amount),
        transaction.kind.value,
        str(transaction.person_id),
        str(transaction.category_id),
    ]


def row_to_transaction(row: list) -> Transaction:
    return Transaction(
        id=UUID(_safe_get(row, 0)),
        created_at=datetime.fromisoformat(_safe_get(row, 1)),
        description=_safe_get(row, 2),
        amount=Decimal(_safe_get(row, 3)),
        kind=TransactionKind(_safe_get(row, 4)),
        person_id=UUID(_safe_get(row, 5)),
        category_id=UUID(_safe_get(row, 6)),
    )


# =============================================================================
# STORAGE
# =============================================================================

class GoogleSheetsLedgerStorage(LedgerStorageInterface):
    """
    Google Sheets implementation of ledger storage.

    Each entity is one row; the first column is always the entity ID.
    Row 1 of every sheet is the header.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        super().__init__()
        self._client = client or GoogleSheetsClient()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _data_rows(sheet: gspread.Worksheet) -> list[tuple[int, list]]:
        """Return (sheet_row_number, row) pairs, skipping the header and blank rows."""
        all_rows = sheet.get_all_values()
        return [
            (idx, row)
            for idx, row in enumerate(all_rows[1:], start=2)
            if row and row[0]
        ]

    def _parse_rows(
        self,
        sheet: gspread.Worksheet,
        parse: Callable[[list], T],
        entity: str,
    ) -> list[T]:
        items = []
        for idx, row in self._data_rows(sheet):
            try:
                items.append(parse(row))
            except (ValueError, InvalidOperation, ValidationError) as e:
                raise StorageError(f"Malformed {entity} row {idx}: {e}")
        return items

    def _find(
        self,
        sheet: gspread.Worksheet,
        entity_id: UUID,
        parse: Callable[[list], T],
        entity: str,
    ) -> Optional[T]:
        for idx, row in self._data_rows(sheet):
            if row[0] == str(entity_id):
                try:
                    return parse(row)
                except (ValueError, InvalidOperation, ValidationError) as e:
                    raise StorageError(f"Malformed {entity} row {idx}: {e}")
        return None

    # -------------------------------------------------------------------------
    # People
    # -------------------------------------------------------------------------

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def save_person(self, person: Person) -> bool:
        """Save a person to Google Sheets."""
        try:
            sheet = self._client.get_people_sheet()
            sheet.append_row(person_to_row(person), value_input_option="RAW")
            return True
        except Exception as e:
            raise StorageError(f"Failed to save person: {e}")

    async def get_person(self, person_id: UUID) -> Optional[Person]:
        try:
            sheet = self._client.get_people_sheet()
        except Exception as e:
            raise StorageError(f"Failed to get person: {e}")
        return self._find(sheet, person_id, row_to_person, "person")

    async def list_people(self) -> list[Person]:
        try:
            sheet = self._client.get_people_sheet()
        except Exception as e:
            raise StorageError(f"Failed to list people: {e}")
        return self._parse_rows(sheet, row_to_person, "person")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def delete_person(self, person_id: UUID) -> int:
        """
        Delete a person and their transactions.

        Transactions go first, bottom-up so earlier row numbers stay valid.
        Every attempt re-reads the sheets, so a retry after a partial
        failure picks up where the previous attempt stopped.
        """
        try:
            tx_sheet = self._client.get_transactions_sheet()
            owned = [
                idx
                for idx, row in self._data_rows(tx_sheet)
                if _safe_get(row, 5) == str(person_id)
            ]
            for idx in reversed(owned):
                tx_sheet.delete_rows(idx)

            people_sheet = self._client.get_people_sheet()
            for idx, row in self._data_rows(people_sheet):
                if row[0] == str(person_id):
                    people_sheet.delete_rows(idx)
                    break

            return len(owned)
        except Exception as e:
            raise StorageError(f"Failed to delete person: {e}")

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def save_category(self, category: Category) -> bool:
        """Save a category to Google Sheets."""
        try:
            sheet = self._client.get_categories_sheet()
            sheet.append_row(category_to_row(category), value_input_option="RAW")
            return True
        except Exception as e:
            raise StorageError(f"Failed to save category: {e}")

    async def get_category(self, category_id: UUID) -> Optional[Category]:
        try:
            sheet = self._client.get_categories_sheet()
        except Exception as e:
            raise StorageError(f"Failed to get category: {e}")
        return self._find(sheet, category_id, row_to_category, "category")

    async def list_categories(self) -> list[Category]:
        try:
            sheet = self._client.get_categories_sheet()
        except Exception as e:
            raise StorageError(f"Failed to list categories: {e}")
        return self._parse_rows(sheet, row_to_category, "category")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def delete_category(self, category_id: UUID) -> bool:
        """Delete a category by ID."""
        try:
            sheet = self._client.get_categories_sheet()
            for idx, row in self._data_rows(sheet):
                if row[0] == str(category_id):
                    sheet.delete_rows(idx)
                    return True
            return False
        except Exception as e:
            raise StorageError(f"Failed to delete category: {e}")

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def save_transaction(self, transaction: Transaction) -> bool:
        """Save an admitted transaction to Google Sheets."""
        try:
            sheet = self._client.get_transactions_sheet()
            sheet.append_row(transaction_to_row(transaction), value_input_option="RAW")
            return True
        except Exception as e:
            raise StorageError(f"Failed to save transaction: {e}")

    async def get_transaction(self, transaction_id: UUID) -> Optional[Transaction]:
        try:
            sheet = self._client.get_transactions_sheet()
        except Exception as e:
            raise StorageError(f"Failed to get transaction: {e}")
        return self._find(sheet, transaction_id, row_to_transaction, "transaction")

    async def list_transactions(self) -> list[Transaction]:
        try:
            sheet = self._client.get_transactions_sheet()
        except Exception as e:
            raise StorageError(f"Failed to list transactions: {e}")
        return self._parse_rows(sheet, row_to_transaction, "transaction")
