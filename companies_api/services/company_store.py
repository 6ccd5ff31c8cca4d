from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import func, or_, select, text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from companies_api.core.exceptions import AppError, ErrorKind
from companies_api.core.logging import get_logger
from companies_api.models.company import Company
from companies_api.utils.normalize import digits_only

logger = get_logger(__name__)

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 20

CONFLICT_COLUMNS = ["cnpj"]
STORE_ASSIGNED_COLUMNS = {"id", "created_at", "updated_at"}
INSERT_COLUMNS = [
    column.name for column in Company.__table__.columns if column.name not in STORE_ASSIGNED_COLUMNS
]
LIST_COLUMNS = [column for column in Company.__table__.columns if column.name != "raw"]

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class CompanyStore:
    """Upsert and listing over the ``companies`` table for one request session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _insert(self):
        dialect = self.db.get_bind().dialect.name
        try:
            return _INSERT_BY_DIALECT[dialect]
        except KeyError:
            raise AppError(ErrorKind.INTERNAL, f"Banco de dados nao suportado: {dialect}") from None

    def upsert(self, row: Mapping[str, Any]) -> dict[str, Any]:
        """Inserts ``row`` or overwrites the existing row with the same CNPJ.

        Every mutable column takes the new value and ``updated_at`` is
        refreshed. Returns the stored row with both timestamps.
        """
        values = {column: row.get(column) for column in INSERT_COLUMNS}
        update_columns = [column for column in INSERT_COLUMNS if column not in CONFLICT_COLUMNS]

        stmt = self._insert()(Company.__table__).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=CONFLICT_COLUMNS,
            set_={
                **{column: stmt.excluded[column] for column in update_columns},
                "updated_at": func.now(),
            },
        ).returning(*LIST_COLUMNS)

        try:
            saved = self.db.execute(stmt).mappings().one()
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("companies.upsert_failed", cnpj=values["cnpj"])
            raise

        logger.info("companies.upserted", cnpj=saved["cnpj"], id=saved["id"])
        return dict(saved)

    def search(
        self,
        query: str | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> tuple[int, list[dict[str, Any]]]:
        """Returns ``(total, rows)`` for one page, most recently updated first.

        A query with digits also matches CNPJs containing those digits; the
        legal name always matches case-insensitively as a substring.
        """
        if page < 1:
            raise AppError(ErrorKind.VALIDATION, "Pagina deve ser >= 1")
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise AppError(ErrorKind.VALIDATION, f"PageSize deve estar entre 1 e {MAX_PAGE_SIZE}")

        term = (query or "").strip()
        condition = None
        if term:
            digits = digits_only(term)
            condition = Company.razao_social.icontains(term, autoescape=True)
            if digits:
                condition = or_(Company.cnpj.contains(digits, autoescape=True), condition)

        count_stmt = select(func.count()).select_from(Company)
        data_stmt = select(*LIST_COLUMNS)
        if condition is not None:
            count_stmt = count_stmt.where(condition)
            data_stmt = data_stmt.where(condition)

        data_stmt = (
            data_stmt.order_by(Company.updated_at.desc(), Company.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )

        total = int(self.db.execute(count_stmt).scalar() or 0)
        rows = [dict(row) for row in self.db.execute(data_stmt).mappings().all()]
        return total, rows

    def ping(self) -> bool:
        try:
            self.db.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.exception("database.ping_failed")
            return False
        return True
