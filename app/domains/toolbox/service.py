from typing import List

from sqlalchemy.orm import Session

from app.domains.toolbox import models, schemas
from app.shared.database.connection import atomic
from app.shared.errors import NotFound


class ToolboxService:
    def __init__(self, db: Session):
        self.db = db

    def get_toolbox_rows(self, user_id: int) -> List[models.ToolboxRow]:
        return (
            self.db.query(models.ToolboxRow)
            .filter(models.ToolboxRow.user_id == user_id)
            .order_by(models.ToolboxRow.created_at.asc(), models.ToolboxRow.id.asc())
            .all()
        )

    def save_toolbox_rows(
        self, user_id: int, rows: List[schemas.ToolboxRowIn]
    ) -> List[models.ToolboxRow]:
        """
        Replace the user's toolbox with `rows`

        Rows missing from the payload are deleted, rows with an id are updated,
        rows without one are created.
        """
        with atomic(self.db):
            existing = {row.id: row for row in self.get_toolbox_rows(user_id)}
            incoming_ids = {row.id for row in rows if row.id is not None}

            unknown = incoming_ids - existing.keys()
            if unknown:
                raise NotFound(f"Toolbox row {min(unknown)} not found")

            for row_id, row in existing.items():
                if row_id not in incoming_ids:
                    self.db.delete(row)

            for payload in rows:
                if payload.id is not None:
                    row = existing[payload.id]
                    row.label = payload.label
                    row.content = payload.content
                else:
                    self.db.add(
                        models.ToolboxRow(
                            user_id=user_id, label=payload.label, content=payload.content
                        )
                    )

        return self.get_toolbox_rows(user_id)
