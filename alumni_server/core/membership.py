# alumni_server/core/membership.py

import logging
from sqlalchemy import Table, and_, delete, insert, select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session


logger = logging.getLogger(__name__)

MAX_TOGGLE_ATTEMPTS = 3


def _toggle(db: Session, table: Table, key: dict, count_column: str | None) -> tuple[bool, int | None]:
    """
    Removal is a conditional DELETE; only if it removed nothing is the row
    inserted. A concurrent insert of the same pair surfaces as a primary-key
    violation, after which the flip is retried against the new state.
    The optional count is read before the commit, in the flip's transaction.
    """
    condition = and_(*(table.c[column] == value for column, value in key.items()))

    for attempt in range(1, MAX_TOGGLE_ATTEMPTS + 1):
        removed = db.execute(delete(table).where(condition)).rowcount
        present = not removed
        if present:
            try:
                db.execute(insert(table).values(**key))
            except IntegrityError:
                db.rollback()
                logger.info("Concurrent toggle on %s %s, retrying (attempt %d)", table.name, key, attempt)
                continue

        count = count_members(db, table, count_column, key[count_column]) if count_column else None
        db.commit()
        return present, count

    raise RuntimeError(f"Could not toggle {table.name} membership for {key}")


def toggle_membership(db: Session, table: Table, **key) -> bool:
    """
    Flips membership of one row in an association table and commits.
    Returns True when the row is present afterwards.
    """
    return _toggle(db, table, key, None)[0]


def toggle_membership_counted(db: Session, table: Table, count_column: str, **key) -> tuple[bool, int]:
    """
    Like toggle_membership, also returning the member count for key[count_column]
    as seen by the same transaction.
    """
    return _toggle(db, table, key, count_column)


def count_members(db: Session, table: Table, column: str, value) -> int:
    return db.execute(
        select(func.count()).select_from(table).where(table.c[column] == value)
    ).scalar_one()


def is_member(db: Session, table: Table, **key) -> bool:
    condition = and_(*(table.c[column] == value for column, value in key.items()))
    return db.execute(select(func.count()).select_from(table).where(condition)).scalar_one() > 0


def count_by(db: Session, table: Table, column: str, values) -> dict:
    """
    Member counts for many entities in one grouped query; missing keys mean zero.
    """
    values = list(values)
    if not values:
        return {}
    col = table.c[column]
    rows = db.execute(
        select(col, func.count()).where(col.in_(values)).group_by(col)
    ).all()
    return {row[0]: row[1] for row in rows}
